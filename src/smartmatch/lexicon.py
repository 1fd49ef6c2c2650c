"""Lexical tables for food search normalization.

This module holds the static data used by the matcher: diacritic folding,
common typo corrections, phonetic simplifications, abbreviations and a curated
vocabulary of dish names with their regional spelling variants. Everything
here is plain immutable data, shared by all ``TextMatcher`` instances.

Table Organization:
    - DIACRITICS: Accented character to ASCII replacement
    - TYPO_CORRECTIONS: Misspelled substring to canonical substring
    - PHONETIC_PATTERNS: Letter cluster to phonetic surrogate
    - ABBREVIATIONS: Short form to full form (variations only)
    - DOMAIN_VOCABULARY: Canonical dish name to spelling variants

Usage:
    >>> from smartmatch.lexicon import get_sorted_typo_corrections
    >>> corrections = get_sorted_typo_corrections()
    >>> corrections[0][0]  # Longest key first
    'chakhchoukha'

    >>> from smartmatch.lexicon import get_vocabulary_index
    >>> get_vocabulary_index()["tagine"]
    'tajine'

Note:
    Typo corrections are applied longest key first. Several keys are
    substrings of others ("tion" inside "ttion", "c" inside "cion"), and
    applying a short key first would split the longer pattern.
"""

from types import MappingProxyType
from typing import Dict, List, Mapping, Sequence, Tuple

# ============================================================================
# DIACRITIC FOLDING
# ============================================================================

"""DIACRITICS: Accented Latin characters mapped to their ASCII form.

Text is lowercased before folding, but the uppercase forms are kept so the
table can be used on its own. Ligatures expand to two letters.
"""
DIACRITICS: Mapping[str, str] = MappingProxyType(
    {
        # Lowercase
        "à": "a",
        "á": "a",
        "â": "a",
        "ã": "a",
        "ä": "a",
        "å": "a",
        "æ": "ae",
        "è": "e",
        "é": "e",
        "ê": "e",
        "ë": "e",
        "ì": "i",
        "í": "i",
        "î": "i",
        "ï": "i",
        "ò": "o",
        "ó": "o",
        "ô": "o",
        "õ": "o",
        "ö": "o",
        "ø": "o",
        "œ": "oe",
        "ù": "u",
        "ú": "u",
        "û": "u",
        "ü": "u",
        "ý": "y",
        "ÿ": "y",
        "ñ": "n",
        "ç": "c",
        "ß": "ss",
        # Uppercase
        "À": "A",
        "Á": "A",
        "Â": "A",
        "Ã": "A",
        "Ä": "A",
        "Å": "A",
        "Æ": "AE",
        "È": "E",
        "É": "E",
        "Ê": "E",
        "Ë": "E",
        "Ì": "I",
        "Í": "I",
        "Î": "I",
        "Ï": "I",
        "Ò": "O",
        "Ó": "O",
        "Ô": "O",
        "Õ": "O",
        "Ö": "O",
        "Ø": "O",
        "Œ": "OE",
        "Ù": "U",
        "Ú": "U",
        "Û": "U",
        "Ü": "U",
        "Ý": "Y",
        "Ÿ": "Y",
        "Ñ": "N",
        "Ç": "C",
    }
)

# ============================================================================
# TYPO CORRECTIONS
# ============================================================================

"""TYPO_CORRECTIONS: Misspelled or alternate substrings and their canonical form.

Identity entries ("pizza": "pizza") are kept on purpose: they act as anchors
when the table is read in reverse to generate plausible misspellings, and
they document the canonical spelling next to its variants.

Pattern Categories:
    - Suffix patterns: cion/ttion/ssion
    - General English misspellings: reciepe, seperate, occured
    - Food terms: piza, burguer, sandwitch, chiken
    - Algerian/French dishes: tagine, chorbe, makrout, chakhchouka
    - Letter simplifications: ph->f, ck->k, c->k, z->s

Examples:
    >>> TYPO_CORRECTIONS["burguer"]
    'burger'
    >>> TYPO_CORRECTIONS["tagine"]
    'tajine'
"""
TYPO_CORRECTIONS: Mapping[str, str] = MappingProxyType(
    {
        # Suffix patterns
        "tion": "tion",
        "sion": "sion",
        "cion": "tion",
        "ttion": "tion",
        "ssion": "sion",
        # Common misspellings
        "reciepe": "recipe",
        "reciept": "receipt",
        "seperate": "separate",
        "occured": "occurred",
        "begining": "beginning",
        "accomodate": "accommodate",
        "definately": "definitely",
        "neccessary": "necessary",
        "occassion": "occasion",
        # Food-specific common mistakes
        "crepe": "crepe",
        "crépe": "crepe",
        "crepes": "crepes",
        "crépes": "crepes",
        "pizza": "pizza",
        "piza": "pizza",
        "pizzza": "pizza",
        "burger": "burger",
        "burguer": "burger",
        "burgar": "burger",
        "sandwich": "sandwich",
        "sandwitch": "sandwich",
        "sandwiche": "sandwich",
        "salad": "salad",
        "salade": "salad",
        "salat": "salad",
        "pasta": "pasta",
        "pastas": "pasta",
        "pastaa": "pasta",
        "soup": "soup",
        "soupe": "soup",
        "soop": "soup",
        "coffee": "coffee",
        "coffe": "coffee",
        "cafe": "coffee",
        "chicken": "chicken",
        "chiken": "chicken",
        "chikn": "chicken",
        "beef": "beef",
        "beff": "beef",
        "beefs": "beef",
        "fish": "fish",
        "fisch": "fish",
        "fishes": "fish",
        # Algerian/French food terms
        "couscous": "couscous",
        "couscouss": "couscous",
        "couscouse": "couscous",
        "tajine": "tajine",
        "tagine": "tajine",
        "tajin": "tajine",
        "merguez": "merguez",
        "merguezs": "merguez",
        "chorba": "chorba",
        "chorbas": "chorba",
        "chorbe": "chorba",
        "brik": "brik",
        "bricks": "brik",
        "briq": "brik",
        "makroudh": "makroudh",
        "makroud": "makroudh",
        "makrout": "makroudh",
        "chakhchoukha": "chakhchoukha",
        "chakhchouka": "chakhchoukha",
        "rechta": "rechta",
        "rechtaa": "rechta",
        # Common letter substitutions
        "ph": "f",
        "gh": "g",
        "ck": "k",
        "qu": "k",
        "x": "ks",
        "z": "s",
        "c": "k",
        "q": "k",
    }
)

# ============================================================================
# PHONETIC PATTERNS
# ============================================================================

"""PHONETIC_PATTERNS: Letter clusters and a simplified phonetic surrogate.

The keys are disjoint clusters, so the application order does not change
the result. Most single-letter keys are already rewritten by the typo step
during normalization; the table is also read during variation generation,
where those keys still matter.
"""
PHONETIC_PATTERNS: Mapping[str, str] = MappingProxyType(
    {
        "tion": "shun",
        "sion": "shun",
        "cian": "shun",
        "ough": "uff",
        "augh": "aff",
        "eigh": "ay",
        "ph": "f",
        "gh": "f",
        "ck": "k",
        "qu": "kw",
        "x": "ks",
        "z": "s",
    }
)

# ============================================================================
# ABBREVIATIONS
# ============================================================================

"""ABBREVIATIONS: Short forms typed in search boxes and the term they stand for.

Only used to widen search variations, never during normalization.
"""
ABBREVIATIONS: Mapping[str, str] = MappingProxyType(
    {
        "pizza": "pizza",
        "piz": "pizza",
        "pz": "pizza",
        "burger": "burger",
        "burg": "burger",
        "bg": "burger",
        "sandwich": "sandwich",
        "sand": "sandwich",
        "sw": "sandwich",
        "salad": "salad",
        "sal": "salad",
        "sl": "salad",
        "pasta": "pasta",
        "pas": "pasta",
        "ps": "pasta",
        "soup": "soup",
        "sp": "soup",
        "coffee": "coffee",
        "caf": "coffee",
        "cf": "coffee",
        "chicken": "chicken",
        "chick": "chicken",
        "chk": "chicken",
        "beef": "beef",
        "bf": "beef",
        "fish": "fish",
        "fs": "fish",
    }
)

# ============================================================================
# DOMAIN VOCABULARY
# ============================================================================

"""DOMAIN_VOCABULARY: Canonical dish names and the spellings found in menus.

Spellings are lowercase and diacritic-free, because they are matched against
the folded form of a query. Plurals are listed explicitly rather than derived,
since several dishes do not pluralize with a trailing "s" in menus.
"""
DOMAIN_VOCABULARY: Mapping[str, Tuple[str, ...]] = MappingProxyType(
    {
        "crepe": ("crepes",),
        "pizza": ("pizzas", "piza", "pizzza"),
        "burger": ("burgers", "burguer", "burgar"),
        "sandwich": ("sandwiches", "sandwitch", "sandwiche"),
        "salad": ("salads", "salade", "salat"),
        "pasta": ("pastas", "pastaa"),
        "soup": ("soups", "soupe", "soop"),
        "coffee": ("coffe", "cafe"),
        "chicken": ("chiken", "chikn"),
        "beef": ("beff", "beefs"),
        "fish": ("fishes", "fisch"),
        "couscous": ("couscouss", "couscouse"),
        "tajine": ("tajines", "tagine", "tajin"),
        "merguez": ("merguezs",),
        "chorba": ("chorbas", "chorbe"),
        "brik": ("bricks", "brick", "briq"),
        "makroudh": ("makroud", "makrout"),
        "chakhchoukha": ("chakhchouka",),
        "rechta": ("rechtaa",),
    }
)


def get_sorted_typo_corrections(
    corrections: Mapping[str, str] = TYPO_CORRECTIONS,
) -> List[Tuple[str, str]]:
    """Return typo corrections ordered by descending key length.

    The sort is stable, so keys of equal length keep their table order.

    Args:
        corrections: Table to order, defaults to TYPO_CORRECTIONS.

    Returns:
        List of (key, value) pairs, longest key first.
    """
    return sorted(corrections.items(), key=lambda item: len(item[0]), reverse=True)


def get_vocabulary_index(
    vocabulary: Mapping[str, Sequence[str]] = DOMAIN_VOCABULARY,
) -> Dict[str, str]:
    """Map every vocabulary spelling, canonical names included, to its canonical name."""
    index: Dict[str, str] = {}
    for canonical, variants in vocabulary.items():
        index.setdefault(canonical, canonical)
        for variant in variants:
            index.setdefault(variant, canonical)
    return index


def get_vocabulary_forms(
    canonical: str,
    vocabulary: Mapping[str, Sequence[str]] = DOMAIN_VOCABULARY,
) -> Tuple[str, ...]:
    """Return the canonical name followed by its variants.

    Unknown names return a one-element tuple holding the name itself.
    """
    return (canonical,) + tuple(vocabulary.get(canonical, ()))


def find_chained_corrections(
    corrections: Mapping[str, str] = TYPO_CORRECTIONS,
) -> List[Tuple[str, str, str]]:
    """Find corrections whose output is itself a key mapping elsewhere.

    A chain ``a -> b``, ``b -> c`` makes the result depend on application
    order. Identity entries are anchors, not chains, and are ignored.

    Args:
        corrections: Table to inspect, defaults to TYPO_CORRECTIONS.

    Returns:
        List of (key, value, next_value) triples. Empty for a clean table.
    """
    chained = []
    for key, value in corrections.items():
        if key == value:
            continue
        next_value = corrections.get(value, value)
        if next_value != value:
            chained.append((key, value, next_value))
    return chained


def find_self_expanding_corrections(
    corrections: Mapping[str, str] = TYPO_CORRECTIONS,
) -> List[Tuple[str, str]]:
    """Find corrections whose output contains their own key.

    ``coffe -> coffee`` is such a rule: a plain replace-all would rewrite the
    already correct "coffee" into "coffeee". The matcher applies these rules
    with a guard that skips occurrences sitting inside the output.

    Returns:
        List of (key, value) pairs.
    """
    return [
        (key, value)
        for key, value in corrections.items()
        if key != value and key in value
    ]


def get_table_statistics() -> Dict[str, int]:
    """Get entry counts for every lexical table.

    Returns:
        Dictionary with one count per table and a ``total_entries`` sum.

    Examples:
        >>> stats = get_table_statistics()
        >>> stats["diacritics"] > 0
        True
    """
    stats = {
        "diacritics": len(DIACRITICS),
        "typo_corrections": len(TYPO_CORRECTIONS),
        "phonetic_patterns": len(PHONETIC_PATTERNS),
        "abbreviations": len(ABBREVIATIONS),
        "vocabulary_terms": len(DOMAIN_VOCABULARY),
        "vocabulary_spellings": len(get_vocabulary_index()),
    }
    stats["total_entries"] = sum(
        count for name, count in stats.items() if name != "vocabulary_terms"
    )
    return stats
