"""
Fuzzy text normalization and matching for food search.

This module turns raw search text into a canonical comparable form, widens a
query into likely spelling variations, and scores candidates with a
Levenshtein-based similarity. It is tolerant to typos ("burguer"), diacritics
("crêpe") and regional spellings ("tagine").

Module Architecture:
    - LRUCache: Thread-safe bounded cache with hit/miss counters
    - levenshtein_distance / similarity_score: Edit-distance scoring
    - TextMatcher: Normalizer, variation generator and similarity engine
    - Module-level API: Delegates to a process-wide default TextMatcher

Normalization Pipeline:
    0. Encoding repair with ftfy (mojibake, ligatures, NFC composition)
    1. Lowercase and trim
    2. Diacritic folding
    3. Typo correction, longest key first
    4. Phonetic simplification
    5. Cleanup: drop punctuation, collapse whitespace, trim

    The pipeline is re-run on its own output until it settles, so
    ``normalize(normalize(s)) == normalize(s)``.

Usage Examples:
    One-off calls through the default matcher:
    >>> from smartmatch import normalize, is_similar, find_best_match
    >>> normalize("Crépe")
    'krepe'
    >>> is_similar("burguer", "burger")
    True
    >>> find_best_match("pizza", ["PIZZA", "pizzza", "burger"])
    'PIZZA'

    An isolated matcher with its own caches and thresholds:
    >>> matcher = TextMatcher(Config(similarity_threshold=0.8, cache_size=500))
    >>> matcher.generate_variations("crépe")[:3]
    ['krepe', 'crépe', 'crepe']

Thread Safety:
    - Lexical tables: read-only after import
    - LRUCache: guarded by a re-entrant lock
    - TextMatcher: safe to share; two threads normalizing the same new
      string may both compute it, and both get the same answer

See Also:
    smartmatch.lexicon: Tables used by the pipeline
    smartmatch.search: Record filtering built on TextMatcher
    smartmatch.config: Thresholds and cache sizing
"""

import logging
import re
import threading
from collections import OrderedDict
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

import ftfy
from rapidfuzz.distance import Levenshtein

from .config import Config
from .lexicon import (
    ABBREVIATIONS,
    DIACRITICS,
    DOMAIN_VOCABULARY,
    PHONETIC_PATTERNS,
    TYPO_CORRECTIONS,
    get_sorted_typo_corrections,
    get_vocabulary_forms,
    get_vocabulary_index,
)

logger = logging.getLogger(__name__)

_SPECIAL_CHARACTERS = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")


class LRUCache:
    """Thread-safe LRU (Least Recently Used) cache for matcher results.

    This cache uses an OrderedDict to keep entries in access order and
    moves accessed items to the end (most recently used). When the cache
    exceeds its maximum size, the least recently used items are evicted
    first. All operations take an internal lock.

    Attributes:
        cache (OrderedDict): Internal storage maintaining access order.
        maxsize (Optional[int]): Maximum number of items, None for unbounded.
        hits (int): Lookups that found a value.
        misses (int): Lookups that found nothing.

    Examples:
        >>> cache = LRUCache(maxsize=3)
        >>> cache.set("piza", "pissa")
        >>> cache.set("burguer", "burger")
        >>> cache.set("salade", "salad")
        >>> cache.get("piza")  # Moves "piza" to end (most recent)
        'pissa'
        >>> cache.set("soop", "soup")  # Evicts "burguer" (least recent)
        >>> cache.get("burguer")
        None
    """

    def __init__(self, maxsize: Optional[int] = 10000):
        """Initialize the LRU cache.

        Args:
            maxsize: Maximum number of key-value pairs to store, or None to
                let the cache grow until cleared.

        Raises:
            ValueError: If maxsize is less than 1.
        """
        if maxsize is not None and maxsize < 1:
            raise ValueError("maxsize must be at least 1")
        self.cache: "OrderedDict[str, Any]" = OrderedDict()
        self.maxsize = maxsize
        self.hits = 0
        self.misses = 0
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self.cache)

    def get(self, key: str) -> Optional[Any]:
        """Retrieve a value and mark it as recently used.

        Args:
            key: The key to look up.

        Returns:
            The cached value if the key exists, None otherwise.
        """
        with self._lock:
            if key in self.cache:
                self.cache.move_to_end(key)
                self.hits += 1
                return self.cache[key]
            self.misses += 1
            return None

    def set(self, key: str, value: Any) -> None:
        """Store or update a key-value pair, evicting the oldest entry if full.

        Args:
            key: The key to store.
            value: The value to associate with the key.
        """
        with self._lock:
            if key in self.cache:
                self.cache.move_to_end(key)
            self.cache[key] = value

            if self.maxsize is not None and len(self.cache) > self.maxsize:
                self.cache.popitem(last=False)

    def resize(self, new_size: Optional[int]) -> None:
        """Resize the cache, evicting least recently used items if necessary.

        Args:
            new_size: The new maximum size, or None for unbounded.

        Raises:
            ValueError: If new_size is less than 1.
        """
        if new_size is not None and new_size < 1:
            raise ValueError("new_size must be at least 1")
        with self._lock:
            self.maxsize = new_size
            while new_size is not None and len(self.cache) > new_size:
                self.cache.popitem(last=False)

    def clear(self) -> None:
        """Remove all entries. The size limit and hit counters are kept."""
        with self._lock:
            self.cache.clear()


def levenshtein_distance(s1: str, s2: str) -> int:
    """Compute the Levenshtein edit distance between two strings.

    Insertions, deletions and substitutions each cost 1. Characters are
    compared as Unicode code points.

    Args:
        s1: First string.
        s2: Second string.

    Returns:
        Minimum number of single-character edits turning s1 into s2.

    Examples:
        >>> levenshtein_distance("burguer", "burger")
        1
        >>> levenshtein_distance("", "soup")
        4
    """
    return Levenshtein.distance(s1, s2)


def similarity_score(s1: str, s2: str) -> float:
    """Score two strings as ``1 - distance / longest length``.

    Returns:
        Value in [0, 1]; 1.0 for identical strings, two empty strings included.
    """
    max_length = max(len(s1), len(s2))
    if max_length == 0:
        return 1.0
    return 1.0 - levenshtein_distance(s1, s2) / max_length


def clean_text(text: str) -> str:
    """Drop punctuation and symbols, collapse whitespace and trim."""
    text = _SPECIAL_CHARACTERS.sub("", text)
    return _WHITESPACE.sub(" ", text).strip()


def _replace_all(text: str, key: str, value: str, anchors: Tuple[int, ...]) -> str:
    # anchors: offsets of key inside value; occurrences already sitting
    # inside a copy of value at one of these offsets are left alone
    if not anchors:
        return text.replace(key, value)

    pieces = []
    last = 0
    position = text.find(key)
    while position != -1:
        if any(
            position >= offset and text.startswith(value, position - offset)
            for offset in anchors
        ):
            position = text.find(key, position + 1)
            continue
        pieces.append(text[last:position])
        pieces.append(value)
        last = position + len(key)
        position = text.find(key, last)
    pieces.append(text[last:])
    return "".join(pieces)


class TextMatcher:
    """Typo, diacritic and spelling-variant tolerant text matcher.

    The matcher owns two caches: normalized forms keyed by raw input, and
    variation lists keyed by raw query. Both are LRU-bounded by
    ``Config.cache_size`` (0 means unbounded). The lexical tables default to
    the ``smartmatch.lexicon`` constants and can be replaced per instance.

    Attributes:
        config (Config): Thresholds, cache size and normalization settings.
        diacritics (dict): Single character to ASCII replacement.
        typo_corrections (dict): Misspelled substring to canonical substring.
        phonetic_patterns (dict): Letter cluster to phonetic surrogate.
        abbreviations (dict): Short form to full form.
        vocabulary (dict): Canonical dish name to spelling variants.

    Examples:
        >>> matcher = TextMatcher()
        >>> matcher.normalize("  Tagine  ")
        'tajine'
        >>> matcher.is_similar("pizza", "sushi")
        False
        >>> matcher.rank_matches("chiken", ["chicken wings", "chicken", "beef"])
        [('chicken', 1.0)]
        >>> matcher.get_cache_stats()["normalization_cache_size"] > 0
        True

    Note:
        The two thresholds differ on purpose: ``is_similar`` accepts above
        0.70, ``find_best_match`` above 0.60. See Config.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        diacritics: Optional[Mapping[str, str]] = None,
        typo_corrections: Optional[Mapping[str, str]] = None,
        phonetic_patterns: Optional[Mapping[str, str]] = None,
        abbreviations: Optional[Mapping[str, str]] = None,
        vocabulary: Optional[Mapping[str, Sequence[str]]] = None,
    ):
        """Initialize the matcher.

        Args:
            config: Configuration object, uses defaults if None.
            diacritics: Replacement for DIACRITICS. Keys must be single
                characters.
            typo_corrections: Replacement for TYPO_CORRECTIONS.
            phonetic_patterns: Replacement for PHONETIC_PATTERNS.
            abbreviations: Replacement for ABBREVIATIONS.
            vocabulary: Replacement for DOMAIN_VOCABULARY.

        Raises:
            ValueError: If a diacritics key is longer than one character.
        """
        self.config = config or Config()

        self.diacritics = dict(DIACRITICS if diacritics is None else diacritics)
        self.typo_corrections = dict(
            TYPO_CORRECTIONS if typo_corrections is None else typo_corrections
        )
        self.phonetic_patterns = dict(
            PHONETIC_PATTERNS if phonetic_patterns is None else phonetic_patterns
        )
        self.abbreviations = dict(
            ABBREVIATIONS if abbreviations is None else abbreviations
        )
        self.vocabulary = {
            canonical: tuple(variants)
            for canonical, variants in (
                DOMAIN_VOCABULARY if vocabulary is None else vocabulary
            ).items()
        }

        self._diacritic_table = str.maketrans(self.diacritics)
        self._typo_rules = self._compile_typo_rules(self.typo_corrections)
        self._vocabulary_index = get_vocabulary_index(self.vocabulary)

        cache_size = self.config.cache_size or None
        self._normalization_cache = LRUCache(maxsize=cache_size)
        self._variation_cache = LRUCache(maxsize=cache_size)

    @staticmethod
    def _compile_typo_rules(
        corrections: Mapping[str, str],
    ) -> List[Tuple[str, str, Tuple[int, ...]]]:
        """Order corrections longest key first and precompute their guards.

        Identity entries change nothing during normalization and are dropped
        here; they stay in ``typo_corrections`` for variation generation.
        """
        rules = []
        for key, value in get_sorted_typo_corrections(corrections):
            if not key or key == value:
                continue
            anchors = tuple(
                offset
                for offset in range(len(value) - len(key) + 1)
                if value.startswith(key, offset)
            )
            rules.append((key, value, anchors))
        return rules

    # ------------------------------------------------------------------
    # Normalizer
    # ------------------------------------------------------------------

    def normalize(self, text: str) -> str:
        """Normalize text into its canonical comparable form.

        Args:
            text: Any string. Empty input is returned unchanged.

        Returns:
            Lowercase, diacritic-free, typo-corrected text with punctuation
            removed and whitespace collapsed. May be empty when the input has
            no word characters.

        Examples:
            >>> TextMatcher().normalize("Café!!")
            'koffee'
            >>> TextMatcher().normalize("Mixed   ...  Grill")
            'miksed grill'
        """
        if not text:
            return text

        cached = self._normalization_cache.get(text)
        if cached is not None:
            return cached

        # Repeat until settled; bounded for custom tables that never settle
        normalized = self._normalize_once(text)
        for _ in range(len(normalized) + 1):
            candidate = self._normalize_once(normalized)
            if candidate == normalized:
                break
            normalized = candidate

        if len(self._normalization_cache) < self.config.debug_log_limit:
            logger.debug('Normalized "%s" -> "%s"', text, normalized)

        self._normalization_cache.set(text, normalized)
        return normalized

    def _normalize_once(self, text: str) -> str:
        if self.config.fix_encoding:
            text = ftfy.fix_text(text)
        text = text.lower().strip()
        text = self._fold_diacritics(text)
        text = self._apply_typo_corrections(text)
        text = self._apply_phonetic_patterns(text)
        return clean_text(text)

    def _fold_diacritics(self, text: str) -> str:
        return text.translate(self._diacritic_table)

    def _apply_typo_corrections(self, text: str) -> str:
        for key, value, anchors in self._typo_rules:
            if key in text:
                text = _replace_all(text, key, value, anchors)
        return text

    def _apply_phonetic_patterns(self, text: str) -> str:
        for pattern, replacement in self.phonetic_patterns.items():
            text = text.replace(pattern, replacement)
        return text

    # ------------------------------------------------------------------
    # Variation generator
    # ------------------------------------------------------------------

    def generate_variations(self, query: str) -> List[str]:
        """Generate alternate spellings of a query to widen matching recall.

        The result always starts with the normalized form, followed by the
        cleanup-only form and the diacritic-folded form, then phonetic,
        abbreviation, misspelling and vocabulary variants. Duplicates are
        removed and the order is reproducible.

        Args:
            query: Raw query text, not pre-normalized.

        Returns:
            List of unique variations; ``[""]`` for an empty query.

        Examples:
            >>> variations = TextMatcher().generate_variations("crépe")
            >>> "crepe" in variations and "crepes" in variations
            True
        """
        if not query:
            return [query]

        cached = self._variation_cache.get(query)
        if cached is not None:
            return list(cached)

        normalized = self.normalize(query)
        lowered = query.lower()
        folded = clean_text(self._fold_diacritics(lowered))

        # dict keeps insertion order, giving an ordered set
        variations: Dict[str, None] = dict.fromkeys([normalized, clean_text(lowered), folded])
        for generator in (
            self._phonetic_variations(normalized),
            self._abbreviation_variations(normalized),
            self._misspelling_variations(normalized),
            self._vocabulary_variations(folded),
        ):
            for variation in generator:
                variations.setdefault(variation, None)

        result = tuple(variations)
        self._variation_cache.set(query, result)
        return list(result)

    def _phonetic_variations(self, text: str) -> Iterator[str]:
        for pattern, replacement in self.phonetic_patterns.items():
            if pattern in text:
                yield text.replace(pattern, replacement)

    def _abbreviation_variations(self, text: str) -> Iterator[str]:
        for short_form, full_form in self.abbreviations.items():
            if short_form in text:
                yield text.replace(short_form, full_form)

    def _misspelling_variations(self, text: str) -> Iterator[str]:
        # Reverse direction: canonical spelling back to a known misspelling
        for misspelling, canonical in self.typo_corrections.items():
            if canonical and canonical in text:
                yield text.replace(canonical, misspelling)

    def _vocabulary_variations(self, text: str) -> Iterator[str]:
        words = text.split()
        for index, word in enumerate(words):
            canonical = self._vocabulary_index.get(word)
            if canonical is None:
                continue
            for form in get_vocabulary_forms(canonical, self.vocabulary):
                yield " ".join(words[:index] + [form] + words[index + 1 :])

    # ------------------------------------------------------------------
    # Similarity engine
    # ------------------------------------------------------------------

    def _normalized_pair(self, text1: str, text2: str) -> Optional[Tuple[str, str]]:
        # None when either side is empty before or after normalization
        if not text1 or not text2:
            return None
        normalized1 = self.normalize(text1)
        normalized2 = self.normalize(text2)
        if not normalized1 or not normalized2:
            return None
        return normalized1, normalized2

    def similarity(self, text1: str, text2: str) -> float:
        """Score two raw strings by the similarity of their normalized forms.

        Returns:
            Value in [0, 1]; 0.0 when either side is empty or has no word
            characters.
        """
        pair = self._normalized_pair(text1, text2)
        if pair is None:
            return 0.0
        return similarity_score(*pair)

    def is_similar(self, text1: str, text2: str) -> bool:
        """Check whether two texts refer to the same thing.

        Texts are similar when their normalized forms are equal, when one
        contains the other, or when their similarity score is above
        ``Config.similarity_threshold``.

        Args:
            text1: First raw text.
            text2: Second raw text.

        Returns:
            True if similar. False when either text is empty or has no word
            characters.

        Examples:
            >>> matcher = TextMatcher()
            >>> matcher.is_similar("burguer", "burger")
            True
            >>> matcher.is_similar("chicken", "chicken wings")
            True
            >>> matcher.is_similar("", "pizza")
            False
        """
        pair = self._normalized_pair(text1, text2)
        if pair is None:
            return False

        normalized1, normalized2 = pair
        if normalized1 == normalized2:
            return True

        if normalized1 in normalized2 or normalized2 in normalized1:
            return True

        return similarity_score(normalized1, normalized2) > self.config.similarity_threshold

    def find_best_match(self, query: str, candidates: Sequence[str]) -> Optional[str]:
        """Find the candidate closest to the query.

        A candidate whose normalized form equals the normalized query is
        returned immediately. Otherwise the best-scoring candidate above
        ``Config.best_match_threshold`` wins; on equal scores the first one
        seen is kept.

        Args:
            query: Raw query text.
            candidates: Raw candidate strings, e.g. menu item names.

        Returns:
            The matching candidate as given, or None if nothing qualifies.

        Examples:
            >>> matcher = TextMatcher()
            >>> matcher.find_best_match("pizza", ["PIZZA", "pizzza", "burger"])
            'PIZZA'
            >>> matcher.find_best_match("sushi", ["pizza", "burger"]) is None
            True
        """
        if not query or not candidates:
            return None

        normalized_query = self.normalize(query)
        if not normalized_query:
            return None

        best_match: Optional[str] = None
        best_score = 0.0

        for candidate in candidates:
            if not candidate:
                continue
            normalized_candidate = self.normalize(candidate)

            if normalized_candidate == normalized_query:
                return candidate

            score = similarity_score(normalized_query, normalized_candidate)
            if score > best_score and score > self.config.best_match_threshold:
                best_score = score
                best_match = candidate

        return best_match

    def rank_matches(
        self, query: str, candidates: Sequence[str], limit: Optional[int] = None
    ) -> List[Tuple[str, float]]:
        """Rank candidates by similarity to the query.

        Exact normalized matches score 1.0 and are always kept; other
        candidates are kept when they score above
        ``Config.best_match_threshold``. Equal scores keep input order.

        Args:
            query: Raw query text.
            candidates: Raw candidate strings.
            limit: Maximum number of results, None for all.

        Returns:
            List of (candidate, score) pairs, best first.
        """
        if not query or not candidates:
            return []

        normalized_query = self.normalize(query)
        if not normalized_query:
            return []

        scored = []
        for candidate in candidates:
            if not candidate:
                continue
            normalized_candidate = self.normalize(candidate)
            if normalized_candidate == normalized_query:
                scored.append((candidate, 1.0))
                continue
            score = similarity_score(normalized_query, normalized_candidate)
            if score > self.config.best_match_threshold:
                scored.append((candidate, score))

        scored.sort(key=lambda item: item[1], reverse=True)
        if limit is not None:
            return scored[:limit]
        return scored

    # ------------------------------------------------------------------
    # Cache management
    # ------------------------------------------------------------------

    def clear_cache(self) -> None:
        """Empty both the normalization and the variation cache."""
        self._normalization_cache.clear()
        self._variation_cache.clear()

    def get_cache_stats(self) -> Dict[str, Any]:
        """Report cache sizes and efficiency.

        Returns:
            Dictionary containing:
            - normalization_cache_size (int): Cached normalized forms
            - variation_cache_size (int): Cached variation lists
            - cache_hits (int): Lookups answered from either cache
            - cache_misses (int): Lookups that had to compute
            - cache_hit_rate (float): Hits over lookups (0.0-1.0)
        """
        hits = self._normalization_cache.hits + self._variation_cache.hits
        misses = self._normalization_cache.misses + self._variation_cache.misses
        lookups = hits + misses
        return {
            "normalization_cache_size": len(self._normalization_cache),
            "variation_cache_size": len(self._variation_cache),
            "cache_hits": hits,
            "cache_misses": misses,
            "cache_hit_rate": hits / lookups if lookups else 0.0,
        }


_default_matcher: Optional[TextMatcher] = None
_default_matcher_lock = threading.Lock()


def get_default_matcher() -> TextMatcher:
    """Return the process-wide matcher used by the module-level functions."""
    global _default_matcher
    if _default_matcher is None:
        with _default_matcher_lock:
            if _default_matcher is None:
                _default_matcher = TextMatcher()
    return _default_matcher


def normalize(text: str) -> str:
    """Normalize text with the default matcher. See TextMatcher.normalize."""
    return get_default_matcher().normalize(text)


def generate_variations(query: str) -> List[str]:
    """Generate variations with the default matcher."""
    return get_default_matcher().generate_variations(query)


def is_similar(text1: str, text2: str) -> bool:
    """Compare two texts with the default matcher."""
    return get_default_matcher().is_similar(text1, text2)


def find_best_match(query: str, candidates: Sequence[str]) -> Optional[str]:
    """Find the best candidate with the default matcher."""
    return get_default_matcher().find_best_match(query, candidates)


def rank_matches(
    query: str, candidates: Sequence[str], limit: Optional[int] = None
) -> List[Tuple[str, float]]:
    return get_default_matcher().rank_matches(query, candidates, limit)


def clear_cache() -> None:
    get_default_matcher().clear_cache()


def get_cache_stats() -> Dict[str, Any]:
    return get_default_matcher().get_cache_stats()
