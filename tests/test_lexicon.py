"""
Tests for the static lexical tables.
"""

import pytest

from smartmatch.lexicon import (
    ABBREVIATIONS,
    DIACRITICS,
    DOMAIN_VOCABULARY,
    PHONETIC_PATTERNS,
    TYPO_CORRECTIONS,
    find_chained_corrections,
    find_self_expanding_corrections,
    get_sorted_typo_corrections,
    get_table_statistics,
    get_vocabulary_forms,
    get_vocabulary_index,
)


class TestDiacritics:
    """Test the diacritic folding table."""

    def test_keys_are_single_characters(self):
        """Every key folds exactly one character."""
        assert all(len(key) == 1 for key in DIACRITICS)

    def test_values_are_short_ascii(self):
        """Replacements are one or two ASCII characters."""
        for value in DIACRITICS.values():
            assert value.isascii()
            assert 1 <= len(value) <= 2

    def test_common_accents(self):
        assert DIACRITICS["é"] == "e"
        assert DIACRITICS["ç"] == "c"
        assert DIACRITICS["æ"] == "ae"


class TestTypoCorrections:
    """Test typo correction ordering and table hygiene."""

    def test_sorted_longest_first(self):
        """Keys come out in non-increasing length."""
        lengths = [len(key) for key, _ in get_sorted_typo_corrections()]
        assert lengths == sorted(lengths, reverse=True)

    def test_sort_is_stable_for_equal_lengths(self):
        """Keys of the same length keep their table order."""
        sorted_keys = [key for key, _ in get_sorted_typo_corrections()]
        for length in {len(key) for key in TYPO_CORRECTIONS}:
            table_order = [key for key in TYPO_CORRECTIONS if len(key) == length]
            sorted_order = [key for key in sorted_keys if len(key) == length]
            assert sorted_order == table_order

    def test_all_entries_kept(self):
        assert dict(get_sorted_typo_corrections()) == dict(TYPO_CORRECTIONS)

    def test_no_chained_corrections(self):
        """No correction produces a key that would be corrected again."""
        assert find_chained_corrections() == []

    def test_chained_corrections_detected(self):
        table = {"aa": "bb", "bb": "cc", "dd": "dd"}
        assert find_chained_corrections(table) == [("aa", "bb", "cc")]

    def test_self_expanding_corrections(self):
        """Rules whose output contains their key are known and few."""
        assert set(find_self_expanding_corrections()) == {
            ("coffe", "coffee"),
            ("tajin", "tajine"),
            ("makroud", "makroudh"),
        }

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            TYPO_CORRECTIONS["pizzaa"] = "pizza"
        with pytest.raises(TypeError):
            PHONETIC_PATTERNS["ph"] = "v"


class TestVocabulary:
    """Test the domain vocabulary helpers."""

    def test_spellings_are_folded(self):
        """Spellings are lowercase ASCII so they match folded queries."""
        for canonical, variants in DOMAIN_VOCABULARY.items():
            for spelling in (canonical,) + variants:
                assert spelling == spelling.lower()
                assert spelling.isascii()

    def test_index_maps_variants_to_canonical(self):
        index = get_vocabulary_index()
        assert index["tagine"] == "tajine"
        assert index["crepes"] == "crepe"
        assert index["chakhchouka"] == "chakhchoukha"
        assert all(index[canonical] == canonical for canonical in DOMAIN_VOCABULARY)

    def test_forms(self):
        assert get_vocabulary_forms("crepe") == ("crepe", "crepes")
        assert get_vocabulary_forms("sushi") == ("sushi",)

    def test_typo_variants_are_in_vocabulary(self):
        """Food misspellings known to the typo table are searchable variants."""
        index = get_vocabulary_index()
        for key, value in TYPO_CORRECTIONS.items():
            if value in DOMAIN_VOCABULARY and key.isascii():
                assert index[key] == value


class TestTableStatistics:
    """Test table statistics."""

    def test_statistics(self):
        stats = get_table_statistics()

        assert stats["diacritics"] == len(DIACRITICS)
        assert stats["typo_corrections"] == len(TYPO_CORRECTIONS)
        assert stats["phonetic_patterns"] == len(PHONETIC_PATTERNS)
        assert stats["abbreviations"] == len(ABBREVIATIONS)
        assert stats["vocabulary_terms"] == len(DOMAIN_VOCABULARY)
        assert stats["total_entries"] == (
            stats["diacritics"]
            + stats["typo_corrections"]
            + stats["phonetic_patterns"]
            + stats["abbreviations"]
            + stats["vocabulary_spellings"]
        )
