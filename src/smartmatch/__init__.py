"""
smartmatch: Typo, accent and spelling-variant tolerant matching for food search.

Normalizes what users type ("Crêpes", "burguer", "tagine") and what menus
store into comparable forms, widens queries into likely spellings, and picks
the closest dish or restaurant name with an edit-distance similarity.
"""

__version__ = "1.0.0"
__author__ = "smartmatch Team"

from .config import Config
from .matcher import (
    LRUCache,
    TextMatcher,
    clear_cache,
    find_best_match,
    generate_variations,
    get_cache_stats,
    get_default_matcher,
    is_similar,
    levenshtein_distance,
    normalize,
    rank_matches,
    similarity_score,
)

# Public API exports
from .search import filter_records, matches_record

__all__ = [
    "TextMatcher",
    "LRUCache",
    "normalize",
    "generate_variations",
    "is_similar",
    "find_best_match",
    "rank_matches",
    "clear_cache",
    "get_cache_stats",
    "get_default_matcher",
    "levenshtein_distance",
    "similarity_score",
    "filter_records",
    "matches_record",
    "Config",
    "__version__",
]
