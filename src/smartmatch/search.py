"""
In-memory record filtering built on the text matcher.

Search screens hold a list of restaurants or menu items fetched from the
backend and narrow it down as the user types. This module applies the matcher
to such records: the query is widened into its spelling variations, and a
record is kept when one of the variations appears in, or is similar to, one
of the searched fields.

Key Functions:
    - filter_records(): Filter a list of records, with statistics
    - matches_record(): Test a single record

Example Workflow:
    >>> restaurants = [
    ...     {"name": "Chez Karim", "description": "Tagine et couscous"},
    ...     {"name": "Burger House", "description": "Smash burgers"},
    ... ]
    >>> matched, stats = filter_records("tajine", restaurants, ["name", "description"])
    >>> [r["name"] for r in matched]
    ['Chez Karim']
    >>> stats["records_matched"]
    1
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from .matcher import TextMatcher, get_default_matcher

logger = logging.getLogger(__name__)

MATCH_CONTAINMENT = "containment"
MATCH_FUZZY = "fuzzy"


def _field_values(record: Mapping[str, Any], fields: Sequence[str]) -> List[str]:
    values = []
    for field in fields:
        value = record.get(field)
        if value:
            values.append(str(value).lower())
    return values


def _match_kind(
    variations: Sequence[str], values: Sequence[str], matcher: TextMatcher
) -> Optional[str]:
    for variation in variations:
        if not variation:
            continue
        if any(variation in value for value in values):
            return MATCH_CONTAINMENT
        if any(matcher.is_similar(variation, value) for value in values):
            return MATCH_FUZZY
    return None


def matches_record(
    query: str,
    record: Mapping[str, Any],
    fields: Sequence[str],
    matcher: Optional[TextMatcher] = None,
) -> bool:
    """Check whether a record matches a search query.

    Args:
        query: Raw search text.
        record: Mapping of field name to value; missing or empty fields are
            ignored.
        fields: Names of the fields to search.
        matcher: Matcher to use, defaults to the process-wide matcher.

    Returns:
        True if any variation of the query is contained in, or similar to,
        one of the record's fields.
    """
    if not query:
        return False
    matcher = matcher or get_default_matcher()
    variations = matcher.generate_variations(query)
    return _match_kind(variations, _field_values(record, fields), matcher) is not None


def filter_records(
    query: str,
    records: Sequence[Mapping[str, Any]],
    fields: Sequence[str],
    matcher: Optional[TextMatcher] = None,
    progress_callback: Optional[Callable[[int, int, str], None]] = None,
) -> Tuple[List[Mapping[str, Any]], Dict[str, int]]:
    """Filter records down to those matching a search query.

    Each record is tested against every variation of the query, in the order
    ``generate_variations`` returns them. For each variation a cheap
    substring check on the lowercased field values runs first; only when it
    fails is the fuzzy ``is_similar`` comparison tried.

    Args:
        query: Raw search text, e.g. what the user typed.
        records: Records to filter. Each is a mapping such as a decoded
            JSON row. Records are returned as given, never copied.
        fields: Names of the string fields to search, e.g.
            ``["name", "description", "city"]``.
        matcher: Matcher to use, defaults to the process-wide matcher so
            its caches are shared across searches.
        progress_callback: Optional callback for progress updates. Called with:
            - current (int): Current record index (0-based)
            - total (int): Total number of records
            - message (str): Progress message

    Returns:
        Tuple containing:
            - matched_records: Matching records, in input order
            - search_statistics: Dictionary with:
                - records_scanned (int): Records examined
                - records_matched (int): Records kept
                - containment_matches (int): Kept by substring check
                - fuzzy_matches (int): Kept by similarity check
                - variations_tried (int): Non-empty query variations used

    Examples:
        >>> items = [{"name": "Pizza Margherita"}, {"name": "Chorba frik"}]
        >>> matched, stats = filter_records("chorbe", items, ["name"])
        >>> matched[0]["name"]
        'Chorba frik'
    """
    matcher = matcher or get_default_matcher()

    stats = {
        "records_scanned": 0,
        "records_matched": 0,
        "containment_matches": 0,
        "fuzzy_matches": 0,
        "variations_tried": 0,
    }

    if not query:
        return [], stats

    variations = [variation for variation in matcher.generate_variations(query) if variation]
    stats["variations_tried"] = len(variations)
    if not variations:
        logger.debug('Query "%s" has no searchable variations', query)
        return [], stats

    matched = []
    total = len(records)
    for i, record in enumerate(records):
        if progress_callback:
            progress_callback(i, total, "Filtering records...")

        stats["records_scanned"] += 1
        kind = _match_kind(variations, _field_values(record, fields), matcher)
        if kind is None:
            continue

        matched.append(record)
        stats["records_matched"] += 1
        if kind == MATCH_CONTAINMENT:
            stats["containment_matches"] += 1
        else:
            stats["fuzzy_matches"] += 1

    logger.debug(
        'Query "%s": %d of %d records matched using %d variations',
        query,
        stats["records_matched"],
        total,
        len(variations),
    )

    if progress_callback:
        progress_callback(
            total,
            total,
            "Filtering complete: {} records matched".format(stats["records_matched"]),
        )

    return matched, stats
