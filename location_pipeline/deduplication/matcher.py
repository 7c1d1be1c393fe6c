"""
Duplicate candidate matching.

Two modes:
- exact: group the whole corpus by normalized name (full audit)
- search: collect everything resembling one query string (targeted lookup)
"""

from collections import defaultdict
from typing import Iterable

from loguru import logger

from location_pipeline.models import DuplicateGroup, LocationRecord, present
from location_pipeline.normalizers import normalize_location_name
from location_pipeline.utils.geo import coordinate_key
from location_pipeline.utils.text import similarity

DEFAULT_SIMILARITY_THRESHOLD = 0.80


def group_by_normalized_name(
    locations: Iterable[LocationRecord],
) -> dict[str, list[LocationRecord]]:
    """Bucket records by normalized name, preserving input order.

    Records whose name normalizes to an empty string are left out.
    """
    groups: dict[str, list[LocationRecord]] = defaultdict(list)
    for loc in locations:
        key = normalize_location_name(loc.name)
        if not key:
            continue
        groups[key].append(loc)
    return dict(groups)


def distinct_place_ids(locations: Iterable[LocationRecord]) -> set[str]:
    return {loc.place_id for loc in locations if present(loc.place_id)}


def distinct_cities(locations: Iterable[LocationRecord]) -> set[str]:
    return {loc.city_key for loc in locations if loc.city_key}


def build_group(normalized_name: str, locations: list[LocationRecord]) -> DuplicateGroup:
    """Wrap records in a DuplicateGroup and derive its flags."""
    return DuplicateGroup(
        normalized_name=normalized_name,
        locations=locations,
        same_place_id=len(distinct_place_ids(locations)) <= 1,
        same_city=len(distinct_cities(locations)) <= 1,
    )


def find_duplicate_groups(locations: Iterable[LocationRecord]) -> list[DuplicateGroup]:
    """
    Exact mode: every normalized name shared by two or more records.

    Returns:
        Groups sorted by member count, largest first (ties keep first-seen order)
    """
    groups = [
        build_group(name, locs)
        for name, locs in group_by_normalized_name(locations).items()
        if len(locs) > 1
    ]
    groups.sort(key=lambda g: g.size, reverse=True)

    logger.debug(f"Found {len(groups)} duplicate name groups")
    return groups


def matches_query(normalized: str, normalized_query: str, threshold: float) -> bool:
    """Equality, containment either way, or similarity above the threshold."""
    if normalized == normalized_query:
        return True
    if normalized_query in normalized or normalized in normalized_query:
        return True
    return similarity(normalized, normalized_query) > threshold


def search_by_name(
    locations: Iterable[LocationRecord],
    query: str,
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
) -> list[DuplicateGroup]:
    """
    Search mode: records resembling ``query``, regrouped by their own key.

    Args:
        locations: Corpus snapshot
        query: Free-text name to look for
        threshold: Minimum similarity (exclusive) for a fuzzy match

    Returns:
        One group per matching normalized name, in first-seen order.
        Groups may have a single member.
    """
    normalized_query = normalize_location_name(query)
    if not normalized_query:
        return []

    matching = []
    for loc in locations:
        key = normalize_location_name(loc.name)
        if key and matches_query(key, normalized_query, threshold):
            matching.append(loc)
    logger.debug(f"Search '{query}' matched {len(matching)} locations")

    return [
        build_group(name, locs)
        for name, locs in group_by_normalized_name(matching).items()
    ]


def find_coordinate_duplicates(
    locations: Iterable[LocationRecord],
    precision: int = 6,
) -> dict[str, list[LocationRecord]]:
    """Records sharing the exact same position (rounded to ``precision`` decimals)."""
    by_coords: dict[str, list[LocationRecord]] = defaultdict(list)
    for loc in locations:
        if loc.coordinates is None:
            continue
        by_coords[coordinate_key(loc.coordinates.lat, loc.coordinates.lng, precision)].append(loc)
    return {key: locs for key, locs in by_coords.items() if len(locs) > 1}
