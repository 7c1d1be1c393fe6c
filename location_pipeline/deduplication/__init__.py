"""
Deduplication pipeline components.

These modules find locations that are the same place listed more than once
and decide which single record to keep.
"""

from location_pipeline.deduplication.matcher import (
    DEFAULT_SIMILARITY_THRESHOLD,
    find_coordinate_duplicates,
    find_duplicate_groups,
    search_by_name,
)
from location_pipeline.deduplication.overrides import Overrides, load_overrides
from location_pipeline.deduplication.resolver import (
    ResolutionGroup,
    ResolutionResult,
    plan_resolution,
    resolve,
)
from location_pipeline.deduplication.scoring import score_location

__all__ = [
    "DEFAULT_SIMILARITY_THRESHOLD",
    "find_duplicate_groups",
    "search_by_name",
    "find_coordinate_duplicates",
    "score_location",
    "plan_resolution",
    "resolve",
    "ResolutionGroup",
    "ResolutionResult",
    "Overrides",
    "load_overrides",
]
