"""Utility modules for the data pipeline."""

from location_pipeline.utils.files import atomic_write_json, atomic_write_text
from location_pipeline.utils.geo import coordinate_key, is_valid_coordinates, parse_coordinates
from location_pipeline.utils.logging import setup_logging
from location_pipeline.utils.text import levenshtein_distance, similarity, truncate

__all__ = [
    # File output
    "atomic_write_json",
    "atomic_write_text",
    # Logging
    "setup_logging",
    # Geographic utilities
    "is_valid_coordinates",
    "parse_coordinates",
    "coordinate_key",
    # Text utilities
    "levenshtein_distance",
    "similarity",
    "truncate",
]
