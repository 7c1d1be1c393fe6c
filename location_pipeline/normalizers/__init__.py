"""
Data normalization utilities.

These modules turn raw display values into stable comparison keys.
"""

from .names import normalize_location_name

__all__ = [
    'normalize_location_name',
]
