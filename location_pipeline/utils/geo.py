"""Geographic utility functions for the data pipeline."""

from typing import Any


def is_valid_coordinates(lat: float, lng: float) -> bool:
    """Check if latitude and longitude are valid.

    Args:
        lat: Latitude in degrees
        lng: Longitude in degrees

    Returns:
        True if coordinates are valid, False otherwise
    """
    return -90 <= lat <= 90 and -180 <= lng <= 180


def parse_coordinates(value: Any) -> tuple[float, float] | None:
    """Parse a stored coordinates value into a (lat, lng) tuple.

    The locations table stores coordinates as a JSON object
    ``{"lat": ..., "lng": ...}``. Anything that is missing, malformed or
    out of range yields None.

    Args:
        value: Raw column value

    Returns:
        Tuple of (lat, lng) or None
    """
    if not value or not isinstance(value, dict):
        return None

    lat = value.get("lat")
    lng = value.get("lng", value.get("lon"))
    if lat is None or lng is None:
        return None

    try:
        lat = float(lat)
        lng = float(lng)
    except (TypeError, ValueError):
        return None

    if not is_valid_coordinates(lat, lng):
        return None

    return lat, lng


def coordinate_key(lat: float, lng: float, precision: int = 6) -> str:
    """Grouping key for exact-position comparisons (6 decimals is ~11cm)."""
    return f"{lat:.{precision}f},{lng:.{precision}f}"
