"""
Data-completeness scoring for duplicate resolution.

Higher score = more complete record = the one to keep. Each signal adds a
fixed amount and the score of one record never depends on another.
"""

from location_pipeline.models import LocationRecord, present

PLACE_ID_POINTS = 100
COORDINATES_POINTS = 50
DESCRIPTION_POINTS = 30
RATING_POINTS = 20
IMAGE_POINTS = 10
CITY_POINTS = 5
CATEGORY_POINTS = 5

MIN_DESCRIPTION_LENGTH = 10


def score_location(loc: LocationRecord) -> int:
    """Score a location by how much verified data it carries."""
    score = 0

    # Google Places verified
    if present(loc.place_id):
        score += PLACE_ID_POINTS

    if loc.coordinates is not None:
        score += COORDINATES_POINTS

    if loc.description is not None and len(loc.description) > MIN_DESCRIPTION_LENGTH:
        score += DESCRIPTION_POINTS

    if loc.rating is not None and loc.rating > 0:
        score += RATING_POINTS

    if present(loc.image):
        score += IMAGE_POINTS

    if present(loc.city):
        score += CITY_POINTS

    if present(loc.category):
        score += CATEGORY_POINTS

    return score
