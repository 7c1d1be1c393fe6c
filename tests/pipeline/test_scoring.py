# SPDX-License-Identifier: MIT
"""Tests for data-completeness scoring."""

from location_pipeline.deduplication.scoring import score_location
from location_pipeline.models import Coordinates, LocationRecord


class TestScoreLocation:

    def test_empty_record(self):
        assert score_location(LocationRecord(id="a", name="Lawson")) == 0

    def test_complete_record(self, sample_locations):
        # place_id + coords + description + rating + image + city + category
        assert score_location(sample_locations[0]) == 220

    def test_individual_signals(self):
        base = dict(id="a", name="Lawson")
        assert score_location(LocationRecord(**base, place_id="ChIJ")) == 100
        assert score_location(LocationRecord(**base, coordinates=Coordinates(34.0, 135.0))) == 50
        assert score_location(LocationRecord(**base, description="A long description")) == 30
        assert score_location(LocationRecord(**base, rating=3.2)) == 20
        assert score_location(LocationRecord(**base, image="img.jpg")) == 10
        assert score_location(LocationRecord(**base, city="Osaka")) == 5
        assert score_location(LocationRecord(**base, category="shop")) == 5

    def test_description_must_exceed_ten_characters(self):
        assert score_location(LocationRecord(id="a", name="x", description="0123456789")) == 0
        assert score_location(LocationRecord(id="a", name="x", description="0123456789A")) == 30

    def test_zero_rating_scores_nothing(self):
        assert score_location(LocationRecord(id="a", name="x", rating=0)) == 0

    def test_blank_strings_are_absent(self):
        record = LocationRecord(id="a", name="x", place_id="", image="  ", city="", category="")
        assert score_location(record) == 0

    def test_adding_data_never_lowers_score(self):
        record = LocationRecord(id="a", name="Lawson")
        previous = score_location(record)
        for field, value in [
            ("category", "shop"),
            ("city", "Osaka"),
            ("image", "img.jpg"),
            ("rating", 4.0),
            ("description", "Convenience store by the station"),
            ("coordinates", Coordinates(34.0, 135.0)),
            ("place_id", "ChIJ"),
        ]:
            setattr(record, field, value)
            current = score_location(record)
            assert current > previous
            previous = current
