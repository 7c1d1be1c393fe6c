# SPDX-License-Identifier: MIT
"""Tests for duplicate candidate matching."""

from location_pipeline.deduplication.matcher import (
    find_coordinate_duplicates,
    find_duplicate_groups,
    group_by_normalized_name,
    matches_query,
    search_by_name,
)
from location_pipeline.models import Coordinates
from location_pipeline.normalizers import normalize_location_name


class TestGroupByNormalizedName:

    def test_every_named_record_in_exactly_one_group(self, sample_locations, make_location):
        locations = sample_locations + [make_location(""), make_location("!!!")]
        groups = group_by_normalized_name(locations)

        grouped_ids = [loc.id for locs in groups.values() for loc in locs]
        named_ids = [loc.id for loc in locations if normalize_location_name(loc.name)]
        assert sorted(grouped_ids) == sorted(named_ids)
        assert len(grouped_ids) == len(set(grouped_ids))

    def test_empty_names_left_out(self, make_location):
        groups = group_by_normalized_name([make_location(""), make_location("   ")])
        assert groups == {}

    def test_preserves_input_order(self, make_location):
        a = make_location("Lawson", id="b")
        b = make_location("LAWSON", id="a")
        assert [loc.id for loc in group_by_normalized_name([a, b])["lawson"]] == ["b", "a"]


class TestFindDuplicateGroups:
    """Exact mode over the whole corpus."""

    def test_finds_full_width_duplicate(self, sample_locations):
        groups = find_duplicate_groups(sample_locations)
        names = {g.normalized_name for g in groups}
        assert names == {"bistro n/n", "ichiran ramen"}

    def test_singletons_excluded(self, sample_locations):
        groups = find_duplicate_groups(sample_locations)
        assert all(g.size >= 2 for g in groups)

    def test_sorted_by_size(self, make_location):
        locations = [
            make_location("Lawson"),
            make_location("Lawson"),
            make_location("Family Mart"),
            make_location("Family Mart"),
            make_location("Family Mart"),
        ]
        groups = find_duplicate_groups(locations)
        assert [g.normalized_name for g in groups] == ["family mart", "lawson"]

    def test_flags(self, sample_locations):
        groups = {g.normalized_name: g for g in find_duplicate_groups(sample_locations)}

        bistro = groups["bistro n/n"]
        assert bistro.same_place_id  # one place_id, one missing
        assert bistro.same_city

        ichiran = groups["ichiran ramen"]
        assert not ichiran.same_place_id
        assert not ichiran.same_city

    def test_city_comparison_ignores_case(self, make_location):
        groups = find_duplicate_groups([
            make_location("Lawson", city="Osaka"),
            make_location("Lawson", city=" osaka "),
        ])
        assert groups[0].same_city


class TestSearchByName:
    """Search mode around one query string."""

    def test_exact_and_full_width(self, sample_locations):
        groups = search_by_name(sample_locations, "Bistro N/N")
        assert len(groups) == 1
        assert {loc.id for loc in groups[0].locations} == {"loc-1", "loc-2"}

    def test_fuzzy_match_above_threshold(self, sample_locations):
        """A full-width reverse solidus becomes a backslash: one edit away."""
        groups = search_by_name(sample_locations, "Bistro N＼N")
        assert [g.normalized_name for g in groups] == ["bistro n/n"]

    def test_threshold_is_exclusive(self, sample_locations):
        assert search_by_name(sample_locations, "Bistro N＼N", threshold=0.9) == []

    def test_romanized_reading_does_not_match(self, sample_locations):
        assert search_by_name(sample_locations, "Bisutoro Nu Enu") == []

    def test_containment(self, sample_locations):
        groups = search_by_name(sample_locations, "ichiran")
        assert len(groups) == 1
        assert groups[0].size == 2

    def test_single_member_groups_kept(self, sample_locations):
        groups = search_by_name(sample_locations, "Kinkaku-ji")
        assert len(groups) == 1
        assert groups[0].size == 1

    def test_empty_query(self, sample_locations):
        assert search_by_name(sample_locations, "") == []
        assert search_by_name(sample_locations, "!!!") == []

    def test_matches_query_rules(self):
        assert matches_query("lawson", "lawson", 0.8)
        assert matches_query("lawson namba", "lawson", 0.8)
        assert matches_query("lawson", "lawson namba", 0.8)
        assert not matches_query("lawson", "family mart", 0.8)


class TestCoordinateDuplicates:

    def test_same_position(self, make_location):
        here = Coordinates(34.6937, 135.5023)
        locations = [
            make_location("Lawson", coordinates=here),
            make_location("Lawson Osaka Station", coordinates=here),
            make_location("Family Mart", coordinates=Coordinates(35.0, 135.0)),
            make_location("No coords"),
        ]
        duplicates = find_coordinate_duplicates(locations)
        assert list(duplicates) == ["34.693700,135.502300"]
        assert len(duplicates["34.693700,135.502300"]) == 2
