# SPDX-License-Identifier: MIT
"""Tests for the rich console renderers."""

import io

from rich.console import Console

from location_pipeline.console import render_region_audit
from location_pipeline.integrity.corruption import audit_locations
from location_pipeline.models import Coordinates, LocationRecord

TOKYO = Coordinates(35.6762, 139.6503)


def _render(mismatches, verbose=False) -> str:
    out = io.StringIO()
    render_region_audit(Console(file=out, width=160), len(mismatches), mismatches, verbose=verbose)
    return out.getvalue()


class TestRenderRegionAudit:

    def test_one_section_per_type(self, corrupted_location):
        mismatches = audit_locations([
            corrupted_location,
            LocationRecord(id="t", name="Tokyo Tower", city="Tokyo", region="Kanto", coordinates=TOKYO),
            LocationRecord(id="k", name="Kyoto Inn", city="Kyoto", region="Okinawa", coordinates=TOKYO),
        ])
        text = _render(mismatches)

        assert "city-region (1)" in text
        assert "both (1)" in text
        assert "coordinate-region (" not in text
        assert text.index("both (1)") < text.index("city-region (1)")

    def test_lower_severity_counted_not_listed(self):
        mismatches = audit_locations([
            LocationRecord(id="b", name="No Coords Inn", city="Osaka", region="Kanto"),
        ])

        text = _render(mismatches)
        assert "city-region (1)" in text
        assert "1 lower-severity mismatches" in text
        assert "No Coords Inn" not in text

        verbose = _render(mismatches, verbose=True)
        assert "No Coords Inn" in verbose
        assert "lower-severity" not in verbose

    def test_no_mismatches(self):
        assert "No region mismatches found" in _render([])
