"""
Data-integrity checks for the locations table.

Currently covers the city-region corruption left by the ward consolidation
migration: detection, a reviewable change script, and repair from backup.
"""

from location_pipeline.integrity.change_script import generate_change_script
from location_pipeline.integrity.corruption import (
    CityRepair,
    RegionMismatch,
    RepairPlan,
    RepairResult,
    apply_repairs,
    audit_locations,
    check_location,
    plan_repairs,
)
from location_pipeline.integrity.regions import (
    CITY_TO_EXPECTED_REGION,
    REGION_BOUNDS,
    expected_region_for_city,
    find_region_by_coordinates,
)

__all__ = [
    "REGION_BOUNDS",
    "CITY_TO_EXPECTED_REGION",
    "expected_region_for_city",
    "find_region_by_coordinates",
    "RegionMismatch",
    "check_location",
    "audit_locations",
    "CityRepair",
    "RepairPlan",
    "RepairResult",
    "plan_repairs",
    "apply_repairs",
    "generate_change_script",
]
