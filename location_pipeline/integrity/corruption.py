"""
City-region corruption audit.

An earlier ward-consolidation migration rewrote ``city`` to the parent city
of a same-named ward, even when the location was in another region. Example:
Miyakojima is an Okinawa city and also an Osaka ward, so Okinawa locations
ended up with ``city="Osaka"``.

Two independent signals are compared against the stored ``region``: the
region a city name implies, and the region the coordinates fall in. When
both disagree with each other as well, the corruption is confirmed.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, Literal

from loguru import logger

from location_pipeline.database import LocationStore
from location_pipeline.integrity.regions import (
    CITY_TO_EXPECTED_REGION,
    REGION_BOUNDS,
    Bounds,
    expected_region_for_city,
    find_region_by_coordinates,
    normalize_region,
)
from location_pipeline.models import Coordinates, LocationRecord, present
from location_pipeline.results import MutationError

MismatchType = Literal["city-region", "coordinate-region", "both"]
MISMATCH_TYPES: tuple[MismatchType, ...] = ("both", "city-region", "coordinate-region")
Severity = Literal["critical", "medium", "low"]


@dataclass
class RegionMismatch:
    id: str
    name: str
    city: str | None
    city_original: str | None
    region: str | None
    expected_region: str | None
    coordinate_region: str | None
    mismatch_type: MismatchType
    coordinates: Coordinates | None = None

    @property
    def critical(self) -> bool:
        """Declared city convention and physical position disagree with each other."""
        if self.mismatch_type == "both":
            return True
        return (
            self.coordinate_region is not None
            and self.expected_region is not None
            and self.coordinate_region != self.expected_region
        )

    @property
    def severity(self) -> Severity:
        if self.critical:
            return "critical"
        if self.mismatch_type == "coordinate-region":
            return "medium"
        return "low"

    @property
    def has_backup(self) -> bool:
        return present(self.city_original)

    @property
    def pattern(self) -> str:
        """Summary key: the city -> region combination and what it should be."""
        should_be = self.coordinate_region or self.expected_region or "?"
        return f"{self.city} -> {self.region} (should be {should_be})"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "city": self.city,
            "city_original": self.city_original,
            "region": self.region,
            "expected_region": self.expected_region,
            "coordinate_region": self.coordinate_region,
            "mismatch_type": self.mismatch_type,
            "critical": self.critical,
            "severity": self.severity,
            "coordinates": self.coordinates.to_dict() if self.coordinates else None,
        }


def check_location(
    loc: LocationRecord,
    city_table: dict[str, str] = CITY_TO_EXPECTED_REGION,
    bounds: dict[str, Bounds] = REGION_BOUNDS,
) -> RegionMismatch | None:
    """
    Cross-check one location's region against its city name and coordinates.

    A record with a ``city_original`` backup is inspected only while the backup
    differs from ``city``; an equal backup means it was never touched by the
    migration or has already been restored. Records without a backup are
    always inspected.

    Returns:
        The mismatch, or None when the record is consistent
    """
    if present(loc.city_original) and not loc.was_migrated:
        return None

    region = normalize_region(loc.region)
    expected_region = expected_region_for_city(loc.city, city_table)
    coordinate_region = None
    if loc.coordinates is not None:
        coordinate_region = find_region_by_coordinates(
            loc.coordinates.lat, loc.coordinates.lng, bounds
        )

    city_mismatch = expected_region is not None and expected_region != region
    coordinate_mismatch = coordinate_region is not None and coordinate_region != region

    if city_mismatch and coordinate_mismatch:
        mismatch_type: MismatchType = "both"
    elif city_mismatch:
        mismatch_type = "city-region"
    elif coordinate_mismatch:
        mismatch_type = "coordinate-region"
    else:
        return None

    return RegionMismatch(
        id=loc.id,
        name=loc.name,
        city=loc.city,
        city_original=loc.city_original,
        region=loc.region,
        expected_region=expected_region,
        coordinate_region=coordinate_region,
        mismatch_type=mismatch_type,
        coordinates=loc.coordinates,
    )


def audit_locations(
    locations: Iterable[LocationRecord],
    city_table: dict[str, str] = CITY_TO_EXPECTED_REGION,
    bounds: dict[str, Bounds] = REGION_BOUNDS,
) -> list[RegionMismatch]:
    """Every city-region or coordinate-region mismatch in the snapshot."""
    mismatches = []
    checked = 0
    for loc in locations:
        checked += 1
        mismatch = check_location(loc, city_table, bounds)
        if mismatch:
            mismatches.append(mismatch)

    logger.info(f"Checked {checked} locations, found {len(mismatches)} region mismatches")
    return mismatches


# =============================================================================
# Repair
# =============================================================================

@dataclass
class CityRepair:
    """Restore ``city`` from the migration backup."""
    location_id: str
    name: str
    current_city: str | None
    original_city: str
    region: str | None
    coordinate_region: str | None

    @property
    def transformation(self) -> str:
        return f'"{self.current_city}" → "{self.original_city}" ({self.region})'

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.location_id,
            "name": self.name,
            "current_city": self.current_city,
            "original_city": self.original_city,
            "region": self.region,
            "coordinate_region": self.coordinate_region,
        }


@dataclass
class RepairPlan:
    repairs: list[CityRepair] = field(default_factory=list)
    manual_review: list[RegionMismatch] = field(default_factory=list)


@dataclass
class RepairResult:
    repaired_count: int = 0
    errors: list[MutationError] = field(default_factory=list)

    @property
    def error_count(self) -> int:
        return len(self.errors)


def plan_repairs(mismatches: Iterable[RegionMismatch], critical_only: bool = False) -> RepairPlan:
    """
    Split mismatches into automatic repairs and manual review.

    Only records carrying a ``city_original`` backup can be repaired.

    Args:
        mismatches: Output of ``audit_locations``
        critical_only: Restrict repairs to confirmed (critical) mismatches
    """
    plan = RepairPlan()
    for m in mismatches:
        if critical_only and not m.critical:
            continue
        if m.has_backup:
            plan.repairs.append(CityRepair(
                location_id=m.id,
                name=m.name,
                current_city=m.city,
                original_city=m.city_original,
                region=m.region,
                coordinate_region=m.coordinate_region,
            ))
        else:
            plan.manual_review.append(m)
    return plan


def apply_repairs(
    repairs: list[CityRepair],
    store: LocationStore | None = None,
    execute: bool = False,
) -> RepairResult:
    """
    Write ``city := city_original`` for every repair.

    Dry-run (the default) never touches storage. Updates run one record at a
    time; a failed update is recorded and the run moves on.
    """
    result = RepairResult()
    if not execute:
        return result

    if store is None:
        raise ValueError("A store is required to apply repairs")

    for repair in repairs:
        outcome = store.update(repair.location_id, {"city": repair.original_city})
        if not outcome.ok:
            logger.warning(f'Error rolling back "{repair.name}": {outcome.message}')
            result.errors.append(MutationError(repair.location_id, outcome.message))
            continue

        result.repaired_count += 1
        if result.repaired_count % 10 == 0:
            logger.info(f"Rolled back {result.repaired_count}/{len(repairs)}...")

    logger.info(f"Rolled back {result.repaired_count} locations, {result.error_count} errors")
    return result
