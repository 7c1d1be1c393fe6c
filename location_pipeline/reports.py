"""
Report construction.

Builders here are pure: they turn analysis results into plain dicts that the
console renderer and the JSON writer both consume. Nothing in this module
prints or touches storage.
"""

from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import Any

from location_pipeline.deduplication.resolver import ResolutionGroup, ResolutionResult
from location_pipeline.integrity.corruption import (
    MISMATCH_TYPES,
    RegionMismatch,
    RepairPlan,
    RepairResult,
)
from location_pipeline.models import DuplicateGroup, LocationRecord


def report_path(report_dir: Path, prefix: str, now: datetime, suffix: str = "json") -> Path:
    """Timestamped artifact path, e.g. reports/duplicate-audit-2026-01-25_101500.json."""
    return Path(report_dir) / f"{prefix}-{now.strftime('%Y-%m-%d_%H%M%S')}.{suffix}"


def _mutation_summary(result: ResolutionResult | RepairResult | None) -> dict[str, Any] | None:
    if result is None:
        return None
    count = result.deleted_count if isinstance(result, ResolutionResult) else result.repaired_count
    return {
        "applied": count,
        "error_count": result.error_count,
        "errors": [{"id": e.location_id, "message": e.message} for e in result.errors],
    }


def build_duplicate_audit_report(
    locations: list[LocationRecord],
    groups: list[DuplicateGroup],
    now: datetime,
    coordinate_duplicates: dict[str, list[LocationRecord]] | None = None,
    search_term: str | None = None,
    search_matches: list[DuplicateGroup] | None = None,
) -> dict[str, Any]:
    """Full-corpus duplicate audit, optionally with search-mode results."""
    coordinate_duplicates = coordinate_duplicates or {}
    report: dict[str, Any] = {
        "timestamp": now.isoformat(),
        "total_locations": len(locations),
        "total_duplicate_groups": len(groups),
        "total_duplicate_locations": sum(g.size for g in groups),
        "high_risk_groups": sum(1 for g in groups if not g.same_place_id),
        "multi_city_groups": sum(1 for g in groups if not g.same_city),
        "duplicate_groups": [g.to_dict() for g in groups],
        "coordinate_duplicates": [
            {"coordinates": key, "locations": [loc.summary() for loc in locs]}
            for key, locs in coordinate_duplicates.items()
        ],
    }
    if search_term is not None:
        report["search_term"] = search_term
        report["search_term_matches"] = [g.to_dict() for g in (search_matches or [])]
    return report


def build_cleanup_report(
    locations: list[LocationRecord],
    groups: list[ResolutionGroup],
    now: datetime,
    execute: bool,
    same_city: bool,
    result: ResolutionResult | None = None,
) -> dict[str, Any]:
    """Duplicate cleanup plan and, after an execute run, what was applied."""
    to_delete = sum(len(g.delete) for g in groups)
    return {
        "timestamp": now.isoformat(),
        "mode": "execute" if execute else "dry-run",
        "same_city_only": same_city,
        "total_locations": len(locations),
        "duplicate_groups": len(groups),
        "to_delete": to_delete,
        "remaining_after_cleanup": len(locations) - to_delete,
        "groups": [g.to_dict() for g in groups],
        "result": _mutation_summary(result),
    }


def build_region_audit_report(
    locations: list[LocationRecord],
    mismatches: list[RegionMismatch],
    plan: RepairPlan,
    now: datetime,
    execute: bool,
    change_script: Path | None = None,
    result: RepairResult | None = None,
) -> dict[str, Any]:
    """City-region audit grouped by mismatch type and by transformation pattern."""
    by_type: dict[str, list[str]] = {t: [] for t in MISMATCH_TYPES}
    by_pattern: dict[str, list[str]] = {}
    for m in mismatches:
        by_type[m.mismatch_type].append(m.id)
        by_pattern.setdefault(m.pattern, []).append(m.id)

    return {
        "timestamp": now.isoformat(),
        "mode": "fix" if execute else "dry-run",
        "total_locations": len(locations),
        "total_mismatches": len(mismatches),
        "critical_count": sum(1 for m in mismatches if m.critical),
        "by_type": by_type,
        "by_severity": dict(Counter(m.severity for m in mismatches)),
        "by_pattern": by_pattern,
        "mismatches": [m.to_dict() for m in mismatches],
        "repairs": [r.to_dict() for r in plan.repairs],
        "manual_review": [m.to_dict() for m in plan.manual_review],
        "change_script": str(change_script) if change_script else None,
        "result": _mutation_summary(result),
    }
