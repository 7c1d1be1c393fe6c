"""
Duplicate resolution: decide which record of each group survives.

``plan_resolution`` is pure and works on an in-memory snapshot.
``resolve`` is the only step that touches storage, and only when asked to.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, Literal

from loguru import logger

from location_pipeline.database import LocationStore
from location_pipeline.deduplication.matcher import (
    distinct_cities,
    distinct_place_ids,
    group_by_normalized_name,
)
from location_pipeline.deduplication.overrides import Overrides
from location_pipeline.deduplication.scoring import score_location
from location_pipeline.models import LocationRecord
from location_pipeline.results import MutationError

UNKNOWN_CITY = "unknown"


@dataclass
class ScoredLocation:
    location: LocationRecord
    score: int

    def to_dict(self) -> dict[str, Any]:
        return {**self.location.summary(), "score": self.score}


@dataclass
class ResolutionGroup:
    """Keep/delete decision for one duplicate group."""
    normalized_name: str
    keep: ScoredLocation
    delete: list[ScoredLocation]
    reason: str
    city: str | None = None  # set in same-city mode
    source: Literal["score", "override"] = "score"

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.normalized_name,
            "city": self.city,
            "source": self.source,
            "reason": self.reason,
            "keep": self.keep.to_dict(),
            "delete": [d.to_dict() for d in self.delete],
        }


@dataclass
class ResolutionResult:
    deleted_count: int = 0
    errors: list[MutationError] = field(default_factory=list)

    @property
    def error_count(self) -> int:
        return len(self.errors)


def is_probably_distinct(locations: list[LocationRecord]) -> bool:
    """Several place_ids AND several cities: same name, different places."""
    return len(distinct_place_ids(locations)) > 1 and len(distinct_cities(locations)) > 1


def rank_group(
    normalized_name: str,
    locations: list[LocationRecord],
    city: str | None = None,
) -> ResolutionGroup:
    """Keep the highest score; ties keep their original order."""
    scored = [ScoredLocation(loc, score_location(loc)) for loc in locations]
    scored.sort(key=lambda s: s.score, reverse=True)

    keep, to_delete = scored[0], scored[1:]
    return ResolutionGroup(
        normalized_name=normalized_name,
        keep=keep,
        delete=to_delete,
        reason=f"Keep score: {keep.score}, Delete scores: {', '.join(str(d.score) for d in to_delete)}",
        city=city,
    )


def apply_pinned(
    normalized_name: str,
    locations: list[LocationRecord],
    overrides: Overrides,
    city: str | None = None,
) -> ResolutionGroup | None:
    """
    Resolution dictated by an overrides entry.

    Returns None when no entry covers the group. A covered group always keeps
    the pinned record and deletes only the listed ids present in the group,
    so its delete list may be empty.
    """
    by_id = {loc.id: loc for loc in locations}
    pinned = overrides.pinned_for(set(by_id))
    if pinned is None:
        return None

    protected = overrides.pinned_keeps()
    to_delete = [by_id[i] for i in pinned.delete if i in by_id and i not in protected]

    return ResolutionGroup(
        normalized_name=normalized_name,
        keep=ScoredLocation(by_id[pinned.keep], score_location(by_id[pinned.keep])),
        delete=[ScoredLocation(loc, score_location(loc)) for loc in to_delete],
        reason=pinned.reason or "Pinned in overrides",
        city=city,
        source="override",
    )


def _resolve_group(
    normalized_name: str,
    locations: list[LocationRecord],
    overrides: Overrides,
    city: str | None = None,
) -> ResolutionGroup:
    pinned = apply_pinned(normalized_name, locations, overrides, city)
    if pinned is not None:
        return pinned
    return rank_group(normalized_name, locations, city)


def plan_resolution(
    locations: Iterable[LocationRecord],
    same_city: bool = False,
    overrides: Overrides | None = None,
) -> list[ResolutionGroup]:
    """
    Compute the keep/delete split for every duplicate group.

    Whole-corpus mode skips groups that look like genuinely different places
    (more than one place_id and more than one city). Same-city mode splits
    each name group by city first, which makes that guard unnecessary.

    Pinned override entries win over scoring, including over the guard. A
    group holding a pinned ``keep`` is never scored, and is left out when the
    entry lists nothing to delete in it.

    Args:
        locations: Corpus snapshot
        same_city: Only resolve duplicates inside one city
        overrides: Skip list and pinned resolutions

    Returns:
        Resolution groups in first-seen name order
    """
    overrides = overrides or Overrides()
    candidates = [loc for loc in locations if not overrides.is_skipped(loc.id)]

    groups: list[ResolutionGroup] = []
    skipped_distinct = 0

    for normalized_name, locs in group_by_normalized_name(candidates).items():
        if len(locs) <= 1:
            continue

        if same_city:
            by_city: dict[str, list[LocationRecord]] = {}
            for loc in locs:
                by_city.setdefault(loc.city_key or UNKNOWN_CITY, []).append(loc)

            for city, city_locs in by_city.items():
                if len(city_locs) <= 1:
                    continue
                group = _resolve_group(normalized_name, city_locs, overrides, city)
                if group.delete:
                    groups.append(group)
            continue

        pinned = apply_pinned(normalized_name, locs, overrides)
        if pinned is not None:
            if pinned.delete:
                groups.append(pinned)
            continue

        if is_probably_distinct(locs):
            skipped_distinct += 1
            continue

        groups.append(rank_group(normalized_name, locs))

    if skipped_distinct:
        logger.info(f"Skipped {skipped_distinct} groups with different place_ids in different cities")

    return groups


def resolve(
    groups: list[ResolutionGroup],
    store: LocationStore | None = None,
    execute: bool = False,
) -> ResolutionResult:
    """
    Delete the losing records of every group.

    Dry-run (the default) never touches storage. In execute mode records are
    deleted one at a time; a failed delete is recorded and the run moves on.

    Args:
        groups: Output of ``plan_resolution``
        store: Storage to delete from (required when executing)
        execute: Actually delete

    Returns:
        Count of deleted records and the per-record errors
    """
    result = ResolutionResult()
    if not execute:
        return result

    if store is None:
        raise ValueError("A store is required to execute a resolution")

    total = sum(len(g.delete) for g in groups)
    for group in groups:
        for scored in group.delete:
            loc = scored.location
            outcome = store.delete(loc.id)
            if outcome.ok:
                result.deleted_count += 1
                if result.deleted_count % 50 == 0:
                    logger.info(f"Deleted {result.deleted_count}/{total}...")
            else:
                logger.warning(f"Failed to delete {loc.id} ({loc.name}): {outcome.message}")
                result.errors.append(MutationError(loc.id, f"{loc.name}: {outcome.message}"))

    logger.info(f"Deleted {result.deleted_count} locations, {result.error_count} errors")
    return result
