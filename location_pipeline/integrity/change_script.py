"""
SQL change script for restoring corrupted city values.

The script is meant to be read before it is run: one UPDATE per restored
city value, a commented revert block, and a list of locations that need a
human because no backup value exists.
"""

import re
from datetime import datetime
from typing import Iterable

from location_pipeline.integrity.corruption import CityRepair, RegionMismatch

# Anything that ends a `--` comment line
LINE_BREAKS = re.compile(r"[\r\n\u2028\u2029\x0b\x0c\x85]+")


def sql_literal(value: str | None) -> str:
    """Quote a value as a SQL string literal."""
    if value is None:
        return "NULL"
    return "'" + value.replace("'", "''") + "'"


def sql_comment(value: object) -> str:
    """Render a value for use inside a `--` comment (single line only)."""
    return LINE_BREAKS.sub(" ", str(value))


def _group_by(repairs: Iterable[CityRepair], attr: str) -> dict[str | None, list[CityRepair]]:
    groups: dict[str | None, list[CityRepair]] = {}
    for repair in repairs:
        groups.setdefault(getattr(repair, attr), []).append(repair)
    return groups


def _update_statement(city: str | None, repairs: list[CityRepair]) -> list[str]:
    ids = ",\n  ".join(sql_literal(r.location_id) for r in repairs)
    return [
        f"UPDATE locations SET city = {sql_literal(city)}",
        "WHERE id IN (",
        f"  {ids}",
        ");",
    ]


def _commented(lines: Iterable[str]) -> list[str]:
    """Prefix every physical line, including breaks inside string literals."""
    return [f"-- {part}" for line in lines for part in LINE_BREAKS.split(line)]


def generate_change_script(
    repairs: list[CityRepair],
    manual_review: list[RegionMismatch],
    generated_at: datetime,
) -> str:
    """
    Build the rollback SQL.

    Values taken from the data only ever appear as quoted literals or inside
    single-line comments, so a name or city cannot add statements.

    Args:
        repairs: Restorations to apply (grouped by original city)
        manual_review: Mismatches without a backup value, listed as comments
        generated_at: Timestamp written into the header

    Returns:
        The script text
    """
    lines: list[str] = [
        "-- Rollback script for city consolidation corruption",
        f"-- Generated: {generated_at.isoformat()}",
        f"-- Total locations to fix: {len(repairs)}",
        "",
        "BEGIN;",
        "",
    ]

    for original_city, group in _group_by(repairs, "original_city").items():
        sources = sorted({str(r.current_city) for r in group})
        lines.append(
            f'-- Restore {len(group)} locations: '
            f'"{sql_comment(", ".join(sources))}" → "{sql_comment(original_city)}"'
        )
        lines.extend(_update_statement(original_city, group))
        lines.append("")

    if manual_review:
        lines.append("-- WARNING: The following locations don't have a city_original backup")
        lines.append("-- Manual verification is needed")
        for m in manual_review:
            lines.append(
                f'-- {sql_comment(m.name)} ({sql_comment(m.id)}): city="{sql_comment(m.city)}", '
                f'region="{sql_comment(m.region)}", coords region="{sql_comment(m.coordinate_region)}"'
            )
        lines.append("")

    lines.append("COMMIT;")
    lines.append("")

    if repairs:
        lines.append("-- To revert this script, run:")
        revert = ["BEGIN;"]
        for current_city, group in _group_by(repairs, "current_city").items():
            revert.extend(_update_statement(current_city, group))
        revert.append("COMMIT;")
        lines.extend(_commented(revert))
        lines.append("")

    return "\n".join(lines)
