"""
Rich rendering of the audit and cleanup results.

Renderers only read what the jobs produced; they never decide anything.
"""

from rich.console import Console
from rich.table import Table

from location_pipeline.deduplication.resolver import ResolutionGroup, ResolutionResult
from location_pipeline.integrity.corruption import (
    MISMATCH_TYPES,
    RegionMismatch,
    RepairPlan,
    RepairResult,
)
from location_pipeline.models import DuplicateGroup, LocationRecord
from location_pipeline.utils.text import truncate

TOP_GROUPS = 20


def _yes_no(value: bool) -> str:
    return "[green]yes[/green]" if value else "[red]no[/red]"


def _location_table(locations: list[LocationRecord]) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", style="dim")
    table.add_column("Name")
    table.add_column("City")
    table.add_column("Place ID", style="dim")
    for loc in locations:
        table.add_row(loc.id, truncate(loc.name), loc.city or "-", loc.place_id or "-")
    return table


# =============================================================================
# Duplicates
# =============================================================================

def render_duplicate_audit(
    console: Console,
    total: int,
    groups: list[DuplicateGroup],
    coordinate_duplicates: dict[str, list[LocationRecord]],
    search_term: str | None = None,
    search_matches: list[DuplicateGroup] | None = None,
    verbose: bool = False,
) -> None:
    """
    Print the duplicate audit.

    High-risk groups (several place_ids under one name) are always listed.
    Coordinate duplicates and multi-city groups are lower-confidence
    findings and are only listed in verbose mode.
    """
    console.print(f"\n[bold blue]Duplicate Audit[/bold blue]  ({total} locations)\n")

    summary = Table(title="Duplicate Groups")
    summary.add_column("Name")
    summary.add_column("Count", justify="right")
    summary.add_column("Same place_id")
    summary.add_column("Same city")
    for group in groups[:TOP_GROUPS]:
        summary.add_row(
            truncate(group.normalized_name),
            str(group.size),
            _yes_no(group.same_place_id),
            _yes_no(group.same_city),
        )
    console.print(summary)
    if len(groups) > TOP_GROUPS:
        console.print(f"[dim]... and {len(groups) - TOP_GROUPS} more groups[/dim]")

    high_risk = [g for g in groups if not g.same_place_id]
    if high_risk:
        console.print(f"\n[bold red]High risk: {len(high_risk)} groups with different place_ids[/bold red]")
        for group in high_risk:
            console.print(f"\n[bold]{group.normalized_name}[/bold]")
            console.print(_location_table(group.locations))

    if search_term is not None:
        matches = search_matches or []
        console.print(f"\n[bold]Search: \"{search_term}\"[/bold] ({len(matches)} name groups)")
        for group in matches:
            console.print(f"\n[bold]{group.normalized_name}[/bold]")
            console.print(_location_table(group.locations))

    if verbose:
        multi_city = [g for g in groups if g.same_place_id and not g.same_city]
        if multi_city:
            console.print(f"\n[yellow]Same name in several cities: {len(multi_city)} groups[/yellow]")
            for group in multi_city:
                console.print(_location_table(group.locations))

        if coordinate_duplicates:
            console.print(f"\n[yellow]Same coordinates: {len(coordinate_duplicates)} positions[/yellow]")
            for key, locs in coordinate_duplicates.items():
                console.print(f"\n[dim]{key}[/dim]")
                console.print(_location_table(locs))

    console.print(
        f"\n[bold]Total:[/bold] {len(groups)} duplicate groups, "
        f"{sum(g.size for g in groups)} locations involved, {len(high_risk)} high risk"
    )


def render_cleanup_plan(console: Console, groups: list[ResolutionGroup], execute: bool) -> None:
    """List every keep/delete decision. Printed before any delete runs."""
    mode = "[red]EXECUTE[/red]" if execute else "[yellow]DRY RUN[/yellow]"
    console.print(f"\n[bold blue]Duplicate Cleanup[/bold blue]  {mode}\n")

    if not groups:
        console.print("[green]No duplicates to clean up[/green]")
        return

    for group in groups:
        heading = group.normalized_name if group.city is None else f"{group.normalized_name} ({group.city})"
        console.print(f"[bold]{heading}[/bold]  [dim]{group.reason}[/dim]")
        console.print(
            f"  [green]KEEP[/green]   {group.keep.location.id}  "
            f"{truncate(group.keep.location.name)} (score {group.keep.score})"
        )
        for scored in group.delete:
            console.print(
                f"  [red]DELETE[/red] {scored.location.id}  "
                f"{truncate(scored.location.name)} (score {scored.score})"
            )

    to_delete = sum(len(g.delete) for g in groups)
    console.print(f"\n[bold]{len(groups)} groups, {to_delete} locations to delete[/bold]")
    if not execute:
        console.print("[dim]Run with --execute to apply[/dim]")


def render_cleanup_result(console: Console, result: ResolutionResult) -> None:
    console.print(f"\n[green]Deleted {result.deleted_count} locations[/green]")
    if result.errors:
        console.print(f"[red]{result.error_count} errors:[/red]")
        for error in result.errors:
            console.print(f"  [red]✗[/red] {error}")


# =============================================================================
# Regions
# =============================================================================

_SEVERITY_STYLE = {"critical": "red", "medium": "yellow", "low": "dim"}


def _mismatch_table(mismatches: list[RegionMismatch], title: str) -> Table:
    table = Table(title=title)
    table.add_column("Name")
    table.add_column("City")
    table.add_column("Region")
    table.add_column("Expected")
    table.add_column("Coords")
    table.add_column("Backup")
    table.add_column("Type")
    for m in mismatches:
        style = _SEVERITY_STYLE[m.severity]
        table.add_row(
            truncate(m.name, 40),
            m.city or "-",
            m.region or "-",
            m.expected_region or "-",
            m.coordinate_region or "-",
            m.city_original or "-",
            f"[{style}]{m.mismatch_type}[/{style}]",
        )
    return table


def render_region_audit(
    console: Console,
    total: int,
    mismatches: list[RegionMismatch],
    verbose: bool = False,
) -> None:
    """
    One section per mismatch type, then a pattern summary.

    Critical mismatches are always listed. Lower-severity ones are counted,
    and listed only in verbose mode.
    """
    console.print(f"\n[bold blue]City-Region Audit[/bold blue]  ({total} locations)\n")

    if not mismatches:
        console.print("[green]No region mismatches found[/green]")
        return

    for mismatch_type in MISMATCH_TYPES:
        of_type = [m for m in mismatches if m.mismatch_type == mismatch_type]
        if not of_type:
            continue

        shown = of_type if verbose else [m for m in of_type if m.critical]
        console.print(f"\n[bold]{mismatch_type}[/bold] ({len(of_type)})")
        if shown:
            console.print(_mismatch_table(shown, f"{mismatch_type} ({len(shown)} listed)"))
        hidden = len(of_type) - len(shown)
        if hidden:
            console.print(f"[dim]{hidden} lower-severity mismatches, use --verbose to list them[/dim]")

    patterns: dict[str, int] = {}
    for m in mismatches:
        patterns[m.pattern] = patterns.get(m.pattern, 0) + 1
    pattern_table = Table(title="Patterns")
    pattern_table.add_column("Pattern")
    pattern_table.add_column("Count", justify="right")
    for pattern, count in sorted(patterns.items(), key=lambda item: item[1], reverse=True):
        pattern_table.add_row(pattern, str(count))
    console.print(pattern_table)

    critical = sum(1 for m in mismatches if m.critical)
    console.print(
        f"\n[bold]Total:[/bold] {len(mismatches)} mismatches, [red]{critical} critical[/red]"
    )


def render_repair_plan(console: Console, plan: RepairPlan, execute: bool) -> None:
    """List every city restoration. Printed before any update runs."""
    mode = "[red]FIX[/red]" if execute else "[yellow]DRY RUN[/yellow]"
    console.print(f"\n[bold]City restorations[/bold]  {mode}")

    for repair in plan.repairs:
        console.print(f"  {repair.location_id}  {truncate(repair.name, 40)}: {repair.transformation}")

    if plan.manual_review:
        console.print(
            f"\n[yellow]{len(plan.manual_review)} locations have no city_original backup "
            f"and need manual review[/yellow]"
        )
        for m in plan.manual_review:
            console.print(f"  {m.id}  {truncate(m.name, 40)}: city={m.city}, coords region={m.coordinate_region}")

    if not execute and plan.repairs:
        console.print("[dim]Run with --fix to apply[/dim]")


def render_repair_result(console: Console, result: RepairResult) -> None:
    console.print(f"\n[green]Restored {result.repaired_count} locations[/green]")
    if result.errors:
        console.print(f"[red]{result.error_count} errors:[/red]")
        for error in result.errors:
            console.print(f"  [red]✗[/red] {error}")
