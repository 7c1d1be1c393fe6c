#!/usr/bin/env python3
"""
Koku Travel - Location Data-Quality Pipeline Entry Point

Batch jobs that audit the locations table for duplicate listings and for
city values corrupted by the ward consolidation migration. Every job is a
dry run unless asked otherwise.

Usage:
    python -m location_pipeline.main audit-duplicates --name "Bistro N/N"
    python -m location_pipeline.main cleanup-duplicates --same-city --execute
    python -m location_pipeline.main audit-regions --critical-only --fix
"""

import json
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, NoReturn

import click
from loguru import logger
from pydantic import ValidationError
from rich.console import Console

from location_pipeline import console as render
from location_pipeline.config import Settings, get_settings
from location_pipeline.database import (
    LocationStore,
    create_all_tables,
    create_db_engine,
    drop_all_tables,
    make_session_factory,
)
from location_pipeline.deduplication import (
    find_coordinate_duplicates,
    find_duplicate_groups,
    load_overrides,
    plan_resolution,
    resolve,
    search_by_name,
)
from location_pipeline.exceptions import ConfigurationError
from location_pipeline.integrity import (
    apply_repairs,
    audit_locations,
    generate_change_script,
    plan_repairs,
)
from location_pipeline.models import LocationRecord
from location_pipeline.reports import (
    build_cleanup_report,
    build_duplicate_audit_report,
    build_region_audit_report,
    report_path,
)
from location_pipeline.results import Err
from location_pipeline.utils.files import atomic_write_json, atomic_write_text
from location_pipeline.utils.logging import setup_logging

EXIT_MISMATCHES = 1
EXIT_FATAL = 2

console = Console()
err_console = Console(stderr=True)


def _fail(message: str) -> NoReturn:
    err_console.print(f"[red]Error: {message}[/red]")
    sys.exit(EXIT_FATAL)


def _load_settings() -> Settings:
    try:
        return get_settings()
    except ValidationError as e:
        _fail(f"Invalid configuration: {e}")


def _open_store(settings: Settings) -> LocationStore:
    try:
        engine = create_db_engine(settings.database)
    except ConfigurationError as e:
        _fail(str(e))
    return LocationStore(make_session_factory(engine))


def _load_locations(store: LocationStore, settings: Settings) -> list[LocationRecord]:
    """Read the whole corpus or abort the run."""
    result = store.fetch_all(page_size=settings.pipeline.page_size)
    if isinstance(result, Err):
        _fail(result.message)
    logger.info(f"Loaded {len(result.value)} locations")
    return result.value


def _echo_json(report: dict[str, Any]) -> None:
    click.echo(json.dumps(report, indent=2, ensure_ascii=False, default=str))


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def cli(debug):
    """Koku Travel - Location Data-Quality Pipeline"""
    settings = _load_settings()
    setup_logging(
        level="DEBUG" if debug else settings.pipeline.log_level,
        log_file=settings.pipeline.log_file,
    )


@cli.command("audit-duplicates")
@click.option("--name", "search_term", default=None, help="Also list locations resembling this name")
@click.option(
    "--threshold",
    type=click.FloatRange(0.0, 1.0),
    default=None,
    help="Similarity threshold for --name (default: PIPELINE_SIMILARITY_THRESHOLD)",
)
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON")
@click.option("--verbose", "-v", is_flag=True, help="Include lower-confidence findings")
def audit_duplicates(search_term: str | None, threshold: float | None, as_json: bool, verbose: bool):
    """
    Report locations sharing a normalized name.

    Read-only: nothing is changed in the database.
    """
    settings = _load_settings()
    locations = _load_locations(_open_store(settings), settings)
    now = datetime.now()

    groups = find_duplicate_groups(locations)
    coordinate_duplicates = find_coordinate_duplicates(locations)

    search_matches = None
    if search_term is not None:
        if threshold is None:
            threshold = settings.pipeline.similarity_threshold
        search_matches = search_by_name(locations, search_term, threshold)

    report = build_duplicate_audit_report(
        locations,
        groups,
        now,
        coordinate_duplicates=coordinate_duplicates,
        search_term=search_term,
        search_matches=search_matches,
    )
    path = atomic_write_json(report_path(settings.pipeline.report_dir, "duplicate-audit", now), report)

    if as_json:
        _echo_json(report)
        return

    render.render_duplicate_audit(
        console,
        len(locations),
        groups,
        coordinate_duplicates,
        search_term=search_term,
        search_matches=search_matches,
        verbose=verbose,
    )
    console.print(f"\n[dim]Report saved to {path}[/dim]")


@cli.command("cleanup-duplicates")
@click.option("--dry-run/--execute", "dry_run", default=True, help="Preview (default) or delete duplicates")
@click.option("--same-city", is_flag=True, help="Only treat same-named locations in one city as duplicates")
@click.option(
    "--overrides",
    "overrides_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="JSON file with skipped ids and pinned keep/delete decisions",
)
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON")
def cleanup_duplicates(dry_run: bool, same_city: bool, overrides_path: Path | None, as_json: bool):
    """
    Keep the most complete record of each duplicate group, delete the rest.
    """
    settings = _load_settings()
    try:
        overrides = load_overrides(overrides_path)
    except ConfigurationError as e:
        _fail(str(e))

    store = _open_store(settings)
    locations = _load_locations(store, settings)
    now = datetime.now()
    execute = not dry_run

    groups = plan_resolution(locations, same_city=same_city, overrides=overrides)

    # The change list is always shown before anything is deleted
    plan_console = err_console if as_json else console
    render.render_cleanup_plan(plan_console, groups, execute)

    result = None
    if execute and groups:
        result = resolve(groups, store=store, execute=True)
        render.render_cleanup_result(plan_console, result)

    report = build_cleanup_report(locations, groups, now, execute, same_city, result)
    path = atomic_write_json(report_path(settings.pipeline.report_dir, "duplicate-cleanup", now), report)

    if as_json:
        _echo_json(report)
    else:
        console.print(f"\n[dim]Report saved to {path}[/dim]")


@cli.command("audit-regions")
@click.option("--dry-run/--fix", "dry_run", default=True, help="Preview (default) or restore city values")
@click.option("--critical-only", is_flag=True, help="Only restore confirmed (critical) mismatches")
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON")
@click.option("--verbose", "-v", is_flag=True, help="List non-critical mismatches too")
def audit_regions(dry_run: bool, critical_only: bool, as_json: bool, verbose: bool):
    """
    Find locations whose city, region and coordinates disagree.

    Writes a JSON report and a reviewable SQL change script. With --fix,
    restores city from the city_original backup. Exits 1 when mismatches
    were found.
    """
    settings = _load_settings()
    store = _open_store(settings)
    locations = _load_locations(store, settings)
    now = datetime.now()
    execute = not dry_run

    mismatches = audit_locations(locations)
    plan = plan_repairs(mismatches, critical_only=critical_only)

    script = generate_change_script(plan.repairs, plan.manual_review, now)
    script_path = atomic_write_text(
        report_path(settings.pipeline.report_dir, "region-rollback", now, suffix="sql"), script
    )

    out = err_console if as_json else console
    if not as_json:
        render.render_region_audit(console, len(locations), mismatches, verbose=verbose)
    if mismatches:
        render.render_repair_plan(out, plan, execute)

    result = None
    if execute and plan.repairs:
        result = apply_repairs(plan.repairs, store=store, execute=True)
        render.render_repair_result(out, result)

    report = build_region_audit_report(
        locations, mismatches, plan, now, execute, change_script=script_path, result=result
    )
    path = atomic_write_json(report_path(settings.pipeline.report_dir, "region-audit", now), report)

    if as_json:
        _echo_json(report)
    else:
        console.print(f"\n[dim]Report saved to {path}[/dim]")
        console.print(f"[dim]Change script saved to {script_path}[/dim]")

    if mismatches:
        sys.exit(EXIT_MISMATCHES)


@cli.command("init-db")
@click.option("--drop", is_flag=True, help="Drop the locations table first")
def init_db(drop: bool):
    """Create the locations table."""
    settings = _load_settings()
    try:
        engine = create_db_engine(settings.database)
    except ConfigurationError as e:
        _fail(str(e))

    if drop:
        console.print("[yellow]Dropping existing tables...[/yellow]")
        drop_all_tables(engine)

    create_all_tables(engine)
    console.print("[green]Database initialized[/green]")


if __name__ == "__main__":
    cli()
