"""Command-line interface for keep-active."""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer

from .config import AutoPauseSettings, ScheduleSettings
from .paths import get_log_path

app = typer.Typer(help="Keep the workstation looking active during work hours.")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


@app.callback(no_args_is_help=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logs."),
) -> None:
    ctx.obj = {"verbose": verbose}


def _configure_logging(ctx: typer.Context, log_file: Optional[Path] = None) -> None:
    verbose = bool(ctx.obj and ctx.obj.get("verbose"))
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        filename=str(log_file) if log_file else None,
    )


def _schedule_settings(
    work_start: str,
    work_end: str,
    short_day_end: str,
    lunch_start: str,
    lunch_end: str,
) -> ScheduleSettings:
    try:
        return ScheduleSettings.from_clock_strings(
            work_start=work_start,
            work_end=work_end,
            short_day_end=short_day_end,
            lunch_start=lunch_start,
            lunch_end=lunch_end,
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.command()
def run(
    ctx: typer.Context,
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Log pointer nudges instead of moving the pointer."
    ),
    log_file: Optional[Path] = typer.Option(
        None, "--log-file", path_type=Path, help="Where to write logs while the console is in use."
    ),
    default_minutes: float = typer.Option(
        30.0,
        "--default-minutes",
        min=0.0,
        help="Initial auto-pause duration in minutes (0 = never).",
    ),
    work_start: str = typer.Option("07:00", "--work-start", help="Work start (HH:MM)."),
    work_end: str = typer.Option("18:30", "--work-end", help="Work end on normal days (HH:MM)."),
    short_day_end: str = typer.Option("17:30", "--short-day-end", help="Work end on Fridays (HH:MM)."),
    lunch_start: str = typer.Option("11:45", "--lunch-start", help="Lunch break start (HH:MM)."),
    lunch_end: str = typer.Option("12:30", "--lunch-end", help="Lunch break end (HH:MM)."),
) -> None:
    """Run the interactive console session until [X] or [Esc] is pressed."""
    if not sys.stdin.isatty():
        raise typer.BadParameter("the interactive session needs a terminal on stdin")
    schedule = _schedule_settings(work_start, work_end, short_day_end, lunch_start, lunch_end)
    _configure_logging(ctx, log_file or get_log_path())

    from .runner import run_console_session

    run_console_session(
        schedule_settings=schedule,
        auto_pause_settings=AutoPauseSettings.from_minutes(default_minutes),
        dry_run=dry_run,
    )


@app.command()
def web(
    ctx: typer.Context,
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind the control API."),
    port: int = typer.Option(
        8766, "--port", min=1, max=65535, help="TCP port for the control API."
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Log pointer nudges instead of moving the pointer."
    ),
    default_minutes: float = typer.Option(
        30.0,
        "--default-minutes",
        min=0.0,
        help="Initial auto-pause duration in minutes (0 = never).",
    ),
    open_browser: bool = typer.Option(
        False,
        "--open-browser/--no-open-browser",
        help="Open the interactive API docs in your default browser.",
    ),
    work_start: str = typer.Option("07:00", "--work-start", help="Work start (HH:MM)."),
    work_end: str = typer.Option("18:30", "--work-end", help="Work end on normal days (HH:MM)."),
    short_day_end: str = typer.Option("17:30", "--short-day-end", help="Work end on Fridays (HH:MM)."),
    lunch_start: str = typer.Option("11:45", "--lunch-start", help="Lunch break start (HH:MM)."),
    lunch_end: str = typer.Option("12:30", "--lunch-end", help="Lunch break end (HH:MM)."),
) -> None:
    """Run the activity loop headless, controlled through a local HTTP API."""
    schedule = _schedule_settings(work_start, work_end, short_day_end, lunch_start, lunch_end)
    _configure_logging(ctx)

    from .server_runner import run_headless

    run_headless(
        host=host,
        port=port,
        schedule_settings=schedule,
        auto_pause_settings=AutoPauseSettings.from_minutes(default_minutes),
        dry_run=dry_run,
        open_browser=open_browser,
        log_level="debug" if ctx.obj and ctx.obj.get("verbose") else "info",
    )


@app.command()
def status(
    at: Optional[str] = typer.Option(
        None,
        "--at",
        help="Instant (YYYY-MM-DD HH:MM) to evaluate. Defaults to now.",
    ),
    work_start: str = typer.Option("07:00", "--work-start", help="Work start (HH:MM)."),
    work_end: str = typer.Option("18:30", "--work-end", help="Work end on normal days (HH:MM)."),
    short_day_end: str = typer.Option("17:30", "--short-day-end", help="Work end on Fridays (HH:MM)."),
    lunch_start: str = typer.Option("11:45", "--lunch-start", help="Lunch break start (HH:MM)."),
    lunch_end: str = typer.Option("12:30", "--lunch-end", help="Lunch break end (HH:MM)."),
) -> None:
    """Print whether activity would be paused at a given instant."""
    from .models import AutoPauseState
    from .schedule import ScheduleEvaluator

    try:
        target = datetime.strptime(at, "%Y-%m-%d %H:%M") if at else datetime.now()
    except ValueError as exc:
        raise typer.BadParameter("expected YYYY-MM-DD HH:MM", param_hint="--at") from exc
    schedule = _schedule_settings(work_start, work_end, short_day_end, lunch_start, lunch_end)
    decision = ScheduleEvaluator(schedule).evaluate(target, AutoPauseState(None))
    typer.echo(f"{target:%Y-%m-%d %H:%M} {decision.reason}")
