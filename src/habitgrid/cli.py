"""Command-line interface for HabitGrid."""

from __future__ import annotations

import functools
import logging
from datetime import date

import click

from .config import BaseConfig
from .context import AppContext, create_app_context
from .logging_config import setup_logging
from .models.frequency import (
    DAILY,
    SPECIFIC_DAYS,
    TIMES_PER_WEEK,
    WEEKDAY_NAMES,
    describe_frequency,
    parse_frequency,
    parse_weekday_names,
)
from .services.aggregates import build_heatmap
from .services.dates import parse_date_key, today_key, utc_now
from .services.habits import archived_days_remaining
from .services.schedule import COMPLETED, SCHEDULED
from .services.settings import update_settings

MONTH_LABELS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
HEATMAP_GLYPHS = {COMPLETED: "#", SCHEDULED: "+"}


def _handle_value_errors(func):
    """Surface boundary validation failures as clean CLI errors."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ValueError as exc:
            raise click.ClickException(str(exc)) from exc

    return wrapper


def _require_habit(app: AppContext, habit_id: str):
    habit = app.habit_repo.get_by_id(habit_id)
    if habit is None:
        raise click.ClickException(f"Habit not found: {habit_id}")
    return habit


@click.group()
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory holding the database and logs (defaults to HABITGRID_DATA_DIR).",
)
@click.pass_context
@_handle_value_errors
def cli(ctx: click.Context, data_dir: str | None) -> None:
    """Track habits, streaks and yearly heatmaps."""

    config = BaseConfig(data_dir=data_dir)
    setup_logging(config, console_level=logging.WARNING)
    ctx.obj = create_app_context(config)


@cli.command("add")
@click.argument("name")
@click.option("--days", "days", default=None, help="Weekdays, e.g. mon,wed,fri.")
@click.option("--times", "times", type=int, default=None, help="Target completions per week (1-7).")
@click.option("--color", default=None, help="Hex colour, e.g. #34C759.")
@click.option("--icon", default=None)
@click.pass_obj
@_handle_value_errors
def add_habit(app: AppContext, name: str, days: str | None, times: int | None, color, icon) -> None:
    """Create a habit (daily unless --days or --times is given)."""

    if days is not None and times is not None:
        raise click.UsageError("Use either --days or --times, not both.")
    if days is not None:
        frequency = parse_frequency(SPECIFIC_DAYS, days=parse_weekday_names(days))
    elif times is not None:
        frequency = parse_frequency(TIMES_PER_WEEK, times_per_week=times)
    else:
        frequency = parse_frequency(DAILY)

    habit = app.habit_repo.create(name, frequency, color=color, icon=icon)
    click.echo(f"Created {habit.name} ({describe_frequency(frequency)}) id={habit.id}")


@cli.command("list")
@click.option("--today", "today", default=None, help="Evaluate as of this YYYY-MM-DD day.")
@click.pass_obj
@_handle_value_errors
def list_habits(app: AppContext, today: str | None) -> None:
    """Show active habits with their streaks."""

    day = parse_date_key(today) if today else date.today()
    rows = app.habits_with_stats(today=day)
    if not rows:
        click.echo("No active habits.")
        return
    for row in rows:
        mark = "x" if row.completed_today else " "
        click.echo(
            f"[{mark}] {row.habit.name} ({describe_frequency(row.habit.frequency)}) "
            f"streak={row.current_streak} best={row.longest_streak} "
            f"week={row.completions_this_week} id={row.habit.id}"
        )


@cli.command("toggle")
@click.argument("habit_id")
@click.option("--date", "date_key", default=None, help="Day to toggle (YYYY-MM-DD, default today).")
@click.pass_obj
@_handle_value_errors
def toggle(app: AppContext, habit_id: str, date_key: str | None) -> None:
    """Mark or unmark a habit as done for a day."""

    habit = _require_habit(app, habit_id)
    key = date_key or today_key()
    completed = app.habit_repo.toggle_completion(habit.id, key)
    state = "completed" if completed else "not completed"
    click.echo(f"{habit.name} {state} on {key}")


@cli.command("archive")
@click.argument("habit_id")
@click.pass_obj
@_handle_value_errors
def archive(app: AppContext, habit_id: str) -> None:
    """Archive a habit; it is purged after the retention window."""

    habit = _require_habit(app, habit_id)
    app.habit_repo.archive_habit(habit.id)
    click.echo(f"Archived {habit.name}")


@cli.command("restore")
@click.argument("habit_id")
@click.pass_obj
@_handle_value_errors
def restore(app: AppContext, habit_id: str) -> None:
    """Restore an archived habit."""

    habit = _require_habit(app, habit_id)
    app.habit_repo.restore_habit(habit.id)
    click.echo(f"Restored {habit.name}")


@cli.command("delete")
@click.argument("habit_id")
@click.option("--yes", is_flag=True, default=False, help="Skip confirmation.")
@click.pass_obj
@_handle_value_errors
def delete(app: AppContext, habit_id: str, yes: bool) -> None:
    """Permanently delete a habit and its history."""

    habit = _require_habit(app, habit_id)
    if not yes:
        click.confirm(f"Permanently delete {habit.name}?", abort=True)
    app.habit_repo.permanently_delete(habit.id)
    click.echo(f"Deleted {habit.name}")


@cli.command("archived")
@click.pass_obj
@_handle_value_errors
def archived(app: AppContext) -> None:
    """List archived habits and the days left before purge."""

    habits = app.habit_repo.list_archived_habits()
    if not habits:
        click.echo("No archived habits.")
        return
    retention = app.settings().deletion_policy_days
    now = utc_now()
    for habit in habits:
        remaining = archived_days_remaining(habit.archived_at, now=now, retention_days=retention)
        click.echo(f"{habit.name} ({remaining} days left) id={habit.id}")


@cli.command("reorder")
@click.argument("habit_ids", nargs=-1, required=True)
@click.pass_obj
@_handle_value_errors
def reorder(app: AppContext, habit_ids: tuple[str, ...]) -> None:
    """Set the display order of habits."""

    app.habit_repo.reorder(list(habit_ids))
    click.echo(f"Reordered {len(habit_ids)} habit(s)")


@cli.command("heatmap")
@click.argument("habit_id")
@click.option("--year", type=int, default=None, help="Calendar year (default current).")
@click.pass_obj
@_handle_value_errors
def heatmap(app: AppContext, habit_id: str, year: int | None) -> None:
    """Print a year heatmap: '#' done, '+' scheduled, '.' off day."""

    habit = _require_habit(app, habit_id)
    year = year or date.today().year
    grid = build_heatmap(
        year,
        app.habit_repo.list_completion_dates(habit.id, f"{year}-01-01", f"{year}-12-31"),
        habit.frequency,
    )

    header = [" "] * len(grid.weeks)
    for month, week_index in grid.month_labels:
        label = MONTH_LABELS[month - 1]
        for offset, char in enumerate(label):
            if week_index + offset < len(header):
                header[week_index + offset] = char
    click.echo(f"{habit.name} {year}")
    click.echo("    " + "".join(header))
    for weekday in range(7):
        line = []
        for week in grid.weeks:
            cell = week[weekday] if weekday < len(week) else None
            line.append(" " if cell is None else HEATMAP_GLYPHS.get(cell.status, "."))
        click.echo(f"{WEEKDAY_NAMES[weekday]} " + "".join(line).rstrip())


@cli.command("purge")
@click.pass_obj
@_handle_value_errors
def purge(app: AppContext) -> None:
    """Delete archived habits whose retention window has passed."""

    count = app.habit_repo.purge_expired(app.settings().deletion_policy_days)
    click.echo(f"Purged {count} habit(s)")


@cli.command("settings")
@click.option("--auto-sort/--no-auto-sort", default=None, help="Sink completed habits in listings.")
@click.option("--retention-days", type=int, default=None, help="Days to keep archived habits.")
@click.pass_obj
@_handle_value_errors
def settings(app: AppContext, auto_sort: bool | None, retention_days: int | None) -> None:
    """Show or change settings."""

    update_settings(
        app.settings_repo, auto_sort_completed=auto_sort, deletion_policy_days=retention_days
    )
    current = app.settings()
    click.echo(f"auto_sort_completed={str(current.auto_sort_completed).lower()}")
    click.echo(f"deletion_policy_days={current.deletion_policy_days}")


def main() -> None:  # pragma: no cover - console entry point
    cli()


__all__ = ["cli", "main"]
