"""Weekly counts and the year heatmap model."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional, Union

from ..models.frequency import Frequency
from .dates import format_date_key, is_within_week, month_label_positions, parse_date_key, weeks_of_year
from .schedule import COMPLETED, SCHEDULED, DayStatus, classify_day

HEATMAP_EMPTY_COLOR = "#EBEDF0"
SCHEDULED_OPACITY = 0.15


def completions_this_week(completions: Iterable[str], *, today: Union[str, date]) -> int:
    """Count completions inside the Sunday-Saturday week containing ``today``."""
    anchor = today if isinstance(today, date) else parse_date_key(today)
    return sum(1 for key in set(completions) if is_within_week(parse_date_key(key), anchor))


@dataclass(slots=True)
class HeatmapCell:
    """One populated day in the heatmap grid."""

    day: date
    date_key: str
    status: DayStatus


@dataclass(slots=True)
class Heatmap:
    """A year of cells grouped into Sunday-first week rows.

    Rows mirror ``weeks_of_year``: ``None`` pads the start of the first row and
    the final row may be shorter than seven slots.
    """

    year: int
    weeks: list[list[Optional[HeatmapCell]]] = field(default_factory=list)
    month_labels: list[tuple[int, int]] = field(default_factory=list)

    def cells(self) -> list[HeatmapCell]:
        return [cell for week in self.weeks for cell in week if cell is not None]

    def count(self, status: DayStatus) -> int:
        return sum(1 for cell in self.cells() if cell.status == status)


def build_heatmap(year: int, completions: Iterable[str], frequency: Frequency) -> Heatmap:
    """Classify every day of ``year`` against a habit's completions and rule."""
    done = set(completions)
    rows = weeks_of_year(year)
    weeks: list[list[Optional[HeatmapCell]]] = []
    for row in rows:
        weeks.append(
            [
                None
                if day is None
                else HeatmapCell(
                    day=day,
                    date_key=format_date_key(day),
                    status=classify_day(day, done, frequency),
                )
                for day in row
            ]
        )
    return Heatmap(year=year, weeks=weeks, month_labels=month_label_positions(rows))


def _hex_to_rgb(color: str) -> tuple[int, int, int]:
    value = color.lstrip("#")
    if len(value) == 3:
        value = "".join(ch * 2 for ch in value)
    if len(value) != 6:
        raise ValueError(f"Expected a #RRGGBB colour, got {color!r}")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


def cell_color(status: DayStatus, color: str) -> str:
    """Display colour for a heatmap cell of the given status."""
    if status == COMPLETED:
        return color
    if status == SCHEDULED:
        r, g, b = _hex_to_rgb(color)
        return f"rgba({r}, {g}, {b}, {SCHEDULED_OPACITY})"
    return HEATMAP_EMPTY_COLOR


__all__ = [
    "HEATMAP_EMPTY_COLOR",
    "Heatmap",
    "HeatmapCell",
    "build_heatmap",
    "cell_color",
    "completions_this_week",
]
