from __future__ import annotations

import math
import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from .compare import SIZE_MODE, report_mode
from .model import MeasurementRecord, Snapshot, lookup, union_names

SIZE_RESULTS_HEADER = ["Path", "Size"]

TIME_RESULTS_HEADER = [
    "Path",
    "Size",
    "Loading time (3g)",
    "Running time (snapdragon)",
    "Total time",
]

ADDED = "added 🆕"
REMOVED = "removed 🚮"
INCREASE_MARK = "🔺"
DECREASE_MARK = "🔽"

_BYTE_UNITS = [
    ("PB", 1 << 50),
    ("TB", 1 << 40),
    ("GB", 1 << 30),
    ("MB", 1 << 20),
    ("KB", 1 << 10),
]
_TRAILING_ZEROS = re.compile(r"(?:\.0*|(\.[^0]+)0+)$")


def _fmt_number(value: float) -> str:
    if value == int(value):
        return str(int(value))
    return repr(float(value))


def _ceil_to(value: float, places: int) -> float:
    scale = 10**places
    magnitude = math.ceil(abs(value) * scale) / scale
    return -magnitude if value < 0 else magnitude


def format_bytes(size: float) -> str:
    unit, divisor = "B", 1
    magnitude = abs(size)
    for candidate, candidate_divisor in _BYTE_UNITS:
        if magnitude >= candidate_divisor:
            unit, divisor = candidate, candidate_divisor
            break
    scaled = Decimal(size) / Decimal(divisor)
    text = str(scaled.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
    text = _TRAILING_ZEROS.sub(lambda match: match.group(1) or "", text)
    return f"{text} {unit}"


def format_time(seconds: float) -> str:
    if seconds >= 1:
        return f"{_fmt_number(math.ceil(seconds * 10) / 10)} s"
    return f"{math.ceil(seconds * 1000)} ms"


def format_change(
    base: Optional[float] = 0,
    current: Optional[float] = 0,
    highlight_threshold: float = 0,
) -> str:
    """Describe the move from ``base`` to ``current`` as a percentage.

    The percentage is rounded up in magnitude to two decimals. A direction
    marker is appended only when the change exceeds ``highlight_threshold``.
    """
    base = base or 0
    current = current or 0
    if base == 0:
        return ADDED
    if current == 0:
        return REMOVED

    value = (current - base) / base * 100
    formatted = _fmt_number(_ceil_to(value, 2))

    if value > 0:
        if value - highlight_threshold > 0:
            return f"+{formatted}% {INCREASE_MARK}"
        return f"+{formatted}%"
    if value == 0:
        return f"{formatted}%"
    if value + highlight_threshold < 0:
        return f"{formatted}% {DECREASE_MARK}"
    return f"{formatted}%"


def format_line(value: str, change: str) -> str:
    return f"{value} ({change})"


def format_size_result(
    name: str,
    base: MeasurementRecord,
    current: MeasurementRecord,
    highlight_threshold: float = 0,
) -> list[str]:
    return [
        name,
        format_line(
            format_bytes(current.size),
            format_change(base.size, current.size, highlight_threshold),
        ),
    ]


def format_time_result(
    name: str,
    base: MeasurementRecord,
    current: MeasurementRecord,
    highlight_threshold: float = 0,
) -> list[str]:
    return [
        *format_size_result(name, base, current, highlight_threshold),
        format_line(
            format_time(current.loading or 0.0),
            format_change(base.loading, current.loading, highlight_threshold),
        ),
        format_line(
            format_time(current.running or 0.0),
            format_change(base.running, current.running, highlight_threshold),
        ),
        format_time(current.total or 0.0),
    ]


def format_results(
    base: Optional[Snapshot],
    current: Snapshot,
    highlight_threshold: float = 0,
) -> list[list[str]]:
    """Build the report table: a header row, then one row per artifact.

    Rows follow base order, with artifacts new in ``current`` appended.
    """
    size_only = report_mode(current) == SIZE_MODE
    header = SIZE_RESULTS_HEADER if size_only else TIME_RESULTS_HEADER
    format_row = format_size_result if size_only else format_time_result

    rows = [list(header)]
    for name in union_names(base, current):
        rows.append(format_row(name, lookup(base, name), lookup(current, name), highlight_threshold))
    return rows


def render_markdown_table(table: list[list[str]]) -> str:
    if not table:
        return ""
    header, *body = table
    widths = [max(3, len(cell)) for cell in header]
    for row in body:
        for index, cell in enumerate(row):
            widths[index] = max(widths[index], len(cell))

    def _line(cells: list[str]) -> str:
        padded = [cell.ljust(widths[index]) for index, cell in enumerate(cells)]
        return "| " + " | ".join(padded) + " |"

    lines = [_line(header), _line(["-" * width for width in widths])]
    lines.extend(_line(row) for row in body)
    return "\n".join(lines)
