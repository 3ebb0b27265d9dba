from __future__ import annotations

from typing import Optional

from .model import Snapshot, lookup, union_names

SIZE_MODE = "size"
TIME_MODE = "time"


def is_size_only(current: Snapshot) -> bool:
    # Only the current side decides; one untimed entry turns timing columns off.
    return any(record.total is None for record in current.values())


def report_mode(current: Snapshot) -> str:
    return SIZE_MODE if is_size_only(current) else TIME_MODE


def size_change_pct(base_size: int, current_size: int) -> float:
    if base_size == 0:
        return 0.0 if current_size == 0 else float("inf")
    return abs((current_size - base_size) / base_size) * 100


def has_size_changes(
    base: Optional[Snapshot],
    current: Snapshot,
    threshold: float = 0,
) -> bool:
    """Whether the comparison is worth reporting.

    Timed runs always report. Otherwise any artifact whose size moved by more
    than ``threshold`` percent counts, as does an artifact that is zero-sized
    on both sides.
    """
    if report_mode(current) == TIME_MODE:
        return True

    for name in union_names(base, current):
        base_size = lookup(base, name).size
        current_size = lookup(current, name).size
        if base_size == 0 and current_size == 0:
            return True
        if size_change_pct(base_size, current_size) > threshold:
            return True
    return False
