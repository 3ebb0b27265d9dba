"""Parsing of raw size-limit JSON output into canonical snapshots."""

from __future__ import annotations

import json
import math
from typing import Any

from .model import MeasurementRecord, Snapshot, Timing


class ParseError(ValueError):
    """Raised when size-limit output is not a JSON array of result entries."""


def _reject_constant(constant: str) -> Any:
    raise ParseError(f"size-limit output is not valid JSON: unexpected {constant}")


def _as_number(value: Any, field: str, name: str) -> float:
    if value is None:
        return 0.0
    if isinstance(value, bool):
        raise ParseError(f"entry '{name}' has non-numeric {field}: {value!r}")
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            number = math.inf
    elif isinstance(value, str):
        text = value.strip()
        try:
            number = float(text) if text else 0.0
        except (ValueError, OverflowError) as exc:
            raise ParseError(f"entry '{name}' has non-numeric {field}: {value!r}") from exc
    else:
        raise ParseError(f"entry '{name}' has non-numeric {field}: {value!r}")
    if not math.isfinite(number):
        raise ParseError(f"entry '{name}' has non-finite {field}: {value!r}")
    return number


def _as_size(value: Any, name: str) -> int:
    number = _as_number(value, "size", name)
    if number < 0 or not number.is_integer():
        raise ParseError(f"entry '{name}' size must be a non-negative whole number of bytes")
    return int(number)


def parse_result(entry: Any) -> MeasurementRecord:
    if not isinstance(entry, dict):
        raise ParseError(f"each result entry must be an object, got {type(entry).__name__}")
    name = entry.get("name")
    if not isinstance(name, str):
        raise ParseError("result entry is missing a string name")
    if "size" not in entry:
        raise ParseError(f"entry '{name}' is missing size")

    timing = None
    # A null timing value counts as present and reads as zero.
    if "loading" in entry and "running" in entry:
        timing = Timing.from_parts(
            _as_number(entry["loading"], "loading", name),
            _as_number(entry["running"], "running", name),
        )
    return MeasurementRecord(name=name, size=_as_size(entry["size"], name), timing=timing)


def parse_results(output: str) -> Snapshot:
    """Parse size-limit ``--json`` output.

    Entries are keyed by name; a repeated name replaces the earlier entry.
    Timing is attached only when an entry carries both ``loading`` and
    ``running``.
    """
    try:
        payload = json.loads(output, parse_constant=_reject_constant)
    except (TypeError, json.JSONDecodeError) as exc:
        raise ParseError(f"size-limit output is not valid JSON: {exc}") from exc
    if not isinstance(payload, list):
        raise ParseError(f"size-limit output must be a JSON array, got {type(payload).__name__}")

    snapshot: Snapshot = {}
    for entry in payload:
        record = parse_result(entry)
        snapshot[record.name] = record
    return snapshot
