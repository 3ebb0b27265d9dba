from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional

EMPTY_RECORD_NAME = "-"


def _finite_number(value: Any, field: str, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"record '{name}' has non-numeric {field}")
    try:
        number = float(value)
    except OverflowError:
        number = math.inf
    if not math.isfinite(number):
        raise ValueError(f"record '{name}' has non-finite {field}")
    return number


@dataclass(frozen=True)
class Timing:
    loading: float
    running: float
    total: float

    @classmethod
    def from_parts(cls, loading: float, running: float) -> Timing:
        return cls(loading=loading, running=running, total=loading + running)


@dataclass(frozen=True)
class MeasurementRecord:
    name: str
    size: int
    timing: Timing | None = None

    @property
    def loading(self) -> float | None:
        return None if self.timing is None else self.timing.loading

    @property
    def running(self) -> float | None:
        return None if self.timing is None else self.timing.running

    @property
    def total(self) -> float | None:
        return None if self.timing is None else self.timing.total

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"name": self.name, "size": self.size}
        if self.timing is not None:
            payload["running"] = self.timing.running
            payload["loading"] = self.timing.loading
            payload["total"] = self.timing.total
        return payload

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> MeasurementRecord:
        name = payload.get("name")
        if not isinstance(name, str):
            raise ValueError("record name must be a string")
        size = _finite_number(payload.get("size"), "size", name)
        if size < 0 or not size.is_integer():
            raise ValueError(f"record '{name}' size must be a non-negative whole number")

        timing_keys = [key for key in ("loading", "running", "total") if payload.get(key) is not None]
        if not timing_keys:
            return cls(name=name, size=int(size))
        if len(timing_keys) != 3:
            raise ValueError(f"record '{name}' has incomplete timing fields: {', '.join(timing_keys)}")
        return cls(
            name=name,
            size=int(size),
            timing=Timing(
                loading=_finite_number(payload["loading"], "loading", name),
                running=_finite_number(payload["running"], "running", name),
                total=_finite_number(payload["total"], "total", name),
            ),
        )


Snapshot = dict[str, MeasurementRecord]


def empty_record() -> MeasurementRecord:
    """Stand-in for a name missing on one side of a comparison."""
    return MeasurementRecord(
        name=EMPTY_RECORD_NAME,
        size=0,
        timing=Timing(loading=0.0, running=0.0, total=0.0),
    )


def lookup(snapshot: Optional[Snapshot], name: str) -> MeasurementRecord:
    if snapshot is None:
        return empty_record()
    record = snapshot.get(name)
    return empty_record() if record is None else record


def union_names(base: Optional[Snapshot], current: Snapshot) -> list[str]:
    names = list(base or {})
    seen = set(names)
    for name in current:
        if name not in seen:
            seen.add(name)
            names.append(name)
    return names


def snapshot_to_dict(snapshot: Snapshot) -> dict[str, dict[str, Any]]:
    return {name: record.to_dict() for name, record in snapshot.items()}


def snapshot_from_dict(payload: Any) -> Snapshot:
    if not isinstance(payload, dict):
        raise ValueError("snapshot must be an object keyed by artifact name")
    snapshot: Snapshot = {}
    for name, entry in payload.items():
        if not isinstance(entry, dict):
            raise ValueError(f"snapshot entry '{name}' must be an object")
        snapshot[name] = MeasurementRecord.from_dict(entry)
    return snapshot
