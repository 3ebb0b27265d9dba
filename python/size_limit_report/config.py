from __future__ import annotations

import math
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .comment import SIZE_LIMIT_HEADING

INPUT_PREFIX = "INPUT_"


def _as_float(raw: object) -> float | None:
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        text = str(raw).strip()
        if not text:
            return 0.0
        try:
            value = float(text)
        except ValueError:
            return None
    return None if math.isnan(value) else value


def parse_threshold(raw: object) -> float | None:
    """Significance threshold in percent; ``None`` means always significant."""
    return _as_float(raw)


def parse_highlight_threshold(raw: object) -> float:
    value = _as_float(raw)
    return 0.0 if value is None else value


def resolve_run_for_branch(flag: Optional[str], ref: str, main_branch: str) -> bool:
    if flag == "true":
        return True
    if flag == "false":
        return False
    return main_branch in ref


def action_input(
    name: str,
    default: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> str | None:
    """Read a GitHub Action input from its `INPUT_<NAME>` environment variable."""
    env = os.environ if environ is None else environ
    return env.get(INPUT_PREFIX + name.upper().replace(" ", "_"), default)


@dataclass(frozen=True)
class ReportConfig:
    threshold: float | None = 0.0
    highlight_threshold: float = 0.0
    heading: str = SIZE_LIMIT_HEADING

    @classmethod
    def from_inputs(
        cls,
        threshold: object = None,
        highlight_threshold: object = None,
    ) -> ReportConfig:
        return cls(
            threshold=parse_threshold(threshold),
            highlight_threshold=parse_highlight_threshold(highlight_threshold),
        )
