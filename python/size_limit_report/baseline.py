from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from .model import Snapshot, snapshot_from_dict, snapshot_to_dict

logger = logging.getLogger(__name__)

RESULTS_FILE = "size-limit-results.json"


def write_snapshot(snapshot: Snapshot, path: Path | str) -> Path:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    temp = target.with_suffix(".tmp")
    temp.write_text(json.dumps(snapshot_to_dict(snapshot)), encoding="utf-8")
    temp.replace(target)
    return target


def load_baseline(path: Path | str | None) -> Optional[Snapshot]:
    """Load a previously written snapshot, or ``None`` when there is none.

    A missing or unreadable baseline is expected the first time a project is
    measured, so it is logged and treated as an empty base.
    """
    if path is None:
        logger.warning("unable to find base results: no baseline path given")
        return None
    source = Path(path)
    try:
        payload = json.loads(source.read_text(encoding="utf-8"))
        snapshot = snapshot_from_dict(payload)
    except OSError as exc:
        logger.warning("unable to find base results at %s: %s", source, exc)
        return None
    except ValueError as exc:
        logger.warning("ignoring unreadable base results at %s: %s", source, exc)
        return None
    logger.debug("loaded %d base results from %s", len(snapshot), source)
    return snapshot
