from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional

from .compare import has_size_changes
from .formatting import render_markdown_table
from .model import Snapshot

logger = logging.getLogger(__name__)

# Existing report comments are recognised by this prefix.
SIZE_LIMIT_HEADING = "## size-limit report 📦 "


def build_comment_body(table: list[list[str]], heading: str = SIZE_LIMIT_HEADING) -> str:
    return "\r\n".join([heading, render_markdown_table(table)])


def find_previous_comment(
    comments: Iterable[Mapping[str, Any]],
    heading: str = SIZE_LIMIT_HEADING,
) -> Optional[Mapping[str, Any]]:
    for comment in comments:
        body = comment.get("body")
        if isinstance(body, str) and body.startswith(heading):
            return comment
    return None


def should_comment(
    base: Optional[Snapshot],
    current: Snapshot,
    threshold: float | None,
    previous_comment: Optional[Mapping[str, Any]] = None,
) -> bool:
    if threshold is None:
        logger.info("threshold is not a number; reporting unconditionally")
        return True
    if has_size_changes(base, current, threshold):
        return True
    if previous_comment is not None:
        logger.info("no significant size change; refreshing existing report comment")
        return True
    return False


def comment_action(
    should_notify: bool,
    previous_comment: Optional[Mapping[str, Any]],
) -> tuple[str, Any]:
    if not should_notify:
        return "skip", None
    if previous_comment is None:
        return "create", None
    return "update", previous_comment.get("id")
