from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from .baseline import RESULTS_FILE, load_baseline, write_snapshot
from .comment import build_comment_body, comment_action, find_previous_comment, should_comment
from .compare import report_mode
from .config import ReportConfig, action_input, resolve_run_for_branch
from .formatting import format_results
from .model import Snapshot
from .results import ParseError, parse_results

logger = logging.getLogger(__name__)

OUTPUT_EXCERPT_CHARS = 2000


def _read_output(source: Path | str) -> str:
    if str(source) == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _parse_tool_output(raw: str) -> Snapshot:
    try:
        return parse_results(raw)
    except ParseError:
        excerpt = raw[:OUTPUT_EXCERPT_CHARS]
        logger.error(
            "Error parsing size-limit output. The output should be a json. Received: %r",
            excerpt,
        )
        raise


def _load_comments(path: Path | None) -> list[dict[str, Any]]:
    if path is None:
        return []
    payload = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(payload, list):
        raise SystemExit(f"{path}: comments must be a JSON array")
    return [comment for comment in payload if isinstance(comment, dict)]


def run_parse(*, input_path: Path | str, output_path: Path | str) -> dict[str, Any]:
    snapshot = _parse_tool_output(_read_output(input_path))
    written = write_snapshot(snapshot, output_path)
    return {"entries": len(snapshot), "output": str(written)}


def run_report(
    *,
    current_path: Path | str,
    base_path: Path | str | None,
    config: ReportConfig,
    comments_path: Path | None = None,
    output_path: Path | None = None,
    tool_exit_status: int = 0,
) -> dict[str, Any]:
    current = _parse_tool_output(_read_output(current_path))
    base = load_baseline(base_path)

    previous = find_previous_comment(_load_comments(comments_path), heading=config.heading)
    notify = should_comment(base, current, config.threshold, previous)
    action, comment_id = comment_action(notify, previous)

    mode = report_mode(current)
    table = format_results(base, current, config.highlight_threshold)
    if notify:
        body = build_comment_body(table, heading=config.heading)
        if output_path is None:
            sys.stdout.write(body + "\n")
        else:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(body, encoding="utf-8")
    logger.info("report %s: %d rows, comment action %s", mode, len(table) - 1, action)

    return {
        "mode": mode,
        "rows": len(table) - 1,
        "should_comment": notify,
        "comment_action": action,
        "comment_id": comment_id,
        "failed": tool_exit_status > 0,
    }


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Compare size-limit results and render a PR report")
    parser.add_argument("--verbose", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    parse_cmd = sub.add_parser("parse", help="Normalize size-limit output into a baseline snapshot")
    parse_cmd.add_argument("--input", required=True, help="size-limit --json output, or - for stdin")
    parse_cmd.add_argument("--output", default=Path(RESULTS_FILE), type=Path)

    report_cmd = sub.add_parser("report", help="Compare current results against a baseline")
    report_cmd.add_argument("--current", required=True, help="size-limit --json output, or - for stdin")
    report_cmd.add_argument("--base", default=None, type=Path)
    report_cmd.add_argument("--threshold", default=action_input("threshold", default=""))
    report_cmd.add_argument("--highlight-threshold", default=action_input("highlight_threshold", default=""))
    report_cmd.add_argument("--comments", default=None, type=Path, help="JSON array of existing PR comments")
    report_cmd.add_argument("--output", default=None, type=Path, help="write the comment body here")
    report_cmd.add_argument("--tool-exit-status", type=int, default=0)

    plan_cmd = sub.add_parser("plan", help="Decide between a baseline run and a pull request run")
    plan_cmd.add_argument("--ref", required=True)
    plan_cmd.add_argument("--main-branch", default=action_input("main_branch", default="master"))
    plan_cmd.add_argument("--run-for-branch", default=action_input("run_for_branch"))
    plan_cmd.add_argument("--pull-request", action="store_true")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s %(levelname)s %(message)s",
    )

    if args.command == "parse":
        summary = run_parse(input_path=args.input, output_path=args.output)
        print(json.dumps(summary, sort_keys=True))
        return 0

    if args.command == "report":
        summary = run_report(
            current_path=args.current,
            base_path=args.base,
            config=ReportConfig.from_inputs(args.threshold, args.highlight_threshold),
            comments_path=args.comments,
            output_path=args.output,
            tool_exit_status=args.tool_exit_status,
        )
        print(json.dumps(summary, sort_keys=True), file=sys.stderr if args.output is None else sys.stdout)
        if summary["failed"]:
            logger.error("Size limit has been exceeded.")
            return 1
        return 0

    if args.command == "plan":
        run_for_branch = resolve_run_for_branch(args.run_for_branch, args.ref, args.main_branch)
        if not run_for_branch and not args.pull_request:
            raise SystemExit("No PR found. Only pull_request workflows are supported.")
        print(json.dumps({"run_for_branch": run_for_branch}, sort_keys=True))
        return 0

    raise AssertionError(f"unexpected command: {args.command}")


if __name__ == "__main__":
    raise SystemExit(main())
