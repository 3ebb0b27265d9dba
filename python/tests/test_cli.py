from __future__ import annotations

import json
from pathlib import Path

import pytest

from size_limit_report.cli import main
from size_limit_report.comment import SIZE_LIMIT_HEADING
from size_limit_report.results import ParseError


def _write_output(path: Path, entries: list[dict]) -> Path:
    path.write_text(json.dumps(entries), encoding="utf-8")
    return path


def test_parse_then_report_against_baseline(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    base_output = _write_output(tmp_path / "base.json", [{"name": "dist/index.js", "size": "110894"}])
    current_output = _write_output(tmp_path / "current.json", [{"name": "dist/index.js", "size": "100894"}])
    snapshot_path = tmp_path / "results" / "size-limit-results.json"
    body_path = tmp_path / "body.md"

    assert main(["parse", "--input", str(base_output), "--output", str(snapshot_path)]) == 0
    assert json.loads(capsys.readouterr().out) == {"entries": 1, "output": str(snapshot_path)}

    code = main(
        [
            "report",
            "--current",
            str(current_output),
            "--base",
            str(snapshot_path),
            "--threshold",
            "0",
            "--output",
            str(body_path),
        ]
    )

    assert code == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["mode"] == "size"
    assert summary["should_comment"] is True
    assert summary["comment_action"] == "create"
    body = body_path.read_text(encoding="utf-8")
    assert body.startswith(SIZE_LIMIT_HEADING)
    assert "98.53 KB (-9.02% 🔽)" in body


def test_report_skips_unchanged_results(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    entries = [{"name": "dist/index.js", "size": "110894"}]
    snapshot_path = tmp_path / "base-snapshot.json"
    main(["parse", "--input", str(_write_output(tmp_path / "base.json", entries)), "--output", str(snapshot_path)])
    capsys.readouterr()
    body_path = tmp_path / "body.md"

    code = main(
        [
            "report",
            "--current",
            str(_write_output(tmp_path / "current.json", entries)),
            "--base",
            str(snapshot_path),
            "--threshold",
            "0",
            "--output",
            str(body_path),
        ]
    )

    assert code == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["should_comment"] is False
    assert summary["comment_action"] == "skip"
    assert not body_path.exists()


def test_report_updates_existing_comment(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    entries = [{"name": "dist/index.js", "size": "110894"}]
    snapshot_path = tmp_path / "base-snapshot.json"
    main(["parse", "--input", str(_write_output(tmp_path / "base.json", entries)), "--output", str(snapshot_path)])
    capsys.readouterr()
    comments = tmp_path / "comments.json"
    comments.write_text(
        json.dumps([{"id": 42, "body": SIZE_LIMIT_HEADING + "\r\nold table"}]),
        encoding="utf-8",
    )

    main(
        [
            "report",
            "--current",
            str(_write_output(tmp_path / "current.json", entries)),
            "--base",
            str(snapshot_path),
            "--comments",
            str(comments),
            "--output",
            str(tmp_path / "body.md"),
        ]
    )

    summary = json.loads(capsys.readouterr().out)
    assert summary["comment_action"] == "update"
    assert summary["comment_id"] == 42


def test_report_without_baseline_marks_entries_added(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    current_output = _write_output(tmp_path / "current.json", [{"name": "dist/index.js", "size": 1024}])
    body_path = tmp_path / "body.md"

    code = main(
        [
            "report",
            "--current",
            str(current_output),
            "--base",
            str(tmp_path / "missing.json"),
            "--threshold",
            "10",
            "--output",
            str(body_path),
        ]
    )

    assert code == 0
    assert "1 KB (added 🆕)" in body_path.read_text(encoding="utf-8")


def test_report_fails_run_on_nonzero_tool_status(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    current_output = _write_output(tmp_path / "current.json", [{"name": "dist/index.js", "size": 1024}])

    code = main(
        [
            "report",
            "--current",
            str(current_output),
            "--output",
            str(tmp_path / "body.md"),
            "--tool-exit-status",
            "1",
        ]
    )

    assert code == 1
    assert json.loads(capsys.readouterr().out)["failed"] is True


def test_report_aborts_on_unparsable_output(tmp_path: Path) -> None:
    current_output = tmp_path / "current.json"
    current_output.write_text("Error: size-limit crashed", encoding="utf-8")
    body_path = tmp_path / "body.md"

    with pytest.raises(ParseError):
        main(["report", "--current", str(current_output), "--output", str(body_path)])

    assert not body_path.exists()


def test_plan_requires_pull_request_outside_main_branch(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["plan", "--ref", "refs/heads/main", "--main-branch", "main"]) == 0
    assert json.loads(capsys.readouterr().out) == {"run_for_branch": True}

    assert main(["plan", "--ref", "refs/pull/3/merge", "--main-branch", "main", "--pull-request"]) == 0
    assert json.loads(capsys.readouterr().out) == {"run_for_branch": False}

    with pytest.raises(SystemExit, match="No PR found"):
        main(["plan", "--ref", "refs/heads/feature", "--main-branch", "main"])
