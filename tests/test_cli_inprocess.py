from __future__ import annotations

import json
import sys
from collections.abc import Iterable
from pathlib import Path

import pytest

from dupscan import __version__, cli
from dupscan.contracts import REPORT_SCHEMA_VERSION, ExitCode
from tests._sources import DISTINCT_PYTHON, DUPLICATED_RUST

_LOW_THRESHOLDS = ("--min-tokens", "10", "--min-lines", "3")


def _run_main(monkeypatch: pytest.MonkeyPatch, args: Iterable[str]) -> None:
    monkeypatch.setattr(sys, "argv", ["dupscan", *args])
    cli.main()


def _run_main_exit(monkeypatch: pytest.MonkeyPatch, args: Iterable[str]) -> int:
    with pytest.raises(SystemExit) as exc:
        _run_main(monkeypatch, args)
    return int(exc.value.code or 0)


def _write_clones(root: Path) -> tuple[Path, Path]:
    first = root / "src" / "math_utils.rs"
    second = root / "src" / "statistics.rs"
    first.parent.mkdir(parents=True, exist_ok=True)
    first.write_text(DUPLICATED_RUST, "utf-8")
    second.write_text(DUPLICATED_RUST, "utf-8")
    return first, second


def test_cli_no_duplications(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    (tmp_path / "inventory.py").write_text(DISTINCT_PYTHON, "utf-8")
    (tmp_path / "notes.md").write_text("# notes\n", "utf-8")

    _run_main(monkeypatch, [str(tmp_path), "--no-progress"])

    out = capsys.readouterr().out
    assert "DupScan" in out
    assert "Scanning root" in out
    assert "No duplications found." in out
    assert "Analysis Summary" in out
    assert "Files analyzed" in out
    assert "Done in" in out


def test_cli_reports_clones(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _write_clones(tmp_path)

    _run_main(monkeypatch, [str(tmp_path), "--no-progress", *_LOW_THRESHOLDS])

    out = capsys.readouterr().out
    assert "Duplications (" in out
    assert "DUP001" in out
    assert "Exact Clone at" in out
    assert "math_utils.rs" in out
    assert "statistics.rs" in out
    assert "->" not in out


def test_cli_verbose_prints_suggestions(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _write_clones(tmp_path)

    _run_main(
        monkeypatch, [str(tmp_path), "--no-progress", "--verbose", *_LOW_THRESHOLDS]
    )

    out = capsys.readouterr().out
    assert "-> Extract the duplicated code into a shared function or module" in out


def test_cli_progress_bar_path(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _write_clones(tmp_path)

    _run_main(monkeypatch, [str(tmp_path), *_LOW_THRESHOLDS])

    out = capsys.readouterr().out
    assert "DUP001" in out


def test_cli_language_filter(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _write_clones(tmp_path)

    _run_main(
        monkeypatch,
        [str(tmp_path), "--no-progress", "--language", "python", *_LOW_THRESHOLDS],
    )

    out = capsys.readouterr().out
    assert "No duplications found." in out


def test_cli_exclude_pattern(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _write_clones(tmp_path)

    _run_main(
        monkeypatch,
        [
            str(tmp_path),
            "--no-progress",
            "--exclude",
            "**/statistics.rs",
            *_LOW_THRESHOLDS,
        ],
    )

    out = capsys.readouterr().out
    assert "statistics.rs" not in out


def test_cli_fail_on_clones(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _write_clones(tmp_path)

    code = _run_main_exit(
        monkeypatch,
        [str(tmp_path), "--no-progress", "--fail-on-clones", *_LOW_THRESHOLDS],
    )

    assert code == ExitCode.GATING_FAILURE
    out = capsys.readouterr().out
    assert "GATING FAILURE:" in out
    assert "Code duplication detected:" in out


def test_cli_fail_on_clones_passes_when_clean(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    (tmp_path / "inventory.py").write_text(DISTINCT_PYTHON, "utf-8")

    _run_main(monkeypatch, [str(tmp_path), "--no-progress", "--fail-on-clones"])

    assert "GATING FAILURE:" not in capsys.readouterr().out


def test_cli_fail_threshold(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _write_clones(tmp_path)

    code = _run_main_exit(
        monkeypatch,
        [str(tmp_path), "--no-progress", "--fail-threshold", "0", *_LOW_THRESHOLDS],
    )

    assert code == ExitCode.GATING_FAILURE
    out = capsys.readouterr().out
    assert "GATING FAILURE:" in out
    assert "exceed threshold (0)" in out


def test_cli_fail_threshold_not_exceeded(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _write_clones(tmp_path)

    _run_main(
        monkeypatch,
        [str(tmp_path), "--no-progress", "--fail-threshold", "10000", *_LOW_THRESHOLDS],
    )

    assert "GATING FAILURE:" not in capsys.readouterr().out


def test_cli_ci_mode(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _write_clones(tmp_path)

    code = _run_main_exit(monkeypatch, [str(tmp_path), "--ci", *_LOW_THRESHOLDS])

    assert code == ExitCode.GATING_FAILURE
    out = capsys.readouterr().out
    assert "Scanning root" not in out
    assert "Duplications: total=" in out
    assert "Input: found=2 analyzed=2" in out
    assert "GATING FAILURE:" in out
    assert "\x1b[" not in out


def test_cli_quiet_summary(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    (tmp_path / "inventory.py").write_text(DISTINCT_PYTHON, "utf-8")

    _run_main(monkeypatch, [str(tmp_path), "--quiet"])

    out = capsys.readouterr().out
    assert "Input: found=1 analyzed=1" in out
    assert (
        "Duplications: total=0 exact=0 renamed=0 gapped=0 semantic=0 lines=0" in out
    )
    assert "Done in" not in out


def test_cli_writes_reports(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    root = tmp_path / "project"
    _write_clones(root)
    json_out = tmp_path / "reports" / "dupscan.json"
    text_out = tmp_path / "reports" / "dupscan.txt"

    _run_main(
        monkeypatch,
        [
            str(root),
            "--no-progress",
            "--json",
            str(json_out),
            "--text",
            str(text_out),
            *_LOW_THRESHOLDS,
        ],
    )

    out = capsys.readouterr().out
    assert "JSON report saved" in out
    assert "Text report saved" in out

    payload = json.loads(json_out.read_text("utf-8"))
    meta = payload["meta"]
    assert meta["report_schema_version"] == REPORT_SCHEMA_VERSION
    assert meta["dupscan_version"] == __version__
    assert meta["python_version"] == (
        f"{sys.version_info.major}.{sys.version_info.minor}"
    )
    assert meta["root"] == str(root.resolve())
    assert meta["files_found"] == 2
    assert meta["files_analyzed"] == 2
    assert meta["thresholds"]["min_tokens"] == 10
    assert payload["violations"]
    assert payload["stats"]["total_clones"] == len(payload["violations"])
    assert {v["id"] for v in payload["violations"]} == {"DUP001"}

    text = text_out.read_text("utf-8")
    assert text.startswith("REPORT METADATA\n")
    assert "=== Duplications (count=" in text
    assert "[DUP001] WARNING Exact Clone at" in text


@pytest.mark.parametrize(
    ("flag", "name", "label"),
    [("--json", "report.txt", "JSON"), ("--text", "report.json", "text")],
)
def test_cli_invalid_report_extension(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    flag: str,
    name: str,
    label: str,
) -> None:
    code = _run_main_exit(
        monkeypatch, [str(tmp_path), "--no-progress", flag, str(tmp_path / name)]
    )

    assert code == ExitCode.CONTRACT_ERROR
    out = capsys.readouterr().out
    assert "CONTRACT ERROR:" in out
    assert f"Invalid {label} output extension" in out


def test_cli_report_write_failure(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    (tmp_path / "inventory.py").write_text(DISTINCT_PYTHON, "utf-8")
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", "utf-8")

    code = _run_main_exit(
        monkeypatch,
        [str(tmp_path), "--no-progress", "--json", str(blocker / "out.json")],
    )

    assert code == ExitCode.CONTRACT_ERROR
    assert "Failed to write JSON report" in capsys.readouterr().out


def test_cli_invalid_threshold_flag(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    code = _run_main_exit(monkeypatch, [str(tmp_path), "--min-tokens", "0"])

    assert code == ExitCode.CONTRACT_ERROR
    out = capsys.readouterr().out
    assert "CONTRACT ERROR:" in out
    assert "Invalid thresholds" in out


def test_cli_invalid_config(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    config = tmp_path / "dupscan.json"
    config.write_text('{"min_tokenz": 10}', "utf-8")

    code = _run_main_exit(monkeypatch, [str(tmp_path), "--config", str(config)])

    assert code == ExitCode.CONTRACT_ERROR
    out = capsys.readouterr().out
    assert "Invalid thresholds" in out
    assert "min_tokenz" in out


def test_cli_config_applies(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    root = tmp_path / "project"
    _write_clones(root)
    config = tmp_path / "dupscan.json"
    config.write_text('{"min_tokens": 10, "min_lines": 3}', "utf-8")

    _run_main(monkeypatch, [str(root), "--no-progress", "--config", str(config)])

    assert "DUP001" in capsys.readouterr().out


def test_cli_missing_root(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    code = _run_main_exit(monkeypatch, [str(tmp_path / "missing"), "--no-progress"])

    assert code == ExitCode.CONTRACT_ERROR
    assert "Root path does not exist" in capsys.readouterr().out


def test_cli_root_is_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    src = tmp_path / "lib.rs"
    src.write_text("fn main() {}\n", "utf-8")

    code = _run_main_exit(monkeypatch, [str(src), "--no-progress"])

    assert code == ExitCode.CONTRACT_ERROR
    assert "Scan failed" in capsys.readouterr().out


def test_cli_unreadable_source(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    (tmp_path / "good.rs").write_text(DUPLICATED_RUST, "utf-8")
    (tmp_path / "broken.rs").write_bytes(b"fn main() { \xff\xfe }\n")

    code = _run_main_exit(monkeypatch, [str(tmp_path), "--no-progress"])

    assert code == ExitCode.CONTRACT_ERROR
    out = capsys.readouterr().out
    assert "CONTRACT ERROR:" in out
    assert "Source file could not be read" in out
    assert "broken.rs" in out
    assert "No results were produced" in out
