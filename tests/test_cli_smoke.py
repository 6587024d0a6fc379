import os
import subprocess
import sys
from collections.abc import Iterable
from pathlib import Path

from tests._sources import DISTINCT_PYTHON, DUPLICATED_RUST


def run_cli(
    args: Iterable[str], cwd: Path | None = None
) -> subprocess.CompletedProcess[str]:
    env = os.environ.copy()
    root_dir = Path(__file__).parents[1]
    env["PYTHONPATH"] = str(root_dir) + os.pathsep + env.get("PYTHONPATH", "")
    env.pop("DUPSCAN_DEBUG", None)

    # Try to find venv python
    venv_python = root_dir / ".venv" / "bin" / "python"
    executable = str(venv_python) if venv_python.exists() else sys.executable

    return subprocess.run(
        [executable, "-m", "dupscan.cli", *args],
        capture_output=True,
        text=True,
        cwd=cwd,
        env=env,
    )


def test_cli_runs(tmp_path: Path) -> None:
    (tmp_path / "inventory.py").write_text(DISTINCT_PYTHON, "utf-8")

    result = run_cli([str(tmp_path), "--no-progress"], cwd=tmp_path)

    assert result.returncode == 0
    assert "Analysis Summary" in result.stdout
    assert "No duplications found." in result.stdout


def test_cli_help_runs() -> None:
    result = run_cli(["--help"])

    assert result.returncode == 0
    assert "usage: dupscan" in result.stdout


def test_cli_gating_exit_code(tmp_path: Path) -> None:
    (tmp_path / "a.rs").write_text(DUPLICATED_RUST, "utf-8")
    (tmp_path / "b.rs").write_text(DUPLICATED_RUST, "utf-8")
    report = tmp_path / "out" / "report.json"

    result = run_cli(
        [
            str(tmp_path),
            "--ci",
            "--min-tokens",
            "10",
            "--min-lines",
            "3",
            "--json",
            str(report),
        ]
    )

    assert result.returncode == 3
    assert "GATING FAILURE:" in result.stdout
    assert report.exists()


def test_cli_contract_error_exit_code(tmp_path: Path) -> None:
    result = run_cli([str(tmp_path / "missing"), "--no-progress"])

    assert result.returncode == 2
    assert "CONTRACT ERROR:" in result.stdout
