from __future__ import annotations

import platform
import shlex
import sys
import traceback
from pathlib import Path

from rich.markup import escape

from . import __version__
from .contracts import DEBUG_ENV_VAR

BANNER_SUBTITLE = "[italic]Token fingerprint clone detector[/italic]"

MARKER_CONTRACT_ERROR = "[error]CONTRACT ERROR:[/error]"
MARKER_GATING_FAILURE = "[error]GATING FAILURE:[/error]"
MARKER_INTERNAL_ERROR = "[error]INTERNAL ERROR:[/error]"

HELP_VERSION = "Print the DupScan version and exit."
HELP_ROOT = "Project root directory to scan."
HELP_PRESET = "Threshold preset to start from."
HELP_CONFIG = "JSON file with threshold overrides (may name a preset)."
HELP_MIN_TOKENS = "Fingerprint window size in tokens. Default: 50 (preset)."
HELP_MIN_LINES = "Minimum duplicated lines to report. Default: 6 (preset)."
HELP_SIMILARITY = "Global minimum similarity in [0, 1]. Default: 0.8 (preset)."
HELP_LANGUAGE = (
    "Language to analyze; repeat to add more. Replaces the default "
    "rust/python/javascript/typescript set."
)
HELP_EXCLUDE = "Glob-like path pattern to exclude (** and *); repeatable."
HELP_DETECT_SEMANTIC = "Also report semantic (Type 4) clones."
HELP_FAIL_ON_CLONES = "Exit with error if any duplication is detected."
HELP_FAIL_THRESHOLD = "Exit with error if the number of duplications exceeds this."
HELP_CI = "CI preset: --fail-on-clones --no-color --quiet."
HELP_JSON = "Generate a JSON report to FILE."
HELP_TEXT = "Generate a text report to FILE."
HELP_NO_PROGRESS = "Disable the progress bar (recommended for CI logs)."
HELP_NO_COLOR = "Disable ANSI colors in output."
HELP_QUIET = "Minimize output (still shows warnings and errors)."
HELP_VERBOSE = "Print refactoring suggestions for each duplication."
HELP_DEBUG = "Print debug details (traceback and environment) on internal errors."

SUMMARY_TITLE = "Analysis Summary"
CLI_LAYOUT_WIDTH = 40
SUMMARY_LABEL_FILES_FOUND = "Files found"
SUMMARY_LABEL_FILES_ANALYZED = "Files analyzed"
SUMMARY_LABEL_TOTAL = "Duplications"
SUMMARY_LABEL_EXACT = "Exact clones"
SUMMARY_LABEL_RENAMED = "Renamed clones"
SUMMARY_LABEL_GAPPED = "Gapped clones"
SUMMARY_LABEL_SEMANTIC = "Semantic clones"
SUMMARY_LABEL_DUPLICATED_LINES = "Duplicated lines"
SUMMARY_COMPACT_INPUT = "Input: found={found} analyzed={analyzed}"
SUMMARY_COMPACT_CLONES = (
    "Duplications: total={total} exact={exact} renamed={renamed} "
    "gapped={gapped} semantic={semantic} lines={lines}"
)

STATUS_DISCOVERING = "[bold green]Discovering source files..."
PROGRESS_ANALYZING = "Analyzing files..."

INFO_SCANNING_ROOT = "[info]Scanning root:[/info] {root}"
INFO_JSON_REPORT_SAVED = "[info]JSON report saved:[/info] {path}"
INFO_TEXT_REPORT_SAVED = "[info]Text report saved:[/info] {path}"
INFO_NO_DUPLICATIONS = "[success]No duplications found.[/success]"

VIOLATIONS_TITLE = "\n[bold]Duplications ({count}):[/bold]"

ERR_SCAN_FAILED = "[error]Scan failed: {error}[/error]"
ERR_INVALID_THRESHOLDS = "[error]Invalid thresholds: {error}[/error]"
ERR_UNREADABLE_SOURCE = (
    "Source file could not be read: {path}\n"
    "{error}\n"
    "No results were produced for this run."
)
ERR_REPORT_WRITE_FAILED = (
    "[error]Failed to write {label} report: {path} ({error}).[/error]"
)
ERR_FAIL_THRESHOLD = "Duplications ({total}) exceed threshold ({threshold})."
ERR_CLONES_DETECTED = "Code duplication detected: {total} finding(s)."


def version_output(version: str) -> str:
    return f"DupScan {version}"


def banner_title(version: str) -> str:
    return f"[bold white]DupScan[/bold white] [dim]v{version}[/dim]\n{BANNER_SUBTITLE}"


def fmt_report_write_failed(*, label: str, path: Path, error: object) -> str:
    return ERR_REPORT_WRITE_FAILED.format(
        label=label, path=escape(str(path)), error=escape(str(error))
    )


def fmt_unreadable_source(*, path: str, error: object) -> str:
    return ERR_UNREADABLE_SOURCE.format(path=escape(path), error=escape(str(error)))


def fmt_invalid_thresholds(error: object) -> str:
    return ERR_INVALID_THRESHOLDS.format(error=escape(str(error)))


def fmt_cli_error(error: object) -> str:
    return f"[error]{escape(str(error))}[/error]"


def fmt_scan_failed(error: object) -> str:
    return ERR_SCAN_FAILED.format(error=escape(str(error)))


def fmt_scanning_root(root: Path) -> str:
    return INFO_SCANNING_ROOT.format(root=escape(str(root)))


def fmt_path(template: str, path: Path) -> str:
    return template.format(path=escape(str(path)))


def fmt_violation(*, rule_id: str, severity: str, text: str) -> str:
    style = "warning" if severity == "WARNING" else "info"
    return f"[{style}]{rule_id}[/{style}] {escape(text)}"


def fmt_suggestion(suggestion: str) -> str:
    return f"  [dim]-> {escape(suggestion)}[/dim]"


def fmt_summary_compact_input(*, found: int, analyzed: int) -> str:
    return SUMMARY_COMPACT_INPUT.format(found=found, analyzed=analyzed)


def fmt_summary_compact_clones(
    *,
    total: int,
    exact: int,
    renamed: int,
    gapped: int,
    semantic: int,
    lines: int,
) -> str:
    return SUMMARY_COMPACT_CLONES.format(
        total=total,
        exact=exact,
        renamed=renamed,
        gapped=gapped,
        semantic=semantic,
        lines=lines,
    )


def fmt_fail_threshold(*, total: int, threshold: int) -> str:
    return ERR_FAIL_THRESHOLD.format(total=total, threshold=threshold)


def fmt_clones_detected(*, total: int) -> str:
    return ERR_CLONES_DETECTED.format(total=total)


def fmt_contract_error(message: str) -> str:
    return f"{MARKER_CONTRACT_ERROR}\n{message}"


def fmt_gating_failure(message: str) -> str:
    return f"{MARKER_GATING_FAILURE}\n{message}"


def fmt_internal_error(
    error: BaseException,
    *,
    debug: bool = False,
) -> str:
    error_name = type(error).__name__
    error_text = str(error).strip() or "<no message>"
    lines = [
        MARKER_INTERNAL_ERROR,
        "Unexpected exception.",
        f"Reason: {error_name}: {escape(error_text)}",
        "",
        "Next steps:",
        f"- Re-run with --debug or {DEBUG_ENV_VAR}=1 to include a traceback.",
        "- When reporting it, attach the command line, DupScan version and "
        "Python version.",
    ]
    if not debug:
        return "\n".join(lines)

    traceback_lines = traceback.format_exception(
        type(error), error, error.__traceback__
    )
    command_line = shlex.join(sys.argv)
    lines.extend(
        [
            "",
            "DEBUG DETAILS",
            f"Platform: {platform.platform()}",
            f"Python: {sys.version.split()[0]}",
            f"DupScan: {__version__}",
            f"Command: {escape(command_line)}",
            f"CWD: {escape(str(Path.cwd()))}",
            "Traceback:",
            escape("".join(traceback_lines).rstrip()),
        ]
    )
    return "\n".join(lines)
