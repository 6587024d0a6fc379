from __future__ import annotations

import os
import sys
import time
from argparse import Namespace
from collections.abc import Mapping, Sequence
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.rule import Rule
from rich.theme import Theme

from . import __version__
from . import ui_messages as ui
from ._cli_args import build_parser
from ._cli_meta import _build_report_meta
from ._cli_paths import report_label, resolve_report_path, resolve_root
from ._cli_summary import _print_summary
from .analyzer import DuplicationAnalyzer
from .config import load_thresholds, preset_thresholds
from .contracts import DEBUG_ENV_VAR, ExitCode
from .errors import FileProcessingError, ValidationError
from .report import sorted_violations, to_json_report, to_text_report
from .scanner import iter_source_files
from .thresholds import DuplicationThresholds
from .violations import DuplicationViolation

# Custom theme for Rich
custom_theme = Theme(
    {
        "info": "cyan",
        "warning": "yellow",
        "error": "bold red",
        "success": "bold green",
        "dim": "dim",
    }
)


def _make_console(*, no_color: bool) -> Console:
    return Console(theme=custom_theme, width=100, no_color=no_color)


console = _make_console(no_color=False)


def print_banner() -> None:
    console.print(
        Panel(
            ui.banner_title(__version__),
            border_style="blue",
            padding=(0, 2),
            width=ui.CLI_LAYOUT_WIDTH,
            expand=False,
        )
    )


def _is_debug_enabled(
    *,
    argv: Sequence[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> bool:
    args = list(sys.argv[1:] if argv is None else argv)
    debug_from_flag = any(arg == "--debug" for arg in args)
    env = os.environ if environ is None else environ
    debug_from_env = env.get(DEBUG_ENV_VAR) == "1"
    return debug_from_flag or debug_from_env


def _resolve_thresholds(args: Namespace) -> DuplicationThresholds:
    """Preset, then config file, then individual flags."""
    if args.config:
        thresholds = load_thresholds(args.config, preset=args.preset)
    else:
        thresholds = preset_thresholds(args.preset or "default")

    overrides: dict[str, object] = {}
    if args.min_tokens is not None:
        overrides["min_tokens"] = args.min_tokens
    if args.min_lines is not None:
        overrides["min_lines"] = args.min_lines
    if args.similarity is not None:
        overrides["similarity_threshold"] = args.similarity
    if args.languages:
        overrides["languages"] = list(args.languages)
    if args.excludes:
        overrides["exclude_patterns"] = [
            *thresholds.exclude_patterns,
            *args.excludes,
        ]
    if args.detect_semantic:
        overrides["detect_semantic"] = True

    return DuplicationThresholds.from_mapping(overrides, base=thresholds)


def _run_analysis(
    analyzer: DuplicationAnalyzer,
    files: list[str],
    *,
    show_progress: bool,
) -> list[DuplicationViolation]:
    if not show_progress:
        return analyzer.analyze_files(files)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
        TimeElapsedColumn(),
        console=console,
    ) as progress:
        task = progress.add_task(ui.PROGRESS_ANALYZING, total=len(files))
        return analyzer.analyze_files(
            files, on_file=lambda _path: progress.advance(task)
        )


def _print_violations(
    violations: list[DuplicationViolation], *, verbose: bool
) -> None:
    if not violations:
        console.print(ui.INFO_NO_DUPLICATIONS)
        return

    console.print(ui.VIOLATIONS_TITLE.format(count=len(violations)))
    for v in sorted_violations(violations):
        console.print(
            ui.fmt_violation(rule_id=v.id(), severity=v.severity.value, text=str(v)),
            soft_wrap=True,
        )
        suggestion = v.suggestion()
        if verbose and suggestion:
            console.print(ui.fmt_suggestion(suggestion), soft_wrap=True)


def _main_impl() -> None:
    ap = build_parser(__version__)
    args = ap.parse_args()

    if args.ci:
        args.fail_on_clones = True
        args.no_color = True
        args.quiet = True

    if args.quiet:
        args.no_progress = True

    global console
    console = _make_console(no_color=args.no_color)

    t0 = time.monotonic()

    try:
        json_out = resolve_report_path(args.json_out, kind="json")
        text_out = resolve_report_path(args.text_out, kind="text")
    except ValidationError as e:
        console.print(ui.fmt_contract_error(ui.fmt_cli_error(e)))
        sys.exit(ExitCode.CONTRACT_ERROR)

    try:
        thresholds = _resolve_thresholds(args)
    except ValidationError as e:
        console.print(ui.fmt_contract_error(ui.fmt_invalid_thresholds(e)))
        sys.exit(ExitCode.CONTRACT_ERROR)

    if not args.quiet:
        print_banner()

    try:
        root_path = resolve_root(args.root)
    except ValidationError as e:
        console.print(ui.fmt_contract_error(ui.fmt_cli_error(e)))
        sys.exit(ExitCode.CONTRACT_ERROR)

    if not args.quiet:
        console.print(ui.fmt_scanning_root(root_path))

    # Discovery phase
    try:
        if args.no_progress:
            files = list(iter_source_files(str(root_path)))
        else:
            with console.status(ui.STATUS_DISCOVERING, spinner="dots"):
                files = list(iter_source_files(str(root_path)))
    except ValidationError as e:
        console.print(ui.fmt_contract_error(ui.fmt_scan_failed(e)))
        sys.exit(ExitCode.CONTRACT_ERROR)

    analyzer = DuplicationAnalyzer(thresholds)
    selected = [fp for fp in files if analyzer.should_analyze_file(fp)]

    # Analysis phase
    try:
        violations = _run_analysis(
            analyzer, selected, show_progress=not args.no_progress
        )
    except FileProcessingError as e:
        console.print(
            ui.fmt_contract_error(
                ui.fmt_unreadable_source(path=e.path, error=e.__cause__ or e)
            )
        )
        sys.exit(ExitCode.CONTRACT_ERROR)

    stats = analyzer.get_stats(violations)

    if not args.quiet:
        _print_violations(violations, verbose=args.verbose)
        console.print()

    _print_summary(
        console=console,
        quiet=args.quiet,
        files_found=len(files),
        files_analyzed=len(selected),
        stats=stats,
    )

    report_meta = _build_report_meta(
        dupscan_version=__version__,
        root=root_path,
        files_found=len(files),
        files_analyzed=len(selected),
        thresholds=thresholds,
    )

    def _write_report_output(*, out: Path, content: str, kind: str) -> None:
        try:
            out.parent.mkdir(parents=True, exist_ok=True)
            out.write_text(content, "utf-8")
        except OSError as e:
            console.print(
                ui.fmt_contract_error(
                    ui.fmt_report_write_failed(
                        label=report_label(kind), path=out, error=e
                    )
                )
            )
            sys.exit(ExitCode.CONTRACT_ERROR)

    if json_out or text_out:
        if not args.quiet:
            console.print(Rule(style="dim"))
        if json_out:
            _write_report_output(
                out=json_out,
                content=to_json_report(violations, stats, report_meta),
                kind="json",
            )
            if not args.quiet:
                console.print(ui.fmt_path(ui.INFO_JSON_REPORT_SAVED, json_out))
        if text_out:
            _write_report_output(
                out=text_out,
                content=to_text_report(violations, stats, report_meta),
                kind="text",
            )
            if not args.quiet:
                console.print(ui.fmt_path(ui.INFO_TEXT_REPORT_SAVED, text_out))

    # Exit Codes
    if args.fail_on_clones and stats.total_clones > 0:
        console.print(
            ui.fmt_gating_failure(ui.fmt_clones_detected(total=stats.total_clones))
        )
        sys.exit(ExitCode.GATING_FAILURE)

    if 0 <= args.fail_threshold < stats.total_clones:
        console.print(
            ui.fmt_gating_failure(
                ui.fmt_fail_threshold(
                    total=stats.total_clones, threshold=args.fail_threshold
                )
            )
        )
        sys.exit(ExitCode.GATING_FAILURE)

    if not args.quiet:
        elapsed = time.monotonic() - t0
        console.print(f"\n[dim]Done in {elapsed:.1f}s[/dim]")


def main() -> None:
    try:
        _main_impl()
    except SystemExit:
        raise
    except Exception as e:
        console.print(
            ui.fmt_internal_error(
                e,
                debug=_is_debug_enabled(),
            )
        )
        sys.exit(ExitCode.INTERNAL_ERROR)


if __name__ == "__main__":
    main()
