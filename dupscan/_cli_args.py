"""
DupScan: token fingerprint code clone detector
for multi-language source trees.

Copyright (c) 2026 Den Rozhnovskiy
Licensed under the MIT License.
"""

from __future__ import annotations

import argparse
from typing import cast

from . import ui_messages as ui
from .config import PRESETS
from .contracts import cli_help_epilog


class _HelpFormatter(
    argparse.ArgumentDefaultsHelpFormatter, argparse.RawDescriptionHelpFormatter
):
    def _get_help_string(self, action: argparse.Action) -> str:
        # Threshold flags default to None so the preset/config value applies.
        if action.default is None or action.default == []:
            return action.help or ""
        return cast(str, super()._get_help_string(action))


def build_parser(version: str) -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="dupscan",
        description="Token fingerprint code clone detector.",
        epilog=cli_help_epilog(),
        formatter_class=_HelpFormatter,
    )
    ap.add_argument(
        "--version",
        action="version",
        version=ui.version_output(version),
        help=ui.HELP_VERSION,
    )

    core_group = ap.add_argument_group("Target")
    core_group.add_argument(
        "root",
        nargs="?",
        default=".",
        help=ui.HELP_ROOT,
    )

    tune_group = ap.add_argument_group("Detection Thresholds")
    tune_group.add_argument(
        "--preset",
        choices=sorted(PRESETS),
        default=None,
        help=ui.HELP_PRESET,
    )
    tune_group.add_argument(
        "--config",
        metavar="FILE",
        default=None,
        help=ui.HELP_CONFIG,
    )
    tune_group.add_argument(
        "--min-tokens",
        type=int,
        default=None,
        help=ui.HELP_MIN_TOKENS,
    )
    tune_group.add_argument(
        "--min-lines",
        type=int,
        default=None,
        help=ui.HELP_MIN_LINES,
    )
    tune_group.add_argument(
        "--similarity",
        type=float,
        default=None,
        help=ui.HELP_SIMILARITY,
    )
    tune_group.add_argument(
        "--language",
        dest="languages",
        action="append",
        metavar="LANG",
        default=[],
        help=ui.HELP_LANGUAGE,
    )
    tune_group.add_argument(
        "--exclude",
        dest="excludes",
        action="append",
        metavar="PATTERN",
        default=[],
        help=ui.HELP_EXCLUDE,
    )
    tune_group.add_argument(
        "--detect-semantic",
        action="store_true",
        help=ui.HELP_DETECT_SEMANTIC,
    )

    ci_group = ap.add_argument_group("CI/CD")
    ci_group.add_argument(
        "--fail-on-clones",
        action="store_true",
        help=ui.HELP_FAIL_ON_CLONES,
    )
    ci_group.add_argument(
        "--fail-threshold",
        type=int,
        default=-1,
        metavar="MAX_CLONES",
        help=ui.HELP_FAIL_THRESHOLD,
    )
    ci_group.add_argument(
        "--ci",
        action="store_true",
        help=ui.HELP_CI,
    )

    out_group = ap.add_argument_group("Reporting")
    out_group.add_argument(
        "--json",
        dest="json_out",
        metavar="FILE",
        help=ui.HELP_JSON,
    )
    out_group.add_argument(
        "--text",
        dest="text_out",
        metavar="FILE",
        help=ui.HELP_TEXT,
    )
    out_group.add_argument(
        "--no-progress",
        action="store_true",
        help=ui.HELP_NO_PROGRESS,
    )
    out_group.add_argument(
        "--no-color",
        action="store_true",
        help=ui.HELP_NO_COLOR,
    )
    out_group.add_argument(
        "--quiet",
        action="store_true",
        help=ui.HELP_QUIET,
    )
    out_group.add_argument(
        "--verbose",
        action="store_true",
        help=ui.HELP_VERBOSE,
    )
    out_group.add_argument(
        "--debug",
        action="store_true",
        help=ui.HELP_DEBUG,
    )
    return ap
