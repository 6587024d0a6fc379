"""
DupScan: token fingerprint code clone detector
for multi-language source trees.

Copyright (c) 2026 Den Rozhnovskiy
Licensed under the MIT License.
"""

from __future__ import annotations

from rich.console import Console
from rich.table import Table
from rich.text import Text

from . import ui_messages as ui
from .analyzer import DuplicationStats

_CLONE_LABELS = frozenset(
    {
        ui.SUMMARY_LABEL_EXACT,
        ui.SUMMARY_LABEL_RENAMED,
    }
)


def _summary_value_style(*, label: str, value: int) -> str:
    if value == 0:
        return "dim"
    if label == ui.SUMMARY_LABEL_TOTAL:
        return "bold red"
    if label in _CLONE_LABELS:
        return "bold yellow"
    return "bold"


def _build_summary_rows(
    *,
    files_found: int,
    files_analyzed: int,
    stats: DuplicationStats,
) -> list[tuple[str, int]]:
    return [
        (ui.SUMMARY_LABEL_FILES_FOUND, files_found),
        (ui.SUMMARY_LABEL_FILES_ANALYZED, files_analyzed),
        (ui.SUMMARY_LABEL_TOTAL, stats.total_clones),
        (ui.SUMMARY_LABEL_EXACT, stats.exact_clones),
        (ui.SUMMARY_LABEL_RENAMED, stats.renamed_clones),
        (ui.SUMMARY_LABEL_GAPPED, stats.gapped_clones),
        (ui.SUMMARY_LABEL_SEMANTIC, stats.semantic_clones),
        (ui.SUMMARY_LABEL_DUPLICATED_LINES, stats.total_duplicated_lines),
    ]


def _build_summary_table(rows: list[tuple[str, int]]) -> Table:
    summary_table = Table(
        title=ui.SUMMARY_TITLE,
        show_header=True,
        width=ui.CLI_LAYOUT_WIDTH,
    )
    summary_table.add_column("Metric")
    summary_table.add_column("Value", justify="right")
    for label, value in rows:
        summary_table.add_row(
            label,
            Text(str(value), style=_summary_value_style(label=label, value=value)),
        )
    return summary_table


def _print_summary(
    *,
    console: Console,
    quiet: bool,
    files_found: int,
    files_analyzed: int,
    stats: DuplicationStats,
) -> None:
    if quiet:
        console.print(ui.SUMMARY_TITLE)
        console.print(
            ui.fmt_summary_compact_input(found=files_found, analyzed=files_analyzed)
        )
        console.print(
            ui.fmt_summary_compact_clones(
                total=stats.total_clones,
                exact=stats.exact_clones,
                renamed=stats.renamed_clones,
                gapped=stats.gapped_clones,
                semantic=stats.semantic_clones,
                lines=stats.total_duplicated_lines,
            )
        )
        return

    rows = _build_summary_rows(
        files_found=files_found,
        files_analyzed=files_analyzed,
        stats=stats,
    )
    console.print(_build_summary_table(rows))
