from __future__ import annotations

from typing import TYPE_CHECKING

import bittensor as bt
from rich.console import Console, JustifyMethod
from rich.table import Table

from circuit_pipeline.core.stages import StageResult, StageStatus

if TYPE_CHECKING:
    from circuit_pipeline.core.runner import PipelineReport

STATUS_STYLES = {
    StageStatus.RAN: "green",
    StageStatus.CACHED: "cyan",
    StageStatus.DISABLED: "yellow",
    StageStatus.PENDING: "white",
}


def create_and_print_table(
    title: str, columns: list[tuple[str, JustifyMethod, str]], rows: list[list[str]]
):
    """
    Create and print a table.

    Args:
        title (str): The title of the table.
        columns (list[tuple[str, JustifyMethod, str]]): A list of tuples containing column information.
            Each tuple should contain (column_name, justification, style).
        rows (list[list[str]]): A list of rows, where each row is a list of string values.

    """
    table = Table(title=title)
    last = len(columns) - 1
    for index, (col_name, justify, style) in enumerate(columns):
        # only the last column wraps, the others keep their full text
        table.add_column(
            col_name, justify=justify, style=style, no_wrap=index != last
        )
    for row in rows:
        table.add_row(*row)
    console = Console(color_system="truecolor")
    console.width = 120
    console.print(table)


def _status_cell(status: StageStatus) -> str:
    style = STATUS_STYLES.get(status, "white")
    return f"[{style}]{status}[/{style}]"


def log_plan(slot: str, plan: list[StageResult]):
    """
    Print the stages a run would execute, skip or leave disabled.
    """
    rows = [
        [str(index), result.name, _status_cell(result.status), result.detail]
        for index, result in enumerate(plan, start=1)
    ]
    create_and_print_table(
        f"Pipeline plan for slot {slot}",
        [
            ("#", "right", "cyan"),
            ("Stage", "left", "magenta"),
            ("Status", "left", "white"),
            ("Detail", "left", "white"),
        ],
        rows,
    )


def log_report(report: PipelineReport):
    """
    Print the outcome and duration of each stage of a finished run.

    Each stage is also logged so the summary reaches the run log file.
    """
    for result in report.results:
        detail = f" ({result.detail})" if result.detail else ""
        bt.logging.info(
            f" Pipeline | {result.name}: {result.status} "
            f"{result.duration:.1f}s{detail}"
        )
    rows = [
        [
            result.name,
            _status_cell(result.status),
            f"{result.duration:.1f}s" if result.status == StageStatus.RAN else "-",
        ]
        for result in report.results
    ]
    create_and_print_table(
        f"Pipeline run for slot {report.slot} ({report.duration:.0f}s)",
        [
            ("Stage", "left", "magenta"),
            ("Status", "left", "white"),
            ("Duration", "right", "yellow"),
        ],
        rows,
    )
