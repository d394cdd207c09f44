# The MIT License (MIT)
# Copyright © 2025 Entrius

"""Rich tables for the candidate listing and the options summary."""

from dataclasses import dataclass
from typing import List, Tuple

from rich import box
from rich.markup import escape
from rich.table import Table

from dependabot_approve.classes import PullRequestCandidate, StatusState


@dataclass(frozen=True)
class TableStyle:
    box_style: box.Box
    header_style: str
    border_style: str


# Candidate listing gets a header rule; the options summary is a bare key/value grid
LISTING_STYLE = TableStyle(box_style=box.MINIMAL_HEAVY_HEAD, header_style='bold white', border_style='grey50')
OPTIONS_STYLE = TableStyle(box_style=box.SIMPLE, header_style='bold magenta', border_style='grey35')

STATUS_COLORS = {
    StatusState.SUCCESS: 'green',
    StatusState.PENDING: 'yellow',
    StatusState.FAILURE: 'red',
    StatusState.UNKNOWN: 'dim',
}


def _styled_table(style: TableStyle, **kwargs) -> Table:
    return Table(
        box=style.box_style,
        header_style=style.header_style,
        border_style=style.border_style,
        pad_edge=False,
        **kwargs,
    )


def colorize_status(candidate: PullRequestCandidate) -> str:
    """Wrap the candidate's status label with its Rich color tag."""
    if candidate.status_state is None:
        return '[dim]-[/dim]'
    color = STATUS_COLORS[candidate.status_state]
    return f'[{color}]{candidate.status_label}[/{color}]'


def build_candidate_table(candidates: List[PullRequestCandidate], show_status: bool = True) -> Table:
    """Numbered candidate listing; the # column is what the operator types."""
    table = _styled_table(LISTING_STYLE, show_header=True)
    table.add_column('#', style='bold cyan', justify='right')
    table.add_column('PR', style='cyan', justify='right')
    table.add_column('Title', style='green', max_width=60)
    if show_status:
        table.add_column('Status')

    for candidate in candidates:
        row = [str(candidate.index), f'#{candidate.number}', escape(candidate.title)]
        if show_status:
            row.append(colorize_status(candidate))
        table.add_row(*row)

    return table


def build_options_table(rows: List[Tuple[str, str]]) -> Table:
    table = _styled_table(OPTIONS_STYLE, show_header=False)
    table.add_column(style='cyan')
    table.add_column(style='green')
    for key, value in rows:
        table.add_row(key, escape(value))
    return table
