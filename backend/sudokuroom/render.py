"""HTML fragments for the HTMX board page.

Every fragment carries an ``id`` so the client swaps it in out-of-band.
"""

from typing import List, Sequence

from markupsafe import escape

SUCCESS = 'Success!'
FAILED = 'Failed!'

_BAR = (
    '<span id="{id}" class="progress-bar" role="progressbar" aria-labelledby="{label}" aria-valuenow="{value}">'
    '<svg width="100" height="10"><rect height="10" width="100" fill="white" />'
    '<rect height="10" width="{width}" fill="#0369a1" /></svg></span>'
)


def render_cell(value, x: int, y: int, disabled: bool = False) -> str:
    shown = '' if not value else value
    if disabled:
        return f'<input id="cell_{x}_{y}" disabled="true" hx-swap-oob="true" name="cell_{x}_{y}" value="{shown}" />'
    return (
        f'<input id="cell_{x}_{y}" hx-swap-oob="true" name="cell_{x}_{y}" value="{shown}" '
        'hx-ws="send" hx-trigger="keyup changed" maxlength="1" onfocus="this.select()" onclick="this.select()" />'
    )


def render_row(row: Sequence[int], template_row: Sequence[int], y: int) -> str:
    cells = ''.join(f'<td>{render_cell(value, x, y, template_row[x] != 0)}</td>' for x, value in enumerate(row))
    return f'<tr id="row_{y}">{cells}</tr>'


def render_board(board: Sequence[Sequence[int]], template: Sequence[Sequence[int]]) -> List[str]:
    return [render_row(row, template[y], y) for y, row in enumerate(board)]


def render_message(message: str, id: str = 'message') -> str:
    return f'<div id="{id}" class="overlay">{escape(message)}</div>'


def _bar(id: str, label: str, value: int) -> str:
    return _BAR.format(id=id, label=label, value=value, width=max(0, min(100, value)))


def render_progress(percent_complete: int, percent_time: int, time_remaining: int) -> List[str]:
    return [
        f'<span id="completion-label">{percent_complete}% completed</span>',
        _bar('completion-label-data', 'completion-label', percent_complete),
        f'<span id="time-label">{time_remaining} min remaining</span>',
        _bar('time-label-data', 'time-label', percent_time),
    ]


def render_text_board(board: Sequence[Sequence[int]]) -> str:
    """Plain-text grid with box separators, for the CLI preview."""
    size = len(board)
    box = int(size ** 0.5) or 1
    widths = [2 * box + 1] * box
    widths[0] = widths[-1] = 2 * box
    separator = '+'.join('-' * width for width in widths)
    lines = []
    for y, row in enumerate(board):
        if y % box == 0 and y:
            lines.append(separator)
        chunks = []
        for x, value in enumerate(row):
            if x % box == 0 and x:
                chunks.append('|')
            chunks.append(str(value) if value else '.')
        lines.append(' '.join(chunks))
    return '\n'.join(lines)
