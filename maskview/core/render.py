from __future__ import annotations

import io
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from maskview.core.view import View


def write_view(view: "View", stream: TextIO, delimiter: str = "\t") -> None:
    """
    Write the active header line, then one line per included row.
    Cells are joined with delimiter, in active column order.
    """
    stream.write(delimiter.join(view.active_header()) + "\n")
    for row in view.row_iterable():
        stream.write(delimiter.join(view.col_iterable(row)) + "\n")


def format_view(view: "View", delimiter: str = "\t") -> str:
    buffer = io.StringIO()
    write_view(view, buffer, delimiter)
    return buffer.getvalue()
