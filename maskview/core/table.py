from __future__ import annotations

import logging
from collections import Counter
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Sequence, TextIO, Tuple, Union

from maskview.config.model import LoaderConfig
from maskview.core.exceptions import (
    OutOfRangeError,
    SchemaError,
    SourceReadError,
    UnknownColumnError,
)

logger = logging.getLogger(__name__)

Source = Union[str, Path, TextIO]


def parse_line(line: str, delimiter: str = ",", expected_size: Optional[int] = None) -> List[str]:
    """
    Split a single line into stripped fields. An empty last field (trailing
    delimiter, or a blank line) is dropped.

    If expected_size is given the result is padded with empty strings or
    truncated to exactly that many fields.
    """
    cells = [cell.strip() for cell in line.rstrip("\r\n").split(delimiter)]
    if cells[-1] == "":
        cells.pop()

    if expected_size is not None:
        if len(cells) < expected_size:
            cells.extend([""] * (expected_size - len(cells)))
        else:
            del cells[expected_size:]

    return cells


def _ensure_unique_header(header: Sequence[str]) -> None:
    duplicates = sorted(name for name, count in Counter(header).items() if count > 1)
    if duplicates:
        raise SchemaError(f"Header contains multiple columns with the same name: {duplicates}")


class Table:
    """
    Immutable in-memory table of string cells.

    Every row holds exactly as many cells as the header. Built once by
    load_table() or Table.from_rows() and never changed afterwards, so any
    number of views can share one instance.
    """

    __slots__ = ("_header", "_header_index", "_rows", "_source")

    def __init__(
        self,
        header: Tuple[str, ...],
        rows: Tuple[Tuple[str, ...], ...],
        source: Optional[Path] = None,
    ) -> None:
        _ensure_unique_header(header)

        width = len(header)
        for i, row in enumerate(rows):
            if len(row) != width:
                raise SchemaError(f"Row {i} has {len(row)} cells, expected {width}")

        self._header = header
        self._header_index: Mapping[str, int] = MappingProxyType(
            {name: i for i, name in enumerate(header)}
        )
        self._rows = rows
        self._source = source

    @classmethod
    def from_rows(
        cls,
        header: Iterable[str],
        rows: Iterable[Iterable[str]],
        source: Optional[Path] = None,
    ) -> Table:
        """
        Build a table from already split cells. Cells are stripped and each row
        is padded or truncated to the header width.
        """
        header_t = tuple(str(name).strip() for name in header)
        width = len(header_t)

        normalised = []
        for row in rows:
            cells = [str(cell).strip() for cell in row]
            cells = (cells + [""] * width)[:width]
            normalised.append(tuple(cells))

        return cls(header_t, tuple(normalised), source=source)

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------
    @property
    def header(self) -> Tuple[str, ...]:
        return self._header

    @property
    def header_index(self) -> Mapping[str, int]:
        """Read-only mapping from column name to column position."""
        return self._header_index

    @property
    def rows(self) -> Tuple[Tuple[str, ...], ...]:
        return self._rows

    @property
    def source(self) -> Optional[Path]:
        return self._source

    @property
    def n_rows(self) -> int:
        return len(self._rows)

    @property
    def n_cols(self) -> int:
        return len(self._header)

    def column_index(self, name: str) -> int:
        """
        :raises UnknownColumnError: if name is not part of the header
        """
        try:
            return self._header_index[name]
        except KeyError:
            raise UnknownColumnError(name) from None

    def cell(self, row: int, col: int) -> str:
        """
        Access a single cell.

        :raises OutOfRangeError: if row or col lie outside the table
        """
        if not 0 <= row < len(self._rows):
            raise OutOfRangeError(
                f"Table has only {len(self._rows)} rows, but row {row} has been requested"
            )
        if not 0 <= col < len(self._header):
            raise OutOfRangeError(
                f"Table has only {len(self._header)} cols, but col {col} has been requested"
            )
        return self._rows[row][col]

    def __repr__(self) -> str:
        return f"Table(rows={self.n_rows}, cols={self.n_cols}, source={self._source})"


def _read_lines(handle: TextIO, delimiter: str, source: Optional[Path]) -> Table:
    header_line = handle.readline()
    if header_line == "":
        raise SchemaError(f"Source {source or '<stream>'} has no header line")

    header = parse_line(header_line, delimiter)

    rows = tuple(tuple(parse_line(line, delimiter, len(header))) for line in handle)
    return Table(tuple(header), rows, source=source)


def load_table(source: Source, config: Optional[LoaderConfig] = None) -> Table:
    """
    Load a whole delimited text source into a Table.

    The first line is the header; every following line is a row, padded or
    truncated to the header width.

    :param source: path (relative paths go through LoaderConfig.resolve) or an open text stream
    :param config: loader options, defaults to LoaderConfig.from_env()
    :raises SourceReadError: if the path does not exist or cannot be read
    :raises SchemaError: if the header is missing or has duplicate names
    """
    config = config or LoaderConfig.from_env()

    if hasattr(source, "readline"):
        table = _read_lines(source, config.delimiter, None)
        logger.info(
            "Table loaded from stream",
            extra={"n_rows": table.n_rows, "n_cols": table.n_cols},
        )
        return table

    path = config.resolve(source)
    if not path.exists():
        msg = f"Path '{path}' does not exist"
        logger.error(msg, extra={"path": str(path)})
        raise SourceReadError(msg)
    if not path.is_file():
        msg = f"Path '{path}' is not a file"
        logger.error(msg, extra={"path": str(path)})
        raise SourceReadError(msg)

    try:
        with path.open("r", encoding=config.encoding, newline="") as handle:
            table = _read_lines(handle, config.delimiter, path)
    except (OSError, UnicodeDecodeError) as e:
        logger.error("Could not read source", extra={"path": str(path), "error": str(e)})
        raise SourceReadError(f"Could not read '{path}': {e}") from e
    except SchemaError as e:
        logger.error("Invalid header", extra={"path": str(path), "error": str(e)})
        raise

    logger.info(
        "Table loaded",
        extra={"path": str(path), "n_rows": table.n_rows, "n_cols": table.n_cols},
    )
    return table
