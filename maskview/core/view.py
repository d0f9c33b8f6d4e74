from __future__ import annotations

import logging
import operator
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from maskview.config.model import LoaderConfig
from maskview.core.conversion import Target, convert
from maskview.core.exceptions import (
    ArityMismatchError,
    CrossTableError,
    SizeMismatchError,
)
from maskview.core.masked import MaskedSequence, masked
from maskview.core.render import format_view
from maskview.core.table import Source, Table, load_table

logger = logging.getLogger(__name__)

Predicate = Callable[[Any, Any], bool]


def _freeze_mask(mask: Optional[Iterable[bool]], size: int, kind: str) -> np.ndarray:
    """Return a read-only boolean copy of mask; None means all-true."""
    if mask is None:
        frozen = np.ones(size, dtype=bool)
    else:
        frozen = np.array(mask, dtype=bool)
        if frozen.ndim != 1 or frozen.shape[0] != size:
            raise SizeMismatchError(
                f"{kind} mask of shape {frozen.shape} does not match table extent {size}"
            )
    frozen.setflags(write=False)
    return frozen


def _as_reference(reference: Any) -> Tuple[Any, ...]:
    # strings are single values, not sequences of characters
    if isinstance(reference, (tuple, list)):
        return tuple(reference)
    return (reference,)


class View:
    """
    Masked, read-only selection over a shared Table.

    A View holds:
    - a reference to one Table (never copied)
    - a row mask and a column mask (read-only numpy bool arrays)
    - an optional arity, the number of active columns this view must have

    Every filtering or selection method returns a new View over the same
    Table; neither the Table nor the masks of an existing View ever change.

    Comparison operators filter rows against a reference tuple, one value
    per active column:

        df = read_csv("data.csv")
        cheap = df.select_rows(df("price") < (10.0,))

    & and | combine the row masks of two views over the same Table.
    """

    __slots__ = ("_table", "_row_mask", "_col_mask", "_arity")

    # == is overloaded to filter rows, so views are not hashable
    __hash__ = None  # type: ignore[assignment]

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------
    def __init__(
        self,
        table: Table,
        row_mask: Optional[Iterable[bool]] = None,
        col_mask: Optional[Iterable[bool]] = None,
        *,
        arity: Optional[int] = None,
    ) -> None:
        self._table = table
        self._row_mask = _freeze_mask(row_mask, table.n_rows, "row")
        self._col_mask = _freeze_mask(col_mask, table.n_cols, "column")
        self._arity = arity

        if arity is not None and self.cols() != arity:
            raise ArityMismatchError(
                f"View has {self.cols()} active columns, but arity {arity} is required"
            )

    @classmethod
    def from_source(
        cls,
        source: Source,
        config: Optional[LoaderConfig] = None,
        *,
        arity: Optional[int] = None,
    ) -> View:
        """Load source into a new Table and return a view selecting all of it."""
        return cls(load_table(source, config), arity=arity)

    def _derive(
        self,
        row_mask: Optional[np.ndarray] = None,
        col_mask: Optional[np.ndarray] = None,
        arity: Optional[int] = None,
    ) -> View:
        derived = View(
            self._table,
            self._row_mask if row_mask is None else row_mask,
            self._col_mask if col_mask is None else col_mask,
            arity=arity,
        )
        logger.debug(
            "View derived",
            extra={"rows": derived.rows(), "cols": derived.cols(), "arity": arity},
        )
        return derived

    # -------------------------------------------------------------------------
    # Properties & getters
    # -------------------------------------------------------------------------
    @property
    def table(self) -> Table:
        return self._table

    @property
    def row_mask(self) -> np.ndarray:
        return self._row_mask

    @property
    def col_mask(self) -> np.ndarray:
        return self._col_mask

    @property
    def arity(self) -> Optional[int]:
        return self._arity

    def header(self) -> Tuple[str, ...]:
        """Full header of the underlying Table, regardless of the column mask."""
        return self._table.header

    def active_header(self) -> Tuple[str, ...]:
        """Names of the active columns, in file order."""
        return tuple(self.col_iterable(self._table.header))

    def rows(self) -> int:
        """Number of included rows."""
        return int(np.count_nonzero(self._row_mask))

    def cols(self) -> int:
        """Number of active columns."""
        return int(np.count_nonzero(self._col_mask))

    def row_indices(self) -> List[int]:
        """Positions of the included rows in the underlying Table."""
        return [int(i) for i in np.flatnonzero(self._row_mask)]

    def row_iterable(self) -> MaskedSequence[Tuple[str, ...]]:
        return masked(self._table.rows, self._row_mask)

    def col_iterable(self, row: Sequence[str]) -> MaskedSequence[str]:
        return masked(row, self._col_mask)

    # -------------------------------------------------------------------------
    # Checks
    # -------------------------------------------------------------------------
    def _check_arity(self, n: int, what: str) -> None:
        if self.cols() != n:
            raise ArityMismatchError(
                f"{what} needs {n} columns, but the view has {self.cols()} active columns"
            )
        if self._arity is not None and self._arity != n:
            raise ArityMismatchError(
                f"{what} needs {n} columns, but the view is declared with arity {self._arity}"
            )

    def _check_same_table(self, other: View, what: str) -> None:
        if not isinstance(other, View):
            raise TypeError(f"Cannot {what} with {type(other).__name__}")
        if other._table is not self._table:
            raise CrossTableError(f"Cannot {what} views of different tables")

    def _check_same_arity(self, other: View, what: str) -> None:
        if self._arity is not None and other._arity is not None and self._arity != other._arity:
            raise ArityMismatchError(
                f"Cannot {what}: arity {self._arity} does not match arity {other._arity}"
            )

    # -------------------------------------------------------------------------
    # Row-wise comparison
    # -------------------------------------------------------------------------
    def _matching_rows(self, pred: Predicate, refs: Tuple[Any, ...]) -> np.ndarray:
        """
        Mask of included rows for which pred(cell, ref) holds in every active column.
        Cells are converted to the type of their reference value.
        """
        self._check_arity(len(refs), "Row-wise comparison")

        types = [type(ref) for ref in refs]
        new_row_mask = self._row_mask.copy()
        rows = self._table.rows

        for i in masked(range(len(rows)), self._row_mask):
            cells = self.col_iterable(rows[i])
            if not all(
                pred(convert(cell, target), ref)
                for cell, target, ref in zip(cells, types, refs)
            ):
                new_row_mask[i] = False

        return new_row_mask

    def _row_wise_comparison(self, pred: Predicate, reference: Any) -> View:
        refs = _as_reference(reference)
        return self._derive(row_mask=self._matching_rows(pred, refs), arity=len(refs))

    def eq(self, reference: Any) -> View:
        """Keep rows whose active cells all equal the reference values."""
        return self._row_wise_comparison(operator.eq, reference)

    def ne(self, reference: Any) -> View:
        """
        Keep rows that do not fully match the reference values, i.e. the
        negation of eq() over the currently included rows. A row with at least
        one differing column survives.
        """
        refs = _as_reference(reference)
        matched = self._matching_rows(operator.eq, refs)
        return self._derive(row_mask=self._row_mask & ~matched, arity=len(refs))

    def lt(self, reference: Any) -> View:
        return self._row_wise_comparison(operator.lt, reference)

    def le(self, reference: Any) -> View:
        return self._row_wise_comparison(operator.le, reference)

    def gt(self, reference: Any) -> View:
        return self._row_wise_comparison(operator.gt, reference)

    def ge(self, reference: Any) -> View:
        return self._row_wise_comparison(operator.ge, reference)

    def __eq__(self, reference: Any) -> View:  # type: ignore[override]
        return self.eq(reference)

    def __ne__(self, reference: Any) -> View:  # type: ignore[override]
        return self.ne(reference)

    def __lt__(self, reference: Any) -> View:
        return self.lt(reference)

    def __le__(self, reference: Any) -> View:
        return self.le(reference)

    def __gt__(self, reference: Any) -> View:
        return self.gt(reference)

    def __ge__(self, reference: Any) -> View:
        return self.ge(reference)

    def is_in(self, values: Iterable[Any]) -> View:
        """
        Keep rows whose single active cell, converted to the element type of
        values, is one of values. An empty collection excludes every row.

        Raises:
            ArityMismatchError: if the view does not have exactly one active column
            TypeError: if values mixes element types
        """
        self._check_arity(1, "is_in")

        candidates = list(values)
        types = {type(v) for v in candidates}
        if len(types) > 1:
            raise TypeError(f"is_in needs values of one type, got {sorted(t.__name__ for t in types)}")

        new_row_mask = self._row_mask.copy()
        if not candidates:
            new_row_mask[:] = False
            return self._derive(row_mask=new_row_mask, arity=1)

        target = types.pop()
        try:
            lookup: Union[set, list] = set(candidates)
        except TypeError:
            lookup = candidates

        rows = self._table.rows
        for i in masked(range(len(rows)), self._row_mask):
            (cell,) = self.col_iterable(rows[i])
            if convert(cell, target) not in lookup:
                new_row_mask[i] = False

        return self._derive(row_mask=new_row_mask, arity=1)

    # -------------------------------------------------------------------------
    # Logical combination
    # -------------------------------------------------------------------------
    def _combine(self, other: View, op: Callable[[np.ndarray, np.ndarray], np.ndarray], what: str) -> View:
        self._check_same_table(other, what)
        self._check_same_arity(other, what)
        return self._derive(row_mask=op(self._row_mask, other._row_mask), arity=self._arity)

    def and_(self, other: View) -> View:
        """Rows included in both views; columns and arity of self."""
        return self._combine(other, np.logical_and, "AND-combine")

    def or_(self, other: View) -> View:
        """Rows included in either view; columns and arity of self."""
        return self._combine(other, np.logical_or, "OR-combine")

    def __and__(self, other: View) -> View:
        return self.and_(other)

    def __or__(self, other: View) -> View:
        return self.or_(other)

    def __bool__(self) -> bool:
        raise TypeError(
            "The truth value of a View is ambiguous; combine views with & and | instead of 'and'/'or'"
        )

    # -------------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------------
    def select(self, *names: str) -> View:
        """
        Project onto the named columns. The result is declared with one column
        per name, so repeating a name fails the arity check.

        Raises:
            UnknownColumnError: if a name is not part of the header
            ArityMismatchError: if a name is given more than once
        """
        if not names:
            raise ValueError("select() needs at least one column name")

        indices = {self._table.column_index(name) for name in names}

        new_col_mask = np.zeros(self._table.n_cols, dtype=bool)
        new_col_mask[list(indices)] = True

        return self._derive(col_mask=new_col_mask, arity=len(names))

    def __call__(self, *names: str) -> View:
        return self.select(*names)

    def select_rows(self, other: View) -> View:
        """Rows of other, columns of self."""
        self._check_same_table(other, "select rows")
        return self._derive(row_mask=other._row_mask, arity=self._arity)

    def select_cols(self, other: View) -> View:
        """Columns of other, rows of self."""
        self._check_same_table(other, "select columns")
        return self._derive(col_mask=other._col_mask, arity=self._arity)

    # -------------------------------------------------------------------------
    # Extraction
    # -------------------------------------------------------------------------
    def cols_to_lists(self, *types: Target) -> Union[List[Any], Tuple[List[Any], ...]]:
        """
        Extract the active columns, converting column k to types[k].

        :return: a single list if one type is given, otherwise a tuple of lists
        :raises ArityMismatchError: if len(types) differs from the active column count
        """
        self._check_arity(len(types), "cols_to_lists")

        result: Tuple[List[Any], ...] = tuple([] for _ in types)
        for row in self.row_iterable():
            for column, target, cell in zip(result, types, self.col_iterable(row)):
                column.append(convert(cell, target))

        if len(types) == 1:
            return result[0]
        return result

    def rows_to_lists(self, target: Target = str) -> List[List[Any]]:
        """Every included row as a list of its active cells converted to target."""
        return [
            [convert(cell, target) for cell in self.col_iterable(row)]
            for row in self.row_iterable()
        ]

    def rows_to_tuples(self, *types: Target) -> List[Tuple[Any, ...]]:
        """Every included row as a tuple, cell k converted to types[k]."""
        self._check_arity(len(types), "rows_to_tuples")
        return [
            tuple(convert(cell, target) for cell, target in zip(self.col_iterable(row), types))
            for row in self.row_iterable()
        ]

    def to_array(
        self,
        dtype: Any = float,
        shape: Optional[Tuple[Optional[int], Optional[int]]] = None,
    ) -> np.ndarray:
        """
        Export the included cells as a 2-D numpy array (rows x active columns).

        shape may fix the expected extents; None leaves an extent free.
        String dtypes produce an object array holding the full cell text.

        :raises SizeMismatchError: if the fixed row extent differs from rows()
        :raises ArityMismatchError: if the fixed column extent differs from cols() or arity
        """
        n_rows, n_cols = self.rows(), self.cols()

        if shape is not None:
            fixed_rows, fixed_cols = shape
            if fixed_rows is not None and fixed_rows != n_rows:
                raise SizeMismatchError(
                    f"Row number mismatch for fixed size export: {fixed_rows} != {n_rows}"
                )
            if fixed_cols is not None:
                self._check_arity(fixed_cols, "Fixed size export")

        np_dtype = np.dtype(dtype)
        target = dtype if isinstance(dtype, type) else np_dtype.type

        # fixed-width string dtypes would cut cells to the first value's length
        if np_dtype.kind in ("U", "S"):
            np_dtype = np.dtype(object)
            target = str

        array = np.empty((n_rows, n_cols), dtype=np_dtype)
        for r, row in enumerate(self.row_iterable()):
            for c, cell in enumerate(self.col_iterable(row)):
                array[r, c] = convert(cell, target)

        return array

    def to_matrix(
        self,
        dtype: Any = float,
        shape: Optional[Tuple[Optional[int], Optional[int]]] = None,
    ) -> np.ndarray:
        return self.to_array(dtype, shape)

    def to_frame(self, dtypes: Union[None, Target, Sequence[Target]] = None) -> pd.DataFrame:
        """
        Export the included cells as a DataFrame indexed by the original row positions.

        dtypes may be None (strings), a single type for every column, or one type per active column.
        """
        columns = self.active_header()

        if dtypes is None:
            types: Sequence[Target] = [str] * len(columns)
        elif isinstance(dtypes, (list, tuple)):
            types = dtypes
        else:
            types = [dtypes] * len(columns)

        self._check_arity(len(types), "to_frame")

        data = {name: [] for name in columns}
        for row in self.row_iterable():
            for name, target, cell in zip(columns, types, self.col_iterable(row)):
                data[name].append(convert(cell, target))

        index = pd.Index(self.row_indices(), name="row")
        return pd.DataFrame(data, index=index, columns=list(columns))

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------
    def __str__(self) -> str:
        return format_view(self)

    def __repr__(self) -> str:
        return (
            f"View(rows={self.rows()}, cols={self.cols()}, arity={self._arity}, "
            f"source={self._table.source})"
        )


def read_csv(
    source: Source,
    config: Optional[LoaderConfig] = None,
    *,
    arity: Optional[int] = None,
) -> View:
    """Utility to load a delimited text source into a View over all rows and columns."""
    return View.from_source(source, config, arity=arity)
