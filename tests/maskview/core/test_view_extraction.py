import numpy as np
import pandas as pd
import pytest

from maskview.core.conversion import convert
from maskview.core.exceptions import ArityMismatchError, ConversionError, SizeMismatchError
from maskview.core.table import Table
from maskview.core.view import View, read_csv


def _make_csv(tmp_path):
    path = tmp_path / "test.csv"
    path.write_text(
        "col1,col2,col3,col4\n"
        "1, 5, 1.5, 7\n"
        "2, 60, 2.5, 8\n"
        "3, 20, , 9\n"
        "4, 70, 4.25\n",
        encoding="utf-8",
    )
    return path


def test_cols_to_lists_converts_each_column(tmp_path):
    df = read_csv(_make_csv(tmp_path))

    col3, col4 = df("col3", "col4").cols_to_lists(float, int)

    assert col3 == [1.5, 2.5, 0.0, 4.25]
    assert col4 == [7, 8, 9, 0]


def test_cols_to_lists_matches_convert_for_every_included_cell(tmp_path):
    df = read_csv(_make_csv(tmp_path))
    view = df.select_rows(df("col2") < (50,))("col1", "col2")

    col1, col2 = view.cols_to_lists(int, str)

    assert len(col1) == len(col2) == view.rows() == 2
    assert col1 == [convert(view.table.cell(i, 0), int) for i in view.row_indices()]
    assert col2 == ["5", "20"]


def test_cols_to_lists_arity_mismatch(tmp_path):
    df = read_csv(_make_csv(tmp_path))

    with pytest.raises(ArityMismatchError):
        df("col1", "col2").cols_to_lists(int)

    declared = read_csv(_make_csv(tmp_path), arity=4)
    with pytest.raises(ArityMismatchError):
        declared.cols_to_lists(int, int, int)


def test_cols_to_lists_propagates_conversion_errors(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text("n\n1\nabc\n", encoding="utf-8")

    with pytest.raises(ConversionError):
        read_csv(path).cols_to_lists(int)


def test_rows_to_lists_and_tuples(tmp_path):
    df = read_csv(_make_csv(tmp_path))
    view = df.select_rows(df("col1") <= (2,))("col1", "col4")

    assert view.rows_to_lists(int) == [[1, 7], [2, 8]]
    assert view.rows_to_lists() == [["1", "7"], ["2", "8"]]
    assert view.rows_to_tuples(str, float) == [("1", 7.0), ("2", 8.0)]

    with pytest.raises(ArityMismatchError):
        view.rows_to_tuples(int)


def test_to_array_with_fixed_shape(tmp_path):
    df = read_csv(_make_csv(tmp_path))

    array = df.select_rows(df("col2", "col3") < (50, 50.0)).to_array(float, shape=(2, 4))

    assert array.shape == (2, 4)
    assert array.dtype == np.float64
    np.testing.assert_array_equal(
        array,
        np.array([[1.0, 5.0, 1.5, 7.0], [3.0, 20.0, 0.0, 9.0]]),
    )


def test_to_array_shape_mismatch(tmp_path):
    df = read_csv(_make_csv(tmp_path))

    with pytest.raises(SizeMismatchError):
        df.to_array(float, shape=(3, None))
    with pytest.raises(ArityMismatchError):
        df.to_array(float, shape=(None, 2))


def test_to_matrix_integer_dtype(tmp_path):
    df = read_csv(_make_csv(tmp_path))

    matrix = df("col1", "col4").to_matrix("int64")

    assert matrix.dtype == np.int64
    assert matrix.tolist() == [[1, 7], [2, 8], [3, 9], [4, 0]]


def test_to_frame_uses_active_header_and_row_positions(tmp_path):
    df = read_csv(_make_csv(tmp_path))
    view = df.select_rows(df("col2") > (10,))("col1", "col3")

    frame = view.to_frame([int, float])

    assert list(frame.columns) == list(view.active_header())
    assert list(frame.index) == [1, 2, 3]
    assert frame["col1"].tolist() == [2, 3, 4]
    assert frame["col3"].tolist() == [2.5, 0.0, 4.25]

    as_strings = view.to_frame()
    assert isinstance(as_strings, pd.DataFrame)
    assert as_strings.loc[3, "col3"] == "4.25"


def test_to_array_keeps_full_strings():
    table = Table.from_rows(["a", "b", "c"], [["1", "10", "xyz"], ["2", "20", "y"]])

    array = View(table)("c").to_array(str)

    assert array.dtype == object
    assert array.tolist() == [["xyz"], ["y"]]
