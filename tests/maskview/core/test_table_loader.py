import io

import pytest

from maskview.config.model import LoaderConfig
from maskview.core.exceptions import (
    OutOfRangeError,
    SchemaError,
    SourceReadError,
    UnknownColumnError,
)
from maskview.core.table import Table, load_table, parse_line


def _write_csv(tmp_path, text, name="data.csv"):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_parse_line_strips_and_resizes():
    assert parse_line("  a , b,c  \n") == ["a", "b", "c"]
    assert parse_line("1,2", expected_size=4) == ["1", "2", "", ""]
    assert parse_line("1,2,3,4,5", expected_size=3) == ["1", "2", "3"]
    assert parse_line("", expected_size=2) == ["", ""]
    assert parse_line("x;y", delimiter=";") == ["x", "y"]


def test_load_table_pads_and_truncates_rows(tmp_path):
    path = _write_csv(tmp_path, "a, b ,c\n1,2\n3,4,5,6\n7,8,9\n")

    table = load_table(path, LoaderConfig())

    assert table.header == ("a", "b", "c")
    assert table.rows == (("1", "2", ""), ("3", "4", "5"), ("7", "8", "9"))
    assert all(len(row) == len(table.header) for row in table.rows)
    assert table.source == path


def test_load_table_builds_read_only_header_index(tmp_path):
    path = _write_csv(tmp_path, "a,b,c\n1,2,3\n")

    table = load_table(path, LoaderConfig())

    assert dict(table.header_index) == {"a": 0, "b": 1, "c": 2}
    with pytest.raises(TypeError):
        table.header_index["d"] = 3  # type: ignore[index]


def test_load_table_rejects_duplicate_header(tmp_path):
    path = _write_csv(tmp_path, "a,b,a\n1,2,3\n")

    with pytest.raises(SchemaError, match="same name"):
        load_table(path, LoaderConfig())


def test_load_table_missing_path_raises_source_read_error(tmp_path):
    with pytest.raises(SourceReadError, match="does not exist"):
        load_table(tmp_path / "missing.csv", LoaderConfig())

    # still catchable as a plain OSError
    with pytest.raises(OSError):
        load_table(tmp_path / "missing.csv", LoaderConfig())


def test_load_table_empty_source_has_no_header(tmp_path):
    path = _write_csv(tmp_path, "")

    with pytest.raises(SchemaError, match="no header"):
        load_table(path, LoaderConfig())


def test_load_table_from_stream():
    stream = io.StringIO("x;y\n1;2\n")

    table = load_table(stream, LoaderConfig(delimiter=";"))

    assert table.header == ("x", "y")
    assert table.rows == (("1", "2"),)
    assert table.source is None


def test_load_table_resolves_relative_path_against_data_root(tmp_path):
    _write_csv(tmp_path, "a\n1\n", name="rel.csv")

    table = load_table("rel.csv", LoaderConfig(data_root=tmp_path))

    assert table.n_rows == 1
    assert table.source == tmp_path / "rel.csv"


def test_cell_access_is_bounds_checked():
    table = Table.from_rows(["a", "b"], [["1", "2"], ["3", "4"]])

    assert table.cell(1, 0) == "3"

    with pytest.raises(OutOfRangeError, match="only 2 rows"):
        table.cell(2, 0)
    with pytest.raises(OutOfRangeError, match="only 2 cols"):
        table.cell(0, 2)
    with pytest.raises(OutOfRangeError):
        table.cell(-1, 0)


def test_column_index_unknown_name():
    table = Table.from_rows(["a"], [["1"]])

    assert table.column_index("a") == 0
    with pytest.raises(UnknownColumnError, match="'zz' not found"):
        table.column_index("zz")


def test_from_rows_normalises_width():
    table = Table.from_rows([" a", "b "], [["1"], [" 2 ", "3", "4"]])

    assert table.header == ("a", "b")
    assert table.rows == (("1", ""), ("2", "3"))


def test_load_table_directory_is_not_a_file(tmp_path):
    with pytest.raises(SourceReadError, match="is not a file"):
        load_table(tmp_path, LoaderConfig())


def test_trailing_delimiter_does_not_add_a_column():
    table = load_table(io.StringIO("a,b,\n1,2\n3,4,\n"), LoaderConfig())

    assert table.header == ("a", "b")
    assert table.rows == (("1", "2"), ("3", "4"))
    assert parse_line("a, b , ") == ["a", "b"]
    assert parse_line("a,,b") == ["a", "", "b"]
