"""
Core domain layer: the loaded table, masked iteration, typed conversion
and the masked view engine built on top of them
"""

from .conversion import convert, convert_all
from .masked import MaskedSequence, masked
from .table import Table, load_table, parse_line
from .view import View, read_csv
from .render import format_view, write_view

__all__ = [
    "Table",
    "View",
    "MaskedSequence",
    "convert",
    "convert_all",
    "format_view",
    "load_table",
    "masked",
    "parse_line",
    "read_csv",
    "write_view",
]
