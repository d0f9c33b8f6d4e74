"""
Top-level package for maskview.

Zero-copy, mask-based views over delimited text tables. Most code should
import from submodules such as:
    maskview.core
    maskview.config
"""

from maskview.core import Table, View, load_table, read_csv

__all__: list[str] = ["Table", "View", "load_table", "read_csv"]
