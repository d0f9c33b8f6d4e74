from __future__ import annotations

import numbers
from typing import Any, Callable, Iterable, List, Type, TypeVar, Union

import numpy as np

from maskview.core.exceptions import ConversionError

T = TypeVar("T")

Target = Union[Type[T], Callable[[str], T]]

_TRUE_STRINGS = frozenset({"1", "true", "yes"})
_FALSE_STRINGS = frozenset({"", "0", "false", "no"})


def _is_bool_type(target: Any) -> bool:
    return target is bool or target is np.bool_


def is_numeric_type(target: Any) -> bool:
    """True for targets whose empty-string value is zero (bool excluded)."""
    if not isinstance(target, type) or _is_bool_type(target):
        return False
    return issubclass(target, (numbers.Number, np.number))


def _to_bool(cell: str, target: Any) -> Any:
    lowered = cell.strip().lower()
    if lowered in _TRUE_STRINGS:
        return target(True)
    if lowered in _FALSE_STRINGS:
        return target(False)
    raise ConversionError(cell, target)


def convert(cell: str, target: Target) -> Any:
    """
    Convert a single cell to target.

    Rules:
    - str: the cell is returned unchanged
    - bool: '', '0', 'false', 'no' -> False; '1', 'true', 'yes' -> True (case-insensitive)
    - numeric types (int, float, complex, Decimal, Fraction, numpy numbers):
      an empty cell is the zero of the type, otherwise the standard textual form is parsed
    - anything else callable is applied to the cell as-is

    :raises ConversionError: if a non-empty cell cannot be parsed as target
    """
    if target is str:
        return cell

    if _is_bool_type(target):
        return _to_bool(cell, target)

    if is_numeric_type(target):
        if cell == "":
            return target(0)
        try:
            return target(cell)
        except (ValueError, TypeError, ArithmeticError) as e:
            raise ConversionError(cell, target) from e

    try:
        return target(cell)
    except (ValueError, TypeError) as e:
        raise ConversionError(cell, target) from e


def convert_all(cells: Iterable[str], target: Target) -> List[Any]:
    """Element-wise convert(); order is preserved."""
    return [convert(cell, target) for cell in cells]


__all__ = ["convert", "convert_all", "is_numeric_type"]
