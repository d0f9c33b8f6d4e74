from __future__ import annotations

from typing import Generic, Iterator, Sequence, TypeVar

from maskview.core.exceptions import SizeMismatchError

T = TypeVar("T")


class MaskedSequence(Generic[T]):
    """
    Read-only traversal over a container that only yields the elements whose
    mask entry is true.

    Every call to iter() starts from the first position, so the same object can
    be walked any number of times. Works the same for rows of a table and for
    cells of a single row.
    """

    __slots__ = ("_container", "_mask")

    def __init__(self, container: Sequence[T], mask: Sequence[bool]) -> None:
        if len(container) != len(mask):
            raise SizeMismatchError(
                f"Mask of length {len(mask)} cannot mask a container of length {len(container)}"
            )
        self._container = container
        self._mask = mask

    def __iter__(self) -> Iterator[T]:
        for item, keep in zip(self._container, self._mask):
            if keep:
                yield item

    def __len__(self) -> int:
        return sum(1 for keep in self._mask if keep)

    def __repr__(self) -> str:
        return f"MaskedSequence(len={len(self)}, of={len(self._container)})"


def masked(container: Sequence[T], mask: Sequence[bool]) -> MaskedSequence[T]:
    """
    Wrap container and mask into a MaskedSequence.

    Raises:
        SizeMismatchError: if container and mask differ in length
    """
    return MaskedSequence(container, mask)
