# core/selection.py
from __future__ import annotations

from typing import Iterable, List, Sequence, TypeVar

T = TypeVar("T")


class LyricSelection:
    """
    Set of selected lyric indices, owned by the lyrics view.

    Rendering order is always ascending index, never click order.
    """

    def __init__(self, indices: Iterable[int] = ()):
        self._indices: set[int] = {int(i) for i in indices}

    def __len__(self) -> int:
        return len(self._indices)

    def __contains__(self, index: object) -> bool:
        return index in self._indices

    def toggle(self, index: int) -> bool:
        """Flip one index; returns True when it is now selected."""
        index = int(index)
        if index in self._indices:
            self._indices.discard(index)
            return False
        self._indices.add(index)
        return True

    def clear(self) -> None:
        self._indices.clear()

    def ordered(self) -> List[int]:
        return sorted(self._indices)

    def pick(self, items: Sequence[T]) -> List[T]:
        """Selected items in index order; stale indices are dropped."""
        return [items[i] for i in self.ordered() if 0 <= i < len(items)]
