"""
Scroll geometry for the card feed.

The rendering surface reports one box ``(top, height)`` per rendered item.
From those we precompute the midpoints between consecutive item centers, so
"which item is closest to the viewport center" becomes a binary search that
only needs rebuilding when the layout changes, not on every scroll tick.
"""
from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from typing import List, Sequence, Tuple

Box = Tuple[float, float]


@dataclass(frozen=True)
class Anchor:
    index: int
    delta: float  # scroll_top minus the anchor item's top


class LayoutIndex:
    def __init__(self, boxes: Sequence[Box] = ()):
        self._tops: List[float] = [float(top) for top, _ in boxes]
        centers = [float(top) + float(height) / 2.0 for top, height in boxes]
        self._splits: List[float] = [(a + b) / 2.0 for a, b in zip(centers, centers[1:])]

    def __len__(self) -> int:
        return len(self._tops)

    def knows(self, index: int) -> bool:
        return 0 <= index < len(self._tops)

    def top_of(self, index: int) -> float:
        return self._tops[index]

    def index_at(self, scroll_top: float, viewport_height: float) -> int:
        """Index of the item whose center is closest to the viewport center."""
        if not self._tops:
            return 0
        return bisect_right(self._splits, scroll_top + viewport_height / 2.0)

    def anchor_at(self, scroll_top: float, viewport_height: float) -> Anchor | None:
        if not self._tops:
            return None
        idx = self.index_at(scroll_top, viewport_height)
        return Anchor(index=idx, delta=scroll_top - self._tops[idx])

    def restore(self, anchor: Anchor) -> float | None:
        """Scroll offset that puts the anchor item back where it was on screen."""
        if anchor is None or not self.knows(anchor.index):
            return None
        return self._tops[anchor.index] + anchor.delta
