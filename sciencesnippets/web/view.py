from typing import List, Optional, Tuple

from sciencesnippets.core.model import FeedSnapshot


class PageView:
    """FeedView that keeps the latest snapshot for the HTML template."""

    def __init__(self):
        self.snapshot: Optional[FeedSnapshot] = None
        self.renders = 0
        self.scrolls: List[Tuple[float, bool]] = []

    def render(self, snapshot: FeedSnapshot) -> None:
        self.snapshot = snapshot
        self.renders += 1

    def scroll_to(self, offset: float, smooth: bool = True) -> None:
        self.scrolls.append((offset, smooth))
