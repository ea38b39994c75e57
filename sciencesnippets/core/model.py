from dataclasses import dataclass, field
from typing import List, Optional, Tuple

@dataclass(frozen=True)
class Item:
    title: str
    abstract: str
    topic: str

@dataclass(frozen=True)
class PageCursor:
    offset: int = 0
    topic: Optional[str] = None  # pinned from the first item of the latest page

    def advance(self, next_offset: int, page: List[Item]) -> "PageCursor":
        topic = page[0].topic if page else self.topic
        return PageCursor(offset=next_offset, topic=topic)

@dataclass(frozen=True)
class FetchResult:
    items: List[Item]
    has_more: bool
    next_offset: int
    topic: str = ""

@dataclass
class FeedState:
    items: List[Item] = field(default_factory=list)
    cursor: PageCursor = field(default_factory=PageCursor)
    loading: bool = False
    has_more: bool = True
    current_index: int = 0
    initial_loaded: bool = False
    last_error: Optional[str] = None

@dataclass(frozen=True)
class FeedSnapshot:
    items: Tuple[Item, ...]
    loading: bool
    has_more: bool
    current_index: int
    error: Optional[str] = None
