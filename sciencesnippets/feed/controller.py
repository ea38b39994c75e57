# sciencesnippets/feed/controller.py
"""
Infinite-scroll feed state machine.

The controller owns the loaded items, the pagination cursor and the loading
flag. A rendering surface feeds it three signals (scroll position, sentinel
visibility and measured layout) and receives snapshots plus scroll commands
back through the FeedView protocol. Everything runs on one asyncio loop; the
``loading`` flag is the only guard against overlapping fetches.
"""
from __future__ import annotations

import logging
from typing import Awaitable, Callable, Optional, Protocol, Sequence, Tuple

from sciencesnippets.core.errors import FetchError
from sciencesnippets.core.model import FeedSnapshot, FeedState, FetchResult, PageCursor
from sciencesnippets.feed.layout import Anchor, Box, LayoutIndex
from sciencesnippets.fetchers.arxiv import fetch_page_async

Fetch = Callable[[int, Optional[str]], Awaitable[FetchResult]]


class FeedView(Protocol):
    def render(self, snapshot: FeedSnapshot) -> None: ...

    def scroll_to(self, offset: float, smooth: bool = True) -> None: ...


class NullView:
    def render(self, snapshot: FeedSnapshot) -> None:
        pass

    def scroll_to(self, offset: float, smooth: bool = True) -> None:
        pass


class FeedController:
    def __init__(
        self,
        fetch: Fetch = fetch_page_async,
        view: Optional[FeedView] = None,
        *,
        initial_offset: int = 0,
        initial_topic: Optional[str] = None,
    ):
        self.state = FeedState(cursor=PageCursor(offset=initial_offset, topic=initial_topic or None))
        self.view = view or NullView()
        self._fetch = fetch
        self._layout = LayoutIndex()
        self._scroll_top = 0.0
        self._viewport_height = 0.0
        self._pending_anchor: Optional[Anchor] = None
        self._pending_scroll: Optional[Tuple[int, bool]] = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def snapshot(self) -> FeedSnapshot:
        st = self.state
        return FeedSnapshot(
            items=tuple(st.items),
            loading=st.loading,
            has_more=st.has_more,
            current_index=st.current_index,
            error=st.last_error,
        )

    def can_load_more(self) -> bool:
        return self.state.has_more and not self.state.loading

    def _render(self) -> None:
        self.view.render(self.snapshot())

    # ------------------------------------------------------------------
    # Pagination
    # ------------------------------------------------------------------

    async def mount(self) -> bool:
        """Initial load. The sentinel is ignored until this completes."""
        try:
            return await self.load_more()
        finally:
            self.state.initial_loaded = True

    async def load_more(self) -> bool:
        """
        Fetch and append the next page.

        Returns False without fetching when a fetch is already in flight or
        the last page was short. A FetchError is logged and swallowed so the
        same near-end condition can retry later.
        """
        st = self.state
        if not self.can_load_more():
            return False
        cursor = st.cursor
        st.loading = True
        self._render()
        try:
            result = await self._fetch(cursor.offset, cursor.topic)
        except FetchError as ex:
            logging.warning(f"[feed] load failed at offset={cursor.offset} topic={cursor.topic!r}: {ex}")
            st.last_error = str(ex)
        else:
            st.last_error = None
            # Phase 1: remember where the viewed item sits before the list grows
            anchor = self._layout.anchor_at(self._scroll_top, self._viewport_height)
            st.items.extend(result.items)
            st.cursor = cursor.advance(result.next_offset, result.items)
            st.has_more = result.has_more
            # Phase 2 runs in on_layout, once the surface has measured the new list
            if result.items:
                self._pending_anchor = anchor
            logging.info(
                f"[feed] +{len(result.items)} items (total={len(st.items)}) "
                f"next={st.cursor.offset} has_more={st.has_more}"
            )
        finally:
            st.loading = False
            self._render()
        return True

    # ------------------------------------------------------------------
    # Signals from the rendering surface
    # ------------------------------------------------------------------

    async def on_sentinel(self, visible: bool) -> bool:
        """Near-end signal; no-op before the initial load or while loading."""
        if not visible or not self.state.initial_loaded:
            return False
        return await self.load_more()

    def on_scroll(self, scroll_top: float, viewport_height: Optional[float] = None) -> int:
        self._scroll_top = float(scroll_top)
        if viewport_height is not None:
            self._viewport_height = float(viewport_height)
        self._update_current()
        return self.state.current_index

    def on_layout(self, boxes: Sequence[Box], viewport_height: Optional[float] = None) -> None:
        """Rebuild the offset->index mapping after the surface re-measured its items."""
        self._layout = LayoutIndex(boxes)
        if viewport_height is not None:
            self._viewport_height = float(viewport_height)

        if self._pending_anchor is not None:
            restored = self._layout.restore(self._pending_anchor)
            self._pending_anchor = None
            if restored is not None and restored != self._scroll_top:
                self._scroll_top = restored
                self.view.scroll_to(restored, smooth=False)

        if self._pending_scroll is not None:
            index, smooth = self._pending_scroll
            if self._layout.knows(index):
                self._scroll_item(index, smooth)
                return
        self._update_current()

    def _update_current(self) -> None:
        if not len(self._layout):
            return
        idx = min(self._layout.index_at(self._scroll_top, self._viewport_height), len(self.state.items) - 1)
        if idx >= 0 and idx != self.state.current_index:
            self.state.current_index = idx
            self._render()

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def scroll_to(self, index: int, smooth: bool = True) -> bool:
        """Scroll an item into view now, or once its layout is known."""
        st = self.state
        if not st.items:
            return False
        index = max(0, min(int(index), len(st.items) - 1))
        if self._layout.knows(index):
            self._scroll_item(index, smooth)
            return True
        self._pending_scroll = (index, smooth)
        return False

    def _scroll_item(self, index: int, smooth: bool) -> None:
        self._pending_scroll = None
        self.view.scroll_to(self._layout.top_of(index), smooth=smooth)
        if index != self.state.current_index:
            self.state.current_index = index
            self._render()

    def previous(self) -> int:
        if self.state.current_index > 0:
            self.scroll_to(self.state.current_index - 1)
        return self.state.current_index

    async def next(self) -> int:
        """
        Move to the next item. At the end of the loaded list, fetch one more
        page first and then scroll to the first new item once it renders.
        """
        st = self.state
        if st.current_index < len(st.items) - 1:
            self.scroll_to(st.current_index + 1)
            return st.current_index
        if not self.can_load_more():
            return st.current_index
        target = len(st.items)
        await self.load_more()
        if len(st.items) > target:
            self.scroll_to(target)
        return st.current_index
