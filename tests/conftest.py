import pytest

from sciencesnippets.core.model import FetchResult, Item

ATOM = """<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>arXiv Query</title>
{entries}
</feed>
"""


def atom_feed(entries):
    """Build an Atom document; each entry is a dict that may omit title/summary."""
    parts = []
    for e in entries:
        inner = ""
        if "title" in e:
            inner += f"<title>{e['title']}</title>"
        if "summary" in e:
            inner += f"<summary>{e['summary']}</summary>"
        parts.append(f"  <entry><id>http://arxiv.org/abs/x</id>{inner}</entry>")
    return ATOM.format(entries="\n".join(parts))


def make_items(n, topic="quantum computing", prefix="Paper"):
    return [Item(title=f"{prefix} {i}", abstract=f"Abstract {i}", topic=topic) for i in range(n)]


class FakeFetch:
    """Async fetch double that returns scripted pages and records calls."""

    def __init__(self, pages, page_size=5):
        self.pages = list(pages)
        self.page_size = page_size
        self.calls = []

    async def __call__(self, offset, topic):
        self.calls.append((offset, topic))
        page = self.pages.pop(0)
        if isinstance(page, Exception):
            raise page
        items = make_items(page, topic=topic or "machine learning", prefix=f"P{offset}")
        return FetchResult(
            items=items,
            has_more=len(items) == self.page_size,
            next_offset=offset + self.page_size,
            topic=topic or "machine learning",
        )


class RecordingView:
    def __init__(self):
        self.snapshots = []
        self.scrolls = []

    def render(self, snapshot):
        self.snapshots.append(snapshot)

    def scroll_to(self, offset, smooth=True):
        self.scrolls.append((offset, smooth))


@pytest.fixture
def view():
    return RecordingView()
