import asyncio
import logging
import urllib.parse
import xml.etree.ElementTree as ET
from typing import Optional

import requests

from sciencesnippets.config import (
    ARXIV_API_URL,
    NO_ABSTRACT,
    PAGE_SIZE,
    REQUEST_TIMEOUT,
    UNKNOWN_TITLE,
    USER_AGENT,
)
from sciencesnippets.core.errors import FetchError
from sciencesnippets.core.filters import text_or
from sciencesnippets.core.model import FetchResult, Item
from sciencesnippets.fetchers.topics import resolve_topic

NS = {"a": "http://www.w3.org/2005/Atom"}

# Every page must reflect live upstream state
NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


def build_url(topic: str, offset: int, page_size: int = PAGE_SIZE) -> str:
    return (
        f"{ARXIV_API_URL}?"
        f"search_query=all:{urllib.parse.quote(topic)}&start={int(offset)}&max_results={int(page_size)}"
        "&sortBy=submittedDate&sortOrder=descending"
    )


def parse_entries(xml_text: str, topic: str):
    """Parse an Atom feed into Items; missing fields get placeholder text."""
    root = ET.fromstring(xml_text)
    items = []
    for entry in root.findall("a:entry", NS):
        items.append(Item(
            title=text_or(entry.findtext("a:title", namespaces=NS), UNKNOWN_TITLE),
            abstract=text_or(entry.findtext("a:summary", namespaces=NS), NO_ABSTRACT),
            topic=topic,
        ))
    return items


def fetch_page(offset: int = 0, topic: Optional[str] = None, *, rng=None) -> FetchResult:
    """
    Fetch one page of papers starting at ``offset``.

    ``has_more`` is True only when a full page came back; ``next_offset``
    always advances by PAGE_SIZE, even for short pages.
    """
    topic = resolve_topic(topic, rng)
    url = build_url(topic, offset)
    headers = {"User-Agent": USER_AGENT, **NO_CACHE_HEADERS}
    try:
        r = requests.get(url, headers=headers, timeout=REQUEST_TIMEOUT)
        r.raise_for_status()
        items = parse_entries(r.text, topic)
    except requests.HTTPError as ex:
        status = ex.response.status_code if ex.response is not None else None
        logging.warning(f"[arxiv] fail topic={topic!r} start={offset} status={status} -> {ex}")
        raise FetchError(f"arXiv returned status {status}", offset=offset, topic=topic, status=status) from ex
    except requests.RequestException as ex:
        logging.warning(f"[arxiv] fail topic={topic!r} start={offset} -> {ex}")
        raise FetchError(f"arXiv request failed: {ex}", offset=offset, topic=topic) from ex
    except ET.ParseError as ex:
        logging.warning(f"[arxiv] unreadable feed topic={topic!r} start={offset} -> {ex}")
        raise FetchError("arXiv returned an unreadable feed", offset=offset, topic=topic) from ex

    logging.info(f"[arxiv] topic={topic!r} start={offset} got={len(items)}")
    return FetchResult(
        items=items,
        has_more=len(items) == PAGE_SIZE,
        next_offset=offset + PAGE_SIZE,
        topic=topic,
    )


async def fetch_page_async(offset: int = 0, topic: Optional[str] = None) -> FetchResult:
    return await asyncio.to_thread(fetch_page, offset, topic)
