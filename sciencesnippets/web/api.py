from __future__ import annotations

from pathlib import Path
from typing import List

import asyncio
import logging
from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel

from sciencesnippets.config import PAGE_SIZE
from sciencesnippets.core.errors import FetchError
from sciencesnippets.feed.controller import FeedController
from sciencesnippets.fetchers.arxiv import fetch_page
from sciencesnippets.logging_setup import setup as setup_logging
from sciencesnippets.web.view import PageView

BASE_DIR = Path(__file__).resolve().parent
TEMPLATES_DIR = BASE_DIR / "templates"

FETCH_FAILED_DETAIL = "Failed to fetch research papers. Please try again later."

# Deepest start the HTML feed will replay from offset 0
MAX_FEED_START = 100

setup_logging()

app = FastAPI(title="Science Snippets API")

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


class PaperPayload(BaseModel):
    title: str
    abstract: str
    topic: str


class PapersPage(BaseModel):
    papers: List[PaperPayload]
    has_more: bool
    next_start: int
    topic: str


def _fetch_page_payload(start: int, topic: str | None) -> PapersPage:
    result = fetch_page(start, topic)
    return PapersPage(
        papers=[PaperPayload(title=it.title, abstract=it.abstract, topic=it.topic) for it in result.items],
        has_more=result.has_more,
        next_start=result.next_offset,
        topic=result.topic,
    )


@app.get("/health")
def health():
    return {"ok": True}


@app.get("/api/papers", response_model=PapersPage)
def papers(start: int = Query(0, ge=0), topic: str | None = Query(None)):
    try:
        return _fetch_page_payload(start, topic)
    except FetchError as exc:
        logging.warning("[web] papers start=%s topic=%r failed: %s", start, topic, exc)
        raise HTTPException(status_code=502, detail=FETCH_FAILED_DETAIL)


async def _fetch_async(offset: int, topic: str | None):
    return await asyncio.to_thread(fetch_page, offset, topic)


async def _load_feed(start: int, topic: str | None) -> FeedController:
    """Replay the feed from offset 0 until the page holding ``start`` is loaded."""
    ctl = FeedController(fetch=_fetch_async, view=PageView(), initial_topic=topic)
    await ctl.mount()
    while ctl.state.cursor.offset <= start and not ctl.state.last_error:
        if not await ctl.on_sentinel(True):
            break
    return ctl


@app.get("/", response_class=HTMLResponse)
async def feed(
    request: Request,
    start: int = Query(0, ge=0, le=MAX_FEED_START),
    topic: str | None = Query(None),
):
    ctl = await _load_feed(start, topic)
    snap = ctl.view.snapshot or ctl.snapshot()
    st = ctl.state
    if snap.error:
        logging.warning("[web] feed start=%s topic=%r stopped: %s", start, topic, snap.error)
    # first card of the requested page, so the browser lands where it left off
    focus = min(start, len(snap.items) - 1) if snap.items else 0
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "snapshot": snap,
            "error": FETCH_FAILED_DETAIL if snap.error else None,
            "focus": focus,
            "next_start": st.cursor.offset,
            "topic": st.cursor.topic or (topic or ""),
        },
    )
