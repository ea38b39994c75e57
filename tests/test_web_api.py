import pytest
from fastapi.testclient import TestClient

from conftest import make_items
from sciencesnippets.core.errors import FetchError
from sciencesnippets.core.model import FetchResult
from sciencesnippets.web import api


@pytest.fixture
def client():
    return TestClient(api.app)


@pytest.fixture
def stub_fetch(monkeypatch):
    calls = []

    def install(n=5, error=None, fail_at=None):
        def _fetch(start, topic):
            calls.append((start, topic))
            if error is not None and fail_at in (None, start):
                raise error
            used = topic or "computer graphics"
            items = make_items(n, topic=used, prefix=f"P{start}")
            return FetchResult(items=items, has_more=n == 5, next_offset=start + 5, topic=used)
        monkeypatch.setattr(api, "fetch_page", _fetch)
        return calls

    return install


def test_health(client):
    assert client.get("/health").json() == {"ok": True}


def test_papers_page(client, stub_fetch):
    calls = stub_fetch(5)
    r = client.get("/api/papers", params={"start": 10, "topic": "blockchain"})
    assert r.status_code == 200
    body = r.json()
    assert calls == [(10, "blockchain")]
    assert len(body["papers"]) == 5
    assert body["papers"][0] == {"title": "P10 0", "abstract": "Abstract 0", "topic": "blockchain"}
    assert body["has_more"] is True
    assert body["next_start"] == 15
    assert body["topic"] == "blockchain"


def test_papers_without_topic(client, stub_fetch):
    calls = stub_fetch(2)
    body = client.get("/api/papers").json()
    assert calls == [(0, None)]
    assert body["has_more"] is False
    assert body["topic"] == "computer graphics"


def test_papers_rejects_negative_start(client, stub_fetch):
    stub_fetch(5)
    assert client.get("/api/papers", params={"start": -1}).status_code == 422


def test_papers_upstream_failure_is_502(client, stub_fetch):
    stub_fetch(error=FetchError("down"))
    r = client.get("/api/papers")
    assert r.status_code == 502
    assert r.json()["detail"] == api.FETCH_FAILED_DETAIL


def test_feed_page_links_next_page_with_pinned_topic(client, stub_fetch):
    calls = stub_fetch(5)
    r = client.get("/")
    assert r.status_code == 200
    assert calls == [(0, None)]
    assert "P0 4" in r.text
    assert "/?start=5&topic=computer%20graphics#card-5" in r.text
    assert 'data-auto="1"' in r.text


def test_feed_page_keeps_earlier_pages(client, stub_fetch):
    calls = stub_fetch(5)
    r = client.get("/", params={"start": 5, "topic": "ml"})
    assert calls == [(0, "ml"), (5, "ml")]
    for title in ("P0 0", "P0 4", "P5 0", "P5 4"):
        assert title in r.text
    assert r.text.index("P0 0") < r.text.index("P5 0")
    assert 'id="card-9"' in r.text
    assert 'data-focus="5"' in r.text
    assert "/?start=10&topic=ml#card-10" in r.text


def test_feed_page_pins_topic_of_first_page(client, stub_fetch):
    calls = stub_fetch(5)
    client.get("/", params={"start": 5})
    assert calls == [(0, None), (5, "computer graphics")]


def test_feed_page_end_of_results(client, stub_fetch):
    calls = stub_fetch(3)
    r = client.get("/", params={"start": 5, "topic": "blockchain"})
    assert calls == [(0, "blockchain")]
    assert "No more papers to load" in r.text
    assert "P0 2" in r.text


def test_feed_page_renders_error(client, stub_fetch):
    stub_fetch(error=FetchError("down"))
    r = client.get("/", params={"start": 5, "topic": "blockchain"})
    assert r.status_code == 200
    assert api.FETCH_FAILED_DETAIL in r.text
    assert "Retry" in r.text


def test_feed_page_keeps_loaded_cards_when_later_page_fails(client, stub_fetch):
    calls = stub_fetch(error=FetchError("down"), fail_at=5)
    r = client.get("/", params={"start": 10, "topic": "blockchain"})
    assert calls == [(0, "blockchain"), (5, "blockchain")]
    assert "P0 4" in r.text
    assert api.FETCH_FAILED_DETAIL in r.text
    assert "/?start=5&topic=blockchain#card-5" in r.text


def test_feed_page_rejects_deep_start(client, stub_fetch):
    stub_fetch(5)
    assert client.get("/", params={"start": api.MAX_FEED_START + 1}).status_code == 422
