import pytest

from pulse.config.settings import Settings
from pulse.exceptions import FetchError, SourceError
from pulse.services.sources import FeedSource, HackerNewsSource, build_sources
from pulse.services.stable_id import stable_id

from conftest import FakeHttp

INDEX = "https://hn.test/top.json"
ITEM = "https://hn.test/item/{id}.json"


def _hn(http, **kw):
    return HackerNewsSource(http, index_url=INDEX, item_url=ITEM, **kw)


def test_hackernews_maps_first_n_in_index_order():
    http = FakeHttp(
        json_by_url={
            INDEX: [3, 1, 2, 9],
            ITEM.format(id=3): {"id": 3, "title": "Three", "url": "https://3"},
            ITEM.format(id=1): {"id": 1, "title": "One"},
            ITEM.format(id=2): None,
        }
    )
    items = _hn(http, max_workers=2).fetch(3)

    assert [i.id for i in items] == ["hackernews-3", "hackernews-1", "hackernews-2"]
    assert items[0].title == "Three" and items[0].url == "https://3"
    assert items[1].url is None
    assert items[2].title == "(no title)"
    assert all(i.source == "hackernews" and isinstance(i.ts, int) for i in items)
    assert ITEM.format(id=9) not in http.calls


def test_hackernews_non_list_index_fails():
    http = FakeHttp(json_by_url={INDEX: {"error": "nope"}})
    with pytest.raises(SourceError):
        _hn(http).fetch(5)


def test_hackernews_index_transport_failure_fails():
    with pytest.raises(FetchError):
        _hn(FakeHttp()).fetch(5)


def test_hackernews_detail_failure_fails_whole_call():
    http = FakeHttp(json_by_url={INDEX: [1, 2], ITEM.format(id=1): {"title": "One"}})
    with pytest.raises(FetchError):
        _hn(http).fetch(2)


def test_hackernews_empty_index():
    assert _hn(FakeHttp(json_by_url={INDEX: []})).fetch(5) == []


def test_feed_source_derives_stable_ids(rss_doc):
    http = FakeHttp(text_by_url={"https://bbc.test/rss": rss_doc})
    src = FeedSource(http, name="bbc", url="https://bbc.test/rss")

    items = src.fetch(5)
    assert [i.id for i in items] == [
        f"bbc-{stable_id('g-1')}",
        f"bbc-{stable_id('https://news.example/2')}",
        f"bbc-{stable_id('g-4')}",
    ]
    assert items[0].title == "First story"
    assert items[2].url is None
    assert [i.id for i in src.fetch(5)] == [i.id for i in items]


def test_feed_source_respects_n(atom_doc):
    http = FakeHttp(text_by_url={"https://verge.test/rss": atom_doc})
    items = FeedSource(http, name="verge", url="https://verge.test/rss").fetch(1)
    assert len(items) == 1
    assert items[0].url == "https://tech.example/a"


def test_feed_source_transport_failure():
    with pytest.raises(FetchError):
        FeedSource(FakeHttp(), name="bbc", url="https://down.test").fetch(5)


def test_build_sources_from_settings():
    s = Settings(database_url="sqlite://", feeds={"bbc": "https://b", "verge": "https://v"})
    sources = build_sources(s, FakeHttp())
    assert [x.name for x in sources] == ["hackernews", "bbc", "verge"]
    assert isinstance(sources[0], HackerNewsSource)
    assert sources[2].url == "https://v"
