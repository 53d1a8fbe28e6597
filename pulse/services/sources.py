from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Protocol

from pulse.config.settings import Settings
from pulse.exceptions import SourceError
from pulse.models.schemas import IngestedItem
from pulse.services.feed_parser import parse_feed
from pulse.services.stable_id import stable_id

logger = logging.getLogger(__name__)

NO_TITLE = "(no title)"


class Fetcher(Protocol):
    def get_json(self, url: str) -> Any: ...

    def get_text(self, url: str) -> str: ...


def now_ms() -> int:
    return int(time.time() * 1000)


class Source:
    """One upstream origin; fetch(n) returns up to n normalized items or raises."""

    name: str

    def fetch(self, n: int) -> list[IngestedItem]:
        raise NotImplementedError


class HackerNewsSource(Source):
    def __init__(
        self,
        http: Fetcher,
        index_url: str,
        item_url: str,
        name: str = "hackernews",
        max_workers: int = 8,
    ) -> None:
        self.http = http
        self.index_url = index_url
        self.item_url = item_url
        self.name = name
        self.max_workers = max_workers

    def fetch_top_story_ids(self, limit: int) -> list[Any]:
        ids = self.http.get_json(self.index_url)
        if not isinstance(ids, list):
            raise SourceError(f"Expected a list of ids from {self.index_url}, got {type(ids).__name__}")
        return ids[:limit]

    def fetch_story(self, story_id: Any) -> dict | None:
        data = self.http.get_json(self.item_url.format(id=story_id))
        return data if isinstance(data, dict) else None

    def _to_item(self, story_id: Any, data: dict | None, ts: int) -> IngestedItem:
        data = data or {}
        return IngestedItem(
            id=f"{self.name}-{story_id}",
            title=data.get("title") or NO_TITLE,
            url=data.get("url") or None,
            source=self.name,
            ts=ts,
        )

    def fetch(self, n: int) -> list[IngestedItem]:
        ids = self.fetch_top_story_ids(n)
        if not ids:
            return []

        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(ids))) as ex:
            # map() keeps index order and re-raises the first failure
            stories = list(ex.map(self.fetch_story, ids))

        ts = now_ms()
        return [self._to_item(sid, data, ts) for sid, data in zip(ids, stories)]


class FeedSource(Source):
    def __init__(self, http: Fetcher, name: str, url: str) -> None:
        self.http = http
        self.name = name
        self.url = url

    def fetch(self, n: int) -> list[IngestedItem]:
        xml = self.http.get_text(self.url)
        entries = parse_feed(xml, n)

        ts = now_ms()
        return [
            IngestedItem(
                id=f"{self.name}-{stable_id(e.identifier or e.link or e.title)}",
                title=e.title,
                url=e.link,
                source=self.name,
                ts=ts,
            )
            for e in entries
        ]


def build_sources(settings: Settings, http: Fetcher) -> list[Source]:
    sources: list[Source] = [
        HackerNewsSource(
            http,
            index_url=settings.hn_index_url,
            item_url=settings.hn_item_url,
            max_workers=settings.fetch_max_workers,
        )
    ]
    for name, url in settings.feeds.items():
        sources.append(FeedSource(http, name=name, url=url))
    return sources
