from __future__ import annotations

from typing import Any

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from pulse.db.database import init_db
from pulse.exceptions import FetchError


class FakeHttp:
    """Canned responses keyed by URL; unknown URLs behave like a 404."""

    def __init__(self, json_by_url: dict[str, Any] | None = None, text_by_url: dict[str, str] | None = None):
        self.json_by_url = json_by_url or {}
        self.text_by_url = text_by_url or {}
        self.calls: list[str] = []

    def get_json(self, url: str) -> Any:
        self.calls.append(url)
        if url not in self.json_by_url:
            raise FetchError(f"HTTP 404 fetching {url}", url=url, status=404)
        return self.json_by_url[url]

    def get_text(self, url: str) -> str:
        self.calls.append(url)
        if url not in self.text_by_url:
            raise FetchError(f"HTTP 404 fetching {url}", url=url, status=404)
        return self.text_by_url[url]


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    init_db(eng)
    yield eng
    eng.dispose()


RSS_DOC = """<?xml version="1.0"?>
<rss version="2.0"><channel><title>World</title>
<item><title><![CDATA[First story]]></title><link>https://news.example/1</link><guid isPermaLink="false">g-1</guid></item>
<item><title>Second &amp; third</title><link>https://news.example/2</link></item>
<item><description>no title here</description><link>https://news.example/x</link></item>
<item><title>Fourth</title><guid>g-4</guid></item>
</channel></rss>
"""

ATOM_DOC = """<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom"><title>Tech</title>
<entry>
  <title type="html">Chips &lt;new&gt;</title>
  <link rel="alternate" type="text/html" href="https://tech.example/a"/>
  <link rel="replies" href="https://tech.example/a#comments"/>
  <id>tag:tech.example,2024:a</id>
</entry>
<entry>
  <title>Only href</title>
  <link href="https://tech.example/b"/>
</entry>
</feed>
"""


@pytest.fixture
def rss_doc() -> str:
    return RSS_DOC


@pytest.fixture
def atom_doc() -> str:
    return ATOM_DOC
