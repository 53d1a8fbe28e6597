from __future__ import annotations

import threading
from typing import Any

import requests

from pulse.exceptions import FetchError


class HttpClient:
    """
    Thin requests wrapper: non-2xx and network errors surface as FetchError.

    requests.Session isn't thread-safe, so every thread gets its own session.
    """

    def __init__(self, timeout: float = 20.0, user_agent: str = "pulse-ingest/1.0") -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self._local = threading.local()
        self._sessions: list[requests.Session] = []
        self._lock = threading.Lock()

    @property
    def session(self) -> requests.Session:
        s = getattr(self._local, "session", None)
        if s is None:
            s = requests.Session()
            s.headers.update({"User-Agent": self.user_agent})
            self._local.session = s
            with self._lock:
                self._sessions.append(s)
        return s

    def _get(self, url: str) -> requests.Response:
        try:
            r = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise FetchError(f"Request failed for {url}: {e}", url=url) from e

        if not r.ok:
            body = (r.text or "<no body>")[:200]
            raise FetchError(f"HTTP {r.status_code} fetching {url} - body: {body}", url=url, status=r.status_code)
        return r

    def get_json(self, url: str) -> Any:
        r = self._get(url)
        try:
            return r.json()
        except ValueError as e:
            raise FetchError(f"Invalid JSON from {url}", url=url, status=r.status_code) from e

    def get_text(self, url: str) -> str:
        return self._get(url).text

    def close(self) -> None:
        with self._lock:
            sessions, self._sessions = self._sessions, []
        for s in sessions:
            s.close()
        self._local = threading.local()
