from dotenv import load_dotenv
from pydantic import BaseModel, Field
import os

load_dotenv()

DEFAULT_FEEDS = "bbc=http://feeds.bbci.co.uk/news/world/rss.xml,verge=https://www.theverge.com/rss/index.xml"


def _to_int(v: str | None, default: int) -> int:
    if v is None or not v.strip():
        return default
    return int(v.strip())


def _to_float(v: str | None, default: float) -> float:
    if v is None or not v.strip():
        return default
    return float(v.strip())


def _to_list(v: str | None) -> list[str]:
    if v is None or not v.strip():
        return []
    return [x.strip() for x in v.split(",") if x.strip()]


def _to_feeds(v: str | None) -> dict[str, str]:
    """
    Parse "name=url,name=url" into an ordered mapping.
    """
    feeds: dict[str, str] = {}
    for pair in _to_list(v):
        name, sep, url = pair.partition("=")
        if not sep or not name.strip() or not url.strip():
            raise ValueError(f"Invalid FEEDS entry (expected name=url): {pair!r}")
        feeds[name.strip().lower()] = url.strip()
    return feeds


class Settings(BaseModel):
    # store target; empty means "not configured"
    database_url: str = Field(default="")

    log_level: str = Field(default="INFO")
    log_file: str = Field(default="logs/run.log")

    top_n: int = Field(default=5, ge=1)

    hn_index_url: str = Field(default="https://hacker-news.firebaseio.com/v0/topstories.json")
    hn_item_url: str = Field(default="https://hacker-news.firebaseio.com/v0/item/{id}.json")

    feeds: dict[str, str] = Field(default_factory=lambda: _to_feeds(DEFAULT_FEEDS))

    http_timeout: float = Field(default=20.0)
    user_agent: str = Field(default="pulse-ingest/1.0")
    fetch_max_workers: int = Field(default=8, ge=1)

    @property
    def source_names(self) -> list[str]:
        return ["hackernews", *self.feeds.keys()]


_settings: Settings | None = None


def load_settings() -> Settings:
    """Build a fresh Settings from the current environment."""
    return Settings(
        database_url=os.getenv("DATABASE_URL", "").strip(),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_file=os.getenv("LOG_FILE", "logs/run.log"),
        top_n=_to_int(os.getenv("TOP_N"), 5),
        hn_index_url=os.getenv("HN_INDEX_URL", "https://hacker-news.firebaseio.com/v0/topstories.json"),
        hn_item_url=os.getenv("HN_ITEM_URL", "https://hacker-news.firebaseio.com/v0/item/{id}.json"),
        feeds=_to_feeds(os.getenv("FEEDS", DEFAULT_FEEDS)),
        http_timeout=_to_float(os.getenv("HTTP_TIMEOUT"), 20.0),
        user_agent=os.getenv("USER_AGENT", "pulse-ingest/1.0"),
        fetch_max_workers=_to_int(os.getenv("FETCH_MAX_WORKERS"), 8),
    )


def get_settings() -> Settings:
    global _settings
    if _settings is not None:
        return _settings

    _settings = load_settings()
    return _settings
