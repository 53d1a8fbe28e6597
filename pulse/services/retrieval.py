from __future__ import annotations

import logging
from typing import Any, Mapping

from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from pulse.db.models import Item
from pulse.models.schemas import IngestedItem

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 20
MAX_LIMIT = 50


def clamp_limit(raw: Any = None) -> int:
    """
    Coerce a caller-supplied limit into [1, MAX_LIMIT]; missing or unparseable -> DEFAULT_LIMIT.
    """
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return DEFAULT_LIMIT
    try:
        n = int(float(raw))
    except (TypeError, ValueError, OverflowError):
        return DEFAULT_LIMIT
    return max(1, min(n, MAX_LIMIT))


def _to_schema(row: Item) -> IngestedItem:
    return IngestedItem(id=row.id, title=row.title, url=row.url, source=row.source, ts=row.ts)


class ItemRepository:
    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def _by_source(self, session: Session, source: str, limit: int) -> list[Item]:
        # served by ix_items_source_ts, already in order
        stmt = (
            select(Item)
            .where(Item.source == source)
            .order_by(Item.ts.desc().nullslast())
            .limit(limit)
        )
        return list(session.scalars(stmt))

    def _all_sorted(self, session: Session, limit: int) -> list[Item]:
        # No global ts index is assumed: full scan, sort in memory.
        rows = list(session.scalars(select(Item)))
        rows.sort(key=lambda r: r.ts or 0, reverse=True)
        return rows[:limit]

    def list_recent(self, limit: Any = None, source: str | None = None) -> list[IngestedItem]:
        n = clamp_limit(limit)
        with Session(self.engine) as session:
            if source:
                rows = self._by_source(session, source, n)
            else:
                rows = self._all_sorted(session, n)
            return [_to_schema(r) for r in rows]


def get_items(params: Mapping[str, Any] | None, repository: ItemRepository) -> tuple[int, Any]:
    """
    Transport-neutral retrieval entry point: (status, body).
    """
    qs = params or {}
    try:
        items = repository.list_recent(limit=qs.get("limit"), source=qs.get("source") or None)
        return 200, [it.model_dump() for it in items]
    except Exception:
        logger.exception("get-items failed")
        return 500, {"error": "server_error"}
