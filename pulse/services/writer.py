from __future__ import annotations

import enum
import logging

from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from pulse.db.models import Item
from pulse.models.schemas import IngestedItem

logger = logging.getLogger(__name__)


class WriteOutcome(str, enum.Enum):
    INSERTED = "inserted"
    DUPLICATE = "duplicate"


class ItemWriter:
    """
    Insert-if-absent on Item.id. The primary key constraint decides; there is no
    read-before-write, so overlapping runs racing on one id see one INSERTED and
    the rest DUPLICATE.
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def write(self, item: IngestedItem) -> WriteOutcome:
        with Session(self.engine) as session:
            session.add(
                Item(
                    id=item.id,
                    title=item.title,
                    url=item.url,
                    source=item.source,
                    ts=item.ts,
                )
            )
            try:
                session.commit()
            except IntegrityError:
                session.rollback()
                # only an id clash is a duplicate; NOT NULL and friends are real failures
                if session.get(Item, item.id) is None:
                    raise
                logger.debug("Skipped (duplicate): %s", item.id)
                return WriteOutcome.DUPLICATE

        logger.debug("Saved: %s", item.id)
        return WriteOutcome.INSERTED
