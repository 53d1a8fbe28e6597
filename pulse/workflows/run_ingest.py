from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Sequence

from pulse.config.settings import Settings, get_settings
from pulse.db.database import create_store_engine, init_db
from pulse.models.schemas import IngestedItem, IngestSummary
from pulse.services.http_client import HttpClient
from pulse.services.sources import Source, build_sources
from pulse.services.writer import ItemWriter, WriteOutcome

logger = logging.getLogger(__name__)


class IngestionCoordinator:
    """
    One ingestion pass: every source is fetched concurrently, a failing source
    contributes nothing, then items are written one at a time.
    """

    def __init__(
        self,
        sources: Sequence[Source],
        writer: ItemWriter,
        fan_out: int = 5,
        max_workers: int | None = None,
    ) -> None:
        self.sources = list(sources)
        self.writer = writer
        self.fan_out = fan_out
        self.max_workers = max_workers or max(1, len(self.sources))

    def _collect(self) -> tuple[list[IngestedItem], dict[str, int], list[str]]:
        items: list[IngestedItem] = []
        per_source: dict[str, int] = {}
        failed: list[str] = []
        if not self.sources:
            return items, per_source, failed

        with ThreadPoolExecutor(max_workers=self.max_workers) as ex:
            futures = [(src.name, ex.submit(src.fetch, self.fan_out)) for src in self.sources]

            # wait on every future; one failure never cancels the rest
            for name, fu in futures:
                try:
                    pulled = fu.result()
                except Exception as e:
                    logger.error("%s failed: %s", name, e)
                    failed.append(name)
                    continue
                logger.info("%s pulled %d", name, len(pulled))
                per_source[name] = len(pulled)
                items.extend(pulled)

        return items, per_source, failed

    def run(self) -> IngestSummary:
        at = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
        logger.info("Multi-source run at %s; sources=%s", at, [s.name for s in self.sources])

        items, per_source, failed = self._collect()

        saved = 0
        for item in items:
            if self.writer.write(item) is WriteOutcome.INSERTED:
                saved += 1

        logger.info("Done. Pulled %d, saved %d.", len(items), saved)
        return IngestSummary(pulled=len(items), saved=saved, at=at, per_source=per_source, failed=failed)


def run_ingest(settings: Settings | None = None) -> IngestSummary:
    s = settings or get_settings()
    engine = create_store_engine(s.database_url)
    http = HttpClient(timeout=s.http_timeout, user_agent=s.user_agent)
    try:
        init_db(engine)
        coordinator = IngestionCoordinator(
            build_sources(s, http),
            ItemWriter(engine),
            fan_out=s.top_n,
        )
        return coordinator.run()
    except Exception as e:
        logger.error("Run failed: %s", e)
        raise
    finally:
        http.close()
        engine.dispose()
