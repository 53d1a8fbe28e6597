from __future__ import annotations

import logging
from pathlib import Path

from pulse.config.settings import Settings, get_settings


def setup_logging(settings: Settings | None = None) -> None:
    s = settings or get_settings()
    log_path = getattr(s, "log_file", "logs/run.log")

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_path:
        Path(log_path).parent.mkdir(parents=True, exist_ok=True)
        handlers.insert(0, logging.FileHandler(log_path, encoding="utf-8"))

    logging.basicConfig(
        level=getattr(logging, s.log_level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(message)s",
        handlers=handlers,
    )
