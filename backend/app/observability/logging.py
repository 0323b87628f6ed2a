"""
Logging setup and structured event helper.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

EVENT_LOGGER_NAME = "mindcase.events"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_event_logger = logging.getLogger(EVENT_LOGGER_NAME)


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    # pymongo heartbeats are noise at INFO
    logging.getLogger("pymongo").setLevel(logging.WARNING)


def log_event(event: str, level: int = logging.INFO, **fields: Any) -> None:
    """Emit one JSON object describing `event` on the events logger."""
    payload = {"event": event, "ts": datetime.now(timezone.utc).isoformat()}
    payload.update(fields)
    _event_logger.log(level, json.dumps(payload, default=str, ensure_ascii=False))
