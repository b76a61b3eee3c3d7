"""
Structured logging setup and the in-memory log buffer
"""

import logging
import sys
from collections import deque
from threading import Lock
from typing import Any, Dict, List, Optional

import structlog

LEVELS = ("debug", "info", "warning", "error", "critical")


class LogBuffer:
    """Capacity-bounded ring buffer of rendered log events.

    The oldest entry is evicted once ``capacity`` entries are held. One
    instance is created by the application and handed to whatever needs it;
    it is also usable directly as a structlog processor.
    """

    def __init__(self, capacity: int = 1000):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._entries: deque = deque(maxlen=capacity)
        self._lock = Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def __call__(self, logger, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
        entry = {key: _jsonable(value) for key, value in event_dict.items()}
        entry.setdefault("level", method_name)
        self.append(entry)
        return event_dict

    def append(self, entry: Dict[str, Any]) -> None:
        with self._lock:
            self._entries.append(entry)

    def entries(
        self,
        level: Optional[str] = None,
        limit: Optional[int] = None,
        user_id: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Return buffered entries, oldest first.

        ``user_id`` keeps only events tagged with that user; ``level`` keeps
        entries at or above that severity; ``limit`` keeps only the most
        recent ``limit`` of them.
        """
        with self._lock:
            snapshot = list(self._entries)
        if user_id is not None:
            snapshot = [e for e in snapshot if e.get("user_id") == user_id]
        if level:
            threshold = LEVELS.index(level.lower())
            snapshot = [e for e in snapshot if _severity(e.get("level")) >= threshold]
        if limit is not None:
            snapshot = snapshot[-limit:] if limit > 0 else []
        return snapshot

    def clear(self, user_id: Optional[int] = None) -> None:
        """Drop every entry, or only those tagged with ``user_id``"""
        with self._lock:
            if user_id is None:
                self._entries.clear()
            else:
                kept = [e for e in self._entries if e.get("user_id") != user_id]
                self._entries.clear()
                self._entries.extend(kept)


def _severity(level: Optional[str]) -> int:
    if level == "exception":
        level = "error"
    try:
        return LEVELS.index(level)
    except ValueError:
        return 0


def _jsonable(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


def configure_logging(log_level: str = "INFO", buffer: Optional[LogBuffer] = None) -> None:
    """Configure structlog for JSON output, optionally teeing into ``buffer``"""
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level.upper())
    logging.getLogger().setLevel(log_level.upper())

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    if buffer is not None:
        processors.append(buffer)
    processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )
