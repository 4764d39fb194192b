"""
Subscriber list — e-mail addresses that receive storm alerts.

Persisted as a JSON array in a single file:

    [{"email": "a@example.com", "subscribed_at": "2026-10-19T12:00:00+00:00"}]

A missing or unreadable file is an empty list. The async variants run the
file I/O in a worker thread; a per-store lock serializes read-modify-write.
"""

import asyncio
import json
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import structlog
from pydantic import BaseModel, ValidationError

logger = structlog.get_logger(__name__)


class Subscriber(BaseModel):
    email: str
    subscribed_at: Optional[str] = None


class SubscriberStore:
    """JSON-file backed subscriber list."""

    def __init__(self, path: str | Path):
        self._path = Path(path)
        self._write_lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def get_subscribers(self) -> list[Subscriber]:
        """All subscribers, in subscription order."""
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return []
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("subscribers_file_unreadable", path=str(self._path), error=str(e))
            return []

        subscribers: list[Subscriber] = []
        for item in raw if isinstance(raw, list) else []:
            try:
                subscribers.append(Subscriber.model_validate(item))
            except ValidationError:
                logger.warning("subscriber_entry_skipped", entry=item)
        return subscribers

    def subscribe(self, email: str) -> bool:
        """
        Add an address.

        Returns False when the address is already subscribed (compared
        case-insensitively).
        """
        with self._write_lock:
            subscribers = self.get_subscribers()
            if any(s.email.lower() == email.lower() for s in subscribers):
                return False

            subscribers.append(
                Subscriber(email=email, subscribed_at=datetime.now(timezone.utc).isoformat())
            )
            self._write(subscribers)
        logger.info("subscriber_added", email=email, total=len(subscribers))
        return True

    async def aget_subscribers(self) -> list[Subscriber]:
        return await asyncio.to_thread(self.get_subscribers)

    async def asubscribe(self, email: str) -> bool:
        return await asyncio.to_thread(self.subscribe, email)

    def _write(self, subscribers: list[Subscriber]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(
            json.dumps([s.model_dump() for s in subscribers], indent=2),
            encoding="utf-8",
        )
        tmp.replace(self._path)
