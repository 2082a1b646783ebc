"""In-memory record of the sessions this process has handed out."""

import logging
import time
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Tracks issued session keys so a returning ``sessionId`` can be checked.

    Entries expire after ``ttl_seconds``. The registry is only touched from the
    event loop thread, so no locking is needed.
    """

    def __init__(self, ttl_seconds: int = 3600, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._issued: Dict[str, float] = {}

    def record(self, session_key: str) -> None:
        """Remember a newly established session"""
        self._purge_expired()
        self._issued[session_key] = self._clock() + self.ttl_seconds
        logger.debug("Tracking session, %d active", len(self._issued))

    def claim(self, session_key: Optional[str]) -> bool:
        """Remove an issued key and report whether it was still valid.

        Only the first caller for a given key gets True. Check and removal
        happen without yielding to the event loop.
        """
        if not session_key:
            return False
        expires_at = self._issued.pop(session_key, None)
        if expires_at is None:
            return False
        return expires_at > self._clock()

    def __len__(self) -> int:
        self._purge_expired()
        return len(self._issued)

    def _purge_expired(self) -> None:
        now = self._clock()
        expired = [key for key, expires_at in self._issued.items() if expires_at <= now]
        for key in expired:
            del self._issued[key]
