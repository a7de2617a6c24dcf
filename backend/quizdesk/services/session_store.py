"""In-memory registry of live attempts for the HTTP layer."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable
from uuid import uuid4

from quizdesk.core.exceptions import NotFound
from quizdesk.core.models import AttemptResult
from quizdesk.services.attempt_session import AttemptSession

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class LiveAttempt:
    """A running (or finished but not yet forgotten) attempt.

    ``lock`` serializes requests against this one attempt; ``attempt_id`` and
    ``result`` are set once the attempt has been scored and persisted.
    """

    token: str
    session: AttemptSession
    quiz_title: str | None = None
    lock: threading.Lock = field(default_factory=threading.Lock)
    attempt_id: int | None = None
    result: AttemptResult | None = None


class SessionStore:
    """Maps opaque attempt tokens to live attempts."""

    def __init__(self, retention_seconds: int) -> None:
        self._retention = timedelta(seconds=retention_seconds)
        self._lock = threading.Lock()
        self._attempts: dict[str, LiveAttempt] = {}

    def add(self, session: AttemptSession, quiz_title: str | None = None) -> LiveAttempt:
        live = LiveAttempt(token=uuid4().hex, session=session, quiz_title=quiz_title)
        with self._lock:
            self._attempts[live.token] = live
        return live

    def get(self, token: str, user_id: int) -> LiveAttempt:
        """Return the attempt behind *token* if it belongs to *user_id*."""
        with self._lock:
            live = self._attempts.get(token)
        if live is None or live.session.user_id != user_id:
            raise NotFound("Attempt session not found", token=token)
        return live

    def purge(
        self,
        now: datetime,
        finalize: Callable[[LiveAttempt], None] | None = None,
    ) -> int:
        """Forget attempts whose deadline passed more than the retention window ago.

        Attempts that were never submitted are handed to *finalize* first.  If
        it raises, that attempt and any later ones stay in the store.
        """
        with self._lock:
            stale = [
                live
                for live in self._attempts.values()
                if now - live.session.deadline > self._retention
            ]

        unsubmitted = 0
        for live in stale:
            with live.lock:
                if live.result is None:
                    unsubmitted += 1
                    if finalize is not None:
                        finalize(live)
            with self._lock:
                self._attempts.pop(live.token, None)

        if unsubmitted:
            if finalize is None:
                logger.warning("Dropped %d attempts that were never submitted", unsubmitted)
            else:
                logger.info("Submitted %d stale attempts on behalf of their examinees", unsubmitted)
        if stale:
            logger.info("Purged %d stale attempt sessions", len(stale))
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._attempts)
