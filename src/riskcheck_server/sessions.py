"""In-memory registry of respondent sessions.

Each session pairs a :class:`QueueEngine` built over the question pool as
it was when the session started with the session's mutable state.  Edits
made in the editor afterwards do not affect running sessions.

Transitions are synchronous and run on the event loop thread, so one
request's transition never interleaves with another's.
"""

from __future__ import annotations

import logging
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime, timezone

from riskcheck_rulesets.engine import QueueEngine
from riskcheck_rulesets.models.session import SessionInfo, SessionState

logger = logging.getLogger(__name__)


@dataclass
class ActiveSession:
    """One respondent's engine and state."""

    session_id: str
    engine: QueueEngine
    state: SessionState
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def info(self) -> SessionInfo:
        return SessionInfo(
            session_id=self.session_id,
            score=self.state.score,
            complete=self.state.complete,
            current_index=self.state.current_index,
            queue_length=len(self.state.queue),
            created_at=self.created_at,
        )


class SessionRegistry:
    """Bounded mapping session id -> :class:`ActiveSession`.

    When ``max_sessions`` is reached the oldest session is evicted.
    """

    def __init__(self, max_sessions: int = 1000) -> None:
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        self._max = max_sessions
        self._sessions: OrderedDict[str, ActiveSession] = OrderedDict()

    def create(self, engine: QueueEngine) -> ActiveSession:
        """Start a new session on ``engine`` and register it."""
        while len(self._sessions) >= self._max:
            evicted_id, _ = self._sessions.popitem(last=False)
            logger.info("Session registry full, evicted session %s", evicted_id)

        session = ActiveSession(
            session_id=uuid.uuid4().hex,
            engine=engine,
            state=engine.start(),
        )
        self._sessions[session.session_id] = session
        logger.info("Started session %s (queue=%d)", session.session_id, len(session.state.queue))
        return session

    def get(self, session_id: str) -> ActiveSession:
        """Return the session or raise ``ValueError`` if unknown."""
        session = self._sessions.get(session_id)
        if session is None:
            raise ValueError(f"Session not found: session_id={session_id}")
        return session

    def discard(self, session_id: str) -> None:
        """Remove a session; raises ``ValueError`` if unknown."""
        if self._sessions.pop(session_id, None) is None:
            raise ValueError(f"Session not found: session_id={session_id}")
        logger.info("Discarded session %s", session_id)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions
