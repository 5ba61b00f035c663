from __future__ import annotations

import logging
from threading import RLock

from .models import SessionSettings
from .session import QuizSession, Transport
from .timers import Scheduler

logger = logging.getLogger(__name__)


class RoomRegistry:
    """Room code -> live session. Owned by the app, never a module global."""

    def __init__(self, transport: Transport, scheduler: Scheduler, settings: SessionSettings) -> None:
        self._transport = transport
        self._scheduler = scheduler
        self._settings = settings
        self._lock = RLock()
        self._rooms: dict[str, QuizSession] = {}

    @property
    def settings(self) -> SessionSettings:
        return self._settings

    def create(
        self,
        code: str,
        host_id: str,
        max_players: int | None = None,
        auto_advance: bool | None = None,
    ) -> tuple[QuizSession, bool]:
        """Return ``(session, created)``. An existing code keeps its host and settings."""
        with self._lock:
            existing = self._rooms.get(code)
            if existing is not None:
                logger.info("room %s already exists, create is a no-op", code)
                return existing, False

            session = QuizSession(
                code,
                host_id,
                transport=self._transport,
                scheduler=self._scheduler,
                settings=self._settings,
                max_players=max_players,
                auto_advance=auto_advance,
                on_close=self._on_session_closed,
            )
            self._rooms[code] = session
            logger.info("room %s created with max %d players", code, session.max_players)
            return session, True

    def get(self, code: str) -> QuizSession | None:
        with self._lock:
            return self._rooms.get(code)

    def delete(self, code: str) -> bool:
        with self._lock:
            if code in self._rooms:
                del self._rooms[code]
                logger.info("room %s deleted", code)
                return True
            return False

    def list_rooms(self) -> list[QuizSession]:
        with self._lock:
            return list(self._rooms.values())

    def sessions_for(self, identity: str) -> list[QuizSession]:
        return [s for s in self.list_rooms() if s.involves(identity)]

    def __len__(self) -> int:
        with self._lock:
            return len(self._rooms)

    def __contains__(self, code: str) -> bool:
        with self._lock:
            return code in self._rooms

    def _on_session_closed(self, session: QuizSession) -> None:
        with self._lock:
            # A recreated room under the same code must survive a stale close.
            if self._rooms.get(session.code) is session:
                del self._rooms[session.code]
                logger.info("room %s deleted", session.code)
