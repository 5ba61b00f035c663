"""Per-room quiz state machine.

A session owns its roster, question set, score state and timers. Inbound
events arrive as method calls; outbound events leave through the injected
transport. User-facing refusals are returned as ``Rejection`` values, expected
races (duplicate answers, stale timers, events for a closed room) are dropped.
"""

from __future__ import annotations

import logging
from functools import partial
from threading import RLock
from typing import Callable, Protocol

from . import scoring
from .errors import Rejection, RejectionCode
from .models import Phase, Player, Question, SessionSettings
from .timers import Scheduler, TimerHandle, TimerSet

logger = logging.getLogger(__name__)


class Transport(Protocol):
    def broadcast(self, room_code: str, event: str, payload=None) -> None: ...

    def send(self, identity: str, event: str, payload=None) -> None: ...

    def disconnect(self, identity: str) -> None: ...

    def is_connected(self, identity: str) -> bool: ...


def normalize_name(name: str) -> str:
    return (name or "").strip().casefold()


class QuizSession:
    def __init__(
        self,
        code: str,
        host_id: str,
        *,
        transport: Transport,
        scheduler: Scheduler,
        settings: SessionSettings,
        max_players: int | None = None,
        auto_advance: bool | None = None,
        on_close: Callable[["QuizSession"], None] | None = None,
    ) -> None:
        self.code = code
        self.host_id = host_id
        self.max_players = max_players or settings.default_max_players
        self.auto_advance = settings.auto_advance if auto_advance is None else auto_advance

        self.players: list[Player] = []
        self.questions: list[Question] = []
        self.current_index = 0
        self.phase = Phase.LOBBY
        self.quiz_started = False
        self.question_started_at: float | None = None
        self.first_correct_answered = False
        self.answered: set[str] = set()

        self._transport = transport
        self._scheduler = scheduler
        self._settings = settings
        self._on_close = on_close
        self._timers = TimerSet()
        self._countdown: TimerHandle | None = None
        self._closed = False
        self._lock = RLock()

    # ---- queries ----

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def current_question(self) -> Question | None:
        if 0 <= self.current_index < len(self.questions):
            return self.questions[self.current_index]
        return None

    @property
    def pending_timers(self) -> int:
        return len(self._timers)

    def get_player(self, identity: str) -> Player | None:
        for p in self.players:
            if p.id == identity:
                return p
        return None

    def involves(self, identity: str) -> bool:
        with self._lock:
            return identity == self.host_id or self.get_player(identity) is not None

    def leaderboard(self, limit: int | None = None) -> list[Player]:
        """Players by descending score; ties keep join order."""
        with self._lock:
            ranked = sorted(self.players, key=lambda p: -p.score)
            if limit is not None:
                ranked = ranked[:limit]
            return ranked

    def public_state(self) -> dict:
        with self._lock:
            return {
                "code": self.code,
                "phase": self.phase.value,
                "quizStarted": self.quiz_started,
                "autoAdvance": self.auto_advance,
                "currentIndex": self.current_index,
                "questionCount": len(self.questions),
                "maxPlayers": self.max_players,
                "players": [p.to_dict() for p in self.players],
            }

    # ---- inbound events ----

    def join(self, identity: str, name: str) -> Rejection | None:
        with self._lock:
            if self._closed:
                return Rejection.of(RejectionCode.ROOM_NOT_FOUND)
            if identity == self.host_id:
                return Rejection.of(RejectionCode.HOST_CANNOT_JOIN)

            self._prune_disconnected()

            if self.get_player(identity) is not None:
                self._broadcast_lobby()
                return None
            if len(self.players) >= self.max_players:
                return Rejection.of(RejectionCode.ROOM_FULL)

            wanted = normalize_name(name)
            if any(normalize_name(p.name) == wanted for p in self.players):
                return Rejection.of(RejectionCode.DUPLICATE_NAME)

            self.players.append(Player(id=identity, name=name.strip()))
            logger.info("%s joined room %s", name.strip(), self.code)
            self._broadcast_lobby()
            return None

    def load_questions(self, questions: list[Question]) -> Rejection | None:
        with self._lock:
            if self._closed:
                return Rejection.of(RejectionCode.ROOM_NOT_FOUND)
            if self.quiz_started:
                return Rejection.of(RejectionCode.QUIZ_STARTED)

            self.questions = list(questions)
            self.current_index = 0
            logger.info("room %s loaded %d questions", self.code, len(self.questions))
            return None

    def start(self) -> Rejection | None:
        with self._lock:
            if self._closed:
                return Rejection.of(RejectionCode.ROOM_NOT_FOUND)
            if self.quiz_started:
                return Rejection.of(RejectionCode.QUIZ_STARTED)
            if not self.questions:
                return Rejection.of(RejectionCode.NO_QUESTIONS)

            self.quiz_started = True
            self.current_index = 0
            if self.auto_advance:
                self._begin_question()
            else:
                self.phase = Phase.AWAITING_ADVANCE
                self._transport.broadcast(
                    self.code, "quiz-started", {"questionCount": len(self.questions)}
                )
                logger.info("room %s started, waiting for host to advance", self.code)
            return None

    def advance(self) -> Rejection | None:
        with self._lock:
            if self._closed:
                return Rejection.of(RejectionCode.ROOM_NOT_FOUND)
            if not self.quiz_started:
                return Rejection.of(RejectionCode.QUIZ_NOT_STARTED)
            if self.phase is not Phase.AWAITING_ADVANCE:
                return Rejection.of(RejectionCode.QUESTION_IN_PROGRESS)

            self._timers.cancel_all()
            if self.current_index >= len(self.questions):
                self._finish()
            else:
                self._begin_question()
            return None

    def answer(self, identity: str, option: str) -> None:
        with self._lock:
            if self._closed or self.phase is not Phase.QUESTION_ACTIVE:
                return

            player = self.get_player(identity)
            question = self.current_question
            if player is None or question is None or identity in self.answered:
                return

            self.answered.add(identity)

            if scoring.is_correct(option, question.correct_option):
                elapsed = self._scheduler.now() - (self.question_started_at or 0.0)
                remaining = question.time_limit_sec - elapsed
                points = scoring.score(
                    not self.first_correct_answered, remaining, question.time_limit_sec
                )
                self.first_correct_answered = True
                player.score += points

            if len(self.answered) == len(self.players):
                self._lock_question(self.current_index, reason="all-answered")

    def kick(self, issuer: str, target: str) -> Rejection | None:
        with self._lock:
            if self._closed:
                return Rejection.of(RejectionCode.ROOM_NOT_FOUND)
            if issuer != self.host_id:
                return Rejection.of(RejectionCode.ONLY_HOST)

            player = self.get_player(target)
            if player is None:
                return None

            self._remove_player(target)
            logger.info("host kicked %s from room %s", player.name, self.code)
            self._broadcast_lobby()
            self._transport.send(target, "kicked")
            self._transport.disconnect(target)
            return None

    def end(self) -> None:
        with self._lock:
            if self._closed:
                return
            logger.info("room %s ended by request", self.code)
            self._finish()

    def disconnect(self, identity: str) -> None:
        with self._lock:
            if self._closed:
                return

            if identity == self.host_id:
                logger.info("host disconnected, deleting room %s", self.code)
                if self._settings.notify_players_on_host_disconnect:
                    self._transport.broadcast(
                        self.code, "room-closed", {"reason": "host-disconnected"}
                    )
                self._close()
                return

            if self.get_player(identity) is None:
                return

            # Never locks the question here; the deadline still resolves it.
            self._remove_player(identity)
            self._broadcast_lobby()

    # ---- transitions ----

    def _begin_question(self) -> None:
        self._timers.cancel_all()
        question = self.questions[self.current_index]
        index = self.current_index

        self.answered = set()
        self.first_correct_answered = False
        self.question_started_at = self._scheduler.now()
        self.phase = Phase.QUESTION_ACTIVE

        self._transport.broadcast(self.code, "question", question.public_payload())
        logger.info("room %s Q%d: %s", self.code, index + 1, question.text)

        self._countdown = self._timers.add(
            self._scheduler.call_every(
                self._settings.countdown_interval_sec, partial(self._on_countdown_tick, index)
            )
        )
        self._timers.add(
            self._scheduler.call_later(question.time_limit_sec, partial(self._on_deadline, index))
        )

    def _lock_question(self, index: int, reason: str) -> bool:
        if self._closed or self.phase is not Phase.QUESTION_ACTIVE or self.current_index != index:
            return False

        self._timers.cancel_all()
        self._countdown = None
        self.phase = Phase.QUESTION_LOCKED
        question = self.questions[index]
        self._transport.broadcast(self.code, "all-answered", {"correct": question.correct_option})
        logger.info("room %s Q%d locked (%s)", self.code, index + 1, reason)

        self._timers.add(
            self._scheduler.call_later(
                self._settings.reveal_delay_sec, partial(self._on_reveal_elapsed, index)
            )
        )
        return True

    def _end_question(self) -> None:
        self._transport.broadcast(self.code, "question-ended")
        self._transport.broadcast(
            self.code, "leaderboard", [p.to_dict() for p in self.leaderboard()]
        )

        self.current_index += 1
        self.phase = Phase.AWAITING_ADVANCE

        if self.current_index >= len(self.questions):
            self._timers.add(
                self._scheduler.call_later(
                    self._settings.final_leaderboard_delay_sec,
                    partial(self._on_advance_due, self.current_index),
                )
            )
        elif self.auto_advance:
            self._timers.add(
                self._scheduler.call_later(
                    self._settings.inter_question_delay_sec,
                    partial(self._on_advance_due, self.current_index),
                )
            )

    def _finish(self) -> None:
        self._timers.cancel_all()
        self.phase = Phase.FINISHED
        top = self.leaderboard(self._settings.leaderboard_top_n)
        self._transport.broadcast(self.code, "final-leaderboard", [p.to_dict() for p in top])
        self._transport.broadcast(self.code, "quiz-end")
        logger.info("quiz ended for room %s", self.code)
        self._close()

    def _close(self) -> None:
        self._timers.cancel_all()
        self._countdown = None
        self._closed = True
        if self.phase is not Phase.FINISHED:
            self.phase = Phase.FINISHED
        if self._on_close is not None:
            self._on_close(self)

    # ---- timer callbacks ----

    def _on_countdown_tick(self, index: int) -> None:
        with self._lock:
            if self._closed or self.phase is not Phase.QUESTION_ACTIVE or self.current_index != index:
                return
            question = self.questions[index]
            elapsed = self._scheduler.now() - (self.question_started_at or 0.0)
            seconds_left = max(0, round(question.time_limit_sec - elapsed))
            self._transport.broadcast(self.code, "time-left", seconds_left)
            if seconds_left <= 0 and self._countdown is not None:
                self._countdown.cancel()
                self._countdown = None

    def _on_deadline(self, index: int) -> None:
        with self._lock:
            self._lock_question(index, reason="deadline")

    def _on_reveal_elapsed(self, index: int) -> None:
        with self._lock:
            if self._closed or self.phase is not Phase.QUESTION_LOCKED or self.current_index != index:
                return
            self._end_question()

    def _on_advance_due(self, index: int) -> None:
        with self._lock:
            if self._closed or self.phase is not Phase.AWAITING_ADVANCE or self.current_index != index:
                return
            if self.current_index >= len(self.questions):
                self._finish()
            else:
                self._begin_question()

    # ---- helpers ----

    def _remove_player(self, identity: str) -> None:
        self.players = [p for p in self.players if p.id != identity]
        self.answered.discard(identity)

    def _prune_disconnected(self) -> None:
        live = [p for p in self.players if self._transport.is_connected(p.id)]
        if len(live) != len(self.players):
            self.players = live
            self.answered &= {p.id for p in live}

    def _broadcast_lobby(self) -> None:
        self._transport.broadcast(
            self.code,
            "lobby-update",
            {"players": [p.to_dict() for p in self.players], "maxPlayers": self.max_players},
        )
