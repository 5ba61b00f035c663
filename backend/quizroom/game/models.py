from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping


class Phase(str, Enum):
    LOBBY = "lobby"
    QUESTION_ACTIVE = "question_active"
    QUESTION_LOCKED = "question_locked"
    # Between questions: the leaderboard is up and the next question waits for
    # its timer (auto-advance) or for the host (host-paced).
    AWAITING_ADVANCE = "awaiting_advance"
    FINISHED = "finished"


@dataclass
class Player:
    id: str
    name: str
    score: int = 0

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "score": self.score}


@dataclass(frozen=True)
class Question:
    text: str
    options: tuple[str, ...]
    # None never matches a submitted option.
    correct_option: str | None
    time_limit_sec: float

    def public_payload(self) -> dict:
        return {
            "text": self.text,
            "options": list(self.options),
            "timeLimit": self.time_limit_sec,
        }


@dataclass(frozen=True)
class SessionSettings:
    default_max_players: int = 10
    default_time_limit_sec: float = 15
    countdown_interval_sec: float = 1.0
    reveal_delay_sec: float = 2.5
    inter_question_delay_sec: float = 5.0
    final_leaderboard_delay_sec: float = 8.0
    leaderboard_top_n: int = 5
    auto_advance: bool = True
    notify_players_on_host_disconnect: bool = False

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "SessionSettings":
        defaults = cls()
        return cls(
            default_max_players=int(config.get("DEFAULT_MAX_PLAYERS", defaults.default_max_players)),
            default_time_limit_sec=float(config.get("DEFAULT_TIME_LIMIT_SEC", defaults.default_time_limit_sec)),
            countdown_interval_sec=float(config.get("COUNTDOWN_INTERVAL_SEC", defaults.countdown_interval_sec)),
            reveal_delay_sec=float(config.get("REVEAL_DELAY_SEC", defaults.reveal_delay_sec)),
            inter_question_delay_sec=float(
                config.get("INTER_QUESTION_DELAY_SEC", defaults.inter_question_delay_sec)
            ),
            final_leaderboard_delay_sec=float(
                config.get("FINAL_LEADERBOARD_DELAY_SEC", defaults.final_leaderboard_delay_sec)
            ),
            leaderboard_top_n=int(config.get("LEADERBOARD_TOP_N", defaults.leaderboard_top_n)),
            auto_advance=bool(config.get("AUTO_ADVANCE", defaults.auto_advance)),
            notify_players_on_host_disconnect=bool(
                config.get("NOTIFY_PLAYERS_ON_HOST_DISCONNECT", defaults.notify_players_on_host_disconnect)
            ),
        )
