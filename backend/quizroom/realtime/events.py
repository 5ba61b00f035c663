"""Inbound Socket.IO event payloads.

Each event has one frozen dataclass; ``parse`` validates the raw payload at the
transport boundary so the session only ever sees typed values.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..game.models import Question

CREATE_ROOM = "create-room"
JOIN_ROOM = "join-room"
LOAD_QUESTIONS = "load-questions"
LOAD_QUESTIONS_LEGACY = "send-multiple-questions"
START_QUIZ = "start-quiz"
ADVANCE_QUESTION = "advance-question"
ANSWER = "answer"
KICK_PLAYER = "kick-player"
END_QUIZ = "end-quiz"


class InvalidPayload(ValueError):
    pass


def _as_dict(data: Any) -> dict:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidPayload("payload must be an object")
    return data


def _room_code(payload: dict) -> str:
    raw = payload.get("roomCode")
    if not isinstance(raw, str) or not raw.strip():
        raise InvalidPayload("roomCode is required")
    # Room codes are case-sensitive.
    return raw.strip()


def _room_code_only(data: Any) -> str:
    # Older clients send the bare room code instead of an object.
    if isinstance(data, str):
        return _room_code({"roomCode": data})
    return _room_code(_as_dict(data))


@dataclass(frozen=True)
class CreateRoom:
    room_code: str
    max_players: int | None = None
    auto_advance: bool | None = None

    @classmethod
    def parse(cls, data: Any) -> "CreateRoom":
        payload = _as_dict(data)
        max_players = payload.get("maxPlayers")
        if max_players is not None:
            if isinstance(max_players, bool) or not isinstance(max_players, int) or max_players < 1:
                raise InvalidPayload("maxPlayers must be a positive integer")
        auto_advance = payload.get("autoAdvance")
        if auto_advance is not None and not isinstance(auto_advance, bool):
            raise InvalidPayload("autoAdvance must be a boolean")
        return cls(room_code=_room_code(payload), max_players=max_players, auto_advance=auto_advance)


@dataclass(frozen=True)
class JoinRoom:
    room_code: str
    name: str

    @classmethod
    def parse(cls, data: Any) -> "JoinRoom":
        payload = _as_dict(data)
        name = payload.get("name")
        if not isinstance(name, str) or not name.strip():
            raise InvalidPayload("name is required")
        return cls(room_code=_room_code(payload), name=name.strip())


def parse_question(raw: Any, default_time_limit: float) -> Question:
    if not isinstance(raw, dict):
        raise InvalidPayload("question must be an object")

    text = raw.get("text")
    if not isinstance(text, str) or not text.strip():
        raise InvalidPayload("question text is required")

    options = raw.get("options") or []
    if not isinstance(options, list) or not all(isinstance(o, str) for o in options):
        raise InvalidPayload("options must be a list of strings")

    correct = raw.get("correct")
    if correct is not None and not isinstance(correct, str):
        raise InvalidPayload("correct must be a string")
    correct = (correct or "").strip() or None

    time_limit = raw.get("timeLimit")
    if isinstance(time_limit, bool) or not isinstance(time_limit, (int, float)) or time_limit <= 0:
        time_limit = default_time_limit

    return Question(
        text=text.strip(),
        options=tuple(options),
        correct_option=correct,
        time_limit_sec=time_limit,
    )


@dataclass(frozen=True)
class LoadQuestions:
    room_code: str
    questions: tuple[Question, ...]

    @classmethod
    def parse(cls, data: Any, default_time_limit: float = 15) -> "LoadQuestions":
        payload = _as_dict(data)
        raw_questions = payload.get("questions")
        if not isinstance(raw_questions, list):
            raise InvalidPayload("questions must be a list")
        questions = tuple(parse_question(q, default_time_limit) for q in raw_questions)
        return cls(room_code=_room_code(payload), questions=questions)


@dataclass(frozen=True)
class StartQuiz:
    room_code: str

    @classmethod
    def parse(cls, data: Any) -> "StartQuiz":
        return cls(room_code=_room_code_only(data))


@dataclass(frozen=True)
class AdvanceQuestion:
    room_code: str

    @classmethod
    def parse(cls, data: Any) -> "AdvanceQuestion":
        return cls(room_code=_room_code_only(data))


@dataclass(frozen=True)
class EndQuiz:
    room_code: str

    @classmethod
    def parse(cls, data: Any) -> "EndQuiz":
        return cls(room_code=_room_code_only(data))


@dataclass(frozen=True)
class SubmitAnswer:
    room_code: str
    option: str

    @classmethod
    def parse(cls, data: Any) -> "SubmitAnswer":
        payload = _as_dict(data)
        option = payload.get("option")
        if not isinstance(option, str):
            raise InvalidPayload("option must be a string")
        return cls(room_code=_room_code(payload), option=option)


@dataclass(frozen=True)
class KickPlayer:
    room_code: str
    target: str

    @classmethod
    def parse(cls, data: Any) -> "KickPlayer":
        payload = _as_dict(data)
        target = payload.get("playerId", payload.get("targetId"))
        if not isinstance(target, str) or not target:
            raise InvalidPayload("playerId is required")
        return cls(room_code=_room_code(payload), target=target)
