from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class RejectionCode(str, Enum):
    ROOM_NOT_FOUND = "room_not_found"
    ROOM_FULL = "room_full"
    DUPLICATE_NAME = "duplicate_name"
    HOST_CANNOT_JOIN = "host_cannot_join"
    ONLY_HOST = "only_host"
    NO_QUESTIONS = "no_questions"
    QUIZ_STARTED = "quiz_started"
    QUIZ_NOT_STARTED = "quiz_not_started"
    QUESTION_IN_PROGRESS = "question_in_progress"
    INVALID_PAYLOAD = "invalid_payload"


_MESSAGES = {
    RejectionCode.ROOM_NOT_FOUND: "Room does not exist.",
    RejectionCode.ROOM_FULL: "Room is full.",
    RejectionCode.DUPLICATE_NAME: "Name already taken.",
    RejectionCode.HOST_CANNOT_JOIN: "The host cannot join as a player.",
    RejectionCode.ONLY_HOST: "Only the host can do that.",
    RejectionCode.NO_QUESTIONS: "No questions loaded.",
    RejectionCode.QUIZ_STARTED: "The quiz has already started.",
    RejectionCode.QUIZ_NOT_STARTED: "The quiz has not started.",
    RejectionCode.QUESTION_IN_PROGRESS: "A question is still in progress.",
    RejectionCode.INVALID_PAYLOAD: "Invalid payload.",
}


@dataclass(frozen=True)
class Rejection:
    """A user-facing refusal, reported to the originating connection only."""

    code: RejectionCode
    message: str = ""

    @classmethod
    def of(cls, code: RejectionCode, message: str | None = None) -> "Rejection":
        return cls(code=code, message=message or _MESSAGES[code])

    @property
    def event(self) -> str:
        if self.code is RejectionCode.ROOM_FULL:
            return "room-full"
        return "room-error"

    def to_payload(self) -> dict:
        return {"message": self.message, "error": self.code.value}
