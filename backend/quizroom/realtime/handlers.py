from __future__ import annotations

import logging

from flask import request
from flask_socketio import SocketIO, emit, join_room, leave_room

from ..game.errors import Rejection, RejectionCode
from ..game.registry import RoomRegistry
from . import events

logger = logging.getLogger(__name__)


def _reject(rejection: Rejection) -> dict:
    logger.info("rejected %s for %s: %s", request.sid, rejection.code.value, rejection.message)
    emit(rejection.event, rejection.to_payload(), to=request.sid)
    return {"ok": False, "error": rejection.code.value}


def _invalid(exc: events.InvalidPayload) -> dict:
    return _reject(Rejection.of(RejectionCode.INVALID_PAYLOAD, str(exc)))


def _result(rejection: Rejection | None) -> dict:
    if rejection is not None:
        return _reject(rejection)
    return {"ok": True}


def register_socketio_handlers(socketio: SocketIO, registry: RoomRegistry) -> None:
    @socketio.on("connect")
    def on_connect(auth=None):
        logger.info("connected: %s", request.sid)

    @socketio.on(events.CREATE_ROOM)
    def create_room(data):
        try:
            event = events.CreateRoom.parse(data)
        except events.InvalidPayload as exc:
            return _invalid(exc)

        registry.create(
            event.room_code,
            request.sid,
            max_players=event.max_players,
            auto_advance=event.auto_advance,
        )
        join_room(event.room_code)
        emit("room-created", event.room_code, to=request.sid)
        return {"ok": True}

    @socketio.on(events.JOIN_ROOM)
    def join(data):
        try:
            event = events.JoinRoom.parse(data)
        except events.InvalidPayload as exc:
            return _invalid(exc)

        session = registry.get(event.room_code)
        if not session:
            return _reject(Rejection.of(RejectionCode.ROOM_NOT_FOUND))

        already_subscribed = session.involves(request.sid)
        # Subscribe first so the joiner receives its own lobby-update.
        join_room(event.room_code)
        rejection = session.join(request.sid, event.name)
        if rejection is not None:
            if not already_subscribed:
                leave_room(event.room_code)
            return _reject(rejection)
        return {"ok": True}

    def _load_questions(data):
        try:
            event = events.LoadQuestions.parse(
                data, default_time_limit=registry.settings.default_time_limit_sec
            )
        except events.InvalidPayload as exc:
            return _invalid(exc)

        session = registry.get(event.room_code)
        if not session:
            return None
        return _result(session.load_questions(list(event.questions)))

    socketio.on_event(events.LOAD_QUESTIONS, _load_questions)
    socketio.on_event(events.LOAD_QUESTIONS_LEGACY, _load_questions)

    @socketio.on(events.START_QUIZ)
    def start_quiz(data):
        try:
            event = events.StartQuiz.parse(data)
        except events.InvalidPayload as exc:
            return _invalid(exc)

        session = registry.get(event.room_code)
        if not session:
            return None
        return _result(session.start())

    @socketio.on(events.ADVANCE_QUESTION)
    def advance_question(data):
        try:
            event = events.AdvanceQuestion.parse(data)
        except events.InvalidPayload as exc:
            return _invalid(exc)

        session = registry.get(event.room_code)
        if not session:
            return None
        return _result(session.advance())

    @socketio.on(events.ANSWER)
    def answer(data):
        try:
            event = events.SubmitAnswer.parse(data)
        except events.InvalidPayload:
            return None

        session = registry.get(event.room_code)
        if not session:
            return None
        session.answer(request.sid, event.option)
        return {"ok": True}

    @socketio.on(events.KICK_PLAYER)
    def kick_player(data):
        try:
            event = events.KickPlayer.parse(data)
        except events.InvalidPayload as exc:
            return _invalid(exc)

        session = registry.get(event.room_code)
        if not session:
            return None
        return _result(session.kick(request.sid, event.target))

    @socketio.on(events.END_QUIZ)
    def end_quiz(data):
        try:
            event = events.EndQuiz.parse(data)
        except events.InvalidPayload as exc:
            return _invalid(exc)

        session = registry.get(event.room_code)
        if not session:
            return None
        session.end()
        return {"ok": True}

    @socketio.on("disconnect")
    def on_disconnect(reason=None):
        sid = request.sid
        for session in registry.sessions_for(sid):
            session.disconnect(sid)
        logger.info("disconnected: %s", sid)
