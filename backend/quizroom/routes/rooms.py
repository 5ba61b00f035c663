from __future__ import annotations

from flask import Blueprint, jsonify

from . import get_registry

bp = Blueprint("rooms", __name__)


@bp.get("/rooms")
def list_rooms():
    rooms = []
    for session in get_registry().list_rooms():
        state = session.public_state()
        rooms.append(
            {
                "code": state["code"],
                "phase": state["phase"],
                "playerCount": len(state["players"]),
                "maxPlayers": state["maxPlayers"],
            }
        )
    return jsonify({"rooms": rooms})


@bp.get("/rooms/<code>")
def get_room(code: str):
    session = get_registry().get(code)
    if not session:
        return jsonify({"error": "room_not_found"}), 404
    return jsonify(session.public_state())
