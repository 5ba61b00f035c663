from flask import current_app

from ..game.registry import RoomRegistry

REGISTRY_EXTENSION = "quizroom.registry"


def get_registry() -> RoomRegistry:
    return current_app.extensions[REGISTRY_EXTENSION]
