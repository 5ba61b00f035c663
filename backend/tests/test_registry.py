from quizroom.game.session import QuizSession


def test_create_is_idempotent_and_keeps_host(registry):
    first, created = registry.create("ABCD", "host-1", max_players=3)
    again, created_again = registry.create("ABCD", "host-2", max_players=8)

    assert created is True
    assert created_again is False
    assert again is first
    assert first.host_id == "host-1"
    assert first.max_players == 3


def test_codes_are_case_sensitive(registry):
    registry.create("abcd", "h1")
    assert registry.get("ABCD") is None
    assert isinstance(registry.get("abcd"), QuizSession)


def test_default_max_players(registry, settings):
    session, _ = registry.create("ROOM", "host")
    assert session.max_players == settings.default_max_players == 10


def test_delete(registry):
    registry.create("ROOM", "host")
    assert registry.delete("ROOM") is True
    assert registry.delete("ROOM") is False
    assert registry.get("ROOM") is None


def test_sessions_for_host_and_player(registry):
    one, _ = registry.create("ONE", "host-1")
    two, _ = registry.create("TWO", "host-2")
    one.join("ann", "Ann")

    assert registry.sessions_for("host-1") == [one]
    assert registry.sessions_for("ann") == [one]
    assert registry.sessions_for("host-2") == [two]
    assert registry.sessions_for("nobody") == []


def test_stale_close_leaves_recreated_room(registry):
    old, _ = registry.create("ROOM", "host-1")
    registry.delete("ROOM")
    new, _ = registry.create("ROOM", "host-2")

    old.end()

    assert registry.get("ROOM") is new
