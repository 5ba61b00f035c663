import pytest

from quizroom.game import scoring


def test_first_correct_is_flat_maximum():
    assert scoring.score(True, 0, 20) == 1000
    assert scoring.score(True, 19.5, 20) == 1000


def test_later_correct_decays_with_elapsed_time():
    # 20s limit, answered at elapsed=10s
    assert scoring.score(False, 10, 20) == 750
    # 10s limit, answered at elapsed=6s
    assert scoring.score(False, 4, 10) == 700


@pytest.mark.parametrize(
    "remaining, expected",
    [
        (-3, 500),
        (0, 500),
        (0.01, 500),
        (25, 1000),
    ],
)
def test_later_correct_is_clamped(remaining, expected):
    assert scoring.score(False, remaining, 20) == expected


def test_zero_time_limit_falls_back_to_minimum():
    assert scoring.score(False, 0, 0) == 500


def test_is_correct_trims_and_casefolds():
    assert scoring.is_correct("  paris ", "Paris")
    assert scoring.is_correct("PARIS", " paris")
    assert not scoring.is_correct("Rome", "Paris")


def test_missing_correct_option_never_matches():
    assert not scoring.is_correct("", None)
    assert not scoring.is_correct("N/A", None)
