import pytest

from team_maker import Assignment, PlayerNotInTeam, balance, move_player, swap_players


def _assignment():
    return balance(
        [
            {"tg_id": 1, "skill": 10},
            {"tg_id": 2, "skill": 8},
            {"tg_id": 3, "skill": 6},
            {"tg_id": 4, "skill": 4},
        ]
    )


def test_move_player_to_other_team():
    before = _assignment()
    moved = move_player(before, "4", "A")

    assert [p["tg_id"] for p in moved.team_a] == [1]
    assert [p["tg_id"] for p in moved.team_b] == [2, 3, 4]
    assert moved.meta.count == 4
    assert moved.meta.sum_b == pytest.approx(sum(p["rating"] for p in moved.team_b))
    assert [p["tg_id"] for p in before.team_a] == [1, 4]


def test_swap_keeps_slots():
    swapped = swap_players(_assignment(), 4, 2)
    assert [p["tg_id"] for p in swapped.team_a] == [1, 2]
    assert [p["tg_id"] for p in swapped.team_b] == [4, 3]
    assert swapped.meta.diff == pytest.approx(abs(swapped.meta.sum_a - swapped.meta.sum_b))


def test_missing_ratings_are_filled_in():
    stored = {"teamA": [{"tg_id": 1, "skill": 10}], "teamB": [{"tg_id": 2, "rating": "bad"}], "meta": {}}
    moved = move_player(Assignment.from_dict(stored), 2, "B")
    assert [p["rating"] for p in moved.team_a] == [pytest.approx(6.75), 5.0]
    assert moved.team_b == []


def test_unknown_player_or_team():
    with pytest.raises(PlayerNotInTeam):
        move_player(_assignment(), 2, "A")
    with pytest.raises(PlayerNotInTeam):
        swap_players(_assignment(), 1, 99)
    with pytest.raises(ValueError):
        move_player(_assignment(), 1, "C")
