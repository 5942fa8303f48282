import random

from team_maker import ATTRIBUTES, balance


def _roster(seed: int, size: int) -> list[dict]:
    rng = random.Random(seed)
    roster = []
    for idx in range(size):
        player = {"tg_id": 1000 + idx, "first_name": f"P{idx}"}
        for name in ATTRIBUTES:
            if rng.random() < 0.8:
                player[name] = rng.randint(1, 10)
        roster.append(player)
    return roster


def test_balance_is_deterministic():
    roster = _roster(3, 22)
    assert balance(roster).to_dict() == balance(roster).to_dict()


def test_partition_is_complete_and_disjoint():
    for seed in range(10):
        roster = _roster(seed, 10 + seed)
        result = balance(roster)
        ids_a = {p["tg_id"] for p in result.team_a}
        ids_b = {p["tg_id"] for p in result.team_b}
        assert not ids_a & ids_b
        assert ids_a | ids_b == {p["tg_id"] for p in roster}
        assert len(result.team_a) + len(result.team_b) == len(roster) == result.meta.count


def test_diff_never_exceeds_best_rating():
    for seed in range(25):
        result = balance(_roster(seed, 5 + seed))
        best = max(p["rating"] for p in result.players)
        assert result.meta.diff <= best + 1e-9


def test_meta_matches_team_sums():
    result = balance(_roster(11, 18))
    assert abs(result.meta.sum_a - sum(p["rating"] for p in result.team_a)) < 1e-9
    assert abs(result.meta.sum_b - sum(p["rating"] for p in result.team_b)) < 1e-9
    assert result.meta.diff == abs(result.meta.sum_a - result.meta.sum_b)
