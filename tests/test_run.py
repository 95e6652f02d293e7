import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest

from run import play_game


def _without_id(snapshot: dict) -> dict:
    return {k: v for k, v in snapshot.items() if k != "id"}


def test_demo_is_reproducible():
    a = play_game("both", seed=10, seconds=30)
    b = play_game("both", seed=10, seconds=30)
    assert _without_id(a) == _without_id(b)
    assert a["mode"] == "both"


def test_perfect_player_never_misses():
    final = play_game("reverse", seed=3, seconds=60, accuracy=1.0)
    assert final["score"] > 0
    assert final["health"] == final["max_health"]
    assert final["missed"] == []


def test_hopeless_player_loses():
    final = play_game("normal", seed=3, seconds=120, accuracy=0.0)
    assert final["score"] == 0
    assert final["status"] == "game_over"
    assert final["health"] == 0
    fronts = [row["raw_front"] for row in final["missed"]]
    assert len(fronts) == len(set(fronts))


def test_unknown_mode():
    with pytest.raises(ValueError):
        play_game("quick")
