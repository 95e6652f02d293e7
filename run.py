"""Headless demo runner for the falling-card game.

A scripted player answers the oldest card once it has fallen past
`reaction` of the board, getting it right with probability `accuracy`.
"""

import random

from dropcard.card import GameMode
from dropcard.game_state import GameState


def _bot_answer(game: GameState, card_id: int) -> str:
    # qualquer resposta aceita serve; sorted para ser determinístico
    return sorted(game.cards[card_id].accepted_answers)[0]


def play_game(
    mode: str,
    seed: int = 2024,
    seconds: float = 60.0,
    accuracy: float = 0.8,
    fps: int = 30,
    reaction: float = 0.5,
) -> dict:
    mode = mode.lower()
    if mode not in {m.value for m in GameMode}:
        raise ValueError("mode must be one of: normal, reverse, both")

    game = GameState(600, 800, seed, mode=mode)
    player = random.Random(seed ^ 0x5EED)
    dt = 1.0 / fps
    frames = int(seconds * fps)
    attempted = set()

    for _ in range(frames):
        if game.is_game_over():
            print(f"Game over after {game.get_elapsed_time():.1f}s")
            break
        game.tick(dt)
        for view in game.get_cards():
            if view["flipped"] or view["id"] in attempted:
                continue
            if view["y"] < reaction * game.floor_y:
                break
            attempted.add(view["id"])
            if player.random() < accuracy:
                game.submit_answer(_bot_answer(game, view["id"]))
            else:
                game.submit_answer("não sei")
            break

    snapshot = game.snapshot()
    snapshot["missed"] = game.export_missed_cards()
    return snapshot


if __name__ == "__main__":
    print("Running clean demo (both)")
    final = play_game("both")
    print("Final score:", final["score"], "health:", final["health"])
    print("Missed:", [row["raw_front"] for row in final["missed"]])
