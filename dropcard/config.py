"""Tuning constants for the falling-card simulation.

All magic numbers live here so difficulty can be tuned without touching the
state machine. Defaults: a card every 3 s, 50 px/s fall speed, 150x50 px
cards, the interval shrinking by 0.25 s every 5 points down to 0.5 s.
"""

import math
from dataclasses import dataclass

from .errors import ConstructionError


@dataclass(frozen=True)
class Tuning:
    # health
    max_health: int = 3

    # board geometry (pixels)
    card_width: float = 150.0
    card_height: float = 50.0

    # motion (pixels per second)
    base_fall_speed: float = 50.0
    speed_step: float = 0.1  # extra speed scale per difficulty step
    max_speed_scale: float = 2.5

    # spawning (seconds)
    base_spawn_interval: float = 3.0
    spawn_interval_step: float = 0.25
    min_spawn_interval: float = 0.5
    difficulty_step: int = 5  # points per difficulty level

    # concurrency
    base_concurrency: int = 3
    concurrency_step: int = 5  # points per extra card on screen
    max_concurrency: int = 8

    # flipped cards stay visible this long before removal
    flip_linger: float = 1.0

    # scoring and unlocking
    points_per_match: int = 1
    initial_unlocked: int = 3
    unlock_score_step: int = 5
    unlock_block_size: int = 1

    def level(self, score: int) -> int:
        return max(0, score) // self.difficulty_step

    def spawn_interval(self, score: int) -> float:
        """Seconds between spawns; shrinks with score, never below `min_spawn_interval`."""
        interval = self.base_spawn_interval - self.level(score) * self.spawn_interval_step
        return max(self.min_spawn_interval, interval)

    def concurrency_cap(self, score: int) -> int:
        """Maximum number of cards on the board (flipped ones included)."""
        extra = max(0, score) // self.concurrency_step
        return min(self.max_concurrency, self.base_concurrency + extra)

    def speed_scale(self, score: int) -> float:
        return min(self.max_speed_scale, 1.0 + self.level(score) * self.speed_step)

    def unlock_threshold(self, block: int) -> int:
        """Score at which the `block`-th extra block of entries unlocks (block >= 1)."""
        return block * self.unlock_score_step

    def validate(self) -> None:
        if self.max_health < 1:
            raise ConstructionError("max_health must be at least 1")
        if self.card_width < 0 or self.card_height < 0:
            raise ConstructionError("card dimensions must be non-negative")
        if not (self.base_fall_speed > 0 and math.isfinite(self.base_fall_speed)):
            raise ConstructionError("base_fall_speed must be a positive number")
        if self.speed_step < 0 or self.max_speed_scale < 1.0:
            raise ConstructionError("speed scaling must not slow cards down")
        if not 0 < self.min_spawn_interval <= self.base_spawn_interval:
            raise ConstructionError("spawn interval bounds must satisfy 0 < min <= base")
        if self.spawn_interval_step < 0:
            raise ConstructionError("spawn_interval_step must be non-negative")
        if self.difficulty_step < 1 or self.concurrency_step < 1 or self.unlock_score_step < 1:
            raise ConstructionError("score steps must be at least 1")
        if not 1 <= self.base_concurrency <= self.max_concurrency:
            raise ConstructionError("concurrency bounds must satisfy 1 <= base <= max")
        if self.flip_linger < 0:
            raise ConstructionError("flip_linger must be non-negative")
        if self.points_per_match < 1:
            raise ConstructionError("points_per_match must be at least 1")
        if self.initial_unlocked < 1 or self.unlock_block_size < 1:
            raise ConstructionError("unlock sizes must be at least 1")
