import logging
import random
from typing import Dict, Optional, Sequence

from .card import Card, DeckEntry, Direction, GameMode
from .config import Tuning
from .deck import ShuffledSampler

logger = logging.getLogger(__name__)


class Spawner:
    """Decide quando criar uma nova carta e com quais parâmetros.

    Acumula o tempo dos ticks; quando o acumulado passa do intervalo atual
    e ainda há vaga na tela, sorteia uma entrada e cria a carta no topo.
    Se não houver vaga o acumulado é mantido, e a carta nasce assim que uma
    vaga abrir. No máximo uma carta por tick.
    """

    def __init__(
        self,
        sampler: ShuffledSampler,
        rng: random.Random,
        tuning: Tuning,
        board_width: float,
        mode: GameMode,
        speed_multiplier: float,
    ) -> None:
        self.sampler = sampler
        self.rng = rng
        self.tuning = tuning
        self.board_width = board_width
        self.mode = mode
        self.speed_multiplier = speed_multiplier
        self.accumulated: float = 0.0
        self.next_id: int = 1

    def reset(self) -> None:
        # next_id não volta: ids são únicos durante toda a sessão
        self.accumulated = 0.0

    def update(self, dt: float, score: int, cards: Dict[int, Card], unlocked: Sequence[DeckEntry]) -> Optional[Card]:
        self.accumulated += dt
        if self.accumulated <= self.tuning.spawn_interval(score):
            return None
        if len(cards) >= self.tuning.concurrency_cap(score):
            return None
        card = self.spawn(score, cards, unlocked)
        self.accumulated = 0.0
        return card

    def spawn(self, score: int, cards: Dict[int, Card], unlocked: Sequence[DeckEntry]) -> Card:
        entry = self.sampler.draw(unlocked)
        span = max(0.0, self.board_width - self.tuning.card_width)
        card = Card(
            id=self.next_id,
            entry=entry,
            direction=self._direction(),
            x=self.rng.random() * span,
            y=0.0,
            fall_speed=self.tuning.base_fall_speed * self.tuning.speed_scale(score) * self.speed_multiplier,
        )
        self.next_id += 1
        cards[card.id] = card
        logger.debug("Spawned card %d %r (%s) speed=%.1f", card.id, card.front_text, card.direction.value, card.fall_speed)
        return card

    def _direction(self) -> Direction:
        if self.mode == GameMode.REVERSE:
            return Direction.BACK_TO_FRONT
        if self.mode == GameMode.BOTH:
            return self.rng.choice([Direction.FRONT_TO_BACK, Direction.BACK_TO_FRONT])
        return Direction.FRONT_TO_BACK
