import logging
from typing import List

from .card import DeckEntry
from .config import Tuning
from .deck import Deck

logger = logging.getLogger(__name__)


class UnlockManager:
    """Controla quais entradas do deck já podem cair.

    Começa com as primeiras `initial_unlocked` entradas; a cada limiar de
    pontuação cruzado libera o próximo bloco, na ordem do deck. Nunca
    bloqueia de volta.
    """

    def __init__(self, deck: Deck, tuning: Tuning) -> None:
        self.deck = deck
        self.tuning = tuning
        self.count: int = 0
        self.blocks: int = 0
        self.reset()

    def reset(self) -> None:
        self.count = min(self.tuning.initial_unlocked, len(self.deck))
        self.blocks = 0

    def unlocked(self) -> List[DeckEntry]:
        return self.deck.entries[: self.count]

    def is_complete(self) -> bool:
        return self.count >= len(self.deck)

    def update(self, score: int) -> List[DeckEntry]:
        """Libera todos os blocos cujos limiares `score` já alcançou.

        Retorna as entradas recém-liberadas (vazio se nada mudou).
        """
        before = self.count
        while not self.is_complete() and score >= self.tuning.unlock_threshold(self.blocks + 1):
            self.blocks += 1
            self.count = min(len(self.deck), self.count + self.tuning.unlock_block_size)
        fresh = self.deck.entries[before : self.count]
        if fresh:
            logger.debug("Unlocked %d entries at score %d: %s", len(fresh), score, [e.raw_front for e in fresh])
        return fresh

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return f"UnlockManager({self.count}/{len(self.deck)} unlocked)"
