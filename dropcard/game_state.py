import logging
import math
import random
from dataclasses import replace
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Union
from uuid import uuid4

from .card import Card, DeckEntry, GameMode
from .cards_data import default_pairs
from .config import Tuning
from .deck import Deck, ShuffledSampler
from .errors import ConstructionError
from .ledger import Ledger
from .matcher import find_match
from .motion import advance
from .spawner import Spawner
from .unlock import UnlockManager

logger = logging.getLogger(__name__)


class Status(Enum):
    RUNNING = "running"
    PAUSED = "paused"
    GAME_OVER = "game_over"


def _positive(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value) and value > 0


def _parse_mode(mode: Union[GameMode, str]) -> GameMode:
    if isinstance(mode, GameMode):
        return mode
    try:
        return GameMode(str(mode).lower())
    except ValueError:
        raise ConstructionError(f"Unknown mode {mode!r}; expected one of: normal, reverse, both") from None


class GameState:
    """Estado principal do jogo: cartas caindo, pontuação, vida e pausa.

    Não possui relógio próprio: quem hospeda o jogo chama `tick(dt)` a cada
    quadro e `submit_answer(text)` quando o jogador confirma uma resposta.
    Toda aleatoriedade vem de `seed`, então a mesma sequência de chamadas
    reproduz exatamente a mesma partida.

    Ordem dentro de um tick em execução: tempo decorrido, spawner,
    movimento/colisões, checagem de game over. Uma carta criada no tick já
    cai `fall_speed * dt` nesse mesmo tick (o dt inteiro, não só a sobra
    depois do intervalo de spawn); com quadros longos o primeiro passo é
    maior, mas nunca atravessa o chão sem flip.
    """

    def __init__(
        self,
        board_width: float,
        board_height: float,
        seed: int,
        mode: Union[GameMode, str] = GameMode.NORMAL,
        speed_multiplier: float = 1.0,
        deck: Optional[Iterable[Any]] = None,
        max_health: Optional[int] = None,
        tuning: Optional[Tuning] = None,
    ) -> None:
        if not _positive(board_width) or not _positive(board_height):
            raise ConstructionError("Board dimensions must be positive")
        if not _positive(speed_multiplier):
            raise ConstructionError("speed_multiplier must be a positive number")
        self.tuning: Tuning = tuning if tuning is not None else Tuning()
        if max_health is not None:
            if isinstance(max_health, bool) or not isinstance(max_health, int):
                raise ConstructionError("max_health must be an integer")
            self.tuning = replace(self.tuning, max_health=max_health)
        self.tuning.validate()
        if isinstance(seed, bool) or not isinstance(seed, int):
            raise ConstructionError("seed must be an integer")

        self.id: str = uuid4().hex
        self.board_width = float(board_width)
        self.board_height = float(board_height)
        self.mode: GameMode = _parse_mode(mode)
        self.speed_multiplier = float(speed_multiplier)
        self.deck: Deck = Deck.from_pairs(default_pairs() if deck is None else deck)

        self.seed: int = seed
        self.rng = random.Random(self.seed)
        self.unlocks = UnlockManager(self.deck, self.tuning)
        self.sampler = ShuffledSampler(self.rng)
        self.spawner = Spawner(self.sampler, self.rng, self.tuning, self.board_width, self.mode, self.speed_multiplier)
        self.ledger = Ledger(self.tuning.max_health)
        # arena de cartas ativas: id -> Card, em ordem de criação
        self.cards: Dict[int, Card] = {}
        self.elapsed_time: float = 0.0
        self.paused: bool = False
        self.game_over: bool = False

        self.start()
        logger.info("[Game %s] Initialized: mode=%s seed=%d deck=%d entries", self.id, self.mode.value, self.seed, len(self.deck))

    @property
    def floor_y(self) -> float:
        return max(0.0, self.board_height - self.tuning.card_height)

    @property
    def status(self) -> Status:
        if self.game_over:
            return Status.GAME_OVER
        if self.paused:
            return Status.PAUSED
        return Status.RUNNING

    def start(self) -> None:
        """Reinicia os campos da partida e cria a primeira carta."""
        self.cards.clear()
        self.ledger.reset()
        self.unlocks.reset()
        self.sampler.reset()
        self.spawner.reset()
        self.elapsed_time = 0.0
        self.paused = False
        self.game_over = False
        self.spawner.spawn(self.ledger.score, self.cards, self.unlocks.unlocked())

    def tick(self, dt: float) -> None:
        if self.status != Status.RUNNING:
            return
        if isinstance(dt, bool) or not isinstance(dt, (int, float)) or not math.isfinite(dt) or dt <= 0:
            # primeiro quadro do loop de renderização não tem timestamp anterior
            return

        self.elapsed_time += dt
        self.spawner.update(dt, self.ledger.score, self.cards, self.unlocks.unlocked())

        for card in advance(self.cards, dt, self.floor_y, self.tuning.flip_linger):
            health = self.ledger.record_miss(card.entry)
            logger.info("[Game %s] Missed card %d %r; health=%d", self.id, card.id, card.entry.raw_front, health)

        if self.ledger.is_dead():
            self.game_over = True
            logger.info("[Game %s] Game over: score=%d elapsed=%.1fs", self.id, self.ledger.score, self.elapsed_time)

    def submit_answer(self, text: str) -> bool:
        """Tenta casar `text` com a carta mais antiga que o aceite.

        Retorna True se uma carta foi resolvida (e removida). Resposta errada
        ou jogo parado retorna False sem alterar nada.
        """
        if self.status != Status.RUNNING or not isinstance(text, str):
            return False
        card = find_match(self.cards, text)
        if card is None:
            logger.debug("[Game %s] Incorrect answer %r", self.id, text)
            return False

        del self.cards[card.id]
        score = self.ledger.add_points(self.tuning.points_per_match)
        self.unlocks.update(score)
        logger.debug("[Game %s] Correct answer %r for card %d; score=%d", self.id, text, card.id, score)
        return True

    def pause(self) -> None:
        if self.status == Status.RUNNING:
            self.paused = True

    def resume(self) -> None:
        if self.status == Status.PAUSED:
            self.paused = False

    def restart(self) -> None:
        """Nova partida na mesma sessão, com uma nova sequência aleatória derivada da semente."""
        self.rng.seed(self.rng.getrandbits(32))
        self.start()
        logger.info("[Game %s] Restarted", self.id)

    def is_paused(self) -> bool:
        return self.paused

    def is_game_over(self) -> bool:
        return self.game_over

    def get_id(self) -> str:
        return self.id

    def get_cards(self) -> List[Dict[str, Any]]:
        return [card.view() for card in self.cards.values()]

    def get_score(self) -> int:
        return self.ledger.score

    def get_health(self) -> int:
        return self.ledger.health

    def get_max_health(self) -> int:
        return self.ledger.max_health

    def get_elapsed_time(self) -> float:
        return self.elapsed_time

    def get_missed_cards(self) -> List[Dict[str, str]]:
        return [dict(row) for row in self.ledger.missed]

    def export_missed_cards(self) -> List[Dict[str, str]]:
        return self.ledger.export_missed()

    def get_unlocked_cards(self) -> List[DeckEntry]:
        return list(self.unlocks.unlocked())

    def snapshot(self) -> dict:
        return {
            "id": self.id,
            "mode": self.mode.value,
            "status": self.status.value,
            "score": self.ledger.score,
            "health": self.ledger.health,
            "max_health": self.ledger.max_health,
            "elapsed_time": self.elapsed_time,
            "cards": self.get_cards(),
            "missed_count": len(self.ledger.missed),
            "unlocked_count": self.unlocks.count,
            "deck_size": len(self.deck),
        }

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return f"GameState(id={self.id}, status={self.status.value}, score={self.ledger.score}, health={self.ledger.health})"
