import re
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, Optional


class GameMode(Enum):
    NORMAL = "normal"  # front -> back
    REVERSE = "reverse"  # back -> front
    BOTH = "both"  # sorteado por carta


class Direction(Enum):
    FRONT_TO_BACK = "front_to_back"
    BACK_TO_FRONT = "back_to_front"


_ALTERNATIVES = re.compile(r"[/;]")


def normalize_answer(text: str) -> str:
    """Normaliza uma resposta digitada para comparação.

    Minúsculas (casefold), somente caracteres alfanuméricos e espaços, espaços
    repetidos colapsados. Ex.: ``"  How are   you? "`` -> ``"how are you"``.
    """
    kept = "".join(c for c in text.casefold() if c.isalnum() or c.isspace())
    return " ".join(kept.split())


def split_answers(raw: str) -> FrozenSet[str]:
    """Conjunto de respostas aceitas para um lado da carta.

    Alternativas são separadas por ``/`` ou ``;`` (``"Thank you / Thanks"``).
    Alternativas que normalizam para vazio são descartadas.
    """
    answers = (normalize_answer(part) for part in _ALTERNATIVES.split(raw))
    return frozenset(a for a in answers if a)


@dataclass(frozen=True)
class DeckEntry:
    """Par frente/verso com as variantes de resposta aceitas."""

    raw_front: str
    raw_back: str
    accepted_front_answers: FrozenSet[str]
    accepted_back_answers: FrozenSet[str]

    @classmethod
    def from_sides(cls, fronts: Iterable[str], backs: Iterable[str]) -> "DeckEntry":
        fronts = list(dict.fromkeys(fronts))
        backs = list(dict.fromkeys(backs))
        front_answers = frozenset().union(*(split_answers(f) for f in fronts))
        back_answers = frozenset().union(*(split_answers(b) for b in backs))
        # a primeira grafia da frente identifica a entrada (missed cards, export)
        return cls(fronts[0], " / ".join(backs), front_answers, back_answers)

    def as_dict(self) -> dict:
        return {"raw_front": self.raw_front, "raw_back": self.raw_back}


@dataclass
class Card:
    """Instância de uma entrada do deck caindo pelo tabuleiro.

    `front_text`/`back_text` dependem da direção: em BACK_TO_FRONT o verso
    aparece como frente e a resposta esperada é a frente original.
    """

    id: int
    entry: DeckEntry
    direction: Direction = Direction.FRONT_TO_BACK
    x: float = 0.0
    y: float = 0.0
    fall_speed: float = 0.0
    flipped: bool = False
    time_since_flipped: Optional[float] = field(default=None)

    @property
    def front_text(self) -> str:
        if self.direction == Direction.BACK_TO_FRONT:
            return self.entry.raw_back
        return self.entry.raw_front

    @property
    def back_text(self) -> str:
        if self.direction == Direction.BACK_TO_FRONT:
            return self.entry.raw_front
        return self.entry.raw_back

    @property
    def accepted_answers(self) -> FrozenSet[str]:
        if self.direction == Direction.BACK_TO_FRONT:
            return self.entry.accepted_front_answers
        return self.entry.accepted_back_answers

    def accepts(self, normalized: str) -> bool:
        return not self.flipped and normalized in self.accepted_answers

    def view(self) -> dict:
        return {
            "id": self.id,
            "front_text": self.front_text,
            "back_text": self.back_text,
            "x": self.x,
            "y": self.y,
            "flipped": self.flipped,
        }

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return f"Card(id={self.id}, front={self.front_text!r}, y={self.y:.1f}, flipped={self.flipped})"
