import random
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Tuple

from .card import DeckEntry, normalize_answer, split_answers
from .errors import ConstructionError


def _unpack_pair(pair: Any) -> Tuple[str, str]:
    if isinstance(pair, Mapping):
        front, back = pair.get("front"), pair.get("back")
    elif isinstance(pair, (str, bytes)) or not isinstance(pair, Sequence):
        raise ConstructionError(f"Deck row is not a front/back pair: {pair!r}")
    else:
        try:
            front, back = pair
        except (TypeError, ValueError):
            raise ConstructionError(f"Deck row is not a front/back pair: {pair!r}") from None
    if not isinstance(front, str) or not isinstance(back, str):
        raise ConstructionError(f"Deck row needs text front and back: {pair!r}")
    return front.strip(), back.strip()


class Deck:
    """Catálogo imutável de entradas (frente/verso + respostas aceitas).

    Pares cuja frente normaliza para o mesmo texto são mesclados em uma
    única entrada com a união das respostas do verso.
    """

    def __init__(self, entries: Iterable[DeckEntry]):
        self.entries: List[DeckEntry] = list(entries)
        if not self.entries:
            raise ConstructionError("Deck is empty")

    @classmethod
    def from_pairs(cls, pairs: Iterable[Any]) -> "Deck":
        fronts: Dict[str, List[str]] = {}
        backs: Dict[str, List[str]] = {}
        for pair in pairs:
            front, back = _unpack_pair(pair)
            if not split_answers(front) or not split_answers(back):
                raise ConstructionError(f"Deck row has a side with no answer: {pair!r}")
            key = normalize_answer(front)
            fronts.setdefault(key, []).append(front)
            backs.setdefault(key, []).append(back)
        return cls(DeckEntry.from_sides(fronts[k], backs[k]) for k in fronts)

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, index: int) -> DeckEntry:
        return self.entries[index]

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return f"Deck({len(self.entries)} entries)"


class ShuffledSampler:
    """Sorteia entradas desbloqueadas sem reposição.

    Quando o saco esvazia, é reabastecido com o conjunto desbloqueado atual
    (que pode ter crescido) e embaralhado com o RNG da sessão. Entre dois
    embaralhamentos cada entrada sai exatamente uma vez.
    """

    def __init__(self, rng: random.Random) -> None:
        self.rng = rng
        self.bag: List[DeckEntry] = []

    def draw(self, unlocked: Sequence[DeckEntry]) -> DeckEntry:
        if not self.bag:
            self._replenish(unlocked)
        return self.bag.pop()

    def _replenish(self, unlocked: Sequence[DeckEntry]) -> None:
        if not unlocked:
            raise RuntimeError("No unlocked entries to draw from")
        self.bag = list(unlocked)
        self.rng.shuffle(self.bag)

    def reset(self) -> None:
        self.bag.clear()

    def __len__(self) -> int:
        return len(self.bag)
