from typing import Dict, Optional

from .card import Card, normalize_answer


def find_match(cards: Dict[int, Card], text: str) -> Optional[Card]:
    """Return the oldest unflipped card that accepts `text`, or None.

    Cards are tried in spawn order; each one checks the answers for the
    direction it was spawned with. Empty input never matches.
    """
    normalized = normalize_answer(text)
    if not normalized:
        return None
    for card in cards.values():
        if card.accepts(normalized):
            return card
    return None
