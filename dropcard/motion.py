"""Per-tick motion: falling, flipping at the floor, removal of old flips."""

from typing import Dict, List

from .card import Card


def advance(cards: Dict[int, Card], dt: float, floor_y: float, flip_linger: float) -> List[Card]:
    """Move every card by one step of `dt` seconds.

    Unflipped cards fall by `fall_speed * dt`; one that reaches `floor_y` is
    clamped there and flipped. Flipped cards don't move and are removed once
    they have been flipped for `flip_linger` seconds. Returns the cards that
    flipped during this step, in spawn order.
    """
    flipped_now: List[Card] = []
    for card in cards.values():
        if card.flipped:
            card.time_since_flipped = (card.time_since_flipped or 0.0) + dt
            continue
        card.y += card.fall_speed * dt
        if card.y >= floor_y:
            card.y = floor_y
            card.flipped = True
            card.time_since_flipped = 0.0
            flipped_now.append(card)

    # cards flipped in this step stay visible for at least one snapshot
    fresh = {c.id for c in flipped_now}
    expired = [
        cid for cid, c in cards.items()
        if c.flipped and cid not in fresh and c.time_since_flipped >= flip_linger
    ]
    for cid in expired:
        del cards[cid]
    return flipped_now
