import sys
import os
import random

# garantir que a raiz do projeto está no sys.path quando executado como script
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest

from dropcard.card import normalize_answer, split_answers
from dropcard.cards_data import default_pairs, pairs_from_rows
from dropcard.config import Tuning
from dropcard.deck import Deck, ShuffledSampler
from dropcard.errors import ConstructionError
from dropcard.unlock import UnlockManager


def _deck(n: int) -> Deck:
    return Deck.from_pairs([(f"front {i}", f"back {i}") for i in range(n)])


def test_normalize_answer():
    assert normalize_answer("  HeLlO, WoRlD!  ") == "hello world"
    assert normalize_answer("How are you?") == "how are you"
    assert normalize_answer("test-ing 123") == "testing 123"
    assert normalize_answer("Dŵr") == "dŵr"
    assert normalize_answer("   ") == ""


def test_split_answers_alternatives():
    assert split_answers("Thank you / Thanks") == {"thank you", "thanks"}
    assert split_answers("Cheers;Good health") == {"cheers", "good health"}
    assert split_answers("Water") == {"water"}
    assert split_answers("?? / !") == frozenset()


def test_deck_entry_accepted_sets():
    deck = Deck.from_pairs([("Diolch", "Thank you / Thanks")])
    entry = deck[0]
    assert entry.raw_front == "Diolch"
    assert entry.raw_back == "Thank you / Thanks"
    assert entry.accepted_front_answers == {"diolch"}
    assert entry.accepted_back_answers == {"thank you", "thanks"}


def test_deck_merges_pairs_with_same_front():
    deck = Deck.from_pairs([
        {"front": "Diolch", "back": "Thank you"},
        {"front": "Croeso", "back": "Welcome"},
        {"front": " diolch! ", "back": "Thanks"},
    ])
    assert len(deck) == 2
    assert deck[0].raw_front == "Diolch"
    assert deck[0].raw_back == "Thank you / Thanks"
    assert deck[0].accepted_back_answers == {"thank you", "thanks"}
    assert deck[1].raw_front == "Croeso"


@pytest.mark.parametrize("pairs", [
    [],
    [("", "back")],
    [("front", "   ")],
    [("?!", "back")],
    [("only one field",)],
    [{"front": "no back"}],
    ["ab"],
    [b"ab"],
    [42],
    [("front", 3)],
])
def test_deck_rejects_empty_or_malformed(pairs):
    with pytest.raises(ConstructionError):
        Deck.from_pairs(pairs)


def test_default_deck_builds():
    deck = Deck.from_pairs(default_pairs())
    assert len(deck) == len(default_pairs())
    diolch = next(e for e in deck.entries if e.raw_front == "Diolch")
    assert diolch.accepted_back_answers == {"thank you", "thanks"}


def test_pairs_from_rows_filters_malformed_rows():
    rows = [
        ["Bore da", "Good morning"],
        ["missing back"],
        {"front": "Nos da", "back": "Good night"},
        {"front": "Croeso"},
        ["  ", "blank front"],
        ["??", "x"],
        {"front": "Te", "back": "!/;"},
        ["Ie", None],
        "not a row",
        (" Na ", " No "),
    ]
    assert pairs_from_rows(rows) == [
        ("Bore da", "Good morning"),
        ("Nos da", "Good night"),
        ("Na", "No"),
    ]


def test_sampler_fair_rotation():
    deck = _deck(5)
    sampler = ShuffledSampler(random.Random(7))
    first = [sampler.draw(deck.entries) for _ in range(5)]
    second = [sampler.draw(deck.entries) for _ in range(5)]
    assert sorted(e.raw_front for e in first) == sorted(e.raw_front for e in deck.entries)
    assert sorted(e.raw_front for e in second) == sorted(e.raw_front for e in deck.entries)


def test_sampler_picks_up_grown_set_on_reshuffle():
    deck = _deck(5)
    sampler = ShuffledSampler(random.Random(3))
    first = {sampler.draw(deck.entries[:3]).raw_front for _ in range(3)}
    assert first == {"front 0", "front 1", "front 2"}
    second = {sampler.draw(deck.entries).raw_front for _ in range(5)}
    assert second == {e.raw_front for e in deck.entries}


def test_sampler_is_reproducible_for_a_seed():
    deck = _deck(8)
    a = ShuffledSampler(random.Random(99))
    b = ShuffledSampler(random.Random(99))
    assert [a.draw(deck.entries) for _ in range(20)] == [b.draw(deck.entries) for _ in range(20)]


def test_sampler_reset_empties_bag():
    deck = _deck(4)
    sampler = ShuffledSampler(random.Random(0))
    sampler.draw(deck.entries)
    assert len(sampler) == 3
    sampler.reset()
    assert len(sampler) == 0


def test_unlock_manager_thresholds():
    deck = _deck(10)
    unlocks = UnlockManager(deck, Tuning())
    assert [e.raw_front for e in unlocks.unlocked()] == ["front 0", "front 1", "front 2"]

    assert unlocks.update(4) == []
    fresh = unlocks.update(5)
    assert [e.raw_front for e in fresh] == ["front 3"]

    # cruza dois limiares (10 e 15) de uma vez
    fresh = unlocks.update(17)
    assert [e.raw_front for e in fresh] == ["front 4", "front 5"]
    assert len(unlocks.unlocked()) == 6

    # idempotente e nunca regride
    assert unlocks.update(17) == []
    assert unlocks.update(0) == []
    assert len(unlocks.unlocked()) == 6


def test_unlock_manager_blocks_and_full_deck():
    deck = _deck(6)
    unlocks = UnlockManager(deck, Tuning(initial_unlocked=2, unlock_block_size=3, unlock_score_step=10))
    assert len(unlocks.unlocked()) == 2
    assert len(unlocks.update(10)) == 3
    assert len(unlocks.update(1000)) == 1
    assert unlocks.is_complete()
    unlocks.reset()
    assert len(unlocks.unlocked()) == 2


def test_unlock_manager_small_deck():
    unlocks = UnlockManager(_deck(2), Tuning())
    assert len(unlocks.unlocked()) == 2
    assert unlocks.is_complete()
    assert unlocks.update(100) == []
