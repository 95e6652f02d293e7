import logging
from typing import Any, Iterable, List, Tuple

from .card import split_answers

logger = logging.getLogger(__name__)


def default_pairs() -> List[Tuple[str, str]]:
    # Galês básico; a ordem define a ordem de desbloqueio.
    return [
        ("Bore da", "Good morning"),
        ("Prynhawn da", "Good afternoon"),
        ("Nos da", "Good night"),
        ("Sut mae?", "How are you? / How's it going?"),
        ("Croeso", "Welcome"),
        ("Diolch", "Thank you / Thanks"),
        ("Os gwelwch yn dda", "Please"),
        ("Hwyl fawr", "Goodbye / Bye"),
        ("Iechyd da", "Cheers / Good health"),
        ("Ie", "Yes"),
        ("Na", "No"),
        ("Cymru", "Wales"),
        ("Dŵr", "Water"),
        ("Cath", "Cat"),
        ("Ci", "Dog"),
        ("Tŷ", "House / Home"),
        ("Bara", "Bread"),
        ("Coffi", "Coffee"),
        ("Te", "Tea"),
        ("Llyfr", "Book"),
    ]


def pairs_from_rows(rows: Iterable[Any]) -> List[Tuple[str, str]]:
    """Filtra linhas importadas, mantendo apenas pares (frente, verso) válidos.

    Aceita listas/tuplas de 2 campos ou dicts com `front`/`back`. Linhas com
    campos faltando ou com um lado sem resposta aceita (em branco, `"??"`)
    são descartadas (e logadas).
    """
    pairs: List[Tuple[str, str]] = []
    for row in rows:
        if isinstance(row, dict):
            front, back = row.get("front"), row.get("back")
        elif isinstance(row, (list, tuple)) and len(row) == 2:
            front, back = row
        else:
            logger.debug("pairs_from_rows: skipping malformed row %r", row)
            continue
        if not isinstance(front, str) or not isinstance(back, str):
            logger.debug("pairs_from_rows: skipping row with non-text side %r", row)
            continue
        if not split_answers(front) or not split_answers(back):
            # mesma regra do Deck: cada lado precisa de ao menos uma resposta
            logger.debug("pairs_from_rows: skipping row with a side that has no answer %r", row)
            continue
        pairs.append((front.strip(), back.strip()))
    return pairs
