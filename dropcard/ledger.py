from typing import Dict, List

from .card import DeckEntry


class Ledger:
    """Pontuação, vida e registro das cartas perdidas de uma partida."""

    def __init__(self, max_health: int) -> None:
        self.max_health: int = max_health
        self.score: int = 0
        self.health: int = max_health
        self.missed: List[Dict[str, str]] = []

    def reset(self) -> None:
        self.score = 0
        self.health = self.max_health
        self.missed.clear()

    def add_points(self, points: int) -> int:
        self.score += points
        return self.score

    def record_miss(self, entry: DeckEntry) -> int:
        """Registra a carta perdida e desconta 1 de vida (mínimo 0)."""
        self.missed.append(entry.as_dict())
        if self.health > 0:
            self.health -= 1
        return self.health

    def is_dead(self) -> bool:
        return self.health == 0

    def export_missed(self) -> List[Dict[str, str]]:
        """Cartas perdidas sem repetição de `raw_front` (primeira ocorrência vence)."""
        seen = set()
        rows: List[Dict[str, str]] = []
        for row in self.missed:
            if row["raw_front"] in seen:
                continue
            seen.add(row["raw_front"])
            rows.append(dict(row))
        return rows

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return f"Ledger(score={self.score}, health={self.health}/{self.max_health}, missed={len(self.missed)})"
