from __future__ import annotations

from typing import Dict, Protocol

from domain.models import Automaton, GridPosition


class LayoutEngine(Protocol):
    def assign(self, automaton: Automaton) -> Dict[int, GridPosition]:
        ...
