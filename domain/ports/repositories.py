from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from domain.models import Automaton, DiagramPlan


class AutomatonRepository(Protocol):
    def load_by_path(self, path: Path) -> Sequence[tuple[str, Automaton]]: ...

    def load_all_with_paths(
        self, directory: Path
    ) -> Sequence[tuple[Path, Sequence[tuple[str, Automaton]]]]: ...


class DiagramRepository(Protocol):
    def save_svg(self, markup: str, path: Path) -> None: ...

    def save_plans(self, plans: Sequence[tuple[str, DiagramPlan]], path: Path) -> None: ...
