from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Any, List, Sequence

from adapters.filesystem.json_utils import read_json, write_bytes_atomic, write_json_atomic
from domain.models import Automaton, DiagramPlan, StateMachines
from domain.ports.repositories import AutomatonRepository, DiagramRepository

SINGLE_AUTOMATON_NAME = "automaton"


def parse_automaton_document(payload: Any) -> List[tuple[str, Automaton]]:
    """Accept either a bare automaton or an ``{"nfa": ..., "dfa": ...}`` pair."""
    if not isinstance(payload, dict):
        msg = f"Automaton document must be a JSON object, got {type(payload).__name__}"
        raise ValueError(msg)
    if "states" in payload:
        return [(SINGLE_AUTOMATON_NAME, Automaton.model_validate(payload))]
    return StateMachines.model_validate(payload).named()


class FileSystemAutomatonRepository(AutomatonRepository):
    def load_by_path(self, path: Path) -> List[tuple[str, Automaton]]:
        return parse_automaton_document(read_json(path))

    def load_all_with_paths(
        self, directory: Path
    ) -> List[tuple[Path, List[tuple[str, Automaton]]]]:
        return [(path, self.load_by_path(path)) for path in sorted(self._iter_paths(directory))]

    def _iter_paths(self, directory: Path) -> Iterable[Path]:
        yield from directory.glob("*.json")


class FileSystemDiagramRepository(DiagramRepository):
    def save_svg(self, markup: str, path: Path) -> None:
        write_bytes_atomic(path, markup.encode("utf-8"))

    def save_plans(self, plans: Sequence[tuple[str, DiagramPlan]], path: Path) -> None:
        write_json_atomic(path, {name: plan.to_dict() for name, plan in plans})
