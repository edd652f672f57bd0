from __future__ import annotations

from typing import Protocol

from domain.models import DiagramPlan


class DiagramRenderer(Protocol):
    def render(self, plan: DiagramPlan) -> str: ...
