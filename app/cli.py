from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from adapters.filesystem.automaton_repository import (
    SINGLE_AUTOMATON_NAME,
    FileSystemAutomatonRepository,
    FileSystemDiagramRepository,
)
from adapters.layout.grid import DepthFirstLayoutEngine
from adapters.svg.renderer import SvgDiagramRenderer
from app.config import AppSettings, load_settings, parse_log_level
from domain.models import Automaton, DiagramPlan
from domain.services.build_diagram import AutomatonDiagramBuilder

app = typer.Typer(no_args_is_help=True)
console = Console()
logger = logging.getLogger(__name__)


def _configure(config_path: Optional[Path], log_level: Optional[str]) -> AppSettings:
    try:
        settings = load_settings(config_path)
        level = parse_log_level(log_level) if log_level else settings.log_level
    except (FileNotFoundError, ValueError) as exc:
        console.print(f"[red]Invalid configuration:[/] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    return settings


def _load(input_path: Path) -> List[tuple[str, Automaton]]:
    if not input_path.is_file():
        console.print(f"[red]File not found:[/] {input_path}")
        raise typer.Exit(code=1)
    try:
        return FileSystemAutomatonRepository().load_by_path(input_path)
    except (OSError, ValueError) as exc:
        console.print(f"[red]Invalid automaton document:[/] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc


def _build_plans(
    machines: List[tuple[str, Automaton]], settings: AppSettings
) -> List[tuple[str, DiagramPlan]]:
    builder = AutomatonDiagramBuilder(
        DepthFirstLayoutEngine(), settings.diagram.to_layout_config()
    )
    return [(name, builder.build(automaton)) for name, automaton in machines]


def _svg_name(input_path: Path, name: str) -> str:
    stem = input_path.stem
    if name == SINGLE_AUTOMATON_NAME:
        return f"{stem}.svg"
    return f"{stem}.{name}.svg"


@app.command("render")
def render(
    input_path: Path = typer.Argument(..., help="Automaton JSON document."),
    output_dir: Optional[Path] = typer.Option(
        None, help="Directory to write SVG files (defaults to the configured output_dir).",
    ),
    config: Optional[Path] = typer.Option(None, help="YAML settings file."),
    log_level: Optional[str] = typer.Option(None, help="Logging level override."),
) -> None:
    settings = _configure(config, log_level)
    machines = _load(input_path)
    target_dir = output_dir or settings.output_dir
    renderer = SvgDiagramRenderer(settings.diagram.to_svg_style())
    diagrams = FileSystemDiagramRepository()

    for name, plan in _build_plans(machines, settings):
        target_path = target_dir / _svg_name(input_path, name)
        diagrams.save_svg(renderer.render(plan), target_path)
        logger.info("Rendered %s with %d states", name, len(plan.markers))
        console.print(f"[green]Wrote[/] {target_path}")


@app.command("layout")
def layout(
    input_path: Path = typer.Argument(..., help="Automaton JSON document."),
    output: Path = typer.Option(..., help="JSON file to write draw instructions to."),
    config: Optional[Path] = typer.Option(None, help="YAML settings file."),
    log_level: Optional[str] = typer.Option(None, help="Logging level override."),
) -> None:
    settings = _configure(config, log_level)
    machines = _load(input_path)
    FileSystemDiagramRepository().save_plans(_build_plans(machines, settings), output)
    console.print(f"[green]Wrote[/] {output}")


@app.command("validate")
def validate(
    input_path: Path = typer.Argument(..., help="Automaton JSON document to validate."),
) -> None:
    machines = _load(input_path)
    for name, automaton in machines:
        console.print(
            f"[green]Valid {name}:[/] {len(automaton.states)} states, "
            f"{len(automaton.edges())} transitions"
        )


if __name__ == "__main__":
    app()
