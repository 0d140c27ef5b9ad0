from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.tree import Tree

from adapters.filesystem.design_repository import FileSystemDesignRepository
from adapters.filesystem.json_utils import dump_json_bytes
from app.config import AppSettings, LayoutSettings, load_settings
from app.layout_wiring import build_classifier, build_layout_optimizer
from domain.models import DesignNode, SimplifiedDesign
from domain.services.geometry import valid_rects
from domain.services.spatial_relationships import build_containment_forest, group_nodes_into_grid

app = typer.Typer(no_args_is_help=True)
console = Console()
err_console = Console(stderr=True)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _resolve_settings(
    config_path: Path | None,
    classifier: str | None,
    verbose: bool,
) -> AppSettings:
    try:
        settings = load_settings(config_path)
        if classifier:
            layout = LayoutSettings.model_validate(
                {**settings.layout.model_dump(), "classifier": classifier}
            )
            settings = settings.model_copy(update={"layout": layout})
    except (FileNotFoundError, ValidationError) as exc:
        err_console.print(f"[red]Invalid configuration:[/] {exc}")
        raise typer.Exit(code=1) from exc
    _configure_logging("DEBUG" if verbose else settings.log_level)
    return settings


def _load_design(repo: FileSystemDesignRepository, path: Path) -> SimplifiedDesign:
    try:
        return repo.load(path)
    except FileNotFoundError as exc:
        err_console.print(f"[red]File not found:[/] {path}")
        raise typer.Exit(code=1) from exc
    except (ValueError, ValidationError) as exc:
        err_console.print(f"[red]Invalid design file {path}:[/] {exc}")
        raise typer.Exit(code=1) from exc


def _load_directory(
    repo: FileSystemDesignRepository, directory: Path
) -> list[tuple[Path, SimplifiedDesign]]:
    try:
        return list(repo.load_all_with_paths(directory))
    except FileNotFoundError as exc:
        err_console.print(f"[red]File not found:[/] {exc}")
        raise typer.Exit(code=1) from exc
    except (ValueError, ValidationError) as exc:
        err_console.print(f"[red]Invalid design file in {directory}:[/] {exc}")
        raise typer.Exit(code=1) from exc


def _emit(repo: FileSystemDesignRepository, design: SimplifiedDesign, output: Path | None) -> None:
    if output is None:
        typer.echo(dump_json_bytes(design.to_dict()).decode("utf-8"))
        return
    repo.save(design, output)
    err_console.print(f"[green]Wrote[/] {output}")


def _walk(nodes: list[DesignNode]) -> Iterator[DesignNode]:
    for node in nodes:
        yield node
        if node.children:
            yield from _walk(node.children)


@app.command("optimize")
def optimize(
    input_path: Path = typer.Argument(..., help="Design JSON file or directory of design files."),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Output file (or directory when the input is a directory).",
    ),
    config_path: Optional[Path] = typer.Option(None, "--config", help="YAML settings file."),
    classifier: Optional[str] = typer.Option(None, help="Layout classifier: score or relative."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every layout decision."),
) -> None:
    settings = _resolve_settings(config_path, classifier, verbose)
    repo = FileSystemDesignRepository()

    if input_path.is_dir():
        pairs = _load_directory(repo, input_path)
        if not pairs:
            err_console.print(f"[yellow]No design files found in {input_path}[/]")
            raise typer.Exit(code=0)
        output_dir = output or input_path / "optimized"
        for path, design in pairs:
            optimized = build_layout_optimizer(settings).optimize_design(design)
            _emit(repo, optimized, output_dir / path.name)
        return

    design = _load_design(repo, input_path)
    _emit(repo, build_layout_optimizer(settings).optimize_design(design), output)


@app.command("analyze")
def analyze(
    input_path: Path = typer.Argument(..., help="Design JSON file."),
    config_path: Optional[Path] = typer.Option(None, "--config", help="YAML settings file."),
    classifier: Optional[str] = typer.Option(None, help="Layout classifier: score or relative."),
) -> None:
    settings = _resolve_settings(config_path, classifier, verbose=False)
    design = _load_design(FileSystemDesignRepository(), input_path)
    layout_classifier = build_classifier(settings.layout)

    table = Table(title=f"Layout analysis: {design.name or input_path.name}")
    for column in ("id", "name", "type", "children", "row", "column", "direction", "gap", "justify", "align"):
        table.add_column(column)

    for node in _walk(design.nodes):
        if not node.children or len(node.children) < 2:
            continue
        decision = layout_classifier.classify(valid_rects(node.children))
        table.add_row(
            node.id,
            node.name,
            node.type,
            str(len(node.children)),
            f"{decision.row_score:.2f}",
            f"{decision.column_score:.2f}",
            decision.direction.value,
            f"{decision.gap:.1f}",
            decision.justify.value if decision.justify else "-",
            decision.align.value if decision.align else "-",
        )
    console.print(table)


@app.command("resolve")
def resolve(
    input_path: Path = typer.Argument(..., help="Design JSON file with a flat node list."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output file."),
) -> None:
    repo = FileSystemDesignRepository()
    design = _load_design(repo, input_path)
    _emit(repo, design.with_nodes(build_containment_forest(design.nodes)), output)


@app.command("grid")
def grid(
    input_path: Path = typer.Argument(..., help="Design JSON file."),
    node_id: Optional[str] = typer.Option(None, "--node", help="Group the children of this node."),
    config_path: Optional[Path] = typer.Option(None, "--config", help="YAML settings file."),
) -> None:
    settings = _resolve_settings(config_path, None, verbose=False)
    design = _load_design(FileSystemDesignRepository(), input_path)

    nodes = design.nodes
    if node_id is not None:
        matches = [node for node in _walk(design.nodes) if node.id == node_id]
        if not matches:
            err_console.print(f"[red]Node not found:[/] {node_id}")
            raise typer.Exit(code=1)
        nodes = matches[0].children or []

    tree = Tree(node_id or design.name or input_path.name)
    rows = group_nodes_into_grid(nodes, settings.layout.projection_tolerance)
    for row_index, columns in enumerate(rows):
        row_branch = tree.add(f"row {row_index}")
        for column_index, members in enumerate(columns):
            labels = ", ".join(member.name or member.id for member in members)
            row_branch.add(f"column {column_index}: {labels}")
    console.print(tree)


@app.command("validate")
def validate(input_path: Path = typer.Argument(..., help="Design JSON file to validate.")) -> None:
    design = _load_design(FileSystemDesignRepository(), input_path)
    total = sum(1 for _ in _walk(design.nodes))
    positioned = len(valid_rects(_walk(design.nodes)))
    console.print(
        f"[green]Valid design:[/] {input_path} ({total} nodes, {positioned} positioned)"
    )


if __name__ == "__main__":
    app()
