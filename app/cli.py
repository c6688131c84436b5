from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
import uvicorn
from rich.console import Console

from adapters.filesystem.layout_repository import FileSystemLayoutRepository
from app.config import load_settings
from domain.models import LayoutDocument
from domain.services.layout_codec import (
    LayoutImportError,
    ValidationError,
    encode_layout_document,
    export_report,
)

app = typer.Typer(no_args_is_help=True)
console = Console()


def _load_document(repo: FileSystemLayoutRepository, path: Path) -> Optional[LayoutDocument]:
    if not path.exists():
        console.print(f"[red]File not found:[/] {path}")
        return None
    try:
        return repo.load(path)
    except LayoutImportError as exc:
        console.print(f"[red]Invalid layout document ({exc.kind}):[/] {path}")
        if isinstance(exc, ValidationError):
            for issue in exc.issues:
                console.print(f"  - {issue}", markup=False, soft_wrap=True)
        else:
            console.print(f"  {exc.message}", markup=False, soft_wrap=True)
        return None


def _load_or_exit(repo: FileSystemLayoutRepository, path: Path) -> LayoutDocument:
    document = _load_document(repo, path)
    if document is None:
        raise typer.Exit(code=1)
    return document


@app.command("validate")
def validate(
    input_path: Path = typer.Argument(..., help="Layout JSON file, or a directory of them."),
) -> None:
    repo = FileSystemLayoutRepository()
    paths = sorted(input_path.glob("*.json")) if input_path.is_dir() else [input_path]
    if not paths:
        console.print(f"[yellow]No layout files found in {input_path}[/]")
        raise typer.Exit(code=0)

    failures = 0
    for path in paths:
        document = _load_document(repo, path)
        if document is None:
            failures += 1
            continue
        console.print(
            f"[green]Valid layout document:[/] {path} ({len(document.elements)} elements)"
        )
    if failures:
        raise typer.Exit(code=1)


@app.command("report")
def report(
    input_path: Path = typer.Argument(..., help="Layout JSON file to summarize."),
) -> None:
    document = _load_or_exit(FileSystemLayoutRepository(), input_path)
    console.print(
        export_report(document.to_state()), markup=False, highlight=False, soft_wrap=True
    )


@app.command("format")
def format_document(
    input_path: Path = typer.Argument(..., help="Layout JSON file to rewrite."),
    output: Optional[Path] = typer.Option(
        None, help="Where to write the canonical document (defaults to stdout)."
    ),
) -> None:
    repo = FileSystemLayoutRepository()
    document = _load_or_exit(repo, input_path)
    if output is None:
        console.print(
            encode_layout_document(document), markup=False, highlight=False, soft_wrap=True
        )
        return
    repo.save(document, output)
    console.print(f"[green]Wrote[/] {output}")


@app.command("new")
def new_layout(
    output: Path = typer.Argument(..., help="Where to write the empty layout document."),
    config: Optional[Path] = typer.Option(None, help="Optional YAML settings file."),
) -> None:
    settings = load_settings(config)
    document = LayoutDocument.from_state(settings.layout.initial_state())
    FileSystemLayoutRepository().save(document, output)
    console.print(f"[green]Wrote[/] {output}")


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", help="Interface to bind."),
    port: int = typer.Option(8000, help="Port to listen on."),
) -> None:
    settings = load_settings()
    uvicorn.run("app.web_main:app", host=host, port=port, log_level=settings.layout.log_level)


if __name__ == "__main__":
    app()
