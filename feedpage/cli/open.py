"""Open command implementation."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from ..config import Config
from ..errors import FeedpageError
from ..output.builder import INDEX_FILE

console = Console()


def open_command(
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to the config file"),
    build_dir: Optional[Path] = typer.Option(None, "--build-dir", help="Built page directory"),
) -> None:
    """Open the built feed page in the browser."""
    config = Config(config_path=config_path, build_dir=build_dir)
    try:
        index_path = config.build_dir / INDEX_FILE
    except FeedpageError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(1)

    if not index_path.exists():
        console.print("[red]No built page found. Run 'feedpage build' first.[/red]")
        raise typer.Exit(1)

    typer.launch(str(index_path))
    console.print(f"Opened: {index_path}")
