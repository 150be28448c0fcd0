"""Build command implementation."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from ..config import Config
from ..errors import FeedpageError
from ..logging_config import setup_logging
from ..pipeline import BuildOrchestrator

console = Console()


def build_command(
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to the config file. Default: $FEEDPAGE_CONFIG or ~/.config/feedpage/config.yaml",
    ),
    urls_file: Optional[Path] = typer.Option(None, "--urls-file", help="Feed reader urls file"),
    cache_file: Optional[Path] = typer.Option(None, "--cache-file", help="Feed reader cache database"),
    build_dir: Optional[Path] = typer.Option(None, "--build-dir", help="Directory to build the page into"),
    template: Optional[Path] = typer.Option(None, "--template", help="Template directory to use"),
    debug: bool = typer.Option(False, "--debug", help="Verbose logging and pretty printed JSON"),
) -> None:
    """Build the feed page from the feed reader cache."""
    setup_logging(debug)

    config = Config(
        config_path=config_path,
        urls_file=urls_file,
        cache_file=cache_file,
        build_dir=build_dir,
        template_path=template,
    )

    try:
        # Load options early so config errors are reported before the build starts
        config.options
    except FeedpageError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(1)

    try:
        orchestrator = BuildOrchestrator(config, debug=debug)
        success = orchestrator.run()
    except KeyboardInterrupt:
        console.print("\n[yellow]Build interrupted by user[/yellow]")
        raise typer.Exit(1)

    if not success:
        raise typer.Exit(1)
