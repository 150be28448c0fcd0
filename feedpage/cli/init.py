"""Init command implementation."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel

from ..config import Config, OptionsModel, save_config
from ..output.template import INDEX_TEMPLATE

console = Console()

DEFAULT_INDEX = """<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <title>$title</title>
  <base href="$site_path">
  <link rel="alternate" type="application/rss+xml" title="$title" href="rss.xml">
</head>
<body>
  <h1>$title</h1>
  <ul id="feeds"></ul>
  <script>
    const context = $context;
    const list = document.getElementById("feeds");
    for (const feed of context.feeds.concat(context.queryFeeds)) {
      const item = document.createElement("li");
      const link = document.createElement("a");
      link.href = "feeds/" + feed.id + ".json";
      link.textContent = feed.displayTitle + " (" + feed.itemCount + ")";
      item.appendChild(link);
      list.appendChild(item);
    }
  </script>
</body>
</html>
"""


def init_command(
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to the config file. Default: $FEEDPAGE_CONFIG or ~/.config/feedpage/config.yaml",
    ),
) -> None:
    """Initialize feedpage configuration and a default template."""
    console.print(Panel.fit("📰 Feedpage - Initialization", style="bold blue"))

    config = Config(config_path=config_path)

    if config.config_path.exists():
        console.print(f"Config already exists: {config.config_path}")
    else:
        save_config(OptionsModel(), config.config_path)
        console.print(f"✅ Created config: {config.config_path}")

    template_path = config.template_path
    index_path = template_path / INDEX_TEMPLATE
    if index_path.exists():
        console.print(f"Template already exists: {template_path}")
    else:
        (template_path / "include").mkdir(parents=True, exist_ok=True)
        index_path.write_text(DEFAULT_INDEX, encoding="utf-8")
        console.print(f"✅ Created template: {template_path}")

    console.print(
        Panel(
            f"[green]✅ Feedpage initialized successfully![/green]\n\n"
            f"Configuration: {config.config_path}\n"
            f"Template: {template_path}\n"
            f"Urls file: {config.urls_file}\n"
            f"Cache file: {config.cache_file}\n\n"
            f"Next steps:\n"
            f"1. Set [bold]site_url[/bold] and [bold]title[/bold] in the config file\n"
            f"2. Run: [bold]feedpage build[/bold]\n"
            f"3. Run: [bold]feedpage open[/bold]",
            style="green",
        )
    )
