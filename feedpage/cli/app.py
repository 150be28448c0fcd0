"""Main CLI application."""

import typer
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()

from .build import build_command
from .init import init_command
from .open import open_command

app = typer.Typer(
    name="feedpage",
    help="Feedpage - Static feed page builder for your feed reader cache",
    no_args_is_help=True,
)

# Register commands
app.command("build")(build_command)
app.command("init")(init_command)
app.command("open")(open_command)


if __name__ == "__main__":
    app()
