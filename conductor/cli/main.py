"""
Conductor CLI

Main entrypoint for the conductor command-line tool.
"""

import typer
from rich.console import Console
from rich.table import Table

from conductor.cli import run

app = typer.Typer(
    name="conductor",
    help="Uni-directional state management developer tools",
    add_completion=False,
)

console = Console()

app.command(name="run")(run.run_command)


@app.command()
def version():
    """Show version information."""
    from conductor import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]Conductor[/bold]", f"v{__version__}")
    table.add_row("Scheduler", "manual")

    console.print(table)


def main():
    """Main entrypoint."""
    app()


if __name__ == "__main__":
    main()
