"""
Run command: mount a root store, dispatch events and show the resulting state
"""

import importlib
import json
from typing import Any, List

import typer
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from conductor.config import ConductorConfig
from conductor.core.store import Store, ViewHost
from conductor.logging_config import setup_logging
from conductor.runtime import Conductor
from conductor.scheduler import ManualScheduler

console = Console()


class ConsoleViewHost(ViewHost):
    """View host that prints rendered nodes to the console."""

    def __init__(self, console: Console, quiet: bool = False):
        self.console = console
        self.quiet = quiet
        self.nodes: List[Any] = []

    def mount(self, node: Any) -> None:
        self.nodes.append(node)
        if not self.quiet:
            self.console.print(node)


def load_root_store(ref: str) -> Store:
    """Import MODULE:FACTORY and call the factory."""
    module_name, sep, attr = ref.partition(":")
    if not sep or not module_name or not attr:
        raise typer.BadParameter(f"Expected MODULE:FACTORY, got {ref!r}")
    module = importlib.import_module(module_name)
    return getattr(module, attr)()


def parse_event(raw: str) -> List[Any]:
    """Parse an event given as a JSON array ["store/event", *params]."""
    try:
        parts = json.loads(raw)
    except json.JSONDecodeError as e:
        raise typer.BadParameter(f"Event must be JSON: {e}")
    if not isinstance(parts, list) or not parts or not isinstance(parts[0], str):
        raise typer.BadParameter(f"Event must be a JSON array starting with an event name, got {raw}")
    return parts


def run_command(
    factory: str = typer.Argument(..., help="Root store factory as MODULE:FACTORY"),
    events: List[str] = typer.Option([], "--event", "-e", help='Event to dispatch, e.g. \'["s1/foo", 42]\''),
    show_state: bool = typer.Option(False, "--show-state", "-s", help="Show final app state"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Mount a root store, dispatch events and show the resulting state.

    Examples:
        conductor run myapp.stores:make_root
        conductor run myapp.stores:make_root -e '["counter/inc", 2]' --show-state
        conductor run myapp.stores:make_root --json
    """
    try:
        config = ConductorConfig.from_env()
        if not json_output:
            setup_logging(config)

        scheduler = ManualScheduler()
        conductor = Conductor.from_config(config, scheduler=scheduler)
        host = ConsoleViewHost(console, quiet=json_output)

        conductor.mount(load_root_store(factory), host)
        scheduler.run_until_idle()

        for raw in events:
            conductor.dispatch(*parse_event(raw))
            scheduler.run_until_idle()

        state = conductor.state
    except typer.BadParameter as e:
        _report_error(str(e), json_output)
        raise typer.Exit(2)
    except Exception as e:
        _report_error(f"{type(e).__name__}: {e}", json_output)
        raise typer.Exit(2)

    if json_output:
        output = {
            "success": True,
            "root_store_id": state.root_store_id,
            "stores": sorted(state.stores),
            "events_dispatched": len(events),
        }
        if show_state:
            output["app_state"] = state.app_state
        print(json.dumps(output, indent=2, default=repr))
        return

    console.print(f"[green]✓ Dispatched {len(events)} events[/green]")
    console.print(f"  Root store: [cyan]{state.root_store_id}[/cyan]")

    table = Table(title="Stores")
    table.add_column("Store Id", style="green")
    table.add_column("Type", style="cyan")
    table.add_column("Local State", style="yellow")
    for store_id in sorted(state.stores):
        store = state.stores[store_id]
        cell = getattr(store, "local_state", None)
        table.add_row(store_id, type(store).__name__, "-" if cell is None else repr(cell.get()))
    console.print(table)

    if show_state:
        console.print("\n[bold]App State:[/bold]")
        console.print(Syntax(json.dumps(state.app_state, indent=2, default=repr), "json", theme="monokai"))


def _report_error(message: str, json_output: bool) -> None:
    if json_output:
        print(json.dumps({"error": message}))
    else:
        console.print(f"[red]Error:[/red] {message}")
