import click
import sys
import asyncio
import logging
from rich.console import Console
from rich.table import Table

from switch_tracker.config.logging_config import setup_logging
from switch_tracker.config.settings import settings
from switch_tracker.services.display import TerminalDisplay
from switch_tracker.services.errors import ServiceError, VisibilityError
from switch_tracker.services.notifier import NullNotifier, create_notifier
from switch_tracker.services.scheduler import AsyncioScheduler
from switch_tracker.services.tracker import SessionStateMachine

# Set up logging
logger = logging.getLogger(__name__)

# Initialize console
console = Console()

@click.group()
def cli():
    """Context Switch Tracker"""
    # Set up logging before anything else
    setup_logging()

@cli.command()
@click.option('--debug', is_flag=True, help='Enable debug output')
@click.option('--no-bell', is_flag=True, help='Do not ring the terminal bell on a switch')
def track(debug, no_bell):
    """Track a focus session in this terminal"""
    from switch_tracker.services.runner import ServiceRunner

    if debug:
        setup_logging(debug=True)

    machine = SessionStateMachine(
        notifier=NullNotifier() if no_bell else create_notifier(settings.NOTIFIER),
        scheduler=AsyncioScheduler()
    )
    try:
        runner = ServiceRunner(machine=machine)
        asyncio.run(runner.run())
    except VisibilityError as e:
        console.print(f"[red]{e}[/red]")
        console.print("[yellow]Run `switch-tracker web` to track from a browser instead[/yellow]")
        sys.exit(1)
    except ServiceError as e:
        logger.error(f"Tracker failed: {e}")
        console.print(f"[red]Tracker failed: {e}[/red]")
        sys.exit(1)

    display = TerminalDisplay(console)
    if machine.history.latest:
        console.print(display.summary_panel(machine.history.latest))
    display.show_history(machine.history)

@cli.command()
@click.option('--host', default=None, help='Host to bind to')
@click.option('--port', default=None, type=int, help='Port to bind to')
@click.option('--reload', is_flag=True, help='Enable auto-reload')
def web(host, port, reload):
    """Serve the browser dashboard"""
    import uvicorn

    host = host or settings.WEB_HOST
    port = port or settings.WEB_PORT
    click.echo(f"Starting web interface on http://{host}:{port}")
    uvicorn.run(
        "switch_tracker.web.app:app",
        host=host,
        port=port,
        reload=reload
    )

@cli.command()
def info():
    """Show the effective configuration"""
    table = Table(title="Configuration")
    table.add_column("Setting", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")

    for name, value in settings.model_dump().items():
        table.add_row(name, str(value))

    console.print(table)

if __name__ == '__main__':
    cli()
