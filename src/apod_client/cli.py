"""Command-line interface for the APOD client."""

import asyncio
import json
import logging

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from apod_client.api_client import APOD_BASE_URL, DEFAULT_TIMEOUT, ApodAPIClient
from apod_client.controller import UNKNOWN_ERROR_MESSAGE, DailyImageController
from apod_client.models import Error, ImageRecord, LoadState, Success
from apod_client.notifier import Notifier
from apod_client.utils import format_date, parse_date

app = typer.Typer(
    name="apod-client",
    help="Fetch the Astronomy Picture of the Day",
    add_completion=False,
)
console = Console()
# Logs go to stderr so --json output stays parseable
err_console = Console(stderr=True)


def setup_logging(verbose: bool) -> None:
    """Configure logging with Rich handler.

    Args:
        verbose: Enable verbose (DEBUG) logging
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, console=err_console)],
    )


def render_record(record: ImageRecord, as_json: bool) -> None:
    """Print a record as a rich panel or as JSON."""
    if as_json:
        typer.echo(json.dumps(record.to_json(), indent=2, ensure_ascii=False))
        return

    details = Table.grid(padding=(0, 2))
    details.add_column(style="bold cyan")
    details.add_column()
    details.add_row("Date", Text(record.date))
    details.add_row("Media type", Text(record.media_type))
    details.add_row("URL", Text(record.url))
    details.add_row("HD URL", Text(record.hd_url or "-"))
    if record.service_version:
        details.add_row("Service version", Text(record.service_version))

    console.print(Panel(details, title=Text(record.title or "Untitled"), expand=False))
    if record.explanation:
        console.print(Text(record.explanation))


def render_state(state: LoadState, as_json: bool) -> int:
    """Print the outcome of a load.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    if isinstance(state, Success):
        render_record(state.record, as_json)
        return 0

    if isinstance(state, Error):
        console.print(
            Panel(Text(state.message), title="Could not load image", border_style="red")
        )
        return 1

    console.print("[yellow]Image is still loading[/yellow]")
    return 1


async def async_today(
    api_key: str, base_url: str, timeout: float, as_json: bool
) -> int:
    """Load today's image (or yesterday's) through the controller.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    notifier = Notifier(console, toast_enabled=not as_json)

    async with ApodAPIClient(api_key, base_url=base_url, timeout=timeout) as api_client:
        async with DailyImageController(api_client, notifier=notifier) as controller:
            await controller.wait()
            state = controller.state

    return render_state(state, as_json)


async def async_for_date(
    day: str, api_key: str, base_url: str, timeout: float, as_json: bool
) -> int:
    """Load the image for a single date.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    async with ApodAPIClient(api_key, base_url=base_url, timeout=timeout) as api_client:
        result = await api_client.fetch_for_date(day)

    if result.success and result.record is not None:
        return render_state(Success(result.record), as_json)
    return render_state(Error(str(result.error) or UNKNOWN_ERROR_MESSAGE), as_json)


@app.command()
def today(
    api_key: str = typer.Option(
        "DEMO_KEY",
        "--api-key",
        "-k",
        envvar="APOD_API_KEY",
        help="API key (or set APOD_API_KEY env var)",
    ),
    base_url: str = typer.Option(
        APOD_BASE_URL,
        "--base-url",
        envvar="APOD_BASE_URL",
        help="APOD endpoint URL",
    ),
    timeout: float = typer.Option(
        DEFAULT_TIMEOUT,
        "--timeout",
        min=1,
        max=300,
        help="Request timeout in seconds",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the record as JSON",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging",
    ),
) -> None:
    """Show today's image, or yesterday's if today has none yet."""
    setup_logging(verbose)

    exit_code = asyncio.run(async_today(api_key, base_url, timeout, as_json))
    raise typer.Exit(exit_code)


@app.command("date")
def for_date(
    day: str = typer.Argument(..., help="Date as YYYY-MM-DD"),
    api_key: str = typer.Option(
        "DEMO_KEY",
        "--api-key",
        "-k",
        envvar="APOD_API_KEY",
        help="API key (or set APOD_API_KEY env var)",
    ),
    base_url: str = typer.Option(
        APOD_BASE_URL,
        "--base-url",
        envvar="APOD_BASE_URL",
        help="APOD endpoint URL",
    ),
    timeout: float = typer.Option(
        DEFAULT_TIMEOUT,
        "--timeout",
        min=1,
        max=300,
        help="Request timeout in seconds",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the record as JSON",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging",
    ),
) -> None:
    """Show the image for DAY."""
    setup_logging(verbose)

    try:
        day = format_date(parse_date(day))
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="DAY") from e

    exit_code = asyncio.run(async_for_date(day, api_key, base_url, timeout, as_json))
    raise typer.Exit(exit_code)


if __name__ == "__main__":
    app()
