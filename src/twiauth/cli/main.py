"""twiauth command line: login, status, logout and request signing."""

import asyncio
from pathlib import Path
from typing import Annotated

import httpx
import typer
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from structlog import get_logger

from twiauth._version import __version__
from twiauth.auth.models import AccessToken
from twiauth.auth.oauth1.sequence import AuthSequence
from twiauth.auth.storage import JsonFileTokenStorage
from twiauth.config.settings import Settings, config_manager
from twiauth.exceptions import TwiAuthError
from twiauth.services.interactive import BrowserInteractiveSession
from twiauth.services.transport import HttpxNetworkExecutor


app = typer.Typer(
    name="twiauth",
    help="OAuth 1.0a three-legged authorization",
    no_args_is_help=True,
)

console = Console()
logger = get_logger(__name__)

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Path to a TOML configuration file",
        dir_okay=False,
    ),
]


def version_callback(value: bool) -> None:
    if value:
        console.print(f"twiauth {__version__}")
        raise typer.Exit()


@app.callback()
def app_main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Authorize an application against an OAuth 1.0a provider."""


def _load_settings(config: Path | None) -> Settings:
    settings = config_manager.load_settings(config)
    config_manager.setup_logging()
    return settings


def get_token_storage(settings: Settings) -> JsonFileTokenStorage:
    return JsonFileTokenStorage(settings.storage.token_file)


def build_sequence(settings: Settings, ephemeral: bool | None = None) -> AuthSequence:
    """Create a sequence wired to the browser, httpx and the token file."""
    sequence = AuthSequence.from_settings(
        settings,
        executor=HttpxNetworkExecutor(timeout=settings.oauth.request_timeout),
        interactive_session=BrowserInteractiveSession(console=console),
        token_storage=get_token_storage(settings),
    )
    if ephemeral is not None:
        sequence.ephemeral = ephemeral
    return sequence


def _mask(value: str, visible: int = 6) -> str:
    if len(value) <= visible:
        return "*" * len(value)
    return f"{value[:visible]}..."


def _print_token_table(token: AccessToken, location: str) -> None:
    table = Table(
        show_header=True,
        header_style="bold cyan",
        box=box.ROUNDED,
        title="Access Token",
        title_style="bold white",
    )
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="white")
    table.add_row("Screen name", token.screen_name or "[dim]unknown[/dim]")
    table.add_row("User ID", token.user_id or "[dim]unknown[/dim]")
    table.add_row("Token", _mask(token.oauth_token))
    table.add_row("Secret", "[dim]hidden[/dim]")
    table.add_row("Location", f"[dim]{location}[/dim]")
    console.print(table)


async def _login(sequence: AuthSequence, force: bool) -> tuple[AccessToken, bool]:
    if not force:
        token = await sequence.restore()
        if token is not None:
            return token, False
    return await sequence.initialize(), True


@app.command(name="login")
def login_command(
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Authorize again even if a token is stored"),
    ] = False,
    no_ephemeral: Annotated[
        bool,
        typer.Option(
            "--no-ephemeral",
            help="Allow the browser session to reuse existing cookies",
        ),
    ] = False,
    config: ConfigOption = None,
) -> None:
    """Authorize the application and store the access token.

    Opens your browser at the provider's authorization page, then asks for
    the URL the browser was redirected to.

    Examples:
        twiauth login
        twiauth login --force
        twiauth login --config ./twiauth.toml

    """
    try:
        settings = _load_settings(config)
        sequence = build_sequence(settings, ephemeral=False if no_ephemeral else None)
        token, fresh = asyncio.run(_login(sequence, force))
    except KeyboardInterrupt:
        console.print("\n[yellow]Login cancelled by user.[/yellow]")
        raise typer.Exit(1) from None
    except TwiAuthError as e:
        logger.debug("login_failed", error_type=str(e.error_type), error=str(e))
        console.print(f"[red]Login failed:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e

    if fresh:
        console.print("[green]✓[/green] Authorization completed")
    else:
        console.print(
            "[green]✓[/green] Already logged in [dim](use --force to authorize again)[/dim]"
        )
    _print_token_table(token, str(settings.storage.token_file))


@app.command(name="status")
def status_command(config: ConfigOption = None) -> None:
    """Show whether an access token is stored and for which user."""
    try:
        settings = _load_settings(config)
        storage = get_token_storage(settings)
        token = asyncio.run(storage.load())
    except TwiAuthError as e:
        console.print(f"[red]Error reading token:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e

    if token is None:
        console.print("[yellow]Not logged in.[/yellow]")
        console.print("\n[dim]To authorize, run:[/dim]")
        console.print("[cyan]twiauth login[/cyan]")
        return

    _print_token_table(token, storage.get_location())


@app.command(name="logout")
def logout_command(config: ConfigOption = None) -> None:
    """Delete the stored access token."""
    try:
        settings = _load_settings(config)
        storage = get_token_storage(settings)
        deleted = asyncio.run(storage.delete())
    except TwiAuthError as e:
        console.print(f"[red]Logout failed:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e

    if deleted:
        console.print(f"[green]✓[/green] Removed {storage.get_location()}")
    else:
        console.print("[yellow]No stored token to remove.[/yellow]")


def _parse_param(value: str) -> tuple[str, str]:
    key, sep, param_value = value.partition("=")
    if not sep or not key:
        raise typer.BadParameter(f"Expected key=value, got '{value}'")
    return key, param_value


@app.command(name="sign")
def sign_command(
    method: Annotated[str, typer.Argument(help="HTTP method of the API call")],
    url: Annotated[str, typer.Argument(help="URL of the API call")],
    params: Annotated[
        list[str] | None,
        typer.Option(
            "--param",
            "-p",
            help="Query or form parameter as key=value (repeatable)",
        ),
    ] = None,
    config: ConfigOption = None,
) -> None:
    """Print the Authorization header for an API call.

    Query parameters in URL are signed together with any --param values.

    Examples:
        twiauth sign GET "https://api.twitter.com/1.1/statuses/home_timeline.json?count=5"
        twiauth sign POST https://api.twitter.com/1.1/statuses/update.json -p status=hello

    """
    try:
        request_url = httpx.URL(url)
    except httpx.InvalidURL as e:
        raise typer.BadParameter(str(e), param_hint="URL") from e
    base_url = str(request_url.copy_with(query=None, fragment=None))
    pairs = list(request_url.params.multi_items())
    pairs += [_parse_param(p) for p in params or []]

    try:
        settings = _load_settings(config)
        sequence = build_sequence(settings)
        token = asyncio.run(sequence.restore())
        if token is None:
            console.print("[red]Not logged in.[/red] Run [cyan]twiauth login[/cyan] first.")
            raise typer.Exit(1)
        header = sequence.authorization_header(method, base_url, pairs)
    except TwiAuthError as e:
        console.print(f"[red]Signing failed:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e

    typer.echo(header)


def main() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    main()
