"""CLI principal (Typer).

Por qué una CLI:
- Permite probar la sesión contra el backend (login, me, requests crudos)
  sin levantar el frontend.
- Cada comando abre una `ApiSession` propia: cookies y token viven solo
  mientras dura el comando.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Awaitable, Callable, Optional

import typer
from rich.console import Console

from cli import doctor
from cli.ui_components import build_envelope_panel, build_user_table, print_banner, print_error
from core.config import AppSettings
from core.domain.errors import ApiError
from core.domain.models import RequestDescriptor
from core.log import configure_logging
from core.services.api_session import ApiSession
from core.services.auth_recovery import describe_error
from core.services.event_bus import AuthEvent, Event

app = typer.Typer(no_args_is_help=True, help="Client for the AI ChatBot SaaS API.")
app.add_typer(doctor.app, name="doctor")

_console = Console()


@app.callback()
def _main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit logs as JSON lines."),
) -> None:
    overrides: dict[str, Any] = {}
    if verbose:
        overrides["log_level"] = "DEBUG"
    if json_logs:
        overrides["log_json"] = True
    configure_logging(AppSettings(**overrides))


def _notify(event: Event) -> None:
    if event.event_type == AuthEvent.SERVER_RESTART.value:
        _console.print("[yellow]The server seems to have restarted; your session was lost.[/yellow]")
    else:
        _console.print("[yellow]Authentication required.[/yellow]")


def _run(action: Callable[[ApiSession], Awaitable[None]]) -> None:
    """Ejecuta `action` dentro de una sesión y traduce fallos a exit code 1."""

    async def runner() -> None:
        async with ApiSession() as session:
            session.events.on(AuthEvent.AUTH_REQUIRED, _notify)
            session.events.on(AuthEvent.SERVER_RESTART, _notify)
            try:
                await action(session)
            except ApiError as exc:
                session.recovery.handle_auth_error(exc)
                message = describe_error(exc)
                print_error(_console, message, kind=type(exc).__name__)
                raise typer.Exit(code=1) from exc

    asyncio.run(runner())


async def _maybe_login(session: ApiSession, username: str | None, password: str | None) -> None:
    if username is None:
        return
    if password is None:
        password = typer.prompt("Password", hide_input=True)
    await session.auth.login(username, password)


@app.command()
def login(
    username: str = typer.Option(..., "--username", "-u", prompt=True),
    password: str = typer.Option(..., "--password", "-p", prompt=True, hide_input=True),
) -> None:
    """Log in and show the session user."""

    async def action(session: ApiSession) -> None:
        user = await session.auth.login(username, password)
        _console.print(build_user_table(user))

    _run(action)


@app.command()
def whoami(
    username: Optional[str] = typer.Option(None, "--username", "-u", help="Log in first as this user."),
    password: Optional[str] = typer.Option(None, "--password", "-p"),
) -> None:
    """Show the user bound to the current session."""

    async def action(session: ApiSession) -> None:
        await _maybe_login(session, username, password)
        user = await session.auth.me()
        _console.print(build_user_table(user))

    _run(action)


@app.command()
def request(
    method: str = typer.Argument(..., help="HTTP method (GET, POST, PUT, PATCH, DELETE)."),
    path: str = typer.Argument(..., help="Path relative to the API base URL, e.g. /api/posts/recent."),
    data: Optional[str] = typer.Option(None, "--data", "-d", help="JSON body."),
    retry: bool = typer.Option(True, "--retry/--no-retry", help="Retry once when the session expired."),
    username: Optional[str] = typer.Option(None, "--username", "-u", help="Log in first as this user."),
    password: Optional[str] = typer.Option(None, "--password", "-p"),
) -> None:
    """Send a raw request through the authenticated client."""

    body: Any = None
    if data is not None:
        try:
            body = json.loads(data)
        except json.JSONDecodeError as exc:
            raise typer.BadParameter(f"--data is not valid JSON: {exc}") from exc

    descriptor = RequestDescriptor(url=path, method=method, body=body)

    async def action(session: ApiSession) -> None:
        await _maybe_login(session, username, password)
        if retry:
            envelope = await session.api.call_with_retry(descriptor)
        else:
            envelope = await session.api.call(descriptor)
        _console.print(build_envelope_panel(envelope))

    _run(action)


@app.command(name="csrf-token")
def csrf_token() -> None:
    """Fetch a fresh CSRF token (shows only a prefix)."""

    async def action(session: ApiSession) -> None:
        token = await session.auth.csrf_token()
        _console.print(f"[green]CSRF token:[/green] {token[:6]}… ({len(token)} chars)")

    _run(action)


@app.command()
def init(
    banner: bool = typer.Option(True, "--banner/--no-banner", help="Show the welcome banner."),
) -> None:
    """Warm the session up and run the authentication check."""

    if banner:
        print_banner(_console)

    async def action(session: ApiSession) -> None:
        ok = await session.recovery.initialize_auth()
        if ok:
            _console.print("[green]Authenticated.[/green]")
        else:
            _console.print("[yellow]Not authenticated.[/yellow]")
            raise typer.Exit(code=1)

    _run(action)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
