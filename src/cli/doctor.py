"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_async_client
from core.config import AppSettings, write_user_env_vars
from core.domain.environment import Environment

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_http(settings: AppSettings, path: str) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.get(path)
        return response.is_success, f"HTTP {response.status_code}"
    except Exception as exc:
        return False, str(exc) or type(exc).__name__


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="ChatBot SaaS Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    table.add_row("API base_url", "OK", settings.api_base_url)
    table.add_row("Environment", "OK", settings.environment.label())
    table.add_row(
        "Auth retry",
        "OK",
        f"{settings.auth_retry_max} retry / {settings.auth_retry_delay_seconds:g}s delay",
    )
    if settings.dev_autologin_enabled:
        table.add_row("Dev auto-login", "ENABLED", f"user={settings.dev_login_username}")
    else:
        table.add_row("Dev auto-login", "OFF", "Set dev credentials in development to enable")

    # Connectivity (best-effort)
    ok_init, detail_init = asyncio.run(_check_http(settings, "/api/auth/session-init"))
    table.add_row("Session init", "OK" if ok_init else "OPTIONAL", detail_init)

    ok_csrf, detail_csrf = asyncio.run(_check_http(settings, settings.csrf_token_path))
    table.add_row("CSRF endpoint", "OK" if ok_csrf else "FAIL", detail_csrf)

    _console.print(table)

    if not ok_csrf:
        _console.print(
            "\n[yellow]Note:[/yellow] Without a CSRF token every POST/PUT/PATCH/DELETE "
            "is reported as a server restart."
        )


@app.command(name="setup")
def setup() -> None:
    """Interactive setup (stores config in the user config .env)."""

    base_url = typer.prompt(
        "API base URL",
        default=AppSettings().api_base_url,
        show_default=True,
    ).strip()
    environment = typer.prompt(
        "Environment",
        default=Environment.default().value,
        show_default=True,
    ).strip().lower()

    if not base_url:
        raise typer.BadParameter("base_url is required")
    try:
        Environment(environment)
    except ValueError as exc:
        raise typer.BadParameter(f"unknown environment: {environment}") from exc

    values: dict[str, str | None] = {
        "CHATBOT_SAAS_API_BASE_URL": base_url,
        "CHATBOT_SAAS_ENVIRONMENT": environment,
    }

    if environment == Environment.DEVELOPMENT.value and typer.confirm(
        "Store development auto-login credentials?", default=False
    ):
        values["CHATBOT_SAAS_DEV_LOGIN_USERNAME"] = typer.prompt("Username").strip()
        values["CHATBOT_SAAS_DEV_LOGIN_PASSWORD"] = typer.prompt(
            "Password", hide_input=True, confirmation_prompt=False
        ).strip()

    env_path = write_user_env_vars(values)
    _console.print(f"[green]Saved config to:[/green] {env_path}")
