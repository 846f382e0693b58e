"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

import json
from typing import Any

from rich.align import Align
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import ApiResponse, AuthUser


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida.

    Por qué aquí:
    - Evita dependencias circulares (main <-> doctor).
    - Permite desactivar banner en modos no interactivos (JSON/pipelines).
    """

    title = Text("AI ChatBot SaaS", style="bold cyan")
    subtitle = Text("Cliente de API • Sesión • CSRF", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_user_table(user: AuthUser) -> Table:
    table = Table(title="Current User")
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")
    for key, value in user.model_dump().items():
        table.add_row(key, "" if value is None else str(value))
    return table


def build_envelope_panel(envelope: ApiResponse[Any]) -> Panel:
    """Panel para presentar el sobre `{success, data, error, timestamp}`."""

    style = "green" if envelope.success else "red"
    body = Text()
    body.append(f"success: {envelope.success}\n", style=f"bold {style}")
    if envelope.timestamp:
        body.append(f"timestamp: {envelope.timestamp}\n", style="dim")
    if envelope.error:
        body.append(f"error: {envelope.error}\n", style="red")
    if envelope.data is not None:
        body.append("\n")
        body.append(json.dumps(envelope.data, ensure_ascii=False, indent=2, default=str))

    return Panel(body, title=Text("Respuesta", style=f"bold {style}"), border_style=style)


def print_error(console: Console, message: str, *, kind: str | None = None) -> None:
    prefix = f"[{kind}] " if kind else ""
    console.print(f"[red]{escape(prefix + message)}[/red]")
