"""Logging estructurado (structlog sobre logging estándar).

Por qué structlog:
- Eventos con clave/valor (`url`, `status_code`, `attempt`) en vez de strings
  concatenados, fáciles de filtrar en consola o JSON.
- Un único punto de redacción: tokens CSRF, cookies y passwords nunca llegan
  en claro al handler.
"""

from __future__ import annotations

import logging
import re
import sys
from typing import Any

import structlog

from core.config import AppSettings

_REDACTED = "***REDACTED***"

_SENSITIVE_KEYS = frozenset({"password", "csrf_token", "token", "cookie", "set-cookie", "x-csrf-token"})

_KV_RE = re.compile(r"(?i)\b(password|csrf_?token|x-csrf-token|cookie|token)\b(\s*[=:]\s*)([^\s,;]+)")

_configured = False


def _redact_str(s: str) -> str:
    return _KV_RE.sub(lambda m: f"{m.group(1)}{m.group(2)}{_REDACTED}", s)


def redact_event(_, __, event_dict: dict[str, Any]) -> dict[str, Any]:
    for k, v in list(event_dict.items()):
        if k.lower() in _SENSITIVE_KEYS and v is not None:
            event_dict[k] = _REDACTED
        elif isinstance(v, str):
            event_dict[k] = _redact_str(v)
    return event_dict


def configure_logging(settings: AppSettings | None = None, *, force: bool = False) -> None:
    """Configura structlog una sola vez por proceso.

    Reglas:
    - `log_json=True` renderiza JSON (pipelines); si no, consola legible.
    - Los logs van a stderr para no mezclarse con la salida de la CLI.
    """

    global _configured
    if _configured and not force:
        return

    settings = settings or AppSettings()
    level = getattr(logging, str(settings.log_level).upper(), logging.INFO)

    shared_processors: list[Any] = [
        structlog.processors.TimeStamper(fmt="iso", utc=True, key="ts"),
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        redact_event,
    ]
    renderer: Any
    if settings.log_json:
        # ConsoleRenderer formatea las excepciones por sí mismo.
        shared_processors.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=shared_processors,
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
