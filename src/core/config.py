"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que adaptadores (HTTP/auth) lean config de forma consistente.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.environment import Environment


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "chatbot-saas"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "chatbot-saas"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "chatbot-saas"
    return Path.home() / ".config" / "chatbot-saas"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str | None], env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# chatbot-saas user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Configuración central del cliente.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="CHATBOT_SAAS_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    api_base_url: str = Field(
        default="http://localhost:5000",
        min_length=8,
        description="Base URL del backend Express.",
    )
    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout por request (segundos).",
    )
    user_agent: str = Field(
        default="chatbot-saas-client/1.0",
        min_length=1,
        description="User-Agent enviado al backend.",
    )
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Entorno de ejecución (development/production/test).",
    )

    csrf_token_path: str = Field(
        default="/api/auth/csrf-token",
        min_length=1,
        description="Endpoint que emite el token anti-CSRF.",
    )
    csrf_header_name: str = Field(
        default="X-CSRF-Token",
        min_length=1,
        description="Header en el que viaja el token en requests mutantes.",
    )

    auth_retry_max: int = Field(
        default=1,
        ge=0,
        le=10,
        description="Reintentos máximos ante sesión expirada (401).",
    )
    auth_retry_delay_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Espera fija antes de reintentar tras un 401.",
    )

    # Auto-login de desarrollo: solo si ambos valores se configuran explícitamente.
    dev_login_username: str | None = Field(
        default=None,
        description="Usuario para el auto-login en development (opcional).",
    )
    dev_login_password: str | None = Field(
        default=None,
        description="Password para el auto-login en development (opcional).",
    )

    log_level: str = Field(
        default="INFO",
        description="Nivel de logging (DEBUG, INFO, WARNING, ...).",
    )
    log_json: bool = Field(
        default=False,
        description="Emitir logs como JSON (una línea por evento).",
    )

    @field_validator("api_base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @property
    def dev_autologin_enabled(self) -> bool:
        return (
            self.environment is Environment.DEVELOPMENT
            and bool(self.dev_login_username)
            and bool(self.dev_login_password)
        )
