"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación estricta y documentación autocontenida (Field) sin acoplar
  el Core a librerías de I/O.
- El backend responde siempre con el mismo sobre (`ApiResponse`), así que lo
  validamos una sola vez en el borde.

Nota:
- Estos modelos describen *qué* viaja por el cable, no *cómo* se envía.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict

T = TypeVar("T")

SAFE_METHODS: frozenset[str] = frozenset({"GET", "HEAD", "OPTIONS"})


class ApiResponse(BaseModel, Generic[T]):
    """Sobre normalizado `{success, data, error, timestamp}` del backend.

    Se devuelve tal cual al caller cuando la respuesta es 2xx.
    """

    model_config = ConfigDict(extra="ignore")

    success: bool = Field(
        ...,
        description="Indica si el backend procesó la operación.",
    )
    data: T | None = Field(
        default=None,
        description="Carga útil específica de cada endpoint.",
    )
    error: str | None = Field(
        default=None,
        description="Mensaje de error del servidor (si aplica).",
    )
    timestamp: str = Field(
        default="",
        description="Momento de la respuesta (ISO-8601, generado por el servidor).",
    )


class RequestDescriptor(BaseModel):
    """Descripción inmutable de una llamada HTTP.

    Se construye en cada call site y no se retiene tras la llamada.
    """

    model_config = ConfigDict(frozen=True)

    url: str = Field(
        ...,
        min_length=1,
        description="Ruta relativa al backend (p.ej. '/api/posts') o URL absoluta.",
    )
    method: str = Field(
        default="GET",
        min_length=1,
        description="Verbo HTTP.",
    )
    body: Any = Field(
        default=None,
        description="Cuerpo serializable a JSON (opcional).",
    )
    headers: dict[str, str] = Field(
        default_factory=dict,
        description="Headers extra del caller; se mezclan sobre los por defecto.",
    )

    @field_validator("method")
    @classmethod
    def _upper_method(cls, value: str) -> str:
        return value.strip().upper()

    @property
    def is_mutating(self) -> bool:
        return self.method not in SAFE_METHODS


class CsrfTokenData(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    csrf_token: str = Field(
        ...,
        min_length=1,
        alias="csrfToken",
        description="Token anti-CSRF emitido para la sesión actual.",
    )


class AuthUser(BaseModel):
    """Usuario de la sesión actual (`GET /api/auth/me`)."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., description="Identificador del usuario.")
    username: str = Field(..., min_length=1, description="Nombre de usuario.")
    email: str | None = Field(default=None, description="Email registrado.")
    plan: str | None = Field(default=None, description="Plan de suscripción.")
    role: str | None = Field(default=None, description="Rol (user/admin).")

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        # El backend serializa ids numéricos o uuid según la tabla.
        if isinstance(value, int):
            return str(value)
        return value


class LoginCredentials(BaseModel):
    username: str = Field(..., min_length=1, max_length=128)
    password: str = Field(..., min_length=1, repr=False)
