"""Fallos clasificados del cliente.

Taxonomía:
- `AuthenticationError`: sesión inválida/expirada (se recupera con re-login).
- `ServerRestartError`: el servidor perdió el estado de token/sesión
  (reinicio o caída); se recupera con el flujo completo de re-auth.
- `ApiError`: todo lo demás; llega al caller tal cual.
"""

from __future__ import annotations


class ApiError(Exception):
    """Fallo genérico de una llamada al backend."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AuthenticationError(ApiError):
    def __init__(self, message: str = "Authentication required", *, status_code: int | None = 401) -> None:
        super().__init__(message, status_code=status_code)


class ServerRestartError(ApiError):
    def __init__(
        self,
        message: str = "Server restarted - please log in again",
        *,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code)


class CsrfTokenError(ApiError):
    """No se pudo obtener un token anti-CSRF del servidor."""
