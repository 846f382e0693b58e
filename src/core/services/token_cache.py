"""Caché de un solo slot para el token anti-CSRF.

Notas:
- Vive solo en memoria; nunca se persiste.
- Sin locks: el cliente corre en un único event loop. Dos requests mutantes
  concurrentes pueden pedir token a la vez; el segundo `set` sobrescribe al
  primero con un token igual de válido.
"""

from __future__ import annotations


class TokenCache:
    """Slot compartido por fetcher, cliente y re-auth de una misma sesión."""

    def __init__(self, value: str | None = None) -> None:
        self._value = value or None

    def get(self) -> str | None:
        return self._value

    def set(self, value: str) -> None:
        if not value:
            raise ValueError("CSRF token must be a non-empty string")
        self._value = value

    def clear(self) -> None:
        self._value = None

    @property
    def is_present(self) -> bool:
        return self._value is not None

    def __repr__(self) -> str:
        state = "present" if self.is_present else "absent"
        return f"TokenCache({state})"
