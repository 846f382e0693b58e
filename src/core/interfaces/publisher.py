"""Contrato del canal de eventos de la aplicación.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- El Core emite señales ("auth:required", ...) sin saber quién escucha:
  la CLI, una UI o un test pueden sustituir la implementación.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class EventPublisher(Protocol):
    """Contrato mínimo para publicar señales application-wide.

    Reglas de diseño:
    - `emit` es síncrono y no propaga errores de los listeners.
    - Devuelve cuántos listeners se ejecutaron sin error.
    """

    def emit(self, event_type: str, data: dict[str, Any] | None = None) -> int:
        """Publica `event_type` a todos los listeners registrados."""

        ...
