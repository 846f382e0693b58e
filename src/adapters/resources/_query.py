"""Construcción de query strings para los wrappers de recursos."""

from __future__ import annotations

from typing import Any, Mapping
from urllib.parse import urlencode


def with_query(path: str, params: Mapping[str, Any] | None = None) -> str:
    """Añade `params` a `path` omitiendo valores None.

    Los booleanos se serializan como 'true'/'false', igual que el cliente web.
    """

    if not params:
        return path
    pairs: list[tuple[str, str]] = []
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            pairs.append((key, "true" if value else "false"))
        else:
            pairs.append((key, str(value)))
    if not pairs:
        return path
    return f"{path}?{urlencode(pairs)}"
