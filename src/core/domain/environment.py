"""Runtime environments for the chatbot-saas client.

Keeping the enum in the domain layer lets config, services and the CLI
share one source of truth without importing adapters.
"""

from __future__ import annotations

from enum import Enum


class Environment(str, Enum):
    """Deployment environment the client talks to."""

    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TEST = "test"

    @classmethod
    def default(cls) -> "Environment":
        """Return the environment assumed when nothing is configured."""

        return cls.DEVELOPMENT

    def label(self) -> str:
        """Human readable label for tables and logging."""

        return self.value.capitalize()
