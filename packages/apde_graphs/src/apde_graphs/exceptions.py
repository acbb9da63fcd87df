"""Exception hierarchy for apde_graphs."""

from typing import Any


class GraphsError(Exception):
    """Base exception for all apde_graphs errors."""

    def __init__(self, message: str, *, detail: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.detail = detail or {}

    def __repr__(self) -> str:
        if self.detail:
            return f"{type(self).__name__}({self!s}, detail={self.detail})"
        return f"{type(self).__name__}({self!s})"


class InvalidArgument(GraphsError, ValueError):
    """A helper was called with an argument of the wrong type or range."""


class ConfigError(GraphsError):
    """Invalid settings file or override."""


class DatasetNotFound(GraphsError, KeyError):
    """No example dataset registered under the requested name."""

    def __init__(self, name: str, available: list[str]) -> None:
        self.name = name
        self.available = available
        super().__init__(f"Unknown dataset '{name}'. Available: {sorted(available)}")

    def __str__(self) -> str:
        return self.args[0]
