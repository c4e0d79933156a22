"""Database repository exceptions."""

from __future__ import annotations

from typing import Any


class RepositoryError(Exception):
    """Base exception for repository operations."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class NotFoundError(RepositoryError):
    """Entity not found in database.

    This is a data-level error (404-like) rather than a system error;
    services translate it into NotFoundException.

    Attributes:
        model_name: Name of the model class that wasn't found
        identifier: The key/value that was searched for
    """

    def __init__(self, model_name: str, identifier: dict[str, Any]):
        self.model_name = model_name
        self.identifier = identifier

        id_str = ", ".join(f"{k}={v!r}" for k, v in identifier.items())
        super().__init__(
            f"{model_name} not found with {id_str}",
            details={"model": model_name, **identifier},
        )

    def __repr__(self) -> str:
        return f"NotFoundError(model={self.model_name!r}, identifier={self.identifier!r})"


__all__ = [
    "NotFoundError",
    "RepositoryError",
]
