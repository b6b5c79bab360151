# sequin_platform/errors.py
# error taxonomy for reconcilers and the API client.
# Copyright (c) 2025-2026 CrossWatch / Cenodude (https://github.com/cenodude/CrossWatch)
from __future__ import annotations

from typing import Any

__all__ = [
    "SequinError",
    "ValidationError",
    "InvalidIdentifier",
    "InvalidDestinationField",
    "ConfigError",
    "NotFoundError",
    "RemoteAPIError",
    "CancellationError",
]


class SequinError(RuntimeError):
    """Base error. Carries which resource instance and operation failed."""

    kind = "SequinError"

    def __init__(
        self,
        message: str,
        *,
        resource: str | None = None,
        operation: str | None = None,
        ident: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.resource = resource
        self.operation = operation
        self.ident = ident

    def bind(self, *, resource: str, operation: str, ident: str | None = None) -> "SequinError":
        # first binding wins; inner layers know more than outer ones
        if self.resource is None:
            self.resource = resource
        if self.operation is None:
            self.operation = operation
        if self.ident is None and ident:
            self.ident = ident
        return self

    def __str__(self) -> str:
        if not self.resource:
            return self.message
        where = f"{self.resource}"
        if self.ident:
            where = f"{where} {self.ident}"
        if self.operation:
            return f"{self.operation} {where}: {self.message}"
        return f"{where}: {self.message}"


class ValidationError(SequinError):
    kind = "ValidationError"


class InvalidIdentifier(ValidationError):
    kind = "InvalidIdentifier"


class InvalidDestinationField(ValidationError):
    kind = "InvalidDestinationField"

    def __init__(self, message: str, *, field: str | None = None, **kw: Any) -> None:
        super().__init__(message, **kw)
        self.field = field


class ConfigError(SequinError):
    kind = "ConfigError"


class NotFoundError(SequinError):
    kind = "NotFoundError"


class RemoteAPIError(SequinError):
    kind = "RemoteAPIError"

    def __init__(self, message: str, *, status: int | None = None, body: str = "", **kw: Any) -> None:
        super().__init__(message, **kw)
        self.status = status
        self.body = body


class CancellationError(SequinError):
    kind = "CancellationError"
