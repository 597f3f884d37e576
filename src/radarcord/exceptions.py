"""Exceptions raised by the radarcord client."""

from __future__ import annotations

from typing import Any

DEFAULT_MESSAGE = "Something went wrong with radarcord!"


class RadarcordError(Exception):
    """Something went wrong while talking to Radarcord or Discord.

    Every runtime fault raised by this package is a ``RadarcordError``:
    transport failures, non-2xx responses, a bot that is not ready yet,
    malformed review payloads and unresolvable notification channels.
    Programmer misuse (wrong argument types) raises ``TypeError`` instead.
    """

    def __init__(
        self,
        message: str = DEFAULT_MESSAGE,
        *,
        status_code: int | None = None,
        body: str | None = None,
        context: dict[str, Any] | None = None,  # pyright: ignore[reportExplicitAny] # Free-form debugging context
    ) -> None:
        """Initialize RadarcordError.

        Args:
            message: Human-readable error message
            status_code: HTTP status code when the error came from a response
            body: Raw response body when the error came from a response
            context: Additional context information for debugging
        """
        super().__init__(message)
        self.message: str = message
        self.status_code: int | None = status_code
        self.body: str | None = body
        self.context: dict[str, Any] = context or {}  # pyright: ignore[reportExplicitAny]

    @classmethod
    def from_status(cls, status_code: int, body: str) -> RadarcordError:
        """Build the error raised for a non-2xx response."""
        return cls(f"Request code {status_code}: {body}", status_code=status_code, body=body)


class ConfigurationError(RadarcordError):
    """Raised when configuration cannot be loaded or fails validation."""

    def __init__(
        self,
        message: str,
        *,
        file_path: str | None = None,
        env_var: str | None = None,
    ) -> None:
        context: dict[str, object] = {}
        if file_path is not None:
            context["file_path"] = file_path
        if env_var is not None:
            context["env_var"] = env_var
        super().__init__(message, context=context)
        self.file_path: str | None = file_path
        self.env_var: str | None = env_var
