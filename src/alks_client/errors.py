"""Exceptions raised by the ALKS client."""

from typing import Any

import httpx


class AlksClientError(Exception):
    """Base class for errors raised by this library."""


class ApiError(AlksClientError):
    """Raised when the ALKS API answers with a non-2xx status.

    Attributes:
        status: HTTP status code of the response.
        message: HTTP reason phrase of the response.
        extra: Fields of the parsed JSON error body, or an empty dict when
            the body was missing, not JSON, or not a JSON object.
    """

    def __init__(
        self,
        status: int,
        message: str,
        extra: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.status = status
        self.message = message
        self.extra = dict(extra or {})

    @classmethod
    def from_response(cls, response: httpx.Response, body: Any = None) -> "ApiError":
        """Build an error from a response and its (possibly absent) JSON body."""
        extra = body if isinstance(body, dict) else None
        return cls(response.status_code, response.reason_phrase, extra)

    @property
    def status_message(self) -> str | None:
        """Server-provided ``statusMessage``, if any."""
        return self.extra.get("statusMessage")

    @property
    def errors(self) -> list[Any]:
        """Server-provided ``errors`` list, empty if absent."""
        return self.extra.get("errors") or []

    def __str__(self) -> str:
        if self.status_message:
            return f"{self.status} {self.message}: {self.status_message}"
        return f"{self.status} {self.message}"


class RoleNotFoundError(AlksClientError):
    """Raised when a custom role lookup reports the role does not exist."""

    def __init__(self, role_name: Any):
        self.role_name = role_name
        if role_name is None:
            msg = "Requested role does not exist in this account"
        else:
            msg = f"Role {role_name} does not exist in this account"
        super().__init__(msg)
