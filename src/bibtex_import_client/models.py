from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .errors import ServiceConnectionError


@dataclass(frozen=True)
class ImportResponse:
    status_code: int
    status_message: str
    # Set only for a 200 answer; other bodies are never read.
    json: Optional[Dict[str, Any]] = None

    def __post_init__(self) -> None:
        if self.status_code != 200 and self.json is not None:
            raise ValueError(f"json body is only kept for status 200, got {self.status_code}")

    @property
    def status_line(self) -> str:
        return f"response status: {self.status_code} ({self.status_message})"


@dataclass(frozen=True)
class SubmitResult:
    """Either a response from the service or the reason it could not be obtained."""

    response: Optional[ImportResponse] = None
    error: Optional[ServiceConnectionError] = None

    def __post_init__(self) -> None:
        if (self.response is None) == (self.error is None):
            raise ValueError("SubmitResult needs exactly one of response or error")

    @property
    def ok(self) -> bool:
        return self.response is not None

    @classmethod
    def success(cls, response: ImportResponse) -> "SubmitResult":
        return cls(response=response)

    @classmethod
    def failure(cls, error: ServiceConnectionError) -> "SubmitResult":
        return cls(error=error)
