from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .models import ImportResponse


class ServiceConnectionError(Exception):
    """Raised when the import service could not be reached or its answer could not be read.

    Covers DNS failures, refused connections, connect/read timeouts, I/O errors
    while sending or receiving, and a 200 body that is not a UTF-8 JSON object.
    When the status line had already arrived, ``response`` carries it (without a body).
    """

    def __init__(
        self,
        cause: Optional[BaseException] = None,
        detail: Optional[str] = None,
        response: Optional["ImportResponse"] = None,
    ) -> None:
        self.cause = cause
        self.detail = detail or (str(cause) if cause is not None else "unknown error")
        self.response = response
        super().__init__(f"failed to connect to service: {self.detail}")
