from __future__ import annotations

import json
from contextlib import closing
from typing import Any, Dict, Optional, Tuple

import requests

from .config import (
    DEFAULT_ENDPOINT,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
    ClientSettings,
    is_absolute_http_url,
)
from .errors import ServiceConnectionError
from .logger import get_logger, new_correlation_id
from .models import ImportResponse, SubmitResult


log = get_logger()

BIBTEX_CONTENT_TYPE = "text/plain; charset=utf-8"


class BibtexImportClient:
    def __init__(
        self,
        endpoint: str = DEFAULT_ENDPOINT,
        connect_timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        read_timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        _check_endpoint(endpoint)
        _check_timeouts(connect_timeout_seconds, read_timeout_seconds)
        self.endpoint = endpoint
        self.connect_timeout_seconds = connect_timeout_seconds
        self.read_timeout_seconds = read_timeout_seconds
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": user_agent})

    @classmethod
    def from_settings(cls, settings: Optional[ClientSettings] = None) -> "BibtexImportClient":
        settings = settings or ClientSettings()
        return cls(
            endpoint=settings.endpoint,
            connect_timeout_seconds=settings.connect_timeout_seconds,
            read_timeout_seconds=settings.read_timeout_seconds,
            user_agent=settings.user_agent,
        )

    def __enter__(self) -> "BibtexImportClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    def _timeouts(
        self,
        connect_timeout_seconds: Optional[float],
        read_timeout_seconds: Optional[float],
    ) -> Tuple[float, float]:
        connect = self.connect_timeout_seconds if connect_timeout_seconds is None else connect_timeout_seconds
        read = self.read_timeout_seconds if read_timeout_seconds is None else read_timeout_seconds
        _check_timeouts(connect, read)
        return connect, read

    def submit(
        self,
        bibtex_text: str,
        *,
        endpoint: Optional[str] = None,
        connect_timeout_seconds: Optional[float] = None,
        read_timeout_seconds: Optional[float] = None,
        correlation_id: Optional[str] = None,
    ) -> ImportResponse:
        """
        POST ``bibtex_text`` to the import service and report what it answered.

        - The status code and reason are always returned
        - The body is read and parsed as a JSON object only for a 200 answer
        - Any network, timeout or decoding failure raises ServiceConnectionError

        The BibTeX itself is not checked here; that is the service's job.
        """
        url = self.endpoint if endpoint is None else endpoint
        _check_endpoint(url)
        timeout = self._timeouts(connect_timeout_seconds, read_timeout_seconds)
        cid = correlation_id or new_correlation_id()

        body = bibtex_text.encode("utf-8")
        headers: Dict[str, str] = {
            "Content-Type": BIBTEX_CONTENT_TYPE,
            "X-Correlation-Id": cid,
        }
        status_only: Optional[ImportResponse] = None

        try:
            log.info("http_request", extra={"cid": cid, "method": "POST", "url": url, "bytes": len(body)})

            resp = self.session.request(
                method="POST",
                url=url,
                headers=headers,
                data=body,
                timeout=timeout,
                stream=True,
            )

            with closing(resp):
                status_only = ImportResponse(status_code=resp.status_code, status_message=resp.reason or "")
                log.info(
                    "http_response",
                    extra={"cid": cid, "status": status_only.status_code, "reason": status_only.status_message},
                )

                # Anything but 200 is reported as-is; its body stays unread.
                if status_only.status_code != 200:
                    return status_only

                raw = resp.content

        except requests.RequestException as e:
            log.info("http_connection_failed", extra={"cid": cid, "url": url, "err": str(e)})
            raise ServiceConnectionError(e, response=status_only) from e

        try:
            parsed = json.loads(raw.decode("utf-8"))
        except ValueError as e:
            log.info("http_invalid_body", extra={"cid": cid, "err": str(e)})
            raise ServiceConnectionError(e, f"invalid JSON in response body: {e}", response=status_only) from e

        if not isinstance(parsed, dict):
            kind = type(parsed).__name__
            log.info("http_invalid_body", extra={"cid": cid, "kind": kind})
            raise ServiceConnectionError(
                detail=f"response body is not a JSON object (got {kind})", response=status_only
            )

        log.info("http_body_parsed", extra={"cid": cid, "keys": len(parsed)})
        return ImportResponse(
            status_code=status_only.status_code, status_message=status_only.status_message, json=parsed
        )

    def submit_safely(self, bibtex_text: str, **kwargs: Any) -> SubmitResult:
        """Like :meth:`submit`, but a connection failure comes back as a failed result instead of raising."""
        try:
            return SubmitResult.success(self.submit(bibtex_text, **kwargs))
        except ServiceConnectionError as e:
            return SubmitResult.failure(e)


def _check_endpoint(url: str) -> None:
    if not is_absolute_http_url(url):
        raise ValueError(f"endpoint must be an absolute http(s) URL, got {url!r}")


def _check_timeouts(connect: float, read: float) -> None:
    if connect <= 0 or read <= 0:
        raise ValueError(f"timeouts must be positive, got connect={connect} read={read}")
