import json
import logging
import sys
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

LOGGER_NAME = "bibtex_import_client"

# LogRecord attributes that never go into the payload
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))) | {"message", "asctime"}


def new_correlation_id() -> str:
    return str(uuid.uuid4())


class JsonFormatter(logging.Formatter):
    """Render a record as one JSON line: ``ts``, ``level``, ``logger``, ``event`` plus every ``extra`` field."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "event": record.getMessage(),
        }
        payload.update(
            (k, v)
            for k, v in vars(record).items()
            if not k.startswith("_") and k not in _RECORD_ATTRS and k not in payload
        )
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def get_logger(name: str = LOGGER_NAME, level: Optional[Union[int, str]] = None) -> logging.Logger:
    """Return ``name`` with a single stderr JSON handler attached.

    ``level`` is applied whenever it is given; a fresh logger otherwise starts at INFO.
    stderr keeps stdout free for the command's own output.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(JsonFormatter())
        logger.addHandler(handler)
        if level is None:
            logger.setLevel(logging.INFO)

    if level is not None:
        logger.setLevel(level)
    return logger
