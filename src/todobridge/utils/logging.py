"""Logging setup shared by every todobridge module."""

import json
import logging
import os

_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
_LOGGER_INITIALIZED = False


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        data = {
            "level": record.levelname.lower(),
            "name": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            data["exc"] = self.formatException(record.exc_info)
        return json.dumps(data)


def init_logging(force: bool = False) -> None:
    """
    Configure the ``todobridge`` logger once.

    Environment:
        TODOBRIDGE_LOG_LEVEL: Level name (default INFO)
        TODOBRIDGE_JSON_LOGS: "1"/"true"/"yes" for one JSON object per line
    """
    global _LOGGER_INITIALIZED
    if _LOGGER_INITIALIZED and not force:
        return
    level = os.getenv("TODOBRIDGE_LOG_LEVEL", "INFO").upper()
    json_logs = os.getenv("TODOBRIDGE_JSON_LOGS", "0").lower() in ("1", "true", "yes")

    handler = logging.StreamHandler()
    handler.setFormatter(_JsonFormatter() if json_logs else logging.Formatter(_FORMAT))

    root = logging.getLogger("todobridge")
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(getattr(logging, level, logging.INFO))
    _LOGGER_INITIALIZED = True


def get_logger(name: str) -> logging.Logger:
    if not _LOGGER_INITIALIZED:
        init_logging()
    return logging.getLogger(name)


__all__ = ["get_logger", "init_logging"]
