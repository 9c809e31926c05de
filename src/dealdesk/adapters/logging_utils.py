import json
import logging
import sys
from datetime import datetime, timezone

from .config import config

SERVICE_NAME = "dealdesk"

# LogRecord attributes that context keys may not overwrite
_RESERVED = {"ts", "level", "logger", "message", "service", "env"}


class JsonLogFormatter(logging.Formatter):
    """One JSON object per line; extra={"context": {...}} is flattened in."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": SERVICE_NAME,
            "env": config.ENV,
        }
        ctx = getattr(record, "context", None)
        if isinstance(ctx, dict):
            for key, value in ctx.items():
                payload[f"ctx_{key}" if key in _RESERVED else key] = value
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JsonLogFormatter())
        logger.addHandler(handler)
        logger.setLevel(config.LOG_LEVEL)
        logger.propagate = False
    return logger
