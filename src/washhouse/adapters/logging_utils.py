import json
import logging
import sys
import time

from .config import config

SERVICE_NAME = "washhouse"

# record keys the formatter owns; context cannot overwrite them
_RESERVED_KEYS = ("ts", "level", "logger", "message", "service", "env")


class JsonLogFormatter(logging.Formatter):
    """
    One JSON object per line.

    Context passed as `extra={"context": {...}}` is merged in at the top
    level (deal_id, irr_status, flag codes...). Values that are not JSON
    types, e.g. a Path, are written as strings.
    """

    def __init__(self, env: str = config.ENV):
        super().__init__()
        self.env = env

    def format(self, record):
        payload = {
            "ts": time.time(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": SERVICE_NAME,
            "env": self.env,
        }
        ctx = getattr(record, "context", None)
        if isinstance(ctx, dict):
            payload.update({k: v for k, v in ctx.items() if k not in _RESERVED_KEYS})
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JsonLogFormatter())
        logger.addHandler(handler)
        logger.setLevel(config.LOG_LEVEL.upper())
        logger.propagate = False
    return logger
