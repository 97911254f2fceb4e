"""Logging setup shared by the CLI and the web app."""

import json
import logging
import os
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class JsonFormatter(logging.Formatter):
    """Outputs log records as single-line JSON objects."""

    def format(self, record):
        log_entry = {
            "timestamp": self.formatTime(record, DATE_FORMAT),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[0] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry)


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Configure the 'fleet' logger from FLEET_LOG_LEVEL / FLEET_LOG_FORMAT.

    Safe to call more than once; the handler is only added the first time.
    """
    level = (level or os.environ.get("FLEET_LOG_LEVEL", "INFO")).upper()
    logger = logging.getLogger("fleet")
    logger.setLevel(level)

    if not any(getattr(h, "_fleet_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler._fleet_handler = True
        if os.environ.get("FLEET_LOG_FORMAT", "text").lower() == "json":
            handler.setFormatter(JsonFormatter())
        else:
            handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)
    return logger
