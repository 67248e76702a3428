from __future__ import annotations

import logging
import sys
from typing import Optional

_LEVELS = {
    "critical": logging.CRITICAL,
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": logging.DEBUG,  # uvicorn accepts "trace"; stdlib has no such level.
}


def configure_logging(log_level: str = "info") -> None:
    """
    Configures root logging for the API process.

    - logs to stdout with a single handler
    - safe to call more than once (tests reload the app module)
    """
    level = parse_level(log_level)

    root = logging.getLogger()
    root.setLevel(level)

    for h in list(root.handlers):
        if isinstance(h, logging.StreamHandler) and getattr(h, "_todolist", False):
            root.removeHandler(h)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s - %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )
    )
    handler._todolist = True  # type: ignore[attr-defined]
    root.addHandler(handler)

    # Access logs duplicate what the service already logs per operation.
    logging.getLogger("uvicorn.access").setLevel(max(level, logging.WARNING))
    logging.getLogger("uvicorn.error").setLevel(level)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name if name else "todolist")


def parse_level(log_level: str) -> int:
    return _LEVELS.get(log_level.lower().strip(), logging.INFO)
