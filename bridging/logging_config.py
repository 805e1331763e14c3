# bridging/logging_config.py

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
DATE_FORMAT = "(%Y-%m-%d %H:%M:%S)"


def configure_logging(level: str | int = "INFO") -> None:
    """
    Install a single stderr handler on the root logger. Only entry points call
    this; library modules just use logging.getLogger(__name__).
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        level = resolved if isinstance(resolved, int) else logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    # Avoid duplicate handlers if called twice (REPL/tests)
    for h in root.handlers:
        if getattr(h, "_bridging_handler", False):
            h.setLevel(level)
            return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    handler._bridging_handler = True  # type: ignore[attr-defined]
    root.addHandler(handler)
