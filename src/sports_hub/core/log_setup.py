from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | int = "INFO") -> None:
    """Install a single stream handler on the root logger.

    Safe to call more than once; the CLI and the API app factory both call it.
    """
    root = logging.getLogger()
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root.setLevel(level)
    if any(getattr(h, "_sports_hub", False) for h in root.handlers):
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._sports_hub = True  # type: ignore[attr-defined]
    root.addHandler(handler)

    # httpx logs every request at INFO; keep provider noise down.
    logging.getLogger("httpx").setLevel(logging.WARNING)
