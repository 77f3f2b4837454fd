"""Module: logging."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    # Repeated app construction (tests, reloads) must not stack handlers.
    if not any(getattr(h, "_petcare", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._petcare = True  # type: ignore[attr-defined]
        root.addHandler(handler)
    root.setLevel(level.upper())
