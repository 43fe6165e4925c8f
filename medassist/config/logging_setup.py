"""Logging configuration for the CLI and HTTP entry points.

Library modules only create loggers; handlers are installed here.
"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
HANDLER_NAME = "medassist"


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger("medassist")
    root.setLevel(level)
    if any(h.get_name() == HANDLER_NAME for h in root.handlers):
        return
    handler = logging.StreamHandler()
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
