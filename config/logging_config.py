"""Logging configuration for the API."""
import logging

CONSOLE_HANDLER_NAME = "catalog-console"


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging with a console handler. Safe to call more than once."""
    root = logging.getLogger()
    root.setLevel(level)

    # Replace our own handler only (the app factory may run several times in tests)
    for handler in list(root.handlers):
        if handler.get_name() == CONSOLE_HANDLER_NAME:
            root.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.set_name(CONSOLE_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    root.addHandler(handler)
