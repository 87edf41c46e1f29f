"""Application logging, rendered on the shared rich console."""

import logging

from rich.logging import RichHandler

from workflowy_inbox.display import console


def configure_logging(debug: bool = False) -> logging.Logger:
    logger = logging.getLogger("workflowy_inbox")
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)
    if logger.handlers:
        return logger

    handler = RichHandler(console=console, show_path=debug, rich_tracebacks=True, markup=False)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
