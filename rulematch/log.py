import logging

from rich.console import Console
from rich.logging import RichHandler

from rulematch.constants import APP_NAME


def configure_logging(verbose: bool = False) -> None:
    logger = logging.getLogger(APP_NAME)
    logger.handlers.clear()
    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False
