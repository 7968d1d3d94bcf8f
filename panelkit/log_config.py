# panelkit/log_config.py
import logging
from typing import Optional, Union, TYPE_CHECKING

if TYPE_CHECKING:
    from .config import Config

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_HANDLER_NAME = "panelkit-console"


def setup_logging(level: Union[str, int, None] = None, debug: bool = False,
                  config: Optional["Config"] = None) -> logging.Logger:
    """
    Configure the ``panelkit`` logger hierarchy.

    The level comes from the argument, else from ``logging.level`` in the
    config. ``debug`` (or ``debug: true`` in the config) forces DEBUG.
    Calling it again replaces the handler instead of adding a second one.
    """
    if config is not None:
        level = level or config.get_nested("logging.level", "INFO")
        debug = debug or bool(config.get("debug", False))
    if debug:
        level = logging.DEBUG
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logger = logging.getLogger("panelkit")
    logger.setLevel(level)

    for handler in list(logger.handlers):
        if handler.get_name() == _HANDLER_NAME:
            logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.set_name(_HANDLER_NAME)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(console_handler)

    logger.debug("===== Logging setup complete =====")
    return logger
