"""
Logging configuration for the ``ar_glb`` service.
"""
import logging
import sys


def setup_logging(level: int | str = logging.INFO) -> None:
    """
    Configures the logger for the 'ar_glb' namespace.

    Args:
        level: Logging level, either numeric or a name such as "DEBUG".
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger("ar_glb")
    logger.setLevel(level)

    # Avoid duplicate handlers when uvicorn reloads the app
    if logger.hasHandlers():
        logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)
    logger.propagate = False

    logger.debug("Logging initialized.")
