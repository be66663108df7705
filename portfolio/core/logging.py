import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(log_level: str = "INFO") -> logging.Logger:
    """
    Configure the ``portfolio`` logger tree once per process.
    """
    logger = logging.getLogger("portfolio")
    logger.setLevel(log_level.upper())
    logger.handlers = []  # Clear handlers left by reloads

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(console)
    logger.propagate = False

    return logger
