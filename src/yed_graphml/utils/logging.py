import logging
from pathlib import Path
from typing import Union

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logger(name: str,
                 log_dir: Union[str, Path] = "logs",
                 level: int = logging.WARNING) -> logging.Logger:
    """
    Set up and configure logger with both file and console handlers.

    Args:
        name: Name of the logger, typically __name__ from the calling module
        log_dir: Directory for the "graphml.log" file, created if missing
        level: Level for the logger and both handlers

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Add handlers to logger if they haven't been added already
    if logger.handlers:
        return logger

    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    fh = logging.FileHandler(log_dir / "graphml.log", encoding="utf-8")
    fh.setLevel(level)

    ch = logging.StreamHandler()
    ch.setLevel(level)

    formatter = logging.Formatter(LOG_FORMAT)
    fh.setFormatter(formatter)
    ch.setFormatter(formatter)

    logger.addHandler(fh)
    logger.addHandler(ch)

    return logger
