"""
Logging Configuration
Sets up the project loggers for the plume triage application.
"""
import logging
import sys
from typing import Optional

# Top-level packages whose module loggers share the handlers below
PROJECT_LOGGERS = ("models", "mapping", "triage", "data", "analysis", "visualization")


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Configures console (and optional file) output for the project loggers.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to save logs to a file.
    """
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)

    for name in PROJECT_LOGGERS:
        logger = logging.getLogger(name)
        logger.setLevel(level)

        # Avoid duplicate output when Streamlit re-runs the script
        if logger.handlers:
            logger.handlers.clear()

        for handler in handlers:
            logger.addHandler(handler)

    logging.getLogger("models").info("Logging initialized.")
