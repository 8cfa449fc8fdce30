import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from ..config.config import settings


def setup_logging():
    """
    Installs the application-wide logging configuration.

    Logs go both to the console and to a rotating file under ``settings.LOG_DIR``
    that rolls over once it reaches 5 MB.
    """
    log_format = "%(asctime)s - [%(name)s] - %(levelname)s - %(message)s"

    logger = logging.getLogger()
    logger.setLevel(logging.INFO)

    # Drop handlers installed by uvicorn and friends so our format wins.
    if logger.hasHandlers():
        logger.handlers.clear()

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(logging.Formatter(log_format))
    logger.addHandler(stdout_handler)

    log_dir = Path(settings.LOG_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(
        log_dir / "app.log",
        maxBytes=5*1024*1024,  # 5 MB
        backupCount=5
    )
    file_handler.setFormatter(logging.Formatter(log_format))
    logger.addHandler(file_handler)
