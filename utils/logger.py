"""
Logging configuration with daily file rotation and cleanup of expired files.
"""
import os
import logging
from logging.handlers import TimedRotatingFileHandler
from datetime import datetime, timedelta
from pathlib import Path

from config import Config


LOGS_DIR = Config.LOG_DIR
os.makedirs(LOGS_DIR, exist_ok=True)

LOG_FILE = os.path.join(LOGS_DIR, "dreamcolor.log")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
ROOT_LOGGER_NAME = "dreamcolor"


def cleanup_old_logs(directory: str, retention_days: int = Config.LOG_RETENTION_DAYS) -> int:
    """
    Remove rotated log files older than retention_days.

    Rotated files are named dreamcolor.log.YYYY-MM-DD; anything that does not
    parse falls back to the file's mtime.

    Returns:
        Number of files deleted
    """
    cutoff = datetime.now() - timedelta(days=retention_days)
    log_dir = Path(directory)
    if not log_dir.exists():
        return 0

    deleted_count = 0
    for log_file in log_dir.glob("dreamcolor.log.*"):
        if not log_file.is_file():
            continue
        try:
            file_date = datetime.strptime(log_file.name.replace("dreamcolor.log.", ""), "%Y-%m-%d")
        except ValueError:
            file_date = datetime.fromtimestamp(log_file.stat().st_mtime)
        if file_date >= cutoff:
            continue
        try:
            log_file.unlink()
            deleted_count += 1
        except OSError as e:
            logging.getLogger(ROOT_LOGGER_NAME).error(f"Failed to delete log file {log_file.name}: {e}")

    return deleted_count


def setup_logger(name: str = ROOT_LOGGER_NAME, level: int = logging.INFO) -> logging.Logger:
    """
    Set up logger with file rotation and console output.

    Args:
        name: Logger name
        level: Logging level (default: INFO)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid adding handlers multiple times
    if logger.handlers:
        return logger

    logger.setLevel(level)

    file_handler = TimedRotatingFileHandler(
        LOG_FILE,
        when="midnight",
        interval=1,
        backupCount=Config.LOG_RETENTION_DAYS,
        encoding="utf-8",
        utc=True
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(
        logging.Formatter("%(asctime)s - %(levelname)s - %(message)s", "%H:%M:%S")
    )

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    deleted = cleanup_old_logs(LOGS_DIR, Config.LOG_RETENTION_DAYS)
    if deleted:
        logger.info(f"Cleaned up {deleted} old log file(s)")

    return logger


def get_logger(name: str = None) -> logging.Logger:
    """Get the application logger, or a named child of it."""
    if name is None:
        return logging.getLogger(ROOT_LOGGER_NAME)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


app_logger = setup_logger(ROOT_LOGGER_NAME, logging.INFO)
app_logger.info(f"Logger initialized (dir: {LOGS_DIR}, retention: {Config.LOG_RETENTION_DAYS} days)")
