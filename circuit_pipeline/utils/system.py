import logging
import os
from datetime import datetime

from bittensor import logging as bt_logging

from circuit_pipeline.constants import BITTENSOR_LOGGER_NAME, LOG_TIMESTAMP_FORMAT

LOG_FILE_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"


def get_log_file_path(log_dir: str, name: str, now: datetime | None = None) -> str:
    """
    Build the path of a run log: <log_dir>/<name>_<timestamp>.log
    """
    timestamp = (now or datetime.now()).strftime(LOG_TIMESTAMP_FORMAT)
    return os.path.join(log_dir, f"{name}_{timestamp}.log")


def attach_log_file(log_dir: str, name: str) -> logging.FileHandler:
    """
    Duplicate everything logged through bt.logging into a timestamped file.

    Runs started within the same minute append to the same file.

    Args:
        log_dir (str): Directory receiving the log file, created if absent.
        name (str): Log file name prefix, usually the circuit name.

    Returns:
        logging.FileHandler: The attached handler, for `detach_log_file`.
    """
    os.makedirs(log_dir, exist_ok=True)
    log_path = get_log_file_path(log_dir, name)
    handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(LOG_FILE_FORMAT))
    logging.getLogger(BITTENSOR_LOGGER_NAME).addHandler(handler)
    bt_logging.info(f"Writing run log to {log_path}")
    return handler


def detach_log_file(handler: logging.FileHandler):
    logging.getLogger(BITTENSOR_LOGGER_NAME).removeHandler(handler)
    handler.close()
