import logging
import os
from datetime import datetime

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level="INFO", log_dir=None):
    """Configure root logging with a console handler and an optional dated log file"""
    handlers = [logging.StreamHandler()]
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        filename = os.path.join(log_dir, f"rps_arena_{datetime.now().strftime('%Y%m%d')}.log")
        handlers.append(logging.FileHandler(filename, encoding="utf-8"))

    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)
    return logging.getLogger("rps_arena")
