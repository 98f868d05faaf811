# utils/logger.py
import logging
import sys

from configs.config import Config

def setup_logger(name="Tribunal"):
    logger = logging.getLogger(name)
    logger.setLevel(Config.LOG_LEVEL.upper())


    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            '%(asctime)s - [%(levelname)s] - %(name)s - %(message)s'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger
