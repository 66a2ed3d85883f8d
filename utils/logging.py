# utils/logging.py
import logging
from config import settings

# Create logger
logger = logging.getLogger("mining-pool")
logger.setLevel(logging.DEBUG)

# Console handler
console_handler = logging.StreamHandler()
console_handler.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
formatter = logging.Formatter(
    '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
console_handler.setFormatter(formatter)
logger.addHandler(console_handler)

def set_log_level(level: str):
    """Adjust the console verbosity at runtime"""
    console_handler.setLevel(getattr(logging, level.upper(), logging.INFO))
