"""Utility functions and helpers."""

from .logger import setup_logger, get_event_logger, EventLogger, NullEventLogger
from .config_loader import load_config, save_config

__all__ = [
    'setup_logger',
    'get_event_logger',
    'EventLogger',
    'NullEventLogger',
    'load_config',
    'save_config'
]
