"""Utilities package for the service."""

from .config import read_config
from .logger import get_logger

__all__ = ['read_config', 'get_logger']
