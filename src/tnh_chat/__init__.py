"""Chat orchestration service for The New Humanitarian."""

__version__ = "0.1.0"
