"""Logging configuration for acm_certificate_sync."""

from acm_certificate_sync.logging.config import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
