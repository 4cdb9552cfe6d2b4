"""Version information for acm_certificate_sync."""

__version__ = "0.1.0"
