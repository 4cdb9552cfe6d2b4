"""Command line interface for acm_certificate_sync."""
