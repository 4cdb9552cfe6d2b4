"""Keep AWS Certificate Manager in sync with cert-manager Certificates."""

from acm_certificate_sync.__version__ import __version__

__all__ = ["__version__"]
