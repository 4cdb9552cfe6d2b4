"""PEM certificate chain helpers."""

from __future__ import annotations


class PemError(ValueError):
    """Raised when certificate data holds no usable PEM certificate."""


def split_certificate_chain(cert_data: str) -> tuple[str, str]:
    """Split a PEM bundle into its leaf certificate and intermediate chain.

    The first certificate in the bundle is the leaf; every following
    certificate belongs to the chain. Both parts are re-encoded as PEM.

    Args:
        cert_data: One or more concatenated PEM ``CERTIFICATE`` blocks.

    Returns:
        Tuple of ``(leaf_pem, chain_pem)``; ``chain_pem`` is empty when the
        bundle holds only a leaf.

    Raises:
        PemError: If no certificate can be parsed from ``cert_data``.
    """
    from cryptography import x509
    from cryptography.hazmat.primitives import serialization

    try:
        certs = x509.load_pem_x509_certificates(cert_data.encode("utf-8"))
    except ValueError as e:
        raise PemError(f"no valid PEM certificate found: {e}") from e

    if not certs:
        raise PemError("no valid PEM certificate found")

    pem_blocks = [c.public_bytes(serialization.Encoding.PEM).decode("ascii") for c in certs]
    return pem_blocks[0], "".join(pem_blocks[1:])
