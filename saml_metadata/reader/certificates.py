"""
Helpers for the base64 certificate blobs found in IdP metadata.
Descriptive only: nothing here checks trust or expiry.
"""
import base64
import binascii
import re
import textwrap

from cryptography import x509
from cryptography.hazmat.primitives import hashes

PEM_HEADER = '-----BEGIN CERTIFICATE-----'
PEM_FOOTER = '-----END CERTIFICATE-----'


def strip_certificate(blob):
    """Remove PEM armor and all whitespace from a certificate blob."""
    blob = blob.replace(PEM_HEADER, '').replace(PEM_FOOTER, '')
    return re.sub(r'\s+', '', blob)


def to_pem(blob):
    """
    Wrap a metadata certificate blob as PEM text.

    Args:
        blob (str): Base64 DER certificate, with or without whitespace or armor.

    Returns:
        str: PEM encoded certificate with 64 character lines.
    """
    body = '\n'.join(textwrap.wrap(strip_certificate(blob), 64))
    return f"{PEM_HEADER}\n{body}\n{PEM_FOOTER}\n"


def load_certificate(blob):
    """Load a metadata certificate blob with cryptography."""
    try:
        der = base64.b64decode(strip_certificate(blob), validate=True)
    except binascii.Error as e:
        raise ValueError(f"Certificate is not valid base64: {str(e)}") from e
    return x509.load_der_x509_certificate(der)


def describe_certificate(blob):
    """
    Summarize a metadata certificate.

    Returns:
        dict: subject, issuer, serial number, validity window and SHA-256 fingerprint.

    Raises:
        ValueError: If the blob is not a DER certificate in base64.
    """
    certificate = load_certificate(blob)
    fingerprint = certificate.fingerprint(hashes.SHA256())
    return {
        'subject': certificate.subject.rfc4514_string(),
        'issuer': certificate.issuer.rfc4514_string(),
        'serial_number': format(certificate.serial_number, 'x'),
        'not_valid_before': certificate.not_valid_before_utc.isoformat(),
        'not_valid_after': certificate.not_valid_after_utc.isoformat(),
        'sha256_fingerprint': ':'.join(f"{byte:02X}" for byte in fingerprint),
    }
