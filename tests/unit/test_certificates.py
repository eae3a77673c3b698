"""
Unit tests for metadata certificate helpers.
"""
import unittest
import base64
import os
import sys
from datetime import datetime, timezone
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from saml_metadata.reader.certificates import describe_certificate, load_certificate, strip_certificate, to_pem


def build_certificate(common_name='idp.example.com'):
    """Create a self-signed certificate for the tests."""
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    return (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(0x1234ABCD)
        .not_valid_before(datetime(2024, 1, 1, tzinfo=timezone.utc))
        .not_valid_after(datetime(2034, 1, 1, tzinfo=timezone.utc))
        .sign(key, hashes.SHA256())
    )


def metadata_blob(certificate):
    """Base64 DER as it appears in an X509Certificate element."""
    return base64.b64encode(certificate.public_bytes(serialization.Encoding.DER)).decode('ascii')


class TestCertificates(unittest.TestCase):
    """Test cases for certificate helpers."""
    
    @classmethod
    def setUpClass(cls):
        """Set up test fixtures."""
        cls.certificate = build_certificate()
        cls.blob = metadata_blob(cls.certificate)
    
    def test_strip_certificate(self):
        """Test removing armor and whitespace."""
        self.assertEqual(strip_certificate('-----BEGIN CERTIFICATE-----\nMIIC\n AAAA\n-----END CERTIFICATE-----\n'),
                         'MIICAAAA')
    
    def test_to_pem(self):
        """Test wrapping a blob as PEM."""
        pem = to_pem(self.blob)
        lines = pem.strip().split('\n')
        
        self.assertEqual(lines[0], '-----BEGIN CERTIFICATE-----')
        self.assertEqual(lines[-1], '-----END CERTIFICATE-----')
        self.assertTrue(all(len(line) <= 64 for line in lines[1:-1]))
        self.assertEqual(x509.load_pem_x509_certificate(pem.encode('ascii')), self.certificate)
    
    def test_to_pem_accepts_wrapped_blob(self):
        """Test that line breaks in the metadata blob do not matter."""
        wrapped = '\n'.join(self.blob[i:i + 40] for i in range(0, len(self.blob), 40))
        
        self.assertEqual(to_pem(wrapped), to_pem(self.blob))
    
    def test_load_certificate(self):
        """Test loading a blob with cryptography."""
        self.assertEqual(load_certificate(self.blob), self.certificate)
    
    def test_describe_certificate(self):
        """Test summarizing a certificate."""
        details = describe_certificate(self.blob)
        expected_fingerprint = ':'.join(f"{byte:02X}" for byte in self.certificate.fingerprint(hashes.SHA256()))
        
        self.assertEqual(details['subject'], 'CN=idp.example.com')
        self.assertEqual(details['issuer'], 'CN=idp.example.com')
        self.assertEqual(details['serial_number'], '1234abcd')
        self.assertEqual(details['not_valid_before'], '2024-01-01T00:00:00+00:00')
        self.assertEqual(details['not_valid_after'], '2034-01-01T00:00:00+00:00')
        self.assertEqual(details['sha256_fingerprint'], expected_fingerprint)
    
    def test_describe_pem_certificate(self):
        """Test that PEM armor around the blob is accepted."""
        self.assertEqual(describe_certificate(to_pem(self.blob)), describe_certificate(self.blob))
    
    def test_describe_invalid_base64(self):
        """Test that a blob that is not base64 raises ValueError."""
        with self.assertRaises(ValueError):
            describe_certificate('not*base64!')
    
    def test_describe_invalid_der(self):
        """Test that base64 that is not a certificate raises ValueError."""
        with self.assertRaises(ValueError):
            describe_certificate(base64.b64encode(b'not a certificate').decode('ascii'))

if __name__ == '__main__':
    unittest.main()
