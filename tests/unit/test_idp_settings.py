"""
Unit tests for building IdP settings from metadata.
"""
import unittest
import os
import sys
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from saml_metadata.reader.errors import NotFoundError
from saml_metadata.reader.idp_settings import build_idp_settings, build_settings
from saml_metadata.reader.metadata_reader import MetadataReader

FIXTURES = os.path.join(os.path.dirname(__file__), '../fixtures')

MINIMAL_METADATA = """<EntityDescriptor xmlns="urn:oasis:names:tc:SAML:2.0:metadata" entityID="https://minimal.example.com">
  <IDPSSODescriptor protocolSupportEnumeration="urn:oasis:names:tc:SAML:2.0:protocol">
    <SingleSignOnService Binding="urn:oasis:names:tc:SAML:2.0:bindings:HTTP-POST" Location="https://minimal.example.com/sso"/>
  </IDPSSODescriptor>
</EntityDescriptor>"""

class TestIdPSettings(unittest.TestCase):
    """Test cases for IdP settings."""
    
    def setUp(self):
        """Set up test fixtures."""
        with open(os.path.join(FIXTURES, 'idp_metadata.xml'), 'r') as f:
            self.metadata = f.read()
    
    def test_build_idp_settings(self):
        """Test building the idp section from complete metadata."""
        settings = build_idp_settings(MetadataReader(self.metadata))
        
        self.assertEqual(settings['entityId'], 'https://idp.example.com')
        self.assertEqual(settings['singleSignOnService'], {
            'url': 'https://idp.example.com/sso/redirect',
            'binding': 'urn:oasis:names:tc:SAML:2.0:bindings:HTTP-Redirect'
        })
        self.assertEqual(settings['singleLogoutService'], {
            'url': 'https://idp.example.com/slo/redirect',
            'binding': 'urn:oasis:names:tc:SAML:2.0:bindings:HTTP-Redirect'
        })
        self.assertEqual(settings['x509cert'], 'MIICsigningAAAB')
        self.assertEqual(settings['x509certMulti'], {
            'signing': ['MIICsigningAAAB', 'MIICbothCCCD'],
            'encryption': ['MIICencryptionEEEF', 'MIICbothCCCD']
        })
    
    def test_build_idp_settings_post_binding(self):
        """Test that the configured binding drives endpoint selection."""
        reader = MetadataReader(self.metadata, {'authn_request_binding': 'HTTP-POST'})
        
        settings = build_idp_settings(reader)
        
        self.assertEqual(settings['singleSignOnService']['url'], 'https://idp.example.com/sso/post')
        self.assertEqual(settings['singleLogoutService']['url'], 'https://idp.example.com/slo/post')
    
    def test_minimal_metadata(self):
        """Test that optional sections are left out."""
        settings = build_idp_settings(MetadataReader(MINIMAL_METADATA, {'throw_on_error': True}))
        
        self.assertEqual(settings, {
            'entityId': 'https://minimal.example.com',
            'singleSignOnService': {
                'url': 'https://minimal.example.com/sso',
                'binding': 'urn:oasis:names:tc:SAML:2.0:bindings:HTTP-POST'
            },
            'x509cert': ''
        })
    
    def test_missing_entity_id(self):
        """Test that metadata without an entityID is rejected."""
        reader = MetadataReader(MINIMAL_METADATA.replace(' entityID="https://minimal.example.com"', ''))
        
        with self.assertRaises(NotFoundError):
            build_idp_settings(reader)
    
    def test_missing_sso(self):
        """Test that metadata without an SSO endpoint is rejected."""
        reader = MetadataReader(MINIMAL_METADATA.replace('SingleSignOnService', 'ArtifactResolutionService'))
        
        with self.assertRaises(NotFoundError):
            build_idp_settings(reader)
    
    def test_build_settings(self):
        """Test that the NameIDFormat goes into the sp section."""
        settings = build_settings(MetadataReader(self.metadata))
        
        self.assertEqual(settings['idp']['entityId'], 'https://idp.example.com')
        self.assertEqual(settings['sp'], {
            'NameIDFormat': 'urn:oasis:names:tc:SAML:1.1:nameid-format:emailAddress'
        })
    
    def test_build_settings_without_name_id_format(self):
        """Test that the sp section is empty without a NameIDFormat."""
        settings = build_settings(MetadataReader(MINIMAL_METADATA))
        
        self.assertEqual(settings['sp'], {})

if __name__ == '__main__':
    unittest.main()
