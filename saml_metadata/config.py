import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    """Base configuration class"""
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-key-change-in-production')
    DEBUG = False
    TESTING = False
    
    # Largest metadata document accepted over HTTP
    MAX_CONTENT_LENGTH = int(os.getenv('MAX_CONTENT_LENGTH', str(5 * 1024 * 1024)))
    
    SAML_AUTHN_REQUEST_BINDING = os.getenv('SAML_AUTHN_REQUEST_BINDING', 'HTTP-Redirect')
    SAML_METADATA_THROW_ON_ERROR = os.getenv('SAML_METADATA_THROW_ON_ERROR', 'false')

class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True

class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    DEBUG = True
    SAML_AUTHN_REQUEST_BINDING = 'HTTP-Redirect'
    SAML_METADATA_THROW_ON_ERROR = 'false'

class ProductionConfig(Config):
    """Production configuration"""
    pass

config = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig
}
