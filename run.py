#!/usr/bin/env python3
"""
Entry point for the SAML metadata inspection service.
"""
import os

from saml_metadata.app import create_app

app = create_app(os.environ.get('FLASK_CONFIG', 'default'))

if __name__ == '__main__':
    app.run(host='0.0.0.0', port=5000, debug=True)
