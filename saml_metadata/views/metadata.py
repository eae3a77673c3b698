from flask import Blueprint, current_app, jsonify, request
from ..reader.certificates import describe_certificate, to_pem
from ..reader.errors import InvalidInputError, ParseError
from ..reader.idp_settings import build_settings
from ..reader.metadata_reader import MetadataReader
from ..reader.reader_config import ReaderOptions, parse_bool
import logging

metadata_bp = Blueprint('metadata', __name__)

FORM_MIMETYPES = ('application/x-www-form-urlencoded', 'multipart/form-data')

def _metadata_text():
    """Metadata XML from the form field, an uploaded file or the raw body"""
    if request.mimetype in FORM_MIMETYPES:
        upload = request.files.get('metadata')
        if upload is not None:
            return upload.read().decode('utf-8')
        return request.form.get('metadata', '')
    return request.get_data(as_text=True)

def _reader_options():
    """Options from the app config, overridden by the query string"""
    options = ReaderOptions.from_app_config(current_app.config)
    overrides = {}
    if request.args.get('binding'):
        overrides['authn_request_binding'] = request.args['binding']
    if 'throw_on_error' in request.args:
        overrides['throw_on_error'] = parse_bool(request.args['throw_on_error'])
    return options._replace(**overrides)

def _load_reader():
    """Build a reader for the request, or an error response"""
    try:
        return MetadataReader(_metadata_text(), _reader_options()), None
    except (InvalidInputError, ParseError, UnicodeDecodeError) as e:
        logging.info(f"[Metadata] Rejected metadata document: {str(e)}")
        return None, (jsonify({'error': str(e)}), 400)

@metadata_bp.route('/inspect', methods=['POST'])
def inspect():
    """Everything the reader can extract from the posted metadata"""
    reader, error = _load_reader()
    if error:
        return error
    try:
        return jsonify(reader.to_dict())
    except Exception as e:
        logging.error(f"[Metadata] Error reading metadata: {str(e)}")
        return jsonify({'error': str(e)}), 422

@metadata_bp.route('/idp-settings', methods=['POST'])
def idp_settings():
    """python3-saml settings for the IdP described by the posted metadata"""
    reader, error = _load_reader()
    if error:
        return error
    try:
        return jsonify(build_settings(reader))
    except Exception as e:
        logging.error(f"[Metadata] Error building IdP settings: {str(e)}")
        return jsonify({'error': str(e)}), 422

@metadata_bp.route('/certificates', methods=['POST'])
def certificates():
    """Subject, issuer, validity, fingerprint and PEM text of each published certificate"""
    reader, error = _load_reader()
    if error:
        return error
    try:
        published = [
            ('signing', reader.signing_certificates() or []),
            ('encryption', reader.encryption_certificates() or []),
        ]
    except Exception as e:
        logging.error(f"[Metadata] Error reading certificates: {str(e)}")
        return jsonify({'error': str(e)}), 422

    results = []
    for use, blobs in published:
        for blob in blobs:
            entry = {'use': use, 'certificate': blob}
            try:
                entry.update(describe_certificate(blob))
                entry['pem'] = to_pem(blob)
            except ValueError as e:
                logging.warning(f"[Metadata] Could not load {use} certificate: {str(e)}")
                entry['error'] = str(e)
            results.append(entry)
    return jsonify({'certificates': results})
