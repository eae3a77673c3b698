"""
Build python3-saml style settings from IdP metadata.
The relying application merges the result with its own SP settings.
"""
import logging
from typing import Any, Dict

from .errors import NotFoundError


def build_idp_settings(reader) -> Dict[str, Any]:
    """
    Get the ``idp`` section of the SAML settings for a metadata reader.

    Args:
        reader (MetadataReader): Reader over the IdP metadata.

    Returns:
        dict: entityId, singleSignOnService, singleLogoutService (when the
        IdP has one), x509cert and x509certMulti (when several certificates
        are published).

    Raises:
        NotFoundError: If the metadata has no entityID or no SSO endpoint.
    """
    entity_id = reader.entity_id
    if not entity_id:
        raise NotFoundError("IdP metadata has no entityID")

    sso = reader.identity_provider_endpoint
    if sso is None:
        raise NotFoundError(f"IdP metadata for {entity_id} has no SingleSignOnService")

    settings = {
        "entityId": entity_id,
        "singleSignOnService": {
            "url": sso.location,
            "binding": sso.binding or reader.options.binding_uri
        },
        "x509cert": ""
    }

    slo = reader.logout_endpoint if reader.logout_endpoints else None
    if slo is not None:
        settings["singleLogoutService"] = {
            "url": slo.location,
            "binding": slo.binding or reader.options.binding_uri
        }

    signing = reader.signing_certificates() or []
    encryption = reader.encryption_certificates() or []
    if signing:
        settings["x509cert"] = signing[0].strip()
    if len(signing) > 1 or len(encryption) > 1:
        settings["x509certMulti"] = {
            "signing": signing,
            "encryption": encryption
        }

    logging.info(f"[Metadata] Built IdP settings for {entity_id}: SSO {sso.location}")
    return settings


def build_settings(reader) -> Dict[str, Any]:
    """
    Get the IdP section plus the SP values the metadata dictates.

    Returns:
        dict: ``{"idp": {...}, "sp": {"NameIDFormat": ...}}``; the ``sp`` part
        is empty when the IdP does not publish a NameIDFormat.
    """
    settings = {"idp": build_idp_settings(reader), "sp": {}}
    name_id_formats = reader.name_id_formats
    if name_id_formats:
        settings["sp"]["NameIDFormat"] = name_id_formats[0]
    return settings
