"""
SAML metadata reader module.
Extracts entity, endpoint, certificate and claim information from IdP metadata.
"""
import logging
import re
from typing import Any, Callable, Dict, List, NamedTuple, Optional

from .errors import NotFoundError
from .reader_config import ReaderOptions
from .xml_query import (
    MetadataQuery,
    attribute,
    find_by_attribute_value,
    first,
    parse_metadata,
    require_attribute,
    text_of,
)

IDP_DESCRIPTOR = '//md:IDPSSODescriptor'

CERTIFICATE_QUERY = (
    IDP_DESCRIPTOR + '/md:KeyDescriptor[@use="{use}" or not(@use)]'
    '/sig:KeyInfo/sig:X509Data/sig:X509Certificate'
)

_WHITESPACE = re.compile(r'\s+')
_DELIMITERS = re.compile(r'[\W_]+')
_UNSIGNED = re.compile(r'[0-9]+')


class Endpoint(NamedTuple):
    """A SingleSignOnService or SingleLogoutService entry."""
    binding: Optional[str]
    location: Optional[str]
    index: Optional[str]


class ClaimDescriptor(NamedTuple):
    """An attribute the IdP can release, keyed by its Name URI."""
    name: str
    description: str
    normalized_key: str

    def as_dict(self) -> Dict[str, str]:
        return self._asdict()


def split_words(text: str) -> List[str]:
    """Split text on delimiters and case changes."""
    words = []
    for chunk in _DELIMITERS.split(text):
        if not chunk:
            continue
        start = 0
        for i in range(1, len(chunk)):
            prev, cur = chunk[i - 1], chunk[i]
            nxt = chunk[i + 1] if i + 1 < len(chunk) else ''
            if (prev.islower() and cur.isupper()) or \
               (prev.isupper() and cur.isupper() and nxt.islower()) or \
               (prev.isdigit() != cur.isdigit()):
                words.append(chunk[start:i])
                start = i
        words.append(chunk[start:])
    return words


def camel_case(text: str) -> str:
    """
    Normalize a friendly name into an identifier-safe camelCase key.

    Examples:
        "Email Address" -> "emailAddress", "given-name" -> "givenName"
    """
    words = split_words(text)
    if not words:
        return ''
    return words[0].lower() + ''.join(word.capitalize() for word in words[1:])


def _index_sort_key(element):
    # Missing index counts as 0; anything but ASCII digits sorts after numeric values
    index = attribute(element, 'index')
    if index is None:
        return (0, 0, '')
    if _UNSIGNED.fullmatch(index.strip()):
        return (0, int(index), '')
    return (1, 0, index)


class MetadataReader:
    """Read-only view over a SAML 2.0 metadata document."""

    def __init__(self, metadata, options=None):
        """
        Parse the metadata and merge the options onto the defaults.

        Args:
            metadata (str): The metadata XML document.
            options: ReaderOptions or a mapping with ``authn_request_binding``
                and/or ``throw_on_error``.

        Raises:
            InvalidInputError: If metadata is not a non-empty string.
            ParseError: If metadata is not well-formed XML.
        """
        self.options = ReaderOptions.merge(options)
        self._document = parse_metadata(metadata)
        self.query = MetadataQuery(self._document)

    def _fail_soft(self, description: str, extract: Callable[[], Any], default=None):
        """Run an extraction, returning ``default`` on failure unless throw_on_error is set."""
        try:
            return extract()
        except Exception as e:
            if self.options.throw_on_error:
                raise
            logging.debug(f"[Metadata] Could not read {description}: {str(e)}")
            return default

    @property
    def entity_id(self) -> Optional[str]:
        return self._fail_soft('entityID', lambda: str(first(
            self.query('//md:EntityDescriptor/@entityID'), 'EntityDescriptor entityID')))

    @property
    def identifier_format(self) -> Optional[str]:
        """Text of the first NameIDFormat, as written in the document."""
        return self._fail_soft('NameIDFormat', lambda: str(first(
            self._name_id_formats(), 'NameIDFormat')))

    @property
    def name_id_formats(self) -> List[str]:
        """Every NameIDFormat with surrounding whitespace stripped."""
        return self._fail_soft(
            'NameIDFormat list',
            lambda: [value.strip() for value in self._name_id_formats()],
            default=[])

    def _name_id_formats(self):
        return self.query(IDP_DESCRIPTOR + '/md:NameIDFormat/text()')

    def _sorted_endpoints(self, element_name: str) -> list:
        elements = self.query(f"{IDP_DESCRIPTOR}/md:{element_name}")
        return sorted(elements, key=_index_sort_key)

    def _select_element(self, element_name: str):
        """
        Pick the endpoint element to use for ``element_name``.

        Endpoints are ordered by index, the first one with the configured
        binding wins, and the first endpoint overall is the fallback.
        """
        elements = self._sorted_endpoints(element_name)
        binding_uri = self.options.binding_uri
        element = find_by_attribute_value(
            elements, lambda name, value: name == 'Binding' and value == binding_uri)
        if element is None:
            element = first(elements, element_name)
            logging.debug(f"[Metadata] No {element_name} with binding {binding_uri}, using first endpoint")
        return element

    def _select_endpoint(self, element_name: str) -> str:
        return require_attribute(self._select_element(element_name), 'Location')

    def _selected_endpoint(self, element_name: str) -> Endpoint:
        element = self._select_element(element_name)
        return Endpoint(attribute(element, 'Binding'), require_attribute(element, 'Location'),
                        attribute(element, 'index'))

    def _endpoints(self, element_name: str) -> List[Endpoint]:
        return [
            Endpoint(attribute(element, 'Binding'), attribute(element, 'Location'), attribute(element, 'index'))
            for element in self._sorted_endpoints(element_name)
        ]

    @property
    def identity_provider_url(self) -> Optional[str]:
        return self._fail_soft('SingleSignOnService', lambda: self._select_endpoint('SingleSignOnService'))

    @property
    def logout_url(self) -> Optional[str]:
        return self._fail_soft('SingleLogoutService', lambda: self._select_endpoint('SingleLogoutService'))

    @property
    def identity_provider_endpoint(self) -> Optional[Endpoint]:
        return self._fail_soft('SingleSignOnService', lambda: self._selected_endpoint('SingleSignOnService'))

    @property
    def logout_endpoint(self) -> Optional[Endpoint]:
        return self._fail_soft('SingleLogoutService', lambda: self._selected_endpoint('SingleLogoutService'))

    @property
    def sso_endpoints(self) -> List[Endpoint]:
        return self._fail_soft('SingleSignOnService list',
                               lambda: self._endpoints('SingleSignOnService'), default=[])

    @property
    def logout_endpoints(self) -> List[Endpoint]:
        return self._fail_soft('SingleLogoutService list',
                               lambda: self._endpoints('SingleLogoutService'), default=[])

    def _certificates(self, use: str, trim_whitespace: bool) -> List[str]:
        texts = [text_of(node) for node in self.query(CERTIFICATE_QUERY.format(use=use))]
        if trim_whitespace:
            return [_WHITESPACE.sub('', text) for text in texts]
        return texts

    def encryption_certificates(self, trim_whitespace=True) -> Optional[List[str]]:
        """All encryption certificates of the IdP, in document order."""
        return self._fail_soft('encryption certificates',
                               lambda: self._certificates('encryption', trim_whitespace))

    def encryption_certificate(self, trim_whitespace=True) -> Optional[str]:
        """The first encryption certificate, stripped of surrounding whitespace."""
        return self._fail_soft('encryption certificate', lambda: first(
            self._certificates('encryption', trim_whitespace), 'encryption certificate').strip())

    def signing_certificates(self, trim_whitespace=True) -> Optional[List[str]]:
        """All signing certificates of the IdP, in document order."""
        return self._fail_soft('signing certificates',
                               lambda: self._certificates('signing', trim_whitespace))

    def signing_certificate(self, trim_whitespace=True) -> Optional[str]:
        """The first signing certificate, stripped of surrounding whitespace."""
        return self._fail_soft('signing certificate', lambda: first(
            self._certificates('signing', trim_whitespace), 'signing certificate').strip())

    @property
    def claim_schema(self) -> Dict[str, ClaimDescriptor]:
        """
        Attributes the IdP advertises, keyed by Name.

        A claim without a FriendlyName is left out; with throw_on_error set the
        first such claim aborts the whole lookup.
        """
        return self._fail_soft('claim schema', self._claim_schema, default={})

    def _claim_schema(self) -> Dict[str, ClaimDescriptor]:
        elements = self.query(IDP_DESCRIPTOR + '/claim:Attribute')
        claims: Dict[str, ClaimDescriptor] = {}
        for name in self.query(IDP_DESCRIPTOR + '/claim:Attribute/@Name'):
            name = str(name)
            if name in claims:
                continue
            descriptor = self._fail_soft(f"claim {name}", lambda: self._claim(elements, name))
            if descriptor is not None:
                claims[name] = descriptor
        return claims

    @staticmethod
    def _claim(elements, name: str) -> ClaimDescriptor:
        candidates = [element for element in elements if attribute(element, 'Name') == name]
        holder = find_by_attribute_value(candidates, lambda key, value: key == 'FriendlyName')
        if holder is None:
            raise NotFoundError(f"Attribute {name} has no FriendlyName")
        description = attribute(holder, 'FriendlyName')
        return ClaimDescriptor(name, description, camel_case(description))

    def to_dict(self) -> Dict[str, Any]:
        """Summary of every derived value, ready for JSON serialization."""
        return {
            'entity_id': self.entity_id,
            'identifier_format': self.identifier_format,
            'name_id_formats': self.name_id_formats,
            'identity_provider_url': self.identity_provider_url,
            'logout_url': self.logout_url,
            'sso_endpoints': [endpoint._asdict() for endpoint in self.sso_endpoints],
            'logout_endpoints': [endpoint._asdict() for endpoint in self.logout_endpoints],
            'signing_certificates': self.signing_certificates() or [],
            'encryption_certificates': self.encryption_certificates() or [],
            'claim_schema': {name: claim.as_dict() for name, claim in self.claim_schema.items()},
        }
