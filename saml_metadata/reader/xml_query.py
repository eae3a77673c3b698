"""
XML parsing and namespace-aware XPath queries for SAML metadata.
Wraps lxml so the reader only deals with element lists and plain strings.
"""
import logging
from typing import Callable, Iterable, List, Optional

from lxml import etree

from .errors import InvalidInputError, NotFoundError, ParseError, QueryError

NAMESPACES = {
    'md': 'urn:oasis:names:tc:SAML:2.0:metadata',
    'claim': 'urn:oasis:names:tc:SAML:2.0:assertion',
    'sig': 'http://www.w3.org/2000/09/xmldsig#'
}


def parse_metadata(metadata):
    """
    Parse metadata text into an lxml element tree.

    Args:
        metadata (str): The metadata XML document.

    Returns:
        lxml.etree._ElementTree: The parsed document.
    """
    if not isinstance(metadata, str):
        raise InvalidInputError('metadata must be an XML string')
    if not metadata.strip():
        raise InvalidInputError('metadata must not be empty')

    # The text is already decoded, so any encoding declaration is ignored
    parser = etree.XMLParser(encoding='utf-8', resolve_entities=False, no_network=True)
    try:
        data = metadata.encode('utf-8')
    except UnicodeEncodeError as e:
        raise InvalidInputError(f"metadata is not encodable text: {str(e)}") from e

    try:
        root = etree.fromstring(data, parser)
    except etree.XMLSyntaxError as e:
        logging.debug(f"[Metadata] Could not parse metadata: {str(e)}")
        raise ParseError(f"Metadata is not well-formed XML: {str(e)}") from e
    return root.getroottree()


class MetadataQuery:
    """XPath evaluator bound to one document and the SAML namespace prefixes."""

    def __init__(self, document, namespaces=None):
        self.document = document
        self.namespaces = dict(namespaces or NAMESPACES)

    def __call__(self, query: str) -> list:
        """
        Evaluate a query against the document.

        Returns:
            list: Matched elements, attribute values or text values in document order.
        """
        try:
            result = self.document.xpath(query, namespaces=self.namespaces)
        except etree.XPathError as e:
            logging.debug(f'[Metadata] Could not read xpath query "{query}": {str(e)}')
            raise QueryError(query, e) from e
        if isinstance(result, list):
            return result
        # Scalar results (count(), string()) are not node-sets
        return [result]


def attribute(element, name: str) -> Optional[str]:
    """Return the value of the attribute called ``name``, or None."""
    for key, value in element.attrib.items():
        if key == name:
            return value
    return None


def find_by_attribute_value(elements: Iterable, predicate: Callable[[str, str], bool]):
    """Return the first element with an attribute satisfying ``predicate(name, value)``."""
    for element in elements:
        for key, value in element.attrib.items():
            if predicate(key, value):
                return element
    return None


def first(results: List, description: str):
    """Return the first query result or raise NotFoundError."""
    if not results:
        raise NotFoundError(f"No {description} found in metadata")
    return results[0]


def require_attribute(element, name: str) -> str:
    """Return an attribute value, raising NotFoundError when it is missing."""
    value = attribute(element, name)
    if value is None:
        raise NotFoundError(f"{etree.QName(element).localname} has no {name} attribute")
    return value


def text_of(element) -> str:
    """Return the leading text of an element, raising NotFoundError when it is empty."""
    if element.text is None:
        raise NotFoundError(f"{etree.QName(element).localname} has no text content")
    return element.text
