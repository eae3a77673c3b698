"""
Errors raised while reading SAML metadata.
"""


class MetadataError(Exception):
    """Base class for metadata reader errors."""


class InvalidInputError(MetadataError, TypeError):
    """The metadata handed to the reader is not XML text."""


class ParseError(MetadataError, ValueError):
    """The metadata text is not well-formed XML."""


class QueryError(MetadataError):
    """An XPath expression could not be evaluated."""

    def __init__(self, query, cause=None):
        self.query = query
        self.cause = cause
        message = f'Could not read xpath query "{query}"'
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class NotFoundError(MetadataError, LookupError):
    """A node or attribute the reader needed is missing from the document."""
