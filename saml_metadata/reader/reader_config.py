"""
Metadata reader configuration module.
Provides the options that control endpoint selection and error handling.
"""
from typing import Any, Dict, NamedTuple

BINDING_PREFIX = 'urn:oasis:names:tc:SAML:2.0:bindings:'

DEFAULT_AUTHN_REQUEST_BINDING = 'HTTP-Redirect'

# Option names accepted from callers that follow the camelCase convention
_ALIASES = {
    'authnRequestBinding': 'authn_request_binding',
    'throwOnError': 'throw_on_error',
    'throwExceptions': 'throw_on_error',
}

_TRUE_VALUES = ('1', 'true', 'yes', 'on')


def parse_bool(value) -> bool:
    """Interpret an environment or query string flag."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in _TRUE_VALUES


class ReaderOptions(NamedTuple):
    """Immutable reader options."""
    authn_request_binding: str = DEFAULT_AUTHN_REQUEST_BINDING
    throw_on_error: bool = False

    @property
    def binding_uri(self) -> str:
        """The full binding URI endpoints are matched against."""
        return f"{BINDING_PREFIX}{self.authn_request_binding}"

    @classmethod
    def merge(cls, overrides=None) -> 'ReaderOptions':
        """
        Merge caller overrides onto the defaults.

        Args:
            overrides: None, a ReaderOptions, or a mapping of option names.

        Returns:
            ReaderOptions: The merged options.
        """
        if overrides is None:
            return cls()
        if isinstance(overrides, cls):
            return overrides

        values: Dict[str, Any] = {}
        for key, value in dict(overrides).items():
            name = _ALIASES.get(key, key)
            if name not in cls._fields:
                raise TypeError(f"Unknown metadata reader option: {key}")
            if value is not None:
                values[name] = value

        if 'throw_on_error' in values:
            values['throw_on_error'] = parse_bool(values['throw_on_error'])
        if 'authn_request_binding' in values:
            values['authn_request_binding'] = str(values['authn_request_binding'])
        return cls()._replace(**values)

    @classmethod
    def from_app_config(cls, app_config) -> 'ReaderOptions':
        """Build options from a Flask config mapping."""
        return cls.merge({
            'authn_request_binding': app_config.get('SAML_AUTHN_REQUEST_BINDING'),
            'throw_on_error': app_config.get('SAML_METADATA_THROW_ON_ERROR'),
        })
