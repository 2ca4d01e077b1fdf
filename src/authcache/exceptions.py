"""authcache exceptions."""


class AuthCacheError(Exception):
    """Base exception for authcache."""

    pass


class ConfigError(AuthCacheError):
    """Configuration error."""

    pass


class DecodeError(AuthCacheError):
    """Stored bytes could not be decoded into a value."""

    pass


class InvalidKeyError(AuthCacheError, ValueError):
    """Key segment cannot be encoded (e.g. contains the delimiter)."""

    pass


class MalformedKeyError(AuthCacheError):
    """Key read back from the store does not have the expected structure."""

    pass


class ConnectionNotFoundError(AuthCacheError, LookupError):
    """No store connection registered under the requested name."""

    pass
