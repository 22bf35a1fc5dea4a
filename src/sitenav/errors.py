"""Exceptions raised by sitenav."""


class SitenavError(Exception):
    """Base class for sitenav errors."""


class ConfigurationError(SitenavError, ValueError):
    """Malformed content data, query records or configuration."""


class NotFoundError(SitenavError, LookupError):
    """A uuid, parent page or webspace could not be resolved."""
