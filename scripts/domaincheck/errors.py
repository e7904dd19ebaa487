"""Exceptions and error kinds for domain checks."""

from enum import Enum


class ErrorKind(str, Enum):
    """Kind of failure recorded for a domain."""

    INVALID_FORMAT = "InvalidFormat"
    RESOLUTION_FAILURE = "ResolutionFailure"
    LIST_QUERY_FAILURE = "ListQueryFailure"
    EXTERNAL_API_FAILURE = "ExternalAPIFailure"
    CONFIGURATION_MISSING = "ConfigurationMissing"


class DomainCheckError(Exception):
    """Base class for all domain check errors."""

    kind: ErrorKind = ErrorKind.LIST_QUERY_FAILURE


class ConfigurationError(DomainCheckError):
    """Required configuration (e.g. an API key) is missing or invalid."""

    kind = ErrorKind.CONFIGURATION_MISSING


class QuotaExceededError(DomainCheckError):
    """More domains submitted than a single request may check."""

    def __init__(self, count: int, limit: int):
        self.count = count
        self.limit = limit
        super().__init__(
            f"You can check at most {limit} domains at a time ({count} submitted)."
        )


class ResolutionError(DomainCheckError):
    """Forward DNS lookup of a domain failed."""

    kind = ErrorKind.RESOLUTION_FAILURE

    def __init__(self, domain: str, reason: str):
        self.domain = domain
        self.reason = reason
        super().__init__(f"DNS lookup failed: {reason}")


class ListQueryError(DomainCheckError):
    """A DNSBL query failed in a way that is not a listing verdict."""

    kind = ErrorKind.LIST_QUERY_FAILURE

    def __init__(self, query: str, reason: str):
        self.query = query
        self.reason = reason
        super().__init__(f"{reason} ({query})")


class ProviderError(DomainCheckError):
    """An HTTP reputation provider returned an error or an unusable payload."""

    kind = ErrorKind.EXTERNAL_API_FAILURE
