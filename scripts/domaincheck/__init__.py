"""Domain blocklist checker.

Public API:
    - DomainChecker: Validates, resolves and checks domains
    - CheckerConfig: Configuration dataclass
    - CheckReport: Results and errors of one request
    - ApiServer: HTTP API around the checker

Models:
    - BlocklistSource, CheckResult, ReputationResult, ErrorEntry, DomainOutcome

Provider API (for extending):
    - ReputationProvider: Base class for HTTP reputation providers
    - ProviderRegistry: Provider registry
"""

from .checker import DomainChecker
from .config import CheckerConfig
from .errors import (
    ConfigurationError,
    DomainCheckError,
    ErrorKind,
    ListQueryError,
    ProviderError,
    QuotaExceededError,
    ResolutionError,
)
from .models import (
    BlocklistSource,
    CheckResult,
    DomainOutcome,
    ErrorEntry,
    ReputationResult,
    reverse_ip,
)
from .providers import ProviderRegistry, ReputationProvider
from .report import CheckReport
from .server import ApiServer

__all__ = [
    # Main API
    "DomainChecker",
    "CheckerConfig",
    "CheckReport",
    "ApiServer",
    # Models
    "BlocklistSource",
    "CheckResult",
    "ReputationResult",
    "ErrorEntry",
    "DomainOutcome",
    "reverse_ip",
    # Errors
    "DomainCheckError",
    "ConfigurationError",
    "QuotaExceededError",
    "ResolutionError",
    "ListQueryError",
    "ProviderError",
    "ErrorKind",
    # Provider API
    "ReputationProvider",
    "ProviderRegistry",
]
