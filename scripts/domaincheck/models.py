"""Data models for domain blocklist checks."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional, Union

from .errors import ErrorKind

# Resolution methods reported in results
VIA_IP = "IP"
VIA_DOMAIN = "domain"


@dataclass(frozen=True)
class BlocklistSource:
    """A DNS-based blocklist."""

    name: str
    host: str  # DNSBL zone, e.g. zen.spamhaus.org
    kind: str = "ip"  # "ip" or "domain"
    false_positives: frozenset[str] = frozenset()  # answers that are not listings

    def query_name(self, ip: str, domain: str) -> str:
        """Build the synthetic DNS name for this source."""
        if self.kind == "ip":
            return f"{reverse_ip(ip)}.{self.host}"
        return f"{domain}.{self.host}"


def reverse_ip(ip: str) -> str:
    """Reverse IPv4 octets for DNSBL lookup (1.2.3.4 -> 4.3.2.1)."""
    return ".".join(reversed(ip.split(".")))


@dataclass(frozen=True)
class CheckResult:
    """DNSBL verdict for one domain."""

    domain: str
    query: str  # IP (or domain) used for the lookups
    via: str
    listed_on: tuple[str, ...] = ()
    check_time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def listed(self) -> bool:
        return bool(self.listed_on)

    @property
    def listed_count(self) -> int:
        return len(self.listed_on)

    def to_dict(self) -> dict[str, Any]:
        return {
            "dominioOriginal": self.domain,
            "consultaUsada": self.query,
            "via": self.via,
            "listedOn": list(self.listed_on),
            "listedCount": self.listed_count,
        }


@dataclass(frozen=True)
class ReputationResult:
    """Verdict from an HTTP reputation provider for one domain."""

    domain: str
    query: str
    via: str
    provider: str
    status: str
    count: int = 0
    severity: Any = None  # provider specific (severity label or score)
    matches: tuple[str, ...] = ()
    listed: bool = False
    check_time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict[str, Any]:
        return {
            "dominioOriginal": self.domain,
            "consultaUsada": self.query,
            "via": self.via,
            "fonte": self.provider,
            "status": self.status,
            "blacklistCount": self.count,
            "blacklistSeverity": self.severity,
            "blacklists": "; ".join(self.matches),
        }


Result = Union[CheckResult, ReputationResult]


@dataclass(frozen=True)
class ErrorEntry:
    """A failure recorded against a domain."""

    domain: Any  # raw input, may not even be a string
    error: str
    kind: ErrorKind = ErrorKind.LIST_QUERY_FAILURE
    source: str = ""  # list or provider name, if the failure is source specific

    def to_dict(self) -> dict[str, Any]:
        return {"domain": self.domain, "error": self.error}


@dataclass
class DomainOutcome:
    """Everything a single domain produced: at most one result, any number of errors."""

    domain: Any
    result: Optional[Result] = None
    errors: list[ErrorEntry] = field(default_factory=list)

    def add_error(
        self, error: str, kind: ErrorKind, source: str = ""
    ) -> "DomainOutcome":
        self.errors.append(
            ErrorEntry(domain=self.domain, error=error, kind=kind, source=source)
        )
        return self

    @property
    def ok(self) -> bool:
        return self.result is not None
