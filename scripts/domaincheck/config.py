"""Configuration for the domain checker."""

import os
from dataclasses import dataclass, field

from .dnsbl.lookup import POLICIES, POLICY_TOLERANT
from .errors import ConfigurationError

# Provider name -> attribute holding its API key
PROVIDER_KEYS = {
    "blacklistmaster": "blacklistmaster_api_key",
    "abuseipdb": "abuseipdb_api_key",
    "safebrowsing": "safe_browsing_api_key",
}


def _split(value: str) -> list[str]:
    return [x.strip() for x in value.split(",") if x.strip()] if value else []


@dataclass
class CheckerConfig:
    """Configuration for the domain checker and its HTTP API."""

    host: str = "0.0.0.0"
    port: int = 8080

    # Max domains per request (0 = unlimited)
    max_domains: int = 100

    # Timeout/SERVFAIL handling for DNSBL queries: "tolerant" or "strict"
    dns_policy: str = POLICY_TOLERANT
    dns_timeout: float = 5.0
    http_timeout: float = 10.0

    # Domains checked in parallel (1 = sequential)
    workers: int = 4

    # DNSBL hosts to check (empty = all defaults) and extra YAML sources
    lists: list[str] = field(default_factory=list)
    sources_file: str = ""

    # HTTP reputation providers to enable (empty = every provider with a key)
    providers: list[str] = field(default_factory=list)

    blacklistmaster_api_key: str = ""
    blacklistmaster_lookup: str = "domain"  # "domain" or "ip"

    abuseipdb_api_key: str = ""
    abuseipdb_max_age_days: int = 90
    abuseipdb_threshold: int = 50

    safe_browsing_api_key: str = ""
    safe_browsing_client_id: str = "domaincheck"

    @classmethod
    def from_env(cls) -> "CheckerConfig":
        """Create config from environment variables."""
        return cls(
            host=os.environ.get("DOMAINCHECK_HOST", "0.0.0.0"),
            port=int(os.environ.get("DOMAINCHECK_PORT", "8080")),
            max_domains=int(os.environ.get("DOMAINCHECK_MAX_DOMAINS", "100")),
            dns_policy=os.environ.get("DOMAINCHECK_DNS_POLICY", POLICY_TOLERANT)
            .strip()
            .lower(),
            dns_timeout=float(os.environ.get("DOMAINCHECK_DNS_TIMEOUT", "5")),
            http_timeout=float(os.environ.get("DOMAINCHECK_HTTP_TIMEOUT", "10")),
            workers=int(os.environ.get("DOMAINCHECK_WORKERS", "4")),
            lists=_split(os.environ.get("DOMAINCHECK_LISTS", "")),
            sources_file=os.environ.get("DOMAINCHECK_SOURCES_FILE", ""),
            providers=[
                p.lower() for p in _split(os.environ.get("DOMAINCHECK_PROVIDERS", ""))
            ],
            blacklistmaster_api_key=os.environ.get(
                "BLACKLISTMASTER_API_KEY", os.environ.get("API_KEY", "")
            ),
            blacklistmaster_lookup=os.environ.get(
                "BLACKLISTMASTER_LOOKUP", "domain"
            ).lower(),
            abuseipdb_api_key=os.environ.get("ABUSEIPDB_API_KEY", ""),
            abuseipdb_max_age_days=int(
                os.environ.get("ABUSEIPDB_MAX_AGE_DAYS", "90")
            ),
            abuseipdb_threshold=int(os.environ.get("ABUSEIPDB_THRESHOLD", "50")),
            safe_browsing_api_key=os.environ.get("SAFE_BROWSING_API_KEY", ""),
            safe_browsing_client_id=os.environ.get(
                "SAFE_BROWSING_CLIENT_ID", "domaincheck"
            ),
        )

    def api_key(self, provider: str) -> str:
        """API key configured for a provider ("" if none)."""
        attr = PROVIDER_KEYS.get(provider)
        return getattr(self, attr) if attr else ""

    def enabled_providers(self) -> list[str]:
        """Providers to serve: the explicit list, or every provider with a key."""
        if self.providers:
            return list(self.providers)
        return [name for name in PROVIDER_KEYS if self.api_key(name)]

    def validate(self) -> None:
        """Check configuration once at startup.

        Raises:
            ConfigurationError: invalid value or enabled provider without API key.
        """
        if self.dns_policy not in POLICIES:
            raise ConfigurationError(
                f"Invalid DNS policy '{self.dns_policy}' (expected one of {', '.join(POLICIES)})"
            )
        if self.max_domains < 0:
            raise ConfigurationError("max_domains must be >= 0")
        if self.workers < 1:
            raise ConfigurationError("workers must be >= 1")
        if self.blacklistmaster_lookup not in ("domain", "ip"):
            raise ConfigurationError(
                f"Invalid BlacklistMaster lookup '{self.blacklistmaster_lookup}'"
            )

        unknown = [p for p in self.providers if p not in PROVIDER_KEYS]
        if unknown:
            raise ConfigurationError(f"Unknown provider(s): {', '.join(unknown)}")

        missing = [p for p in self.providers if not self.api_key(p)]
        if missing:
            raise ConfigurationError(
                "Missing API key for provider(s): "
                + ", ".join(f"{p} ({PROVIDER_KEYS[p].upper()})" for p in missing)
            )
