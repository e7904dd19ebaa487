"""Domain checker: validate, resolve, query blocklists, aggregate."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Optional, Sequence

from .config import CheckerConfig
from .dnsbl import DnsblLookup, load_sources, select_sources
from .errors import (
    ConfigurationError,
    ErrorKind,
    ListQueryError,
    ProviderError,
    QuotaExceededError,
    ResolutionError,
)
from .models import VIA_DOMAIN, VIA_IP, BlocklistSource, CheckResult, DomainOutcome
from .providers import ProviderRegistry, ReputationProvider
from .report import CheckReport
from .resolver import resolve_ipv4
from .validator import is_valid_domain

INVALID_FORMAT = "Invalid domain format."


class DomainChecker:
    """Checks domains against DNSBLs and HTTP reputation providers."""

    def __init__(
        self,
        config: CheckerConfig,
        sources: Optional[Sequence[BlocklistSource]] = None,
        lookup: Optional[DnsblLookup] = None,
        resolve: Callable[[str], str] = resolve_ipv4,
        registry: Optional[ProviderRegistry] = None,
    ):
        self.config = config
        self.logger = logging.getLogger(__name__)
        self.resolve = resolve

        if sources is None:
            extra = load_sources(config.sources_file) if config.sources_file else []
            sources = select_sources(config.lists, extra)
        self.sources = list(sources)

        self.lookup = lookup or DnsblLookup(
            policy=config.dns_policy, timeout=config.dns_timeout
        )
        self.registry = registry or ProviderRegistry(config)

        self.logger.info(
            f"Using {len(self.sources)} DNSBLs (policy={self.lookup.policy})"
        )

    # ─────────────────────────────────────────────────────────────────
    # Batch entry points
    # ─────────────────────────────────────────────────────────────────

    def enforce_quota(self, domains: Sequence[Any]) -> None:
        """Reject oversized batches before anything is checked."""
        limit = self.config.max_domains
        if limit and len(domains) > limit:
            raise QuotaExceededError(len(domains), limit)

    def check_domains(self, domains: Sequence[Any]) -> CheckReport:
        """Check domains against all configured DNSBLs."""
        self.enforce_quota(domains)
        return CheckReport.from_outcomes(self._run(self.check_domain, domains))

    def check_reputation(self, domains: Sequence[Any], provider: str) -> CheckReport:
        """Check domains with one HTTP reputation provider.

        Raises:
            ConfigurationError: provider unknown or without API key.
            QuotaExceededError: too many domains.
        """
        if provider not in self.config.enabled_providers():
            raise ConfigurationError(f"Provider '{provider}' is not enabled")
        reputation = self.registry.require(provider)
        self.enforce_quota(domains)
        return CheckReport.from_outcomes(
            self._run(lambda d: self.check_domain_reputation(d, reputation), domains)
        )

    def _run(
        self, check: Callable[[Any], DomainOutcome], domains: Sequence[Any]
    ) -> list[DomainOutcome]:
        """Run a per-domain check over all domains, keeping input order."""
        if self.config.workers <= 1 or len(domains) <= 1:
            return [check(d) for d in domains]

        workers = min(self.config.workers, len(domains))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(check, domains))

    # ─────────────────────────────────────────────────────────────────
    # Per-domain checks
    # ─────────────────────────────────────────────────────────────────

    def _validate_and_resolve(
        self, domain: Any, outcome: DomainOutcome
    ) -> Optional[str]:
        """Validate and resolve a domain, recording failures on the outcome."""
        if not is_valid_domain(domain):
            outcome.add_error(INVALID_FORMAT, ErrorKind.INVALID_FORMAT)
            return None

        try:
            return self.resolve(domain)
        except ResolutionError as e:
            self.logger.warning(f"DNS lookup failed for {domain}: {e.reason}")
            outcome.add_error(str(e), ErrorKind.RESOLUTION_FAILURE)
            return None

    def check_domain(self, domain: Any) -> DomainOutcome:
        """Check one domain against every configured DNSBL, one at a time."""
        outcome = DomainOutcome(domain=domain)

        ip = self._validate_and_resolve(domain, outcome)
        if ip is None:
            return outcome

        listed_on: list[str] = []
        for source in self.sources:
            try:
                result = self.lookup.check(source, ip, domain)
            except ListQueryError as e:
                self.logger.error(
                    f"Error querying {source.name} for {domain} ({ip}): {e.reason}"
                )
                outcome.add_error(
                    f"Error querying {source.name}: {e.reason}",
                    ErrorKind.LIST_QUERY_FAILURE,
                    source=source.name,
                )
                continue

            if result.listed:
                listed_on.append(source.name)

        if listed_on:
            self.logger.warning(
                f"{domain} ({ip} via {VIA_IP}) listed on: {', '.join(listed_on)}"
            )
        else:
            self.logger.info(f"{domain} ({ip} via {VIA_IP}) clean on all lists")

        outcome.result = CheckResult(
            domain=domain, query=ip, via=VIA_IP, listed_on=tuple(listed_on)
        )
        return outcome

    def check_domain_reputation(
        self, domain: Any, provider: ReputationProvider
    ) -> DomainOutcome:
        """Check one domain with an HTTP reputation provider."""
        outcome = DomainOutcome(domain=domain)

        if provider.uses_ip:
            query = self._validate_and_resolve(domain, outcome)
            if query is None:
                return outcome
            via = VIA_IP
        else:
            if not is_valid_domain(domain):
                return outcome.add_error(INVALID_FORMAT, ErrorKind.INVALID_FORMAT)
            query, via = domain, VIA_DOMAIN

        try:
            outcome.result = provider.check(domain, query, via)
        except ProviderError as e:
            self.logger.error(f"[{provider.label}] failed checking {domain}: {e}")
            outcome.add_error(
                str(e),
                ErrorKind.EXTERNAL_API_FAILURE,
                source=provider.label,
            )

        return outcome
