"""Shared fixtures for domain checker tests."""

from unittest.mock import MagicMock

import pytest

from domaincheck import BlocklistSource, CheckerConfig, DomainChecker, ResolutionError
from domaincheck.dnsbl import DnsblResult

ZEN = BlocklistSource("Spamhaus ZEN", "zen.spamhaus.org")
SPAMCOP = BlocklistSource("Spamcop", "bl.spamcop.net")
DBL = BlocklistSource("Spamhaus DBL", "dbl.spamhaus.org", kind="domain")

TEST_SOURCES = [ZEN, SPAMCOP, DBL]

# domain -> IP for the stub resolver
ADDRESSES = {
    "example.com": "93.184.216.34",
    "listed.example": "1.2.3.4",
    "spam.test": "127.0.0.2",
}


def fake_resolve(domain: str) -> str:
    """Stub resolver backed by ADDRESSES."""
    try:
        return ADDRESSES[domain]
    except KeyError:
        raise ResolutionError(domain, "ENOTFOUND") from None


def make_lookup(listed: dict[str, set[str]] | None = None, errors=None):
    """Mock DnsblLookup.

    Args:
        listed: source host -> set of IPs/domains listed there
        errors: source host -> exception raised when that source is queried
    """
    listed = listed or {}
    errors = errors or {}

    def check(source, ip, domain):
        if source.host in errors:
            raise errors[source.host]
        target = ip if source.kind == "ip" else domain
        query = source.query_name(ip, domain)
        hit = target in listed.get(source.host, set())
        return DnsblResult(
            source=source,
            query=query,
            listed=hit,
            return_code="127.0.0.2" if hit else "",
        )

    lookup = MagicMock()
    lookup.policy = "tolerant"
    lookup.check.side_effect = check
    return lookup


@pytest.fixture
def config():
    """Config with sequential processing and every provider keyed."""
    return CheckerConfig(
        workers=1,
        blacklistmaster_api_key="bm-key",
        abuseipdb_api_key="abuse-key",
        safe_browsing_api_key="sb-key",
    )


@pytest.fixture
def checker_factory(config):
    """Build a DomainChecker with stubbed DNS."""

    def factory(listed=None, errors=None, sources=None, cfg=None):
        return DomainChecker(
            cfg or config,
            sources=TEST_SOURCES if sources is None else sources,
            lookup=make_lookup(listed, errors),
            resolve=fake_resolve,
        )

    return factory
