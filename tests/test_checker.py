"""Tests for the domain checker pipeline."""

from unittest.mock import MagicMock

import pytest

from conftest import DBL, SPAMCOP, ZEN, fake_resolve
from domaincheck import (
    CheckerConfig,
    ConfigurationError,
    DomainChecker,
    ErrorKind,
    ListQueryError,
    ProviderError,
    QuotaExceededError,
)
from domaincheck.models import ReputationResult


# ==================== DNSBL Pipeline Tests ====================


def test_clean_domain_produces_result(checker_factory):
    """Test a resolvable, unlisted domain yields one clean result."""
    checker = checker_factory()

    report = checker.check_domains(["example.com"])

    assert report.errors == []
    assert len(report.results) == 1
    result = report.results[0]
    assert result.domain == "example.com"
    assert result.query == "93.184.216.34"
    assert result.via == "IP"
    assert result.listed_on == ()
    assert result.listed_count == 0


def test_listed_on_only_contains_listing_sources(checker_factory):
    """Test listedOn holds exactly the sources that answered listed."""
    checker = checker_factory(
        listed={
            "zen.spamhaus.org": {"1.2.3.4"},
            "dbl.spamhaus.org": {"listed.example"},
        }
    )

    report = checker.check_domains(["listed.example"])

    result = report.results[0]
    assert result.listed_on == ("Spamhaus ZEN", "Spamhaus DBL")
    assert result.listed_count == 2


def test_source_error_recorded_without_aborting(checker_factory):
    """Test a failing source adds an error while other sources still count."""
    checker = checker_factory(
        listed={"bl.spamcop.net": {"1.2.3.4"}},
        errors={"zen.spamhaus.org": ListQueryError("4.3.2.1.zen.spamhaus.org", "SERVFAIL")},
    )

    report = checker.check_domains(["listed.example"])

    assert len(report.results) == 1
    assert report.results[0].listed_on == ("Spamcop",)
    assert len(report.errors) == 1
    error = report.errors[0]
    assert error.domain == "listed.example"
    assert error.kind == ErrorKind.LIST_QUERY_FAILURE
    assert error.source == "Spamhaus ZEN"
    assert "SERVFAIL" in error.error


def test_invalid_format_not_resolved(checker_factory):
    """Test malformed entries produce an error and are never resolved."""
    checker = checker_factory()
    checker.resolve = MagicMock(side_effect=fake_resolve)

    report = checker.check_domains(["example.com", "not a domain"])

    assert [r.domain for r in report.results] == ["example.com"]
    assert [e.domain for e in report.errors] == ["not a domain"]
    assert report.errors[0].kind == ErrorKind.INVALID_FORMAT
    checker.resolve.assert_called_once_with("example.com")


def test_resolution_failure_skips_all_sources(checker_factory):
    """Test a failed forward lookup yields one error and no list queries."""
    checker = checker_factory()

    report = checker.check_domains(["unknown.example"])

    assert report.results == []
    assert len(report.errors) == 1
    assert report.errors[0].kind == ErrorKind.RESOLUTION_FAILURE
    assert report.errors[0].error == "DNS lookup failed: ENOTFOUND"
    checker.lookup.check.assert_not_called()


def test_non_string_entries_are_invalid(checker_factory):
    """Test non-string entries are reported, not crashing the batch."""
    checker = checker_factory()

    report = checker.check_domains([None, 42, "example.com"])

    assert [e.domain for e in report.errors] == [None, 42]
    assert len(report.results) == 1


def test_sources_queried_in_configured_order(checker_factory):
    """Test sources are checked one by one in configured order."""
    checker = checker_factory()

    checker.check_domains(["example.com"])

    hosts = [c.args[0].host for c in checker.lookup.check.call_args_list]
    assert hosts == [ZEN.host, SPAMCOP.host, DBL.host]


def test_every_domain_accounted_for(checker_factory):
    """Test each input yields a result or at least one error."""
    checker = checker_factory(
        errors={"bl.spamcop.net": ListQueryError("q", "Refused")}
    )
    domains = ["example.com", "bad domain", "unknown.example", "listed.example"]

    report = checker.check_domains(domains)

    for domain in domains:
        has_result = any(r.domain == domain for r in report.results)
        has_error = any(e.domain == domain for e in report.errors)
        assert has_result or has_error


def test_parallel_workers_preserve_order(config, checker_factory):
    """Test a worker pool keeps results and errors in input order."""
    config.workers = 4
    checker = checker_factory(cfg=config)
    domains = ["listed.example", "bad domain", "example.com", "spam.test", "x y"]

    report = checker.check_domains(domains)

    assert [r.domain for r in report.results] == [
        "listed.example",
        "example.com",
        "spam.test",
    ]
    assert [e.domain for e in report.errors] == ["bad domain", "x y"]


def test_repeated_checks_are_stable(checker_factory):
    """Test unchanged list membership gives the same listedOn set."""
    checker = checker_factory(listed={"zen.spamhaus.org": {"1.2.3.4"}})

    first = checker.check_domains(["listed.example"]).to_dict()
    second = checker.check_domains(["listed.example"]).to_dict()

    assert first["resultados"][0]["listedOn"] == second["resultados"][0]["listedOn"]


def test_report_dict_always_has_both_lists(checker_factory):
    """Test the response always carries resultados and erros."""
    checker = checker_factory()

    assert checker.check_domains(["example.com"]).to_dict()["erros"] == []
    assert checker.check_domains(["bad domain"]).to_dict()["resultados"] == []


def test_result_serialization(checker_factory):
    """Test DNSBL results keep the wire field names."""
    checker = checker_factory(listed={"zen.spamhaus.org": {"1.2.3.4"}})

    data = checker.check_domains(["listed.example", "oops"]).to_dict()

    assert data["resultados"] == [
        {
            "dominioOriginal": "listed.example",
            "consultaUsada": "1.2.3.4",
            "via": "IP",
            "listedOn": ["Spamhaus ZEN"],
            "listedCount": 1,
        }
    ]
    assert data["erros"] == [{"domain": "oops", "error": "Invalid domain format."}]


# ==================== Quota Tests ====================


def test_quota_exceeded_checks_nothing(checker_factory):
    """Test oversized batches are rejected before any domain is processed."""
    checker = checker_factory()
    checker.resolve = MagicMock(side_effect=fake_resolve)

    with pytest.raises(QuotaExceededError) as exc_info:
        checker.check_domains(["example.com"] * 101)

    assert exc_info.value.limit == 100
    checker.resolve.assert_not_called()


def test_quota_boundary_and_disabled(config, checker_factory):
    """Test exactly max_domains is allowed and 0 disables the cap."""
    checker = checker_factory()
    assert len(checker.check_domains(["example.com"] * 100).results) == 100

    config.max_domains = 0
    assert len(checker.check_domains(["example.com"] * 150).results) == 150


# ==================== Reputation Pipeline Tests ====================


def _provider(uses_ip=False, result=None, error=None):
    provider = MagicMock()
    provider.uses_ip = uses_ip
    provider.label = "Fake"
    if error is not None:
        provider.check.side_effect = error
    else:
        provider.check.side_effect = lambda domain, query, via: result or ReputationResult(
            domain=domain, query=query, via=via, provider="Fake", status="LIMPO"
        )
    return provider


def test_reputation_domain_provider_skips_resolution(checker_factory):
    """Test domain-keyed providers are queried with the domain itself."""
    checker = checker_factory()
    checker.resolve = MagicMock(side_effect=fake_resolve)
    provider = _provider()

    outcome = checker.check_domain_reputation("example.com", provider)

    provider.check.assert_called_once_with("example.com", "example.com", "domain")
    checker.resolve.assert_not_called()
    assert outcome.ok


def test_reputation_ip_provider_resolves(checker_factory):
    """Test IP-keyed providers receive the resolved address."""
    checker = checker_factory()
    provider = _provider(uses_ip=True)

    outcome = checker.check_domain_reputation("example.com", provider)

    provider.check.assert_called_once_with("example.com", "93.184.216.34", "IP")
    assert outcome.result.query == "93.184.216.34"


def test_reputation_provider_failure_becomes_error(checker_factory):
    """Test provider exceptions become per-domain errors."""
    checker = checker_factory()
    provider = _provider(error=ProviderError("HTTP 503"))

    outcome = checker.check_domain_reputation("example.com", provider)

    assert outcome.result is None
    assert outcome.errors[0].kind == ErrorKind.EXTERNAL_API_FAILURE
    assert outcome.errors[0].error == "HTTP 503"


def test_reputation_provider_bug_is_not_masked(checker_factory):
    """Test non-provider exceptions propagate instead of becoming domain errors."""
    checker = checker_factory()
    provider = _provider(error=KeyError(0))

    with pytest.raises(KeyError):
        checker.check_domain_reputation("example.com", provider)


def test_reputation_invalid_domain(checker_factory):
    """Test invalid input never reaches the provider."""
    checker = checker_factory()
    provider = _provider()

    outcome = checker.check_domain_reputation("not a domain", provider)

    provider.check.assert_not_called()
    assert outcome.errors[0].kind == ErrorKind.INVALID_FORMAT


def test_reputation_requires_api_key(checker_factory):
    """Test a provider without key is a configuration error for the request."""
    checker = checker_factory(cfg=CheckerConfig(workers=1))

    with pytest.raises(ConfigurationError):
        checker.check_reputation(["example.com"], "safebrowsing")


def test_reputation_provider_not_enabled(config, checker_factory):
    """Test providers outside the enabled list are refused."""
    config.providers = ["abuseipdb"]
    checker = checker_factory(cfg=config)

    with pytest.raises(ConfigurationError):
        checker.check_reputation(["example.com"], "blacklistmaster")


def test_reputation_quota(checker_factory):
    """Test the quota applies to reputation checks too."""
    checker = checker_factory()

    with pytest.raises(QuotaExceededError):
        checker.check_reputation(["example.com"] * 101, "blacklistmaster")


def test_default_sources_from_config(config):
    """Test the checker builds its sources from config."""
    config.lists = ["zen.spamhaus.org", "dbl.spamhaus.org"]

    checker = DomainChecker(config, lookup=MagicMock(policy="tolerant"))

    assert [s.host for s in checker.sources] == ["zen.spamhaus.org", "dbl.spamhaus.org"]
    assert set(checker.registry.list_providers()) == {
        "abuseipdb",
        "blacklistmaster",
        "safebrowsing",
    }
