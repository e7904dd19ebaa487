"""Tests for checker configuration."""

import pytest

from domaincheck import CheckerConfig, ConfigurationError

ENV_VARS = [
    "DOMAINCHECK_PORT",
    "DOMAINCHECK_MAX_DOMAINS",
    "DOMAINCHECK_DNS_POLICY",
    "DOMAINCHECK_WORKERS",
    "DOMAINCHECK_LISTS",
    "DOMAINCHECK_PROVIDERS",
    "BLACKLISTMASTER_API_KEY",
    "API_KEY",
    "ABUSEIPDB_API_KEY",
    "SAFE_BROWSING_API_KEY",
]


@pytest.fixture
def clean_env(monkeypatch):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    """Test defaults when nothing is set."""
    config = CheckerConfig.from_env()

    assert config.port == 8080
    assert config.max_domains == 100
    assert config.dns_policy == "tolerant"
    assert config.lists == []
    assert config.enabled_providers() == []
    config.validate()


def test_from_env(clean_env):
    """Test environment variables are parsed."""
    clean_env.setenv("DOMAINCHECK_PORT", "9000")
    clean_env.setenv("DOMAINCHECK_MAX_DOMAINS", "0")
    clean_env.setenv("DOMAINCHECK_DNS_POLICY", "STRICT")
    clean_env.setenv("DOMAINCHECK_LISTS", "zen.spamhaus.org, ,dbl.spamhaus.org")
    clean_env.setenv("SAFE_BROWSING_API_KEY", "sb")

    config = CheckerConfig.from_env()

    assert config.port == 9000
    assert config.max_domains == 0
    assert config.dns_policy == "strict"
    assert config.lists == ["zen.spamhaus.org", "dbl.spamhaus.org"]
    assert config.enabled_providers() == ["safebrowsing"]


def test_legacy_api_key_for_blacklistmaster(clean_env):
    """Test API_KEY is accepted as the BlacklistMaster key."""
    clean_env.setenv("API_KEY", "legacy")

    config = CheckerConfig.from_env()

    assert config.api_key("blacklistmaster") == "legacy"


def test_validate_missing_key_for_enabled_provider(clean_env):
    """Test an explicitly enabled provider needs its API key at startup."""
    clean_env.setenv("DOMAINCHECK_PROVIDERS", "abuseipdb,safebrowsing")
    clean_env.setenv("SAFE_BROWSING_API_KEY", "sb")

    config = CheckerConfig.from_env()

    with pytest.raises(ConfigurationError, match="ABUSEIPDB_API_KEY"):
        config.validate()


@pytest.mark.parametrize(
    "overrides",
    [
        {"dns_policy": "lenient"},
        {"max_domains": -1},
        {"workers": 0},
        {"providers": ["virustotal"]},
        {"blacklistmaster_lookup": "url"},
    ],
)
def test_validate_rejects_bad_values(overrides):
    """Test invalid settings are rejected."""
    config = CheckerConfig(**overrides)

    with pytest.raises(ConfigurationError):
        config.validate()
