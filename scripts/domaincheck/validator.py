"""Domain format validation and caller-side normalization."""

import re
from typing import Any, Iterable

DOMAIN_PATTERN = re.compile(r"[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")

_SCHEME = re.compile(r"^https?://", re.IGNORECASE)


def is_valid_domain(domain: Any) -> bool:
    """Check that a value looks like a domain name (label(s), dot, 2+ letter suffix)."""
    if not isinstance(domain, str):
        return False
    return DOMAIN_PATTERN.fullmatch(domain) is not None


def clean_domain(value: str) -> str:
    """Strip scheme, leading www., trailing slash and whitespace; lowercase."""
    value = value.strip()
    value = _SCHEME.sub("", value)
    if value.lower().startswith("www."):
        value = value[4:]
    return value.rstrip("/").strip().lower()


def normalize_domains(values: Iterable[str]) -> list[str]:
    """Clean domains, drop empty entries and duplicates (first occurrence wins)."""
    seen: set[str] = set()
    domains: list[str] = []
    for value in values:
        domain = clean_domain(value)
        if domain and domain not in seen:
            seen.add(domain)
            domains.append(domain)
    return domains
