"""DNS-based blocklist sources and lookups."""

from .lookup import POLICIES, POLICY_STRICT, POLICY_TOLERANT, DnsblLookup, DnsblResult
from .sources import DEFAULT_SOURCES, load_sources, select_sources

__all__ = [
    "DnsblLookup",
    "DnsblResult",
    "POLICIES",
    "POLICY_STRICT",
    "POLICY_TOLERANT",
    "DEFAULT_SOURCES",
    "load_sources",
    "select_sources",
]
