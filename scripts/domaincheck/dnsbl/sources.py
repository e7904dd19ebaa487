"""
DNSBL source definitions.

Declarative list of the blocklists checked by default. Each source is a
BlocklistSource with:
- name: display name reported in results
- host: DNSBL zone queried
- kind: "ip" (reversed IP is queried) or "domain" (domain is queried)
- false_positives: answer codes that do not mean "listed"

Extra sources can be loaded from a YAML file:

    - name: My DNSBL
      host: dnsbl.example.net
      type: ip
      false_positives: ["127.0.0.1"]
"""

import logging
from pathlib import Path
from typing import Any, Iterable

import yaml

from ..errors import ConfigurationError
from ..models import BlocklistSource

logger = logging.getLogger(__name__)

# Returned by Spamhaus when the query comes through a public/open resolver
SPAMHAUS_REFUSED = frozenset({"127.255.255.252", "127.255.255.254", "127.255.255.255"})

# ═══════════════════════════════════════════════════════════════════════════
# IP BLOCKLISTS
# ═══════════════════════════════════════════════════════════════════════════

IP_SOURCES: list[BlocklistSource] = [
    BlocklistSource(
        "Spamhaus ZEN", "zen.spamhaus.org", false_positives=SPAMHAUS_REFUSED
    ),
    BlocklistSource("Spamcop", "bl.spamcop.net"),
    BlocklistSource("PSBL", "psbl.surriel.com"),
    BlocklistSource("UCEPROTECT L1", "dnsbl-1.uceprotect.net"),
    BlocklistSource("UCEPROTECT L2", "dnsbl-2.uceprotect.net"),
    BlocklistSource("UCEPROTECT L3", "dnsbl-3.uceprotect.net"),
    # 127.0.0.1 is hostkarma's whitelist answer
    BlocklistSource(
        "Hostkarma",
        "hostkarma.junkemailfilter.com",
        false_positives=frozenset({"127.0.0.1"}),
    ),
    BlocklistSource("SORBS SPAM", "dnsbl.sorbs.net"),
    BlocklistSource("DRONE BL", "dnsbl.dronebl.org"),
    BlocklistSource("MSRBL Spam", "spam.msrbl.net"),
    BlocklistSource("MSRBL Phishing", "phishing.msrbl.net"),
]

# ═══════════════════════════════════════════════════════════════════════════
# DOMAIN BLOCKLISTS
# ═══════════════════════════════════════════════════════════════════════════

DOMAIN_SOURCES: list[BlocklistSource] = [
    BlocklistSource(
        "Spamhaus DBL",
        "dbl.spamhaus.org",
        kind="domain",
        false_positives=SPAMHAUS_REFUSED,
    ),
    BlocklistSource(
        "SURBL multi",
        "multi.surbl.org",
        kind="domain",
        false_positives=frozenset({"127.0.0.1"}),
    ),
    BlocklistSource("ivmURI (Abuse.CH)", "ivmuri.abuse.ch", kind="domain"),
    BlocklistSource("ivmSIP (Abuse.CH)", "ivmsip.abuse.ch", kind="domain"),
]

DEFAULT_SOURCES: list[BlocklistSource] = IP_SOURCES + DOMAIN_SOURCES


def source_from_dict(data: dict[str, Any]) -> BlocklistSource:
    """Build a source from a mapping (YAML entry)."""
    if not isinstance(data, dict):
        raise ConfigurationError(f"Invalid blocklist source entry: {data!r}")

    host = str(data.get("host") or "").strip().strip(".")
    if not host:
        raise ConfigurationError(f"Blocklist source without host: {data!r}")

    kind = str(data.get("type") or data.get("kind") or "ip").lower()
    if kind not in ("ip", "domain"):
        raise ConfigurationError(f"Invalid type '{kind}' for blocklist {host}")

    return BlocklistSource(
        name=str(data.get("name") or host),
        host=host,
        kind=kind,
        false_positives=frozenset(str(c) for c in data.get("false_positives") or []),
    )


def load_sources(path: str | Path) -> list[BlocklistSource]:
    """Load additional blocklist sources from a YAML file."""
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Sources file not found: {path}")

    with open(path) as f:
        data = yaml.safe_load(f) or []

    if isinstance(data, dict):
        data = data.get("sources") or []

    if not isinstance(data, list):
        raise ConfigurationError(f"Sources file {path} must contain a list")

    sources = [source_from_dict(entry) for entry in data]
    logger.info(f"Loaded {len(sources)} blocklist source(s) from {path}")
    return sources


def select_sources(
    hosts: Iterable[str],
    extra: Iterable[BlocklistSource] = (),
) -> list[BlocklistSource]:
    """Pick sources by host, in default order, followed by extra sources.

    An empty host selection keeps every default source.
    """
    wanted = [h.strip().lower() for h in hosts if h.strip()]
    if wanted:
        known = {s.host: s for s in DEFAULT_SOURCES}
        unknown = [h for h in wanted if h not in known]
        if unknown:
            raise ConfigurationError(
                f"Unknown blocklist host(s): {', '.join(unknown)}"
            )
        selected = [s for s in DEFAULT_SOURCES if s.host in wanted]
    else:
        selected = list(DEFAULT_SOURCES)

    seen = {s.host for s in selected}
    for source in extra:
        if source.host in seen:
            continue
        selected.append(source)
        seen.add(source.host)

    return selected
