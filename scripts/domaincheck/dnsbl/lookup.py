"""
DNSBL lookups.

Queries a synthetic name (reversed IP or domain + zone) for an A record and
turns the DNS outcome into a listing verdict:

- answer         -> listed (unless the answer is a known false positive)
- NXDOMAIN/empty -> not listed
- timeout/SERVFAIL -> depends on policy (tolerant: not listed, strict: error)
- anything else  -> ListQueryError
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

import dns.exception
import dns.resolver

from ..errors import ListQueryError
from ..models import BlocklistSource

POLICY_TOLERANT = "tolerant"
POLICY_STRICT = "strict"
POLICIES = (POLICY_TOLERANT, POLICY_STRICT)


@dataclass
class DnsblResult:
    """Result of a single DNSBL query."""

    source: BlocklistSource
    query: str  # e.g. 4.3.2.1.zen.spamhaus.org
    listed: bool
    return_code: str = ""  # DNS answer (e.g. 127.0.0.2)
    reason: str = ""
    check_time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class DnsblLookup:
    """Checks targets against DNSBL zones with an explicit failure policy."""

    def __init__(
        self,
        policy: str = POLICY_TOLERANT,
        timeout: float = 5.0,
        resolver: Optional[dns.resolver.Resolver] = None,
    ):
        if policy not in POLICIES:
            raise ValueError(f"Unknown DNSBL policy: {policy}")
        self.policy = policy
        self.logger = logging.getLogger(__name__)

        if resolver is None:
            resolver = dns.resolver.Resolver()
            resolver.timeout = timeout
            resolver.lifetime = timeout * 2
        self.resolver = resolver

    def _lookup(self, query: str) -> Optional[str]:
        """Resolve an A record. Returns the first answer or None if not listed."""
        try:
            answers = self.resolver.resolve(query, "A")
            return str(answers[0])
        except (dns.resolver.NXDOMAIN, dns.resolver.NoAnswer):
            return None
        except (dns.exception.Timeout, dns.resolver.NoNameservers) as e:
            code = "TIMEOUT" if isinstance(e, dns.exception.Timeout) else "SERVFAIL"
            if self.policy == POLICY_STRICT:
                raise ListQueryError(query, code) from e
            self.logger.warning(
                f"Query for {query} resulted in {code}, treating as not listed"
            )
            return None
        except dns.exception.DNSException as e:
            raise ListQueryError(query, e.__class__.__name__) from e

    def check(self, source: BlocklistSource, ip: str, domain: str) -> DnsblResult:
        """Check an IP or domain (depending on the source kind) against a source."""
        query = source.query_name(ip, domain)
        answer = self._lookup(query)

        if answer is None:
            return DnsblResult(source=source, query=query, listed=False)

        if answer in source.false_positives:
            self.logger.debug(f"Ignoring false positive {answer} from {source.host}")
            return DnsblResult(
                source=source,
                query=query,
                listed=False,
                return_code=answer,
                reason="False positive",
            )

        return DnsblResult(
            source=source,
            query=query,
            listed=True,
            return_code=answer,
            reason=f"Listed ({answer})",
        )
