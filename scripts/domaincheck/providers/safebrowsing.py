"""Google Safe Browsing v4 provider."""

import re
from typing import Any, ClassVar

from ..errors import ProviderError
from ..models import ReputationResult
from .base import STATUS_CLEAN, STATUS_TOXIC, ReputationProvider

SAFE_BROWSING_API = "https://safebrowsing.googleapis.com/v4/threatMatches:find"

THREAT_TYPES = [
    "MALWARE",
    "SOCIAL_ENGINEERING",
    "UNWANTED_SOFTWARE",
    "POTENTIALLY_HARMFUL_APPLICATION",
]

_SCHEME = re.compile(r"^https?://", re.IGNORECASE)


def candidate_url(domain: str) -> str:
    """URL submitted for a domain (http:// added unless a scheme is present)."""
    return domain if _SCHEME.match(domain) else f"http://{domain}"


class SafeBrowsingProvider(ReputationProvider):
    """Looks a domain up in Google Safe Browsing threat lists."""

    display_name: ClassVar[str] = "Safe Browsing"

    @property
    def name(self) -> str:
        return "safebrowsing"

    def _request_body(self, url: str) -> dict[str, Any]:
        return {
            "client": {
                "clientId": self.config.safe_browsing_client_id,
                "clientVersion": "1.0",
            },
            "threatInfo": {
                "threatTypes": THREAT_TYPES,
                "platformTypes": ["ANY_PLATFORM"],
                "threatEntryTypes": ["URL"],
                "threatEntries": [{"url": url}],
            },
        }

    def check(self, domain: str, query: str, via: str) -> ReputationResult:
        data = self._expect_dict(
            self._request(
                "POST",
                SAFE_BROWSING_API,
                params={"key": self.api_key},
                json=self._request_body(candidate_url(query)),
            )
        )

        # An empty object means no match
        matches = data.get("matches") or []
        if not isinstance(matches, list):
            raise ProviderError("Unexpected 'matches' field in Safe Browsing response")

        threats: list[str] = []
        for match in matches:
            threat = match.get("threatType") if isinstance(match, dict) else None
            if threat and threat not in threats:
                threats.append(threat)

        listed = bool(matches)
        if listed:
            self.logger.warning(f"{domain} flagged by Safe Browsing: {', '.join(threats)}")

        return ReputationResult(
            domain=domain,
            query=query,
            via=via,
            provider=self.label,
            status=STATUS_TOXIC if listed else STATUS_CLEAN,
            count=len(matches),
            matches=tuple(threats),
            listed=listed,
        )
