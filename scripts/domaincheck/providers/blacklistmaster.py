"""BlacklistMaster REST API provider."""

from typing import ClassVar

from ..errors import ProviderError
from ..models import ReputationResult
from .base import ReputationProvider

BLACKLISTMASTER_API = "https://www.blacklistmaster.com/restapi/v1/blacklistcheck"

# Warn when the account is about to run out of API calls
LOW_CALLS_WARNING = 500


class BlacklistMasterProvider(ReputationProvider):
    """Checks a domain (or its IP) against BlacklistMaster."""

    display_name: ClassVar[str] = "BlacklistMaster"

    @property
    def name(self) -> str:
        return "blacklistmaster"

    @property
    def query_kind(self) -> str:  # type: ignore[override]
        return self.config.blacklistmaster_lookup

    def check(self, domain: str, query: str, via: str) -> ReputationResult:
        url = f"{BLACKLISTMASTER_API}/{self.query_kind}/{query}"
        data = self._expect_dict(
            self._request("GET", url, params={"apikey": self.api_key})
        )

        if data.get("response") != "OK":
            raise ProviderError(str(data.get("response") or "Unknown error"))

        remaining = data.get("API_calls_remaining")
        if remaining is not None:
            self.logger.debug(f"BlacklistMaster calls remaining: {remaining}")
            if str(remaining).isdigit() and int(remaining) < LOW_CALLS_WARNING:
                self.logger.warning(
                    f"Less than {LOW_CALLS_WARNING} BlacklistMaster API calls remaining ({remaining})"
                )

        blacklists = data.get("blacklists") or []
        if not isinstance(blacklists, list):
            raise ProviderError("Unexpected 'blacklists' field in BlacklistMaster response")
        names = tuple(
            str(b.get("blacklist_name", "")) for b in blacklists if isinstance(b, dict)
        )

        try:
            count = int(data.get("blacklist_cnt") or 0)
        except (TypeError, ValueError):
            count = len(names)

        self.logger.info(f"Checked {domain} | Status: {data.get('status')}")

        return ReputationResult(
            domain=domain,
            query=query,
            via=via,
            provider=self.label,
            status=str(data.get("status", "")),
            count=count,
            severity=data.get("blacklist_severity"),
            matches=names,
            listed=count > 0,
        )
