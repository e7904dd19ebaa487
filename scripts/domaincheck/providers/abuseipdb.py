"""AbuseIPDB IP reputation provider."""

from typing import Any, ClassVar

from ..errors import ProviderError
from ..models import ReputationResult
from .base import STATUS_CLEAN, STATUS_TOXIC, ReputationProvider

ABUSEIPDB_API = "https://api.abuseipdb.com/api/v2/check"

ABUSE_CATEGORIES = {
    1: "DNS Compromise",
    2: "DNS Poisoning",
    3: "Fraud Orders",
    4: "DDoS Attack",
    5: "FTP Brute-Force",
    6: "Ping of Death",
    7: "Phishing",
    8: "Fraud VoIP",
    9: "Open Proxy",
    10: "Web Spam",
    11: "Email Spam",
    12: "Blog Spam",
    13: "VPN IP",
    14: "Port Scan",
    15: "Hacking",
    16: "SQL Injection",
    17: "Spoofing",
    18: "Brute-Force",
    19: "Bad Web Bot",
    20: "Exploited Host",
    21: "Web App Attack",
    22: "SSH",
    23: "IoT Targeted",
}


class AbuseIPDBProvider(ReputationProvider):
    """Checks the resolved IP of a domain against AbuseIPDB."""

    query_kind: ClassVar[str] = "ip"
    display_name: ClassVar[str] = "AbuseIPDB"

    @property
    def name(self) -> str:
        return "abuseipdb"

    def check(self, domain: str, query: str, via: str) -> ReputationResult:
        data = self._expect_dict(
            self._request(
                "GET",
                ABUSEIPDB_API,
                headers={"Key": self.api_key, "Accept": "application/json"},
                params={
                    "ipAddress": query,
                    "maxAgeInDays": self.config.abuseipdb_max_age_days,
                    "verbose": "true",
                },
            )
        )

        if "data" not in data:
            raise ProviderError(
                self._error_detail(data.get("errors"))
                or "Unexpected response from AbuseIPDB"
            )

        ip_data = data["data"]
        if not isinstance(ip_data, dict):
            raise ProviderError("Unexpected 'data' field in AbuseIPDB response")

        score = self._int_field(ip_data, "abuseConfidenceScore")
        listed = score >= self.config.abuseipdb_threshold

        return ReputationResult(
            domain=domain,
            query=query,
            via=via,
            provider=self.label,
            status=STATUS_TOXIC if listed else STATUS_CLEAN,
            count=self._int_field(ip_data, "totalReports"),
            severity=score,
            matches=tuple(self._category_names(ip_data.get("reports") or [])),
            listed=listed,
        )

    @staticmethod
    def _error_detail(errors: Any) -> str:
        if isinstance(errors, list) and errors and isinstance(errors[0], dict):
            return str(errors[0].get("detail") or "")
        return ""

    @staticmethod
    def _int_field(ip_data: dict[str, Any], key: str) -> int:
        try:
            return int(ip_data.get(key) or 0)
        except (TypeError, ValueError) as e:
            raise ProviderError(f"Unexpected '{key}' field in AbuseIPDB response") from e

    @staticmethod
    def _category_names(reports: Any) -> list[str]:
        """Distinct category names from verbose reports, in first-seen order."""
        names: list[str] = []
        if not isinstance(reports, list):
            return names
        for report in reports:
            if not isinstance(report, dict):
                continue
            categories = report.get("categories")
            if not isinstance(categories, list):
                continue
            for cat_id in categories:
                name = ABUSE_CATEGORIES.get(cat_id) if isinstance(cat_id, int) else None
                if name and name not in names:
                    names.append(name)
        return names
