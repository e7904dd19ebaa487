"""Prometheus metrics for the domain checker API."""

import threading
import time
from collections import Counter

from .report import CheckReport


class Metrics:
    """In-process counters rendered in Prometheus text format."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.requests: Counter[tuple[str, int]] = Counter()  # (route, status)
        self.domains_checked: Counter[str] = Counter()  # check name
        self.listings: Counter[str] = Counter()  # list / provider name
        self.errors: Counter[str] = Counter()  # error kind
        self.last_check: float = 0.0

    def record_request(self, route: str, status: int) -> None:
        with self._lock:
            self.requests[(route, status)] += 1

    def record_report(self, check: str, domains: int, report: CheckReport) -> None:
        """Count checked domains, listings and errors of one request."""
        with self._lock:
            self.domains_checked[check] += domains
            for result in report.results:
                if not result.listed:
                    continue
                provider = getattr(result, "provider", None)
                if provider:
                    self.listings[provider] += 1
                else:
                    for name in result.listed_on:
                        self.listings[name] += 1
            for error in report.errors:
                self.errors[error.kind.value] += 1
            self.last_check = time.time()

    @staticmethod
    def _escape_label_value(value: str) -> str:
        """Escape special characters in Prometheus label values."""
        return value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")

    def render(self) -> str:
        """Generate Prometheus metrics."""
        esc = self._escape_label_value
        lines: list[str] = []

        with self._lock:
            lines.append(
                "# HELP domaincheck_requests_total API requests by route and status"
            )
            lines.append("# TYPE domaincheck_requests_total counter")
            for (route, status), count in sorted(self.requests.items()):
                lines.append(
                    f'domaincheck_requests_total{{route="{esc(route)}",status="{status}"}} {count}'
                )

            lines.append("")
            lines.append("# HELP domaincheck_domains_checked_total Domains submitted for checking")
            lines.append("# TYPE domaincheck_domains_checked_total counter")
            for check, count in sorted(self.domains_checked.items()):
                lines.append(
                    f'domaincheck_domains_checked_total{{check="{esc(check)}"}} {count}'
                )

            lines.append("")
            lines.append(
                "# HELP domaincheck_listed_total Times a domain was found on a list"
            )
            lines.append("# TYPE domaincheck_listed_total counter")
            for name, count in sorted(self.listings.items()):
                lines.append(f'domaincheck_listed_total{{list="{esc(name)}"}} {count}')

            lines.append("")
            lines.append("# HELP domaincheck_errors_total Per-domain errors by kind")
            lines.append("# TYPE domaincheck_errors_total counter")
            for kind, count in sorted(self.errors.items()):
                lines.append(f'domaincheck_errors_total{{kind="{esc(kind)}"}} {count}')

            if self.last_check:
                lines.append("")
                lines.append(
                    "# HELP domaincheck_last_check_timestamp Unix timestamp of last check"
                )
                lines.append("# TYPE domaincheck_last_check_timestamp gauge")
                lines.append(f"domaincheck_last_check_timestamp {int(self.last_check)}")

        return "\n".join(lines) + "\n"
