"""
Base class for HTTP reputation providers.

Each provider:
- Declares whether it is queried with the domain or the resolved IP (`query_kind`)
- Calls one external REST API per domain
- Maps the provider payload into a ReputationResult
- Raises ProviderError on non-success status or unexpected payloads

HTTP transport, status and JSON handling live in the base class - providers
only implement `name` and `check()`.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, ClassVar

import requests

from ..config import CheckerConfig
from ..errors import ProviderError
from ..models import ReputationResult

# Statuses for providers that only report "threat found / nothing found"
STATUS_TOXIC = "TOXICO"
STATUS_CLEAN = "LIMPO"


class ReputationProvider(ABC):
    """Abstract base class for HTTP reputation providers."""

    # "domain" or "ip"
    query_kind: ClassVar[str] = "domain"

    # Shown in results and error messages
    display_name: ClassVar[str] = ""

    def __init__(self, config: CheckerConfig) -> None:
        self.config = config
        self.logger = logging.getLogger(f"{__name__}.{self.name}")

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider identifier used in config and routes."""
        ...

    @property
    def label(self) -> str:
        return self.display_name or self.name

    @property
    def api_key(self) -> str:
        return self.config.api_key(self.name)

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    @property
    def uses_ip(self) -> bool:
        return self.query_kind == "ip"

    @abstractmethod
    def check(self, domain: str, query: str, via: str) -> ReputationResult:
        """Look up a domain (or its IP, passed as `query`)."""
        ...

    # ─────────────────────────────────────────────────────────────────
    # HTTP helpers (shared by all providers)
    # ─────────────────────────────────────────────────────────────────

    def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        """Perform a request and return the decoded JSON body."""
        kwargs.setdefault("timeout", self.config.http_timeout)

        try:
            response = requests.request(method, url, **kwargs)
        except requests.RequestException as e:
            raise ProviderError(f"Error calling {self.label}: {e}") from e

        if not response.ok:
            text = response.text[:200] if response.text else ""
            self.logger.error(
                f"[{self.label}] HTTP {response.status_code} for {url.split('?')[0]}: {text}"
            )
            raise ProviderError(
                f"{self.label} returned {response.status_code}: {text}".rstrip(": ")
            )

        try:
            return response.json()
        except ValueError as e:
            body = response.text[:200] if response.text else "<empty body>"
            raise ProviderError(f"Response is not valid JSON: {body}") from e

    def _expect_dict(self, data: Any) -> dict[str, Any]:
        if not isinstance(data, dict):
            raise ProviderError(
                f"Unexpected response from {self.label}: {type(data).__name__}"
            )
        return data
