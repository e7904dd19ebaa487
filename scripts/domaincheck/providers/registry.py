"""
Reputation Provider Registry

Auto-discovers provider modules in this package and gives access to them
by name.
"""

import importlib
import logging
import pkgutil
from pathlib import Path
from typing import Optional

from ..config import CheckerConfig
from ..errors import ConfigurationError
from .base import ReputationProvider


class ProviderRegistry:
    """
    Registry for HTTP reputation providers.

    Providers are discovered from the providers package and instantiated
    with the checker configuration.
    """

    def __init__(self, config: CheckerConfig):
        self.config = config
        self.logger = logging.getLogger(__name__)
        self._providers: dict[str, ReputationProvider] = {}

        self._discover_providers()

    def _discover_providers(self) -> None:
        """Import every provider module and instantiate its provider classes."""
        package_dir = Path(__file__).parent

        for _, module_name, _ in pkgutil.iter_modules([str(package_dir)]):
            if module_name in ("base", "registry", "__init__"):
                continue

            package_name = __package__ or "domaincheck.providers"
            module = importlib.import_module(f".{module_name}", package=package_name)

            for attr_name in dir(module):
                attr = getattr(module, attr_name)
                if (
                    isinstance(attr, type)
                    and issubclass(attr, ReputationProvider)
                    and attr is not ReputationProvider
                ):
                    provider = attr(self.config)
                    self._providers[provider.name] = provider
                    self.logger.debug(
                        f"Loaded provider: {provider.name} (configured={provider.configured})"
                    )

        self.logger.info(
            f"Loaded {len(self._providers)} reputation providers: "
            f"{', '.join(sorted(self._providers))}"
        )

    def get(self, name: str) -> Optional[ReputationProvider]:
        return self._providers.get(name)

    def require(self, name: str) -> ReputationProvider:
        """Get a provider that is ready to be queried.

        Raises:
            ConfigurationError: unknown provider or no API key configured.
        """
        provider = self.get(name)
        if provider is None:
            raise ConfigurationError(f"Unknown provider: {name}")
        if not provider.configured:
            raise ConfigurationError(f"{provider.label} API key not configured")
        return provider

    def list_providers(self) -> list[str]:
        """Return names of loaded providers."""
        return sorted(self._providers)
