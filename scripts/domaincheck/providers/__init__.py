"""HTTP reputation providers (BlacklistMaster, AbuseIPDB, Safe Browsing)."""

from .base import STATUS_CLEAN, STATUS_TOXIC, ReputationProvider
from .registry import ProviderRegistry

__all__ = ["ReputationProvider", "ProviderRegistry", "STATUS_CLEAN", "STATUS_TOXIC"]
