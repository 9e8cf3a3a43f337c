"""Delete-marker restoration: per-prefix restorer and orchestrator."""

from .orchestrator import RestoreOrchestrator, restore_prefixes
from .prefix_restorer import PrefixRestorer, is_restorable
from .reporting import LogReporter, RestoreReporter

__all__ = [
    "LogReporter",
    "PrefixRestorer",
    "RestoreOrchestrator",
    "RestoreReporter",
    "is_restorable",
    "restore_prefixes",
]
