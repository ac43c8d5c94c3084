"""rootarchive - declarative topology reconciler for a root archive.

Converges the namespace of a content-addressed root archive to a desired
layout: a fixed set of directories, one mount per known owner and ad-hoc
library mounts. Safe to re-run on every start and after every membership
change.
"""

# Version is defined in pyproject.toml and read dynamically
try:
    from importlib.metadata import version

    __version__ = version("rootarchive")
except Exception:
    __version__ = "0.0.0.dev0"  # Fallback for development installs

from rootarchive.kernel.config import RootArchiveConfig, TopologyConfig, TopologyPaths
from rootarchive.kernel.domain import (
    NodeInfo,
    NodeKind,
    Outcome,
    OutcomeStatus,
    Owner,
    ReconciliationReport,
)
from rootarchive.kernel.exceptions import (
    ArchiveError,
    NameAllocationError,
    RootArchiveError,
    RootArchiveNotLoadedError,
)
from rootarchive.kernel.topology import TopologyReconciler

__all__ = [
    "__version__",
    # Configuration
    "RootArchiveConfig",
    "TopologyConfig",
    "TopologyPaths",
    # Domain
    "NodeInfo",
    "NodeKind",
    "Outcome",
    "OutcomeStatus",
    "Owner",
    "ReconciliationReport",
    # Errors
    "ArchiveError",
    "NameAllocationError",
    "RootArchiveError",
    "RootArchiveNotLoadedError",
    # Reconciler
    "TopologyReconciler",
]
