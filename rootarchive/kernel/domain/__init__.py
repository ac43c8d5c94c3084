"""Domain layer exports for rootarchive."""

from rootarchive.kernel.domain.address import (
    format_archive_address,
    is_archive_key,
    parse_archive_key,
)
from rootarchive.kernel.domain.node import NodeInfo, NodeKind
from rootarchive.kernel.domain.outcome import Outcome, OutcomeStatus, ReconciliationReport
from rootarchive.kernel.domain.owner import Owner, Profile

__all__ = [
    # Addresses
    "format_archive_address",
    "is_archive_key",
    "parse_archive_key",
    # Namespace nodes
    "NodeInfo",
    "NodeKind",
    # Reconciliation results
    "Outcome",
    "OutcomeStatus",
    "ReconciliationReport",
    # Collaborator records
    "Owner",
    "Profile",
]
