"""Structured results of reconciliation steps.

Every ensure operation returns an :class:`Outcome` instead of raising, and a
pass collects them into a :class:`ReconciliationReport`. Callers can tell a
fully converged namespace from a partially converged one without reading
logs.
"""

from __future__ import annotations

from collections import Counter
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Operation = Literal["directory", "mount", "unmount", "sweep", "setup"]


class OutcomeStatus(StrEnum):
    """What a single ensure step did."""

    CREATED = "created"
    MOUNTED = "mounted"
    REASSIGNED = "reassigned"
    UNMOUNTED = "unmounted"
    UNCHANGED = "unchanged"
    CONFLICT = "conflict"
    FAILED = "failed"

    @property
    def is_change(self) -> bool:
        return self in _CHANGES

    @property
    def is_problem(self) -> bool:
        return self in (OutcomeStatus.CONFLICT, OutcomeStatus.FAILED)


_CHANGES = frozenset({
    OutcomeStatus.CREATED,
    OutcomeStatus.MOUNTED,
    OutcomeStatus.REASSIGNED,
    OutcomeStatus.UNMOUNTED,
})


class Outcome(BaseModel):
    """Result of one ensure step on one path."""

    model_config = ConfigDict(frozen=True)

    operation: Operation
    path: str
    status: OutcomeStatus
    address: str | None = None
    key: str | None = None
    previous_key: str | None = None
    reason: str | None = None


class ReconciliationReport(BaseModel):
    """Ordered outcomes of a reconciliation pass."""

    outcomes: list[Outcome] = Field(default_factory=list)

    def add(self, outcome: Outcome) -> Outcome:
        self.outcomes.append(outcome)
        return outcome

    def extend(self, other: ReconciliationReport) -> None:
        self.outcomes.extend(other.outcomes)

    @property
    def conflicts(self) -> list[Outcome]:
        return [o for o in self.outcomes if o.status == OutcomeStatus.CONFLICT]

    @property
    def failures(self) -> list[Outcome]:
        return [o for o in self.outcomes if o.status == OutcomeStatus.FAILED]

    @property
    def changes(self) -> list[Outcome]:
        return [o for o in self.outcomes if o.status.is_change]

    @property
    def converged(self) -> bool:
        """True when no step hit a conflict or a failure."""
        return not any(o.status.is_problem for o in self.outcomes)

    def counts(self) -> dict[OutcomeStatus, int]:
        return dict(Counter(o.status for o in self.outcomes))

    def for_path(self, path: str) -> list[Outcome]:
        return [o for o in self.outcomes if o.path == path]


__all__ = ["Operation", "Outcome", "OutcomeStatus", "ReconciliationReport"]
