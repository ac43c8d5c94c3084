"""Topology reconciliation: probe, ensure, allocate names, reconcile."""

from rootarchive.kernel.topology.context import TopologyContext
from rootarchive.kernel.topology.ensure import (
    aensure_directory,
    aensure_mount,
    aensure_unmount,
)
from rootarchive.kernel.topology.naming import aallocate_name, slugify
from rootarchive.kernel.topology.probe import aprobe
from rootarchive.kernel.topology.reconciler import TopologyReconciler

__all__ = [
    "TopologyContext",
    "TopologyReconciler",
    "aallocate_name",
    "aensure_directory",
    "aensure_mount",
    "aensure_unmount",
    "aprobe",
    "slugify",
]
