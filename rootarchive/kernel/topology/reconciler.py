"""Topology reconciler: converge the root archive to its desired layout.

Setup flow
----------
1. Prepare the trash subsystem, if one is configured.
2. Load the profile; create and persist a root archive on first run.
3. Load the root archive and build the :class:`TopologyContext`.
4. Ensure every canonical directory, parents first.
5. Ensure one mount per non-temporary owner, plus the default-owner alias.
6. Sweep ``owners_root`` and unmount entries no current owner claims.

Every step is best effort. Problems are logged and recorded in the returned
:class:`ReconciliationReport`; :meth:`TopologyReconciler.asetup` never
raises.

Concurrency contract: ``asetup`` must finish before ``aadd_user``,
``aremove_user`` or ``aadd_to_library`` are issued. Library additions are
serialised per containing directory by the context lock.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from rootarchive.kernel.config.models import TopologyConfig, TopologyPaths
from rootarchive.kernel.domain.outcome import Outcome, OutcomeStatus, ReconciliationReport
from rootarchive.kernel.exceptions import RootArchiveNotLoadedError
from rootarchive.kernel.logging import get_logger, reset_correlation_id, set_correlation_id
from rootarchive.kernel.topology.context import TopologyContext
from rootarchive.kernel.topology.ensure import (
    aensure_directory,
    aensure_mount,
    aensure_unmount,
)
from rootarchive.kernel.topology.naming import aallocate_name

if TYPE_CHECKING:
    from rootarchive.kernel.domain.owner import Owner
    from rootarchive.kernel.ports.archive import ArchiveEngine, ArchiveFilesystem
    from rootarchive.kernel.ports.profile_store import ProfileStore
    from rootarchive.kernel.ports.trash import Trash
    from rootarchive.kernel.ports.user_directory import UserDirectory

logger = get_logger(__name__)


class TopologyReconciler:
    """Owns the root archive and keeps its namespace converged.

    Example
    -------
    .. code-block:: python

        reconciler = TopologyReconciler(engine, profiles, users)
        report = await reconciler.asetup()
        name = await reconciler.aadd_to_library("hyper://<key>/", "My Post!")
    """

    def __init__(
        self,
        engine: ArchiveEngine,
        profiles: ProfileStore,
        users: UserDirectory,
        *,
        config: TopologyConfig | None = None,
        trash: Trash | None = None,
    ) -> None:
        self.engine = engine
        self.profiles = profiles
        self.users = users
        self.config = config or TopologyConfig()
        self.trash = trash

        self._context: TopologyContext | None = None
        self._root_address: str | None = None
        self.last_report: ReconciliationReport | None = None

    @property
    def paths(self) -> TopologyPaths:
        return self.config.paths

    # ------------------------------------------------------------------
    # Exposed API
    # ------------------------------------------------------------------

    def get_root_archive(self) -> ArchiveFilesystem:
        """The loaded root archive.

        Raises
        ------
        RootArchiveNotLoadedError
            If setup has not loaded the root archive yet.
        """
        return self._require_context("get the root archive").archive

    def is_root_address(self, candidate: str) -> bool:
        """Whether ``candidate`` is the recorded root archive address."""
        return self._root_address is not None and candidate == self._root_address

    @property
    def context(self) -> TopologyContext | None:
        return self._context

    def desired_mounts(self, owners: list[Owner]) -> dict[str, str]:
        """Owner mounts the layout requires, as ``path -> address``.

        The default owner's alias comes before its own path. With several
        owners flagged default, the last one wins the alias.
        """
        desired: dict[str, str] = {}
        for owner in owners:
            if owner.is_default:
                desired[self.paths.default_owner_alias] = owner.address
            if not owner.is_temporary:
                desired[self.paths.owner(owner.label)] = owner.address
        return desired

    async def asetup(self) -> ReconciliationReport:
        """Run a full best-effort reconciliation pass. Never raises."""
        report = ReconciliationReport()
        token = set_correlation_id(uuid.uuid4().hex[:12])
        try:
            await self._asetup_trash(report)

            try:
                await self._aload_root(report)
                owners = await self.users.alist_users()
            except Exception as e:
                logger.exception("Error while loading the root archive: {error}", error=str(e))
                report.add(
                    Outcome(operation="setup", path="/", status=OutcomeStatus.FAILED, reason=str(e))
                )
                return report

            ctx = self._require_context("set up the root archive")
            logger.info("Loading root archive {address}", address=self._root_address)
            try:
                for path in self.paths.canonical_directories():
                    report.add(await aensure_directory(ctx, path))

                for path, address in self.desired_mounts(owners).items():
                    report.add(await aensure_mount(ctx, path, address))

                await self._asweep_owner_mounts(ctx, owners, report)
            except Exception as e:
                logger.exception(
                    "Error while constructing the root archive: {error}", error=str(e)
                )
                report.add(
                    Outcome(operation="setup", path="/", status=OutcomeStatus.FAILED, reason=str(e))
                )
            return report
        finally:
            self.last_report = report
            self._log_summary(report)
            reset_correlation_id(token)

    async def aadd_user(self, owner: Owner) -> ReconciliationReport:
        """Mount a newly added owner without running the full sweep."""
        ctx = self._require_context("add a user")
        report = ReconciliationReport()
        if not owner.is_temporary:
            report.add(await aensure_mount(ctx, self.paths.owner(owner.label), owner.address))
        if owner.is_default:
            report.add(await aensure_mount(ctx, self.paths.default_owner_alias, owner.address))
        return report

    async def aremove_user(self, owner: Owner) -> ReconciliationReport:
        """Unmount a removed owner's path. The default alias is left as is."""
        ctx = self._require_context("remove a user")
        report = ReconciliationReport()
        report.add(await aensure_unmount(ctx, self.paths.owner(owner.label)))
        return report

    async def aadd_to_library(
        self,
        address: str,
        title: str | None,
        report: ReconciliationReport | None = None,
    ) -> str:
        """Mount ``address`` under the library root with a fresh name.

        Parameters
        ----------
        address : str
            Address of the archive to mount
        title : str | None
            Title the entry name is derived from
        report : ReconciliationReport | None, default=None
            Receives the mount outcome. A failed mount does not raise; pass a
            report to see it.

        Returns
        -------
        str
            The allocated entry name (``my-post``, ``my-post-2``...).

        Raises
        ------
        NameAllocationError
            If no free name exists.
        """
        ctx = self._require_context("add to the library")
        library_root = self.paths.library_root
        async with ctx.path_lock(library_root):
            name = await aallocate_name(ctx, library_root, title)
            outcome = await aensure_mount(ctx, self.paths.library_entry(name), address)
        if report is not None:
            report.add(outcome)
        return name

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require_context(self, operation: str) -> TopologyContext:
        if self._context is None:
            raise RootArchiveNotLoadedError(operation)
        return self._context

    async def _asetup_trash(self, report: ReconciliationReport) -> None:
        if self.trash is None:
            return
        try:
            await self.trash.asetup()
        except Exception as e:
            logger.error("Trash setup failed: {error}", error=str(e))
            report.add(
                Outcome(operation="setup", path="trash", status=OutcomeStatus.FAILED, reason=str(e))
            )

    async def _aload_root(self, report: ReconciliationReport) -> None:
        """Create the root archive on first run, then load it."""
        profile_id = self.config.profile_id
        profile = await self.profiles.aget(profile_id)
        address = profile.address
        if not address:
            archive = await self.engine.acreate_root_archive()
            logger.info("Root archive created", address=archive.address)
            await self.profiles.aupdate(profile_id, archive.address)
            address = archive.address
            report.add(
                Outcome(
                    operation="setup",
                    path="/",
                    status=OutcomeStatus.CREATED,
                    address=address,
                    key=archive.key,
                )
            )

        archive = await self.engine.aload_archive(address)
        self._root_address = address
        self._context = TopologyContext(
            archive=archive,
            engine=self.engine,
            paths=self.paths,
            allow_remote=self.config.allow_remote,
            max_name_attempts=self.config.max_name_attempts,
        )

    async def _asweep_owner_mounts(
        self, ctx: TopologyContext, owners: list[Owner], report: ReconciliationReport
    ) -> None:
        """Unmount entries under ``owners_root`` that no current owner claims.

        Owners renamed since the last pass are caught here: the old label is
        no longer claimed, so its mount goes.
        """
        owners_root = self.paths.owners_root
        labels = {o.label for o in owners if not o.is_temporary}
        try:
            names = await ctx.archive.areaddir(owners_root)
        except Exception as e:
            logger.error("Failed to list {path}: {error}", path=owners_root, error=str(e))
            report.add(
                Outcome(
                    operation="sweep", path=owners_root, status=OutcomeStatus.FAILED, reason=str(e)
                )
            )
            return

        for name in names:
            if name in labels:
                continue
            path = self.paths.owner(name)
            outcome = await aensure_unmount(ctx, path)
            if outcome.status == OutcomeStatus.UNMOUNTED:
                logger.info("Removed stale owner mount {path}", path=path)
            report.add(outcome)

    def _log_summary(self, report: ReconciliationReport) -> None:
        counts = {str(status): n for status, n in report.counts().items()}
        if report.converged:
            logger.info("Root archive converged", **counts)
        else:
            logger.warning(
                "Root archive partially converged: {conflicts} conflicts, {failures} failures",
                conflicts=len(report.conflicts),
                failures=len(report.failures),
            )


__all__ = ["TopologyReconciler"]
