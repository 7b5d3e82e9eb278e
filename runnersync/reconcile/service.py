"""Reconcile runner group membership with configured glob rules."""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

from runnersync.github.models import SELECTED_VISIBILITY
from runnersync.logging import get_logger, log_debug, log_info
from runnersync.matching import matching_repository_ids

from .models import ClassificationResult, ReconcileOptions, ReconcileResult
from .observability import SyncEventLogger

if typ.TYPE_CHECKING:
    from runnersync.config.models import MatchRule
    from runnersync.github.client import RunnerGroupClient
    from runnersync.github.models import Repository, RunnerGroup

logger = get_logger(__name__)


class RunnerGroupReconciler:
    """Apply configured membership to the runner groups of one organization.

    The reconciler works from snapshots taken before it starts: the
    repository list and the classification are never re-fetched, so every
    group is computed against the same point-in-time view. Failures from the
    client propagate unchanged and stop the run.
    """

    def __init__(
        self,
        client: RunnerGroupClient,
        org: str,
        *,
        event_logger: SyncEventLogger | None = None,
    ) -> None:
        """Bind the reconciler to a client and organization."""
        self._client = client
        self._org = org
        self._events = event_logger or SyncEventLogger()

    async def sync_existing(
        self,
        group: RunnerGroup,
        repositories: cabc.Sequence[Repository],
        rules: cabc.Sequence[MatchRule],
        *,
        overwrite: bool,
    ) -> list[int]:
        """Update an existing group and return the repository IDs sent.

        Without ``overwrite`` the group's current repositories are kept and
        the matches appended; duplicates are left for GitHub to collapse.
        With ``overwrite`` the matches replace the current assignment.
        """
        log_debug(logger, "syncing %s", group.name)
        repository_ids: list[int] = []
        if not overwrite:
            repository_ids.extend(
                await self._client.get_group_repository_ids(self._org, group.id)
            )
        repository_ids.extend(matching_repository_ids(repositories, rules))

        await self._client.set_group_repositories(self._org, group.id, repository_ids)
        self._events.log_group_synced(group.name, repository_ids, overwrite=overwrite)
        return repository_ids

    async def create_missing(
        self,
        name: str,
        repositories: cabc.Sequence[Repository],
        rules: cabc.Sequence[MatchRule],
    ) -> list[int]:
        """Create group ``name`` with its matching repositories."""
        log_debug(logger, "creating %s", name)
        repository_ids = matching_repository_ids(repositories, rules)
        await self._client.create_group(
            self._org, name, repository_ids, visibility=SELECTED_VISIBILITY
        )
        self._events.log_group_created(name, repository_ids)
        return repository_ids

    async def reconcile(
        self,
        classification: ClassificationResult,
        repositories: cabc.Sequence[Repository],
        options: ReconcileOptions,
    ) -> ReconcileResult:
        """Sync supported groups, then create missing ones when enabled."""
        result = ReconcileResult()

        for name in classification.unsupported:
            self._events.log_group_skipped(name, "unsupported")
            result.groups_unsupported += 1

        log_debug(logger, "Syncing groups")
        for group, rules in classification.supported.items():
            result.assignments[group.name] = await self.sync_existing(
                group, repositories, rules, overwrite=options.overwrite
            )
            result.groups_synced += 1

        log_debug(logger, "Adding missing groups")
        if not options.create_missing:
            if classification.missing:
                log_info(
                    logger,
                    "Not creating %d missing group(s): %s",
                    len(classification.missing),
                    ", ".join(classification.missing),
                )
            result.groups_skipped += len(classification.missing)
            return result

        for name, rules in classification.missing.items():
            result.assignments[name] = await self.create_missing(
                name, repositories, rules
            )
            result.groups_created += 1
        return result
