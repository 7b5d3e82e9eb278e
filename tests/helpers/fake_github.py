"""In-memory runner group client for reconciliation tests."""

from __future__ import annotations

import collections.abc as cabc
import dataclasses

from runnersync.github import SELECTED_VISIBILITY, Repository, RunnerGroup


@dataclasses.dataclass(slots=True)
class CreatedGroup:
    """Arguments recorded for one ``create_group`` call."""

    org: str
    name: str
    repository_ids: list[int]
    visibility: str


@dataclasses.dataclass(slots=True)
class FakeRunnerGroupClient:
    """Serve a fixed organization snapshot and record mutating calls.

    ``group_repositories`` holds the current assignment per group ID and is
    updated by ``set_group_repositories`` so repeated runs see their own
    writes.
    """

    repositories: list[Repository] = dataclasses.field(default_factory=list)
    runner_groups: list[RunnerGroup] = dataclasses.field(default_factory=list)
    group_repositories: dict[int, list[int]] = dataclasses.field(default_factory=dict)
    set_calls: list[tuple[str, int, list[int]]] = dataclasses.field(
        default_factory=list
    )
    created: list[CreatedGroup] = dataclasses.field(default_factory=list)
    calls: list[str] = dataclasses.field(default_factory=list)
    fail_on: str | None = None
    failure: Exception | None = None

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if self.fail_on == name and self.failure is not None:
            raise self.failure

    async def list_org_repositories(
        self, org: str, *, repo_type: str = "all"
    ) -> tuple[Repository, ...]:
        del org, repo_type
        self._record("list_org_repositories")
        return tuple(self.repositories)

    async def list_runner_groups(self, org: str) -> tuple[RunnerGroup, ...]:
        del org
        self._record("list_runner_groups")
        return tuple(self.runner_groups)

    async def get_group_repository_ids(self, org: str, group_id: int) -> list[int]:
        del org
        self._record("get_group_repository_ids")
        return list(self.group_repositories.get(group_id, []))

    async def set_group_repositories(
        self, org: str, group_id: int, repository_ids: cabc.Sequence[int]
    ) -> None:
        self._record("set_group_repositories")
        ids = list(repository_ids)
        self.set_calls.append((org, group_id, ids))
        self.group_repositories[group_id] = ids

    async def create_group(
        self,
        org: str,
        name: str,
        repository_ids: cabc.Sequence[int],
        *,
        visibility: str = SELECTED_VISIBILITY,
    ) -> None:
        self._record("create_group")
        self.created.append(
            CreatedGroup(
                org=org,
                name=name,
                repository_ids=list(repository_ids),
                visibility=visibility,
            )
        )
