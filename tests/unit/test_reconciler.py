"""Unit tests for the runner group membership reconciler."""

from __future__ import annotations

import pytest

from runnersync.config import MatchRule
from runnersync.github import GitHubAPIError, Repository, RunnerGroup
from runnersync.reconcile import (
    ClassificationResult,
    ReconcileOptions,
    RunnerGroupReconciler,
)
from tests.helpers.fake_github import CreatedGroup, FakeRunnerGroupClient

_ORG = "octo"
_REPOSITORIES = [
    Repository(id=1, name="app-one"),
    Repository(id=2, name="app-legacy"),
    Repository(id=3, name="lib-two"),
]
_CI_RULES = (MatchRule.from_pattern("app-*"), MatchRule.from_pattern("!app-legacy"))
_CI_GROUP = RunnerGroup(id=10, name="ci-group", visibility="selected")


def _client() -> FakeRunnerGroupClient:
    return FakeRunnerGroupClient(
        repositories=list(_REPOSITORIES),
        runner_groups=[_CI_GROUP],
        group_repositories={_CI_GROUP.id: [3]},
    )


@pytest.mark.asyncio
async def test_sync_existing_merges_with_current_assignment() -> None:
    """Without overwrite the current IDs are kept ahead of the matches."""
    client = _client()
    reconciler = RunnerGroupReconciler(client, _ORG)

    sent = await reconciler.sync_existing(
        _CI_GROUP, _REPOSITORIES, _CI_RULES, overwrite=False
    )

    assert sent == [3, 1], "Expected prior IDs followed by matched IDs."
    assert client.set_calls == [(_ORG, 10, [3, 1])], "Expected a single set call."
    assert "get_group_repository_ids" in client.calls, "Expected a fetch."


@pytest.mark.asyncio
async def test_sync_existing_merge_keeps_duplicates() -> None:
    """IDs already assigned and matched again are sent twice."""
    client = _client()
    client.group_repositories[_CI_GROUP.id] = [1, 3]
    reconciler = RunnerGroupReconciler(client, _ORG)

    sent = await reconciler.sync_existing(
        _CI_GROUP, _REPOSITORIES, _CI_RULES, overwrite=False
    )

    assert sent == [1, 3, 1], "Expected GitHub to be left to collapse duplicates."
    assert set(sent) >= {1, 3}, "Expected a superset of prior and matched IDs."


@pytest.mark.asyncio
async def test_sync_existing_overwrite_sends_only_matches() -> None:
    """With overwrite the prior assignment is neither fetched nor kept."""
    client = _client()
    reconciler = RunnerGroupReconciler(client, _ORG)

    sent = await reconciler.sync_existing(
        _CI_GROUP, _REPOSITORIES, _CI_RULES, overwrite=True
    )

    assert sent == [1], "Expected only the matched IDs."
    assert "get_group_repository_ids" not in client.calls, "Expected no fetch."
    assert client.group_repositories[_CI_GROUP.id] == [1]


@pytest.mark.asyncio
async def test_overwrite_is_idempotent() -> None:
    """Running twice with overwrite sends the same set both times."""
    client = _client()
    reconciler = RunnerGroupReconciler(client, _ORG)

    first = await reconciler.sync_existing(
        _CI_GROUP, _REPOSITORIES, _CI_RULES, overwrite=True
    )
    second = await reconciler.sync_existing(
        _CI_GROUP, _REPOSITORIES, _CI_RULES, overwrite=True
    )

    assert set(first) == set(second) == {1}, "Expected identical final sets."


@pytest.mark.asyncio
async def test_create_missing_uses_selected_visibility() -> None:
    """Missing groups are created restricted to the matched repositories."""
    client = _client()
    reconciler = RunnerGroupReconciler(client, _ORG)

    sent = await reconciler.create_missing("new-group", _REPOSITORIES, _CI_RULES)

    assert sent == [1], "Expected the matched IDs."
    assert client.created == [
        CreatedGroup(
            org=_ORG, name="new-group", repository_ids=[1], visibility="selected"
        )
    ], "Expected one create call with selected visibility."


@pytest.mark.asyncio
async def test_reconcile_syncs_before_creating() -> None:
    """Existing groups are synced first, then missing groups are created."""
    client = _client()
    reconciler = RunnerGroupReconciler(client, _ORG)
    classification = ClassificationResult(
        supported={_CI_GROUP: _CI_RULES},
        unsupported=("legacy-group",),
        missing={"lib-group": (MatchRule.from_pattern("lib-*"),)},
    )

    result = await reconciler.reconcile(
        classification,
        _REPOSITORIES,
        ReconcileOptions(overwrite=True, create_missing=True),
    )

    assert client.calls == ["set_group_repositories", "create_group"], (
        "Expected sync before create."
    )
    assert result.assignments == {"ci-group": [1], "lib-group": [3]}
    assert (
        result.groups_synced,
        result.groups_created,
        result.groups_skipped,
        result.groups_unsupported,
    ) == (1, 1, 0, 1), "Expected counters for each partition."


@pytest.mark.asyncio
async def test_reconcile_leaves_missing_groups_when_creation_disabled() -> None:
    """No create call is issued unless creation is enabled."""
    client = _client()
    reconciler = RunnerGroupReconciler(client, _ORG)
    classification = ClassificationResult(
        missing={"lib-group": (MatchRule.from_pattern("lib-*"),)},
    )

    result = await reconciler.reconcile(
        classification, _REPOSITORIES, ReconcileOptions(create_missing=False)
    )

    assert client.created == [], "Expected no create calls."
    assert result.groups_skipped == 1, "Expected the missing group to be skipped."
    assert result.assignments == {}


@pytest.mark.asyncio
async def test_reconcile_stops_at_first_remote_failure() -> None:
    """A failing update aborts the run before later groups are touched."""
    client = _client()
    client.fail_on = "set_group_repositories"
    client.failure = GitHubAPIError.http_error(
        422, "PUT", "/orgs/octo/actions/runner-groups/10/repositories"
    )
    reconciler = RunnerGroupReconciler(client, _ORG)
    classification = ClassificationResult(
        supported={_CI_GROUP: _CI_RULES},
        missing={"lib-group": (MatchRule.from_pattern("lib-*"),)},
    )

    with pytest.raises(GitHubAPIError, match="HTTP 422"):
        await reconciler.reconcile(
            classification,
            _REPOSITORIES,
            ReconcileOptions(overwrite=True, create_missing=True),
        )

    assert "create_group" not in client.calls, "Expected creation to be skipped."
