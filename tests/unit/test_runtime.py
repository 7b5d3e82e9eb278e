"""Unit tests for the end-to-end sync runtime."""

from __future__ import annotations

import json
import secrets
import typing as typ

import httpx
import pytest

from runnersync.config import ConfigFormatError
from runnersync.github import GitHubAPIError, GitHubRestConfig, Repository, RunnerGroup
from runnersync.reconcile import SyncEventLogger
from runnersync.runtime import run_sync, run_with_github
from runnersync.settings import RepoType, RunSettings
from tests.helpers import write_config
from tests.helpers.fake_github import FakeRunnerGroupClient

if typ.TYPE_CHECKING:
    import datetime as dt
    from pathlib import Path

    from runnersync.reconcile import ReconcileResult, SyncRunContext

_CONFIG = """
ci-group:
  - "app-*"
  - "!app-legacy"
new-group: "lib-*"
"""


class _RecordingEvents(SyncEventLogger):
    """Records run-level events instead of logging them."""

    def __init__(self) -> None:
        self.events: list[str] = []
        self.failure: BaseException | None = None

    def log_run_started(self, context: SyncRunContext) -> None:
        del context
        self.events.append("started")

    def log_run_completed(
        self,
        context: SyncRunContext,
        result: ReconcileResult,
        duration: dt.timedelta,
    ) -> None:
        del context, result, duration
        self.events.append("completed")

    def log_run_failed(
        self,
        context: SyncRunContext,
        error: BaseException,
        duration: dt.timedelta,
    ) -> None:
        del context, duration
        self.events.append("failed")
        self.failure = error


def _settings(path: Path, **overrides: typ.Any) -> RunSettings:  # noqa: ANN401
    return RunSettings(org="octo", configuration_path=path, **overrides)


def _client() -> FakeRunnerGroupClient:
    return FakeRunnerGroupClient(
        repositories=[
            Repository(id=1, name="app-one"),
            Repository(id=2, name="app-legacy"),
            Repository(id=3, name="lib-two"),
        ],
        runner_groups=[RunnerGroup(id=10, name="ci-group", visibility="selected")],
        group_repositories={10: [3]},
    )


@pytest.mark.asyncio
async def test_run_sync_reconciles_configured_groups(tmp_path: Path) -> None:
    """A run syncs existing groups and creates missing ones when enabled."""
    client = _client()
    events = _RecordingEvents()

    result = await run_sync(
        _settings(write_config(tmp_path, _CONFIG), create_missing=True),
        client,
        event_logger=events,
    )

    assert client.calls == [
        "list_org_repositories",
        "list_runner_groups",
        "get_group_repository_ids",
        "set_group_repositories",
        "create_group",
    ], "Expected listings, then sync, then creation."
    assert result.assignments == {"ci-group": [3, 1], "new-group": [3]}
    assert events.events == ["started", "completed"]


@pytest.mark.asyncio
async def test_run_sync_validates_config_before_remote_calls(tmp_path: Path) -> None:
    """A malformed configuration aborts before GitHub is contacted."""
    client = _client()
    events = _RecordingEvents()

    with pytest.raises(ConfigFormatError):
        await run_sync(
            _settings(write_config(tmp_path, "ci-group: 42\n")),
            client,
            event_logger=events,
        )

    assert client.calls == [], "Expected no remote calls."
    assert events.events == ["started", "failed"]
    assert isinstance(events.failure, ConfigFormatError)


@pytest.mark.asyncio
async def test_run_sync_propagates_remote_failures(tmp_path: Path) -> None:
    """A failing listing aborts the run and is reported as failed."""
    client = _client()
    client.fail_on = "list_runner_groups"
    client.failure = GitHubAPIError.http_error(
        500, "GET", "/orgs/octo/actions/runner-groups"
    )
    events = _RecordingEvents()

    with pytest.raises(GitHubAPIError):
        await run_sync(
            _settings(write_config(tmp_path, _CONFIG)), client, event_logger=events
        )

    assert "set_group_repositories" not in client.calls
    assert events.events == ["started", "failed"]


@pytest.mark.asyncio
async def test_run_with_github_dry_run_only_reads(tmp_path: Path) -> None:
    """A dry run over the REST client never sends mutating requests."""
    seen: list[tuple[str, str]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.url.path))
        path = request.url.path
        if path == "/orgs/octo/repos":
            assert request.url.params["type"] == "public"
            return httpx.Response(
                200,
                json=[
                    {"id": 1, "name": "app-one"},
                    {"id": 2, "name": "app-legacy"},
                    {"id": 3, "name": "lib-two"},
                ],
            )
        if path == "/orgs/octo/actions/runner-groups":
            return httpx.Response(
                200,
                json={
                    "runner_groups": [
                        {"id": 10, "name": "ci-group", "visibility": "selected"}
                    ]
                },
            )
        if path == "/orgs/octo/actions/runner-groups/10/repositories":
            return httpx.Response(
                200, json={"repositories": [{"id": 3, "name": "lib-two"}]}
            )
        return httpx.Response(404, content=json.dumps({"message": "Not Found"}))

    settings = _settings(
        write_config(tmp_path, _CONFIG),
        repo_type=RepoType.PUBLIC,
        create_missing=True,
        dry_run=True,
    )
    config = GitHubRestConfig(token=secrets.token_hex(8), base_url="https://api.test")

    result = await run_with_github(
        settings, config, transport=httpx.MockTransport(handler)
    )

    assert {method for method, _ in seen} == {"GET"}, "Expected only reads."
    assert result.groups_synced == 1
    assert result.groups_created == 1
    assert result.assignments["ci-group"] == [3, 1]
