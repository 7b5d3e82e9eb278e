"""Run one runner group sync from configuration to GitHub updates.

The run loads and validates the configuration before any remote call, takes
a single snapshot of the organization's repositories and runner groups, and
then hands both to the reconciler. The first failure aborts the run.
"""

from __future__ import annotations

import datetime as dt
import typing as typ

from runnersync.config import load_group_rules
from runnersync.github import GitHubRestClient, build_http_client
from runnersync.logging import get_logger, log_debug, log_info
from runnersync.reconcile import (
    ReconcileOptions,
    RunnerGroupReconciler,
    SyncEventLogger,
    SyncRunContext,
    classify_groups,
)

if typ.TYPE_CHECKING:
    import httpx

    from runnersync.github import GitHubRestConfig, RunnerGroupClient
    from runnersync.reconcile import ReconcileResult
    from runnersync.settings import RunSettings

logger = get_logger(__name__)


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.UTC)


async def run_sync(
    settings: RunSettings,
    client: RunnerGroupClient,
    *,
    event_logger: SyncEventLogger | None = None,
) -> ReconcileResult:
    """Reconcile every configured runner group for ``settings.org``.

    Raises
    ------
    ConfigFormatError
        If the configuration file is malformed; nothing remote is touched.
    GlobSyntaxError
        If a configured pattern is malformed; nothing remote is touched.
    GitHubAPIError
        If any GitHub call fails; the run stops at that call.

    """
    events = event_logger or SyncEventLogger()
    context = SyncRunContext(
        org=settings.org, dry_run=settings.dry_run, started_at=_utcnow()
    )
    events.log_run_started(context)
    try:
        result = await _reconcile_org(settings, client, events)
    except Exception as exc:
        events.log_run_failed(context, exc, _utcnow() - context.started_at)
        raise
    events.log_run_completed(context, result, _utcnow() - context.started_at)
    return result


async def _reconcile_org(
    settings: RunSettings,
    client: RunnerGroupClient,
    events: SyncEventLogger,
) -> ReconcileResult:
    log_info(logger, "Begin Org Self Hosted Runner Groups Sync")
    log_debug(
        logger,
        "Using the configurations in %s to manage groups in %s with the %s repos",
        settings.configuration_path,
        settings.org,
        settings.repo_type,
    )
    log_debug(logger, "Will overwrite manually added repos: %s", settings.overwrite)
    log_debug(logger, "Will create new groups: %s", settings.create_missing)
    log_debug(logger, "Is DryRun: %s", settings.dry_run)

    group_rules = load_group_rules(settings.configuration_path)

    log_debug(logger, "Loading Repos for Org")
    repositories = await client.list_org_repositories(
        settings.org, repo_type=settings.repo_type.value
    )
    log_debug(logger, "Getting existing runner groups")
    runner_groups = await client.list_runner_groups(settings.org)

    log_debug(logger, "Validating groups")
    classification = classify_groups(group_rules, runner_groups)

    reconciler = RunnerGroupReconciler(client, settings.org, event_logger=events)
    result = await reconciler.reconcile(
        classification,
        repositories,
        ReconcileOptions(
            overwrite=settings.overwrite, create_missing=settings.create_missing
        ),
    )
    log_info(logger, "Sync is complete")
    return result


async def run_with_github(
    settings: RunSettings,
    github_config: GitHubRestConfig,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ReconcileResult:
    """Run a sync against the GitHub REST API, closing the HTTP client after.

    ``transport`` replaces the network transport, which tests use to serve
    canned responses. Dry-run wrapping is applied on top of it.
    """
    http_client = build_http_client(
        github_config, dry_run=settings.dry_run, transport=transport
    )
    client = GitHubRestClient(github_config, http_client=http_client)
    try:
        return await run_sync(settings, client)
    finally:
        await http_client.aclose()
