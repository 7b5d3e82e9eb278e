"""GitHub REST adapter for organization repositories and runner groups."""

from __future__ import annotations

from .client import (
    GitHubRestClient,
    GitHubRestConfig,
    RunnerGroupClient,
    build_http_client,
)
from .dry_run import DRY_RUN_HEADER, DryRunTransport, is_suppressed
from .errors import GitHubAPIError, GitHubConfigError, GitHubResponseShapeError
from .models import SELECTED_VISIBILITY, Repository, RunnerGroup

__all__ = [
    "DRY_RUN_HEADER",
    "SELECTED_VISIBILITY",
    "DryRunTransport",
    "GitHubAPIError",
    "GitHubConfigError",
    "GitHubResponseShapeError",
    "GitHubRestClient",
    "GitHubRestConfig",
    "Repository",
    "RunnerGroup",
    "RunnerGroupClient",
    "build_http_client",
    "is_suppressed",
]
