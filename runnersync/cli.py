"""Command-line entrypoint for syncing organization runner groups."""

from __future__ import annotations

import argparse
import asyncio
import collections.abc as cabc
import os
from pathlib import Path

from runnersync.config import ConfigFormatError
from runnersync.github import (
    GitHubAPIError,
    GitHubConfigError,
    GitHubResponseShapeError,
    GitHubRestConfig,
)
from runnersync.logging import (
    configure_logging,
    get_logger,
    log_exception,
    log_warning,
)
from runnersync.matching import GlobSyntaxError
from runnersync.runtime import run_with_github
from runnersync.settings import RepoType, RunSettings, SettingsError

logger = get_logger(__name__)

_FATAL_ERRORS: tuple[type[Exception], ...] = (
    ConfigFormatError,
    GlobSyntaxError,
    GitHubAPIError,
    GitHubConfigError,
    GitHubResponseShapeError,
    SettingsError,
)

_FLAG_ENV = {
    "overwrite": "RUNNERSYNC_OVERWRITE",
    "create_missing": "RUNNERSYNC_CREATE_MISSING",
    "dry_run": "RUNNERSYNC_DRY_RUN",
}
_VALUE_ENV = {
    "org": "RUNNERSYNC_ORG",
    "config": "RUNNERSYNC_CONFIG_PATH",
    "repo_type": "RUNNERSYNC_REPO_TYPE",
    "log_level": "RUNNERSYNC_LOG_LEVEL",
}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="runnersync",
        description="Sync organization self-hosted runner groups with glob rules.",
    )
    parser.add_argument("--org", help="Organization to manage")
    parser.add_argument("--config", type=Path, help="YAML runner group configuration")
    parser.add_argument(
        "--repo-type",
        choices=[repo_type.value for repo_type in RepoType],
        help="Repository type filter for the organization listing",
    )
    parser.add_argument(
        "--overwrite",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Replace existing group membership instead of merging into it",
    )
    parser.add_argument(
        "--create-missing",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Create configured groups that do not exist yet",
    )
    parser.add_argument(
        "--dry-run",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Log mutating requests instead of sending them",
    )
    parser.add_argument("--log-level", help="Log level (default INFO)")
    return parser


def _apply_overrides(
    args: argparse.Namespace, environ: cabc.Mapping[str, str]
) -> dict[str, str]:
    """Return ``environ`` with command-line flags layered on top."""
    env = dict(environ)
    for attr, key in _VALUE_ENV.items():
        value = getattr(args, attr)
        if value is not None:
            env[key] = str(value)
    for attr, key in _FLAG_ENV.items():
        value = getattr(args, attr)
        if value is not None:
            env[key] = "true" if value else "false"
    return env


def _escape_annotation(message: str) -> str:
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _describe(exc: Exception) -> str:
    if isinstance(exc, _FATAL_ERRORS):
        return str(exc)
    # Unexpected errors keep their type so the message stays meaningful.
    return f"{type(exc).__name__}: {exc}"


def _report_failure(exc: Exception, env: cabc.Mapping[str, str]) -> None:
    message = _describe(exc)
    log_exception(logger, f"Runner group sync failed: {message}", exc)
    if env.get("GITHUB_ACTIONS") == "true":
        print(f"::error::{_escape_annotation(message)}")


def main(
    argv: list[str] | None = None,
    environ: cabc.Mapping[str, str] | None = None,
) -> int:
    """Run a sync and return the process exit code.

    Parameters
    ----------
    argv : list[str] | None, optional
        Command-line arguments. ``None`` defaults to ``sys.argv``.
    environ : Mapping[str, str] | None, optional
        Environment to read settings from. ``None`` uses ``os.environ``.

    Returns
    -------
    int
        0 when every planned change was applied, 1 when the run failed.

    """
    args = _build_parser().parse_args(argv)
    env = _apply_overrides(args, os.environ if environ is None else environ)

    log_level = env.get("RUNNERSYNC_LOG_LEVEL")
    normalized_level, invalid_level = configure_logging(log_level, force=True)
    if invalid_level and log_level is not None:
        log_warning(
            logger,
            "Invalid RUNNERSYNC_LOG_LEVEL %r, falling back to %s",
            log_level,
            normalized_level,
        )

    try:
        settings = RunSettings.from_env(env)
        github_config = GitHubRestConfig.from_env(env)
        asyncio.run(run_with_github(settings, github_config))
    except Exception as exc:  # noqa: BLE001 - process boundary reports every failure
        _report_failure(exc, env)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
