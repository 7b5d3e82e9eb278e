"""Run settings for a runner group sync.

Settings are read once at start-up from the environment and may be
overridden by command-line flags:

- ``RUNNERSYNC_ORG``: organization to manage (falls back to
  ``GITHUB_REPOSITORY_OWNER`` inside GitHub Actions)
- ``RUNNERSYNC_CONFIG_PATH``: YAML configuration (default
  ``.github/runner-groups.yml``)
- ``RUNNERSYNC_REPO_TYPE``: repository type filter (default ``all``)
- ``RUNNERSYNC_OVERWRITE``: replace instead of merge existing membership
- ``RUNNERSYNC_CREATE_MISSING``: create configured groups that do not exist
- ``RUNNERSYNC_DRY_RUN``: log mutating requests instead of sending them
- ``RUNNERSYNC_LOG_LEVEL``: log level (default ``INFO``)

Boolean variables are enabled only by the string ``true``, in any case.
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses
import enum
import os
from pathlib import Path

DEFAULT_CONFIG_PATH = Path(".github/runner-groups.yml")


class RepoType(enum.StrEnum):
    """Repository type filters accepted by the organization listing."""

    ALL = "all"
    PUBLIC = "public"
    PRIVATE = "private"
    FORKS = "forks"
    SOURCES = "sources"
    MEMBER = "member"


class SettingsError(ValueError):
    """Raised when run settings are missing or invalid."""

    @classmethod
    def missing_org(cls) -> SettingsError:
        """Return an error when no organization could be determined."""
        return cls("RUNNERSYNC_ORG (or GITHUB_REPOSITORY_OWNER) is required")

    @classmethod
    def invalid_repo_type(cls, value: str) -> SettingsError:
        """Return an error for an unknown repository type filter."""
        choices = ", ".join(repo_type.value for repo_type in RepoType)
        return cls(f"invalid repository type {value!r} (expected one of {choices})")


def parse_flag(value: str | None) -> bool:
    """Interpret an environment flag; only ``true`` enables it."""
    return value is not None and value.strip().lower() == "true"


def parse_repo_type(value: str) -> RepoType:
    """Parse a repository type filter, case-insensitively."""
    try:
        return RepoType(value.strip().lower())
    except ValueError as exc:
        raise SettingsError.invalid_repo_type(value) from exc


@dataclasses.dataclass(frozen=True, slots=True)
class RunSettings:
    """Options controlling a single reconciliation run."""

    org: str
    configuration_path: Path = DEFAULT_CONFIG_PATH
    repo_type: RepoType = RepoType.ALL
    overwrite: bool = False
    create_missing: bool = False
    dry_run: bool = False
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        """Reject an empty organization name."""
        if not self.org.strip():
            raise SettingsError.missing_org()

    @classmethod
    def from_env(cls, environ: cabc.Mapping[str, str] | None = None) -> RunSettings:
        """Build settings from ``RUNNERSYNC_*`` environment variables."""
        env = os.environ if environ is None else environ
        org = (
            env.get("RUNNERSYNC_ORG", "").strip()
            or env.get("GITHUB_REPOSITORY_OWNER", "").strip()
        )
        if not org:
            raise SettingsError.missing_org()

        config_path = env.get("RUNNERSYNC_CONFIG_PATH", "").strip()
        return cls(
            org=org,
            configuration_path=Path(config_path or DEFAULT_CONFIG_PATH),
            repo_type=parse_repo_type(env.get("RUNNERSYNC_REPO_TYPE", "all")),
            overwrite=parse_flag(env.get("RUNNERSYNC_OVERWRITE")),
            create_missing=parse_flag(env.get("RUNNERSYNC_CREATE_MISSING")),
            dry_run=parse_flag(env.get("RUNNERSYNC_DRY_RUN")),
            log_level=env.get("RUNNERSYNC_LOG_LEVEL", "INFO"),
        )
