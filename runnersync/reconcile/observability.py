"""Structured run events and error categorization for reconciliation.

Events are emitted as single ``[event] key=value`` lines so log aggregators
can parse them without a dedicated metrics backend.
"""

from __future__ import annotations

import dataclasses
import enum
import typing as typ

from runnersync.config.errors import ConfigFormatError
from runnersync.github.errors import (
    GitHubAPIError,
    GitHubConfigError,
    GitHubResponseShapeError,
)
from runnersync.logging import get_logger, log_error, log_info, log_warning
from runnersync.matching.glob import GlobSyntaxError
from runnersync.settings import SettingsError

if typ.TYPE_CHECKING:
    import datetime as dt

    from .models import ReconcileResult

logger = get_logger(__name__)

_HTTP_SERVER_ERROR_THRESHOLD = 500


class SyncEventType(enum.StrEnum):
    """Structured log event types for reconciliation runs."""

    RUN_STARTED = "sync.run.started"
    GROUP_SYNCED = "sync.group.synced"
    GROUP_CREATED = "sync.group.created"
    GROUP_SKIPPED = "sync.group.skipped"
    RUN_COMPLETED = "sync.run.completed"
    RUN_FAILED = "sync.run.failed"


class ErrorCategory(enum.StrEnum):
    """Categories used to route run failures."""

    CONFIGURATION = "configuration"
    PATTERN = "pattern"
    TRANSIENT = "transient"
    CLIENT_ERROR = "client_error"
    SCHEMA_DRIFT = "schema_drift"
    UNKNOWN = "unknown"


@dataclasses.dataclass(frozen=True, slots=True)
class SyncRunContext:
    """Shared context for a single reconciliation run."""

    org: str
    dry_run: bool
    started_at: dt.datetime


_EXCEPTION_CATEGORY_MAP: tuple[tuple[type[BaseException], ErrorCategory], ...] = (
    (ConfigFormatError, ErrorCategory.CONFIGURATION),
    (SettingsError, ErrorCategory.CONFIGURATION),
    (GitHubConfigError, ErrorCategory.CONFIGURATION),
    (GlobSyntaxError, ErrorCategory.PATTERN),
    (GitHubResponseShapeError, ErrorCategory.SCHEMA_DRIFT),
)


def categorize_error(exc: BaseException) -> ErrorCategory:
    """Categorize a run failure.

    GitHub errors without a status code never reached the API and are
    treated as transient, like 5xx responses.
    """
    if isinstance(exc, GitHubAPIError):
        if exc.status_code is None or exc.status_code >= _HTTP_SERVER_ERROR_THRESHOLD:
            return ErrorCategory.TRANSIENT
        return ErrorCategory.CLIENT_ERROR

    for exc_type, category in _EXCEPTION_CATEGORY_MAP:
        if isinstance(exc, exc_type):
            return category

    return ErrorCategory.UNKNOWN


class SyncEventLogger:
    """Emit structured reconciliation events via femtologging."""

    def log_run_started(self, context: SyncRunContext) -> None:
        """Log run start."""
        log_info(
            logger,
            "[%s] org=%s dry_run=%s started_at=%s",
            SyncEventType.RUN_STARTED,
            context.org,
            context.dry_run,
            context.started_at.isoformat(),
        )

    def log_group_synced(
        self, group_name: str, repository_ids: list[int], *, overwrite: bool
    ) -> None:
        """Log a membership update for an existing group."""
        log_info(
            logger,
            "[%s] group=%s overwrite=%s repository_count=%d",
            SyncEventType.GROUP_SYNCED,
            group_name,
            overwrite,
            len(repository_ids),
        )

    def log_group_created(self, group_name: str, repository_ids: list[int]) -> None:
        """Log the creation of a missing group."""
        log_info(
            logger,
            "[%s] group=%s repository_count=%d",
            SyncEventType.GROUP_CREATED,
            group_name,
            len(repository_ids),
        )

    def log_group_skipped(self, group_name: str, reason: str) -> None:
        """Log a configured group left untouched."""
        log_warning(
            logger,
            "[%s] group=%s reason=%s",
            SyncEventType.GROUP_SKIPPED,
            group_name,
            reason,
        )

    def log_run_completed(
        self,
        context: SyncRunContext,
        result: ReconcileResult,
        duration: dt.timedelta,
    ) -> None:
        """Log successful completion with counters."""
        log_info(
            logger,
            "[%s] org=%s dry_run=%s duration_seconds=%.3f groups_synced=%d "
            "groups_created=%d groups_skipped=%d groups_unsupported=%d",
            SyncEventType.RUN_COMPLETED,
            context.org,
            context.dry_run,
            duration.total_seconds(),
            result.groups_synced,
            result.groups_created,
            result.groups_skipped,
            result.groups_unsupported,
        )

    def log_run_failed(
        self,
        context: SyncRunContext,
        error: BaseException,
        duration: dt.timedelta,
    ) -> None:
        """Log a failed run with error categorization."""
        log_error(
            logger,
            "[%s] org=%s dry_run=%s duration_seconds=%.3f error_type=%s "
            "error_category=%s error_message=%s",
            SyncEventType.RUN_FAILED,
            context.org,
            context.dry_run,
            duration.total_seconds(),
            type(error).__name__,
            categorize_error(error),
            str(error),
            exc_info=error,
        )
