"""Runner group reconciliation engine.

Classify configured groups against the organization's runner groups, then
apply the configured membership::

    from runnersync.reconcile import (
        ReconcileOptions,
        RunnerGroupReconciler,
        classify_groups,
    )

    classification = classify_groups(group_rules, runner_groups)
    reconciler = RunnerGroupReconciler(client, "my-org")
    result = await reconciler.reconcile(
        classification, repositories, ReconcileOptions(overwrite=True)
    )

"""

from __future__ import annotations

from .classify import classify_groups, is_supported_runner_group
from .models import ClassificationResult, ReconcileOptions, ReconcileResult
from .observability import (
    ErrorCategory,
    SyncEventLogger,
    SyncEventType,
    SyncRunContext,
    categorize_error,
)
from .service import RunnerGroupReconciler

__all__ = [
    "ClassificationResult",
    "ErrorCategory",
    "ReconcileOptions",
    "ReconcileResult",
    "RunnerGroupReconciler",
    "SyncEventLogger",
    "SyncEventType",
    "SyncRunContext",
    "categorize_error",
    "classify_groups",
    "is_supported_runner_group",
]
