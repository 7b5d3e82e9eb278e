"""Data transfer objects for runner group reconciliation."""

from __future__ import annotations

import dataclasses
import typing as typ

if typ.TYPE_CHECKING:
    from runnersync.config.models import MatchRule
    from runnersync.github.models import RunnerGroup


@dataclasses.dataclass(frozen=True, slots=True)
class ClassificationResult:
    """Configured groups partitioned against the remote runner groups.

    Every configured group name appears in exactly one partition. Mappings
    keep configuration order.
    """

    supported: dict[RunnerGroup, tuple[MatchRule, ...]] = dataclasses.field(
        default_factory=dict
    )
    unsupported: tuple[str, ...] = ()
    missing: dict[str, tuple[MatchRule, ...]] = dataclasses.field(
        default_factory=dict
    )

    def group_names(self) -> list[str]:
        """Return every classified group name across the three partitions."""
        return [
            *(group.name for group in self.supported),
            *self.unsupported,
            *self.missing,
        ]


@dataclasses.dataclass(frozen=True, slots=True)
class ReconcileOptions:
    """Behaviour switches for a reconciliation run."""

    overwrite: bool = False
    create_missing: bool = False


@dataclasses.dataclass(slots=True)
class ReconcileResult:
    """Summary of a reconciliation run.

    ``assignments`` records, per group name, the repository ID collection sent
    to GitHub (for synced and created groups alike).
    """

    groups_synced: int = 0
    groups_created: int = 0
    groups_skipped: int = 0
    groups_unsupported: int = 0
    assignments: dict[str, list[int]] = dataclasses.field(default_factory=dict)
