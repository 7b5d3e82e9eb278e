"""Point-in-time snapshots of GitHub organization state."""

from __future__ import annotations

import dataclasses

SELECTED_VISIBILITY = "selected"


@dataclasses.dataclass(frozen=True, slots=True)
class Repository:
    """Organization repository as seen by the reconciler."""

    id: int
    name: str


@dataclasses.dataclass(frozen=True, slots=True)
class RunnerGroup:
    """Organization self-hosted runner group.

    Only groups with ``selected`` visibility restrict access to an explicit
    repository list, which is what the reconciler manages.
    """

    id: int
    name: str
    visibility: str

    @property
    def is_selected(self) -> bool:
        """Return True when access is limited to selected repositories."""
        return self.visibility == SELECTED_VISIBILITY
