"""Errors raised while reading runner group configuration."""

from __future__ import annotations


class ConfigFormatError(ValueError):
    """Raised when a configuration document has an unusable shape.

    Every problem found in the document is kept in ``issues`` so operators can
    fix them in one pass. Raising this error always aborts the run before any
    runner group is touched.
    """

    def __init__(self, issues: list[str]) -> None:
        """Capture the issues and join them into the exception message."""
        super().__init__("\n".join(issues))
        self.issues = issues

    @classmethod
    def single(cls, issue: str) -> ConfigFormatError:
        """Return an error carrying one issue."""
        return cls([issue])
