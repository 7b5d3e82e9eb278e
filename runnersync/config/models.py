"""Typed runner group configuration structures."""

from __future__ import annotations

import msgspec


class MatchRule(
    msgspec.Struct,
    frozen=True,
    kw_only=True,
    forbid_unknown_fields=True,
    omit_defaults=True,
):
    """One composed glob rule for a runner group.

    Attributes
    ----------
    any_patterns : tuple[str, ...], optional
        Serialized as ``any``. At least one pattern must match the repository
        name. ``None`` means the check is skipped.
    all_patterns : tuple[str, ...], optional
        Serialized as ``all``. Every pattern must match the repository name.
        ``None`` means the check is skipped.

    Any pattern may start with ``!`` to negate its own result.

    """

    any_patterns: tuple[str, ...] | None = msgspec.field(default=None, name="any")
    all_patterns: tuple[str, ...] | None = msgspec.field(default=None, name="all")

    @classmethod
    def from_pattern(cls, pattern: str) -> MatchRule:
        """Build the rule a bare string entry stands for."""
        return cls(any_patterns=(pattern,))

    def patterns(self) -> tuple[str, ...]:
        """Return every pattern in the rule, ``all`` first."""
        return (*(self.all_patterns or ()), *(self.any_patterns or ()))


type GroupRules = dict[str, tuple[MatchRule, ...]]

# Shape of a configuration document as written in YAML.
RawConfiguration = dict[str, str | list[str | MatchRule]]

__all__ = ["GroupRules", "MatchRule", "RawConfiguration"]
