"""Turn a decoded configuration document into per-group match rules."""

from __future__ import annotations

import collections.abc as cabc
import dataclasses
import typing as typ

import msgspec

from .errors import ConfigFormatError
from .models import MatchRule

if typ.TYPE_CHECKING:
    from .models import GroupRules


@dataclasses.dataclass(slots=True)
class _NormalizeState:
    """Accumulates results and issues while walking the document."""

    groups: dict[str, tuple[MatchRule, ...]] = dataclasses.field(default_factory=dict)
    issues: list[str] = dataclasses.field(default_factory=list)


def normalize_group_rules(raw: object) -> GroupRules:
    """Normalize a ``group -> pattern(s)`` mapping into ordered match rules.

    A group value may be a single pattern string or a list whose entries are
    pattern strings or ``{any: [...], all: [...]}`` mappings. Bare strings are
    shorthand for ``{any: [pattern]}``. Group order follows the document.

    Raises
    ------
    ConfigFormatError
        If the document or any group value has an unexpected shape. All issues
        are reported together and no partial mapping is returned.

    """
    if not isinstance(raw, cabc.Mapping):
        raise ConfigFormatError.single(
            "configuration must be a mapping of runner group names to globs, "
            f"got {type(raw).__name__}"
        )

    state = _NormalizeState()
    for key, value in raw.items():
        group = _group_name(key, state)
        if group is None:
            continue
        rules = _group_value(group, value, state)
        if rules is not None:
            state.groups[group] = rules

    if state.issues:
        raise ConfigFormatError(state.issues)
    return state.groups


def _group_name(key: object, state: _NormalizeState) -> str | None:
    if isinstance(key, str):
        return key
    # YAML reads `2024:` as an int; treat it as the group name it was meant as.
    if isinstance(key, int) and not isinstance(key, bool):
        return str(key)
    state.issues.append(
        f"runner group name {key!r} must be a string, got {type(key).__name__}"
    )
    return None


def _group_value(
    group: str, value: object, state: _NormalizeState
) -> tuple[MatchRule, ...] | None:
    if isinstance(value, str):
        return (MatchRule.from_pattern(value),)
    if isinstance(value, list):
        return _rule_entries(group, value, state)
    state.issues.append(
        f"found unexpected type for group {group} "
        "(should be string or array of globs)"
    )
    return None


def _rule_entries(
    group: str, entries: list[object], state: _NormalizeState
) -> tuple[MatchRule, ...] | None:
    rules: list[MatchRule] = []
    issue_count = len(state.issues)
    for position, entry in enumerate(entries):
        rule = _rule_entry(group, position, entry, state)
        if rule is not None:
            rules.append(rule)
    if len(state.issues) != issue_count:
        return None
    return tuple(rules)


def _rule_entry(
    group: str, position: int, entry: object, state: _NormalizeState
) -> MatchRule | None:
    if isinstance(entry, str):
        return MatchRule.from_pattern(entry)
    if isinstance(entry, MatchRule):
        return entry
    if isinstance(entry, cabc.Mapping):
        try:
            return msgspec.convert(dict(entry), type=MatchRule)
        except msgspec.ValidationError as exc:
            state.issues.append(f"group {group} entry {position}: {exc}")
            return None
    state.issues.append(
        f"group {group} entry {position} must be a glob string or a mapping "
        f"with 'any'/'all' lists, got {type(entry).__name__}"
    )
    return None
