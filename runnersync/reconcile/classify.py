"""Partition configured runner groups against the remote snapshot."""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

from runnersync.logging import get_logger, log_debug, log_warning

from .models import ClassificationResult

if typ.TYPE_CHECKING:
    from runnersync.config.models import GroupRules, MatchRule
    from runnersync.github.models import RunnerGroup

logger = get_logger(__name__)


def is_supported_runner_group(group: RunnerGroup) -> bool:
    """Return whether the reconciler may manage ``group``.

    Groups whose visibility is not ``selected`` only produce a warning for
    now; they are still reported as supported.
    """
    log_debug(logger, "    checking to see if %s is supported", group.name)
    if not group.is_selected:
        log_warning(
            logger,
            'the group(%s) must be marked as "selected" visibility for it to be '
            "supported",
            group.name,
        )
    log_debug(logger, "    group is supported")
    return True


def _index_by_name(
    runner_groups: cabc.Iterable[RunnerGroup],
) -> dict[str, RunnerGroup]:
    index: dict[str, RunnerGroup] = {}
    for group in runner_groups:
        # First match wins when GitHub reports duplicate names.
        index.setdefault(group.name, group)
    return index


def classify_groups(
    group_rules: GroupRules, runner_groups: cabc.Iterable[RunnerGroup]
) -> ClassificationResult:
    """Split configured groups into supported, unsupported and missing.

    Names are compared exactly and case-sensitively.
    """
    remote = _index_by_name(runner_groups)
    supported: dict[RunnerGroup, tuple[MatchRule, ...]] = {}
    unsupported: list[str] = []
    missing: dict[str, tuple[MatchRule, ...]] = {}

    for name, rules in group_rules.items():
        log_debug(logger, "validating %s", name)
        group = remote.get(name)
        if group is None:
            missing[name] = rules
        elif is_supported_runner_group(group):
            supported[group] = rules
        else:
            unsupported.append(name)

    return ClassificationResult(
        supported=supported,
        unsupported=tuple(unsupported),
        missing=missing,
    )
