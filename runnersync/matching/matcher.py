"""Evaluate repository names against runner group match rules."""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

from runnersync.logging import get_logger, log_debug

from .glob import compile_glob, split_negation

if typ.TYPE_CHECKING:
    from runnersync.config.models import MatchRule
    from runnersync.github.models import Repository

logger = get_logger(__name__)


def check_all(repo_name: str, patterns: cabc.Sequence[str]) -> bool:
    """Return True when every pattern matches ``repo_name``."""
    log_debug(logger, '  checking "all" patterns against %s', repo_name)
    for pattern in patterns:
        if not compile_glob(pattern).evaluate(repo_name):
            log_debug(logger, "   %s did not match", pattern)
            return False
    log_debug(logger, '  "all" patterns matched %s', repo_name)
    return True


def check_any(repo_name: str, patterns: cabc.Sequence[str]) -> bool:
    """Return True when at least one pattern matches ``repo_name``."""
    log_debug(logger, '  checking "any" patterns against %s', repo_name)
    for pattern in patterns:
        if compile_glob(pattern).evaluate(repo_name):
            log_debug(logger, "   %s matched", pattern)
            return True
    log_debug(logger, '  "any" patterns did not match %s', repo_name)
    return False


def matches(repo_name: str, rule: MatchRule) -> bool:
    """Return whether ``repo_name`` satisfies a single rule.

    The ``all`` and ``any`` checks are combined with AND; a missing list is
    vacuously satisfied.
    """
    if rule.all_patterns is not None and not check_all(repo_name, rule.all_patterns):
        return False
    return rule.any_patterns is None or check_any(repo_name, rule.any_patterns)


def is_exclusion(rule: MatchRule) -> bool:
    """Return True when every pattern in ``rule`` is negated.

    Such rules (for example a bare ``"!app-legacy"`` list entry) filter the
    repositories picked by the other rules of the group instead of adding to
    them.
    """
    patterns = rule.patterns()
    return bool(patterns) and all(split_negation(p)[0] for p in patterns)


def matches_group(repo_name: str, rules: cabc.Sequence[MatchRule]) -> bool:
    """Return whether ``repo_name`` belongs to a group configured with ``rules``.

    The repository must satisfy at least one inclusive rule and every
    exclusion rule. A group made only of exclusion rules selects everything
    they let through; a group with no rules selects nothing.
    """
    if not rules:
        return False
    included = False
    has_inclusive = False
    for rule in rules:
        log_debug(logger, " checking rule %r", rule)
        if is_exclusion(rule):
            if not matches(repo_name, rule):
                log_debug(logger, " %s excluded", repo_name)
                return False
            continue
        has_inclusive = True
        included = included or matches(repo_name, rule)
    return included or not has_inclusive


def matching_repository_ids(
    repositories: cabc.Iterable[Repository], rules: cabc.Sequence[MatchRule]
) -> list[int]:
    """Return the IDs of repositories matched by ``rules``, in snapshot order."""
    return [repo.id for repo in repositories if matches_group(repo.name, rules)]


def validate_rules(rules: cabc.Iterable[MatchRule]) -> None:
    """Compile every pattern so malformed globs fail before any remote call.

    Raises
    ------
    GlobSyntaxError
        For the first pattern that cannot be compiled.

    """
    for rule in rules:
        for pattern in rule.patterns():
            compile_glob(pattern)
