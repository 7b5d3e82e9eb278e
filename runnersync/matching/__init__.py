"""Glob matching of repository names against runner group rules.

Example::

    >>> from runnersync.config.models import MatchRule
    >>> from runnersync.matching import matches
    >>> matches("app-one", MatchRule(any_patterns=("app-*", "!app-legacy")))
    True

"""

from __future__ import annotations

from .glob import CompiledGlob, GlobSyntaxError, compile_glob, glob_match
from .matcher import (
    check_all,
    check_any,
    is_exclusion,
    matches,
    matches_group,
    matching_repository_ids,
    validate_rules,
)

__all__ = [
    "CompiledGlob",
    "GlobSyntaxError",
    "check_all",
    "check_any",
    "compile_glob",
    "glob_match",
    "is_exclusion",
    "matches",
    "matches_group",
    "matching_repository_ids",
    "validate_rules",
]
