"""Runner group configuration: models, YAML loading and normalization.

A configuration file maps runner group names to one glob, or to a list of
globs and ``{any: [...], all: [...]}`` rules::

    ci-runners:
      - "app-*"
      - "!app-legacy"
    docs-runners: "docs-*"
    gpu-runners:
      - all: ["ml-*", "!*-archive"]

Load it ready for reconciliation::

    >>> from runnersync.config import load_group_rules
    >>> group_rules = load_group_rules(".github/runner-groups.yml")

"""

from __future__ import annotations

from .errors import ConfigFormatError
from .loader import load_configuration, load_group_rules
from .models import GroupRules, MatchRule, RawConfiguration
from .normalize import normalize_group_rules
from .schema import build_config_schema, write_config_schema

__all__ = [
    "ConfigFormatError",
    "GroupRules",
    "MatchRule",
    "RawConfiguration",
    "build_config_schema",
    "load_configuration",
    "load_group_rules",
    "normalize_group_rules",
    "write_config_schema",
]
