"""YAML loading for runner group configuration files."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from runnersync.matching import validate_rules

from .errors import ConfigFormatError
from .normalize import normalize_group_rules

if typ.TYPE_CHECKING:
    from .models import GroupRules

YAML_VERSION = (1, 2)


def load_configuration(path: Path | str) -> object:
    """Decode a YAML configuration file into plain Python data.

    Duplicate keys are rejected, so a runner group can only be configured once
    per file.

    Raises
    ------
    ConfigFormatError
        If the file cannot be read, is not valid YAML, or is empty.

    """
    path_obj = Path(path)
    try:
        loaded = _yaml().load(path_obj.read_text(encoding="utf-8"))
    except (OSError, YAMLError) as exc:
        msg = f"failed to parse YAML configuration {path_obj}: {exc}"
        raise ConfigFormatError.single(msg) from exc

    if loaded is None:
        msg = f"configuration file {path_obj} is empty"
        raise ConfigFormatError.single(msg)
    return loaded


def load_group_rules(path: Path | str) -> GroupRules:
    """Load, normalize and pre-compile the runner group configuration.

    Raises
    ------
    ConfigFormatError
        If the document has an unexpected shape.
    GlobSyntaxError
        If any configured pattern is malformed.

    """
    group_rules = normalize_group_rules(load_configuration(path))
    for rules in group_rules.values():
        validate_rules(rules)
    return group_rules


def _yaml() -> YAML:
    yaml = YAML(typ="safe")
    yaml.version = YAML_VERSION
    yaml.allow_duplicate_keys = False
    return yaml
