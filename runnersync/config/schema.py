"""JSON Schema generation for runner group configuration files."""

from __future__ import annotations

import json
import typing as typ

import msgspec

from .models import RawConfiguration

if typ.TYPE_CHECKING:
    from pathlib import Path

SCHEMA_ID = "https://runnersync.example/schemas/runner-groups.json"
SCHEMA_TITLE = "runnersync runner group configuration"


def build_config_schema() -> dict[str, typ.Any]:
    """Build the JSON Schema describing a configuration document.

    Returns
    -------
    dict[str, Any]
        JSON Schema for the ``group -> pattern(s)`` mapping, with ``$id`` set
        to ``SCHEMA_ID`` and a human-readable ``title``.

    """
    schema = msgspec.json.schema(RawConfiguration)
    schema["$id"] = SCHEMA_ID
    schema["title"] = SCHEMA_TITLE
    return schema


def write_config_schema(path: Path) -> Path:
    """Write the JSON Schema to ``path``, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    rendered = json.dumps(build_config_schema(), indent=2, sort_keys=True)
    path.write_text(f"{rendered}\n", encoding="utf-8")
    return path
