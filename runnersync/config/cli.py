"""Validate runner group configuration files offline."""

from __future__ import annotations

import argparse
import typing as typ
from pathlib import Path

import msgspec

from runnersync.matching import GlobSyntaxError, matches_group

from .errors import ConfigFormatError
from .loader import load_group_rules
from .schema import write_config_schema

if typ.TYPE_CHECKING:
    from .models import GroupRules


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("config", type=Path, help="YAML configuration to validate")
    parser.add_argument(
        "--schema-out",
        type=Path,
        default=None,
        help="Optional path to write the configuration JSON Schema",
    )
    parser.add_argument(
        "--json-out",
        type=Path,
        default=None,
        help="Optional path to write the normalized rules as JSON",
    )
    parser.add_argument(
        "--preview",
        type=Path,
        default=None,
        metavar="NAMES_FILE",
        help="File of repository names, one per line, to match against each group",
    )
    return parser


def _print_issues(config_path: Path, issues: list[str]) -> None:
    print(f"Configuration validation failed for {config_path}:")
    for issue in issues:
        print(f"  - {issue}")


def _read_names(path: Path) -> list[str]:
    lines = path.read_text(encoding="utf-8").splitlines()
    return [line.strip() for line in lines if line.strip()]


def _print_preview(group_rules: GroupRules, names: list[str]) -> None:
    for group, rules in group_rules.items():
        selected = [name for name in names if matches_group(name, rules)]
        print(f"{group}: {', '.join(selected) if selected else '(no repositories)'}")


def main(argv: list[str] | None = None) -> int:
    """Validate a configuration file and optionally export JSON and schema.

    Parameters
    ----------
    argv : list[str] | None, optional
        Command-line arguments. ``None`` defaults to ``sys.argv``.

    Returns
    -------
    int
        Exit code: 0 on success, 1 when validation fails.

    """
    args = _build_parser().parse_args(argv)

    config_path: Path = args.config
    try:
        group_rules = load_group_rules(config_path)
    except ConfigFormatError as exc:
        _print_issues(config_path, exc.issues)
        return 1
    except GlobSyntaxError as exc:
        _print_issues(config_path, [str(exc)])
        return 1

    if args.schema_out:
        write_config_schema(args.schema_out)

    if args.json_out:
        args.json_out.write_bytes(msgspec.json.encode(group_rules))

    rule_count = sum(len(rules) for rules in group_rules.values())
    print(
        f"configuration {config_path} is valid "
        f"({len(group_rules)} groups / {rule_count} rules)"
    )

    if args.preview:
        _print_preview(group_rules, _read_names(args.preview))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
