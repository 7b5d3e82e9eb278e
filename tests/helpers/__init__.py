"""Shared helpers for unit and feature tests."""

from __future__ import annotations

import asyncio
import textwrap
import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path


def run_async[T](coro_func: typ.Callable[[], typ.Coroutine[typ.Any, typ.Any, T]]) -> T:
    """Drive an async callable to completion from synchronous test code."""
    return asyncio.run(coro_func())


def write_config(directory: Path, body: str, *, name: str = "runner-groups.yml") -> Path:
    """Write a dedented YAML configuration file and return its path."""
    path = directory / name
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path
