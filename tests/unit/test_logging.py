"""Unit tests for the femtologging helpers."""

from __future__ import annotations

import pytest

from runnersync.logging import (
    configure_logging,
    format_log_message,
    log_debug,
    log_error,
    log_exception,
    log_info,
    log_warning,
    normalize_log_level,
)


class _FakeLogger:
    """Collects log calls for assertions."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, object | None, bool]] = []

    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> str:
        self.calls.append((level, message, exc_info, stack_info))
        return message


@pytest.mark.parametrize(
    ("raw_level", "expected_level", "expected_invalid"),
    [
        ("debug", "DEBUG", False),
        ("  Warning ", "WARNING", False),
        ("TRACE", "TRACE", False),
        (None, "INFO", True),
        ("   ", "INFO", True),
        ("verbose", "INFO", True),
    ],
)
def test_normalize_log_level(
    raw_level: str | None, expected_level: str, *, expected_invalid: bool
) -> None:
    """Levels are upper-cased and unknown values fall back to INFO."""
    level, invalid = normalize_log_level(raw_level)

    assert level == expected_level, (
        f"Expected {raw_level!r} to normalize to {expected_level}."
    )
    assert invalid is expected_invalid, (
        f"Expected invalid flag {expected_invalid} for {raw_level!r}."
    )


def test_format_log_message_without_args_keeps_percent_signs() -> None:
    """Templates are left untouched when no arguments are supplied."""
    assert format_log_message("100% synced") == "100% synced", (
        "Expected template to pass through unformatted."
    )


def test_log_debug_formats_message() -> None:
    """log_debug interpolates its arguments and emits DEBUG."""
    logger = _FakeLogger()

    log_debug(logger, "syncing %s (%d repos)", "ci-group", 3)

    assert logger.calls == [("DEBUG", "syncing ci-group (3 repos)", None, False)], (
        "Expected DEBUG entry with interpolated message."
    )


def test_log_info_and_warning_levels() -> None:
    """log_info and log_warning emit their respective levels."""
    logger = _FakeLogger()
    exc = RuntimeError("flaky")

    log_info(logger, "Sync is complete")
    log_warning(logger, "group %s is %s", "ci", "visible", exc_info=exc)

    assert logger.calls == [
        ("INFO", "Sync is complete", None, False),
        ("WARNING", "group ci is visible", exc, False),
    ], "Expected INFO then WARNING entries."


def test_log_error_defaults_exc_info_to_none() -> None:
    """log_error does not attach exception info unless asked."""
    logger = _FakeLogger()

    log_error(logger, "failed: %s", "boom")

    assert logger.calls == [("ERROR", "failed: boom", None, False)], (
        "Expected ERROR entry without exc_info."
    )


def test_log_exception_does_not_interpolate() -> None:
    """log_exception passes the message through verbatim with exc_info."""
    logger = _FakeLogger()
    exc = ValueError("50% done")

    log_exception(logger, "Runner group sync failed: 50% done", exc)

    assert logger.calls == [
        ("ERROR", "Runner group sync failed: 50% done", exc, False)
    ], "Expected the raw message and exception to be forwarded."


@pytest.mark.parametrize("force", [True, False])
def test_configure_logging_forwards_level_and_force(
    monkeypatch: pytest.MonkeyPatch, *, force: bool
) -> None:
    """configure_logging calls basicConfig with the normalized level."""
    captured: dict[str, object] = {}

    def fake_basic_config(**kwargs: object) -> None:
        captured.update(kwargs)

    monkeypatch.setattr("runnersync.logging.basicConfig", fake_basic_config)

    normalized, invalid = configure_logging("nope", force=force)

    assert (normalized, invalid) == ("INFO", True), "Expected INFO fallback."
    assert captured == {"level": "INFO", "force": force}, (
        "Expected basicConfig to receive the normalized level and force flag."
    )
