"""Shell-glob compilation for repository names.

Repository names are single path segments, so the rules below are the subset
of minimatch that matters for them:

* ``*`` and ``**`` match any run of characters, ``?`` matches one character.
* ``[...]`` is a character class; ``[!...]`` and ``[^...]`` negate it.
* ``{a,b}`` expands to alternatives and may nest.
* ``\\`` escapes the next character.
* A name starting with ``.`` only matches a pattern starting with ``.``.
* A pattern starting with ``#`` is a comment and matches nothing.

Matching is anchored and case-sensitive.
"""

from __future__ import annotations

import dataclasses
import functools
import re

NEGATION_PREFIX = "!"
COMMENT_PREFIX = "#"


class GlobSyntaxError(ValueError):
    """Raised when a glob pattern cannot be compiled."""

    def __init__(self, pattern: str, reason: str) -> None:
        """Record the offending pattern alongside the reason."""
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"invalid glob pattern {pattern!r}: {reason}")

    @classmethod
    def empty(cls, pattern: str) -> GlobSyntaxError:
        """Return an error for a pattern with nothing left to match."""
        return cls(pattern, "pattern is empty")

    @classmethod
    def dangling_escape(cls, pattern: str) -> GlobSyntaxError:
        """Return an error for a trailing backslash."""
        return cls(pattern, "pattern ends with an unescaped backslash")

    @classmethod
    def unterminated_class(cls, pattern: str) -> GlobSyntaxError:
        """Return an error for a ``[`` without a closing ``]``."""
        return cls(pattern, "character class is not terminated")

    @classmethod
    def unbalanced_braces(cls, pattern: str) -> GlobSyntaxError:
        """Return an error for mismatched ``{`` and ``}``."""
        return cls(pattern, "braces are unbalanced")


@dataclasses.dataclass(frozen=True, slots=True)
class CompiledGlob:
    """A parsed glob pattern ready to test repository names."""

    source: str
    negated: bool
    regexes: tuple[re.Pattern[str], ...]
    comment: bool = False

    def match(self, name: str) -> bool:
        """Return the raw match result, ignoring negation."""
        if self.comment:
            return False
        return any(regex.fullmatch(name) for regex in self.regexes)

    def evaluate(self, name: str) -> bool:
        """Return the match result with negation applied."""
        return self.match(name) != self.negated

    def __str__(self) -> str:
        """Render the pattern the way it appeared in configuration."""
        return self.source


def split_negation(pattern: str) -> tuple[bool, str]:
    """Strip leading ``!`` markers and report whether the pattern negates.

    An even number of markers cancels out, matching minimatch.
    """
    body = pattern.lstrip(NEGATION_PREFIX)
    markers = len(pattern) - len(body)
    return (markers % 2 == 1, body)


def _class_end(pattern: str, start: int) -> int:
    """Return the index just past the ``]`` closing the class at ``start``.

    Returns -1 when the class is not terminated; the translator reports it.
    """
    index = start + 1
    if index < len(pattern) and pattern[index] in "!^":
        index += 1
    # A leading ']' is a class member, not the terminator.
    if index < len(pattern) and pattern[index] == "]":
        index += 1
    while index < len(pattern):
        char = pattern[index]
        if char == "\\":
            index += 2
            continue
        if char == "]":
            return index + 1
        index += 1
    return -1


def _skip_class(pattern: str, index: int) -> int:
    end = _class_end(pattern, index)
    return index + 1 if end == -1 else end


def _find_closing_brace(pattern: str, start: int) -> int:
    depth = 0
    index = start
    while index < len(pattern):
        char = pattern[index]
        if char == "\\":
            index += 2
            continue
        if char == "[":
            index = _skip_class(pattern, index)
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index
        index += 1
    return -1


def _split_alternatives(body: str) -> list[str]:
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    index = 0
    while index < len(body):
        char = body[index]
        if char == "\\" and index + 1 < len(body):
            current.append(body[index : index + 2])
            index += 2
            continue
        if char == "[":
            end = _skip_class(body, index)
            current.append(body[index:end])
            index = end
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
        elif char == "," and depth == 0:
            parts.append("".join(current))
            current = []
            index += 1
            continue
        current.append(char)
        index += 1
    parts.append("".join(current))
    return parts


def expand_braces(pattern: str, *, source: str | None = None) -> list[str]:
    """Expand ``{a,b}`` alternatives into separate patterns.

    Braces without a top-level comma, a ``}`` with no opening brace, and
    braces inside a ``[...]`` class are kept literally, as minimatch does.
    """
    origin = source if source is not None else pattern
    index = 0
    while index < len(pattern):
        char = pattern[index]
        if char == "\\":
            index += 2
            continue
        if char == "[":
            index = _skip_class(pattern, index)
            continue
        if char == "{":
            break
        index += 1
    else:
        return [pattern]

    close = _find_closing_brace(pattern, index)
    if close == -1:
        raise GlobSyntaxError.unbalanced_braces(origin)

    prefix = pattern[:index]
    body = pattern[index + 1 : close]
    suffixes = expand_braces(pattern[close + 1 :], source=origin)
    alternatives = _split_alternatives(body)
    if len(alternatives) == 1:
        inner = [f"{{{variant}}}" for variant in expand_braces(body, source=origin)]
    else:
        inner = [
            variant
            for alternative in alternatives
            for variant in expand_braces(alternative, source=origin)
        ]
    return [f"{prefix}{middle}{suffix}" for middle in inner for suffix in suffixes]


def _translate_class(pattern: str, start: int, source: str) -> tuple[str, int]:
    """Translate a ``[...]`` class starting at ``start``; return (regex, end)."""
    index = start + 1
    negate = index < len(pattern) and pattern[index] in "!^"
    if negate:
        index += 1
    members: list[str] = []
    first = True
    while index < len(pattern):
        char = pattern[index]
        if char == "]" and not first:
            body = "".join(members)
            return (f"[^{body}]" if negate else f"[{body}]", index + 1)
        if char == "\\":
            if index + 1 >= len(pattern):
                raise GlobSyntaxError.dangling_escape(source)
            members.append(re.escape(pattern[index + 1]))
            index += 2
        elif char == "-" and members and index + 1 < len(pattern):
            if pattern[index + 1] == "]":
                members.append(r"\-")
            else:
                members.append("-")
            index += 1
        else:
            members.append(re.escape(char))
            index += 1
        first = False
    raise GlobSyntaxError.unterminated_class(source)


def translate(pattern: str, *, source: str | None = None) -> str:
    """Translate a brace-free glob into a regex body for ``fullmatch``."""
    origin = source if source is not None else pattern
    parts: list[str] = []
    index = 0
    while index < len(pattern):
        char = pattern[index]
        if char == "*":
            while index < len(pattern) and pattern[index] == "*":
                index += 1
            parts.append(".*")
            continue
        if char == "?":
            parts.append(".")
        elif char == "[":
            regex, index = _translate_class(pattern, index, origin)
            parts.append(regex)
            continue
        elif char == "\\":
            if index + 1 >= len(pattern):
                raise GlobSyntaxError.dangling_escape(origin)
            parts.append(re.escape(pattern[index + 1]))
            index += 2
            continue
        else:
            parts.append(re.escape(char))
        index += 1
    return "".join(parts)


@functools.lru_cache(maxsize=1024)
def compile_glob(pattern: str) -> CompiledGlob:
    """Parse ``pattern`` (optionally ``!``-negated) into a :class:`CompiledGlob`.

    Raises
    ------
    GlobSyntaxError
        If the pattern is empty or syntactically malformed.

    """
    negated, body = split_negation(pattern)
    if not body:
        raise GlobSyntaxError.empty(pattern)
    if body.startswith(COMMENT_PREFIX):
        return CompiledGlob(source=pattern, negated=negated, regexes=(), comment=True)

    regexes = tuple(
        _compile_variant(variant, pattern)
        for variant in expand_braces(body, source=pattern)
    )
    return CompiledGlob(source=pattern, negated=negated, regexes=regexes)


def _compile_variant(variant: str, source: str) -> re.Pattern[str]:
    regex = _anchor_dot(variant) + translate(variant, source=source)
    try:
        return re.compile(regex, re.DOTALL)
    except re.error as exc:
        # Reversed ranges such as [z-a] only fail here.
        raise GlobSyntaxError(source, str(exc)) from exc


def _anchor_dot(variant: str) -> str:
    # Hidden names need an explicit leading dot in the pattern.
    if variant.startswith((".", "\\.")):
        return ""
    return r"(?!\.)"


def glob_match(name: str, pattern: str) -> bool:
    """Return whether ``name`` matches ``pattern``, applying any negation."""
    return compile_glob(pattern).evaluate(name)
