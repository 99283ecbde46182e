"""Glob-to-regex translation for file name patterns."""

from __future__ import annotations

import functools
import os
import re
from collections.abc import Sequence
from typing import Final

MATCH_ALL: Final[re.Pattern[str]] = re.compile(".*", re.DOTALL)
_ESCAPABLE: Final[frozenset[str]] = frozenset("*?\\")


class InvalidPatternError(Exception):
    """Raised when a file name pattern cannot be compiled."""

    def __init__(self, pattern: str, reason: str, hint: str) -> None:
        super().__init__(f"Invalid pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason
        self.hint = hint


@functools.cache
def is_case_sensitive_filesystem() -> bool:
    """Return True when the platform distinguishes 'Temp' from 'temp'."""
    return os.path.normcase("Temp") != os.path.normcase("temp")


def glob_to_regex(pattern: str) -> str:
    """Translate one glob into an unanchored regex fragment.

    ``*`` matches any run of characters and ``?`` exactly one. A backslash
    before ``*``, ``?`` or another backslash makes it literal; before any other
    character the backslash itself is literal.
    """
    if not pattern:
        raise InvalidPatternError(pattern, "Pattern is empty.", "Use '*' to match every name.")
    if "/" in pattern:
        raise InvalidPatternError(
            pattern,
            "Pattern contains a path separator.",
            "File name patterns match leaf names only, e.g. '*.java'.",
        )
    output: list[str] = []
    index = 0
    while index < len(pattern):
        char = pattern[index]
        if char == "\\":
            if index + 1 == len(pattern):
                raise InvalidPatternError(
                    pattern,
                    "Pattern ends with a dangling escape.",
                    "Escape a trailing backslash as '\\\\'.",
                )
            following = pattern[index + 1]
            if following in _ESCAPABLE:
                output.append(re.escape(following))
                index += 2
                continue
            output.append(re.escape(char))
        elif char == "*":
            output.append(".*")
        elif char == "?":
            output.append(".")
        else:
            output.append(re.escape(char))
        index += 1
    return "".join(output)


def compile_name_patterns(
    patterns: Sequence[str] | None, case_sensitive: bool
) -> re.Pattern[str]:
    """Compile patterns into one OR-combined matcher; None or empty matches all."""
    if not patterns:
        return MATCH_ALL
    alternatives = "|".join(f"(?:{glob_to_regex(pattern)})" for pattern in patterns)
    flags = re.DOTALL
    if not case_sensitive:
        flags |= re.IGNORECASE
    return re.compile(alternatives, flags)
