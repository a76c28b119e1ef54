"""
validator.py - line level safety gate for model rewrites
=========================================================
A candidate rewrite is accepted only when it is the original file with
logging lines inserted: every other non-blank line must reappear verbatim
(after trimming) and in the same order.

Lines are matched with a regex whitelist, not parsed. Statements that span
several lines, continuation lines and string literals that look like logging
calls are not understood; a multi-line ``logger.info(`` call is treated as
ordinary content and will be rejected, as is a call nested more than one
level deep or with a ")" inside a string argument.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import List

_LOG = logging.getLogger(__name__)

# Argument list of a single call: one level of nested parentheses, nothing
# allowed after the closing parenthesis. A ")" inside a string literal ends
# the match early and the line is treated as ordinary.
_CALL_ARGS = r"\((?:[^()]|\([^()]*\))*\)"

LOGGING_LINE_RE = re.compile(
    r"^(?:"
    r"import logging"
    r"|from logging import [\w ,]+"
    r"|logging\.basicConfig" + _CALL_ARGS +
    r"|logger\s*=\s*logging\.getLogger\(__name__\)"
    r"|(?:logger|logging)\.(?:debug|info|warning|error|critical)" + _CALL_ARGS +
    r")$"
)


class LineClass(Enum):
    LOGGING = "logging"
    ORDINARY = "ordinary"


def classify_line(line: str) -> LineClass:
    if LOGGING_LINE_RE.match(line.strip()):
        return LineClass.LOGGING
    return LineClass.ORDINARY


def is_logging_line(line: str) -> bool:
    return classify_line(line) is LineClass.LOGGING


def significant_lines(text: str) -> List[str]:
    """Trimmed, non-blank lines of ``text`` in order."""
    return [line.strip() for line in text.split("\n") if line.strip()]


def is_valid_change(original: str, candidate: str) -> bool:
    """
    Return True when ``candidate`` only adds whitelisted logging lines to ``original``.

    Two cursors walk the significant lines of both texts. The candidate
    cursor always moves; the original cursor moves only when the candidate
    reproduces the current original line verbatim. Any ordinary candidate
    line that is not the expected original line is an unauthorized edit.
    Original lines that are themselves logging lines are never consumed, so
    a file that already contains them is rejected.
    """
    original_lines = significant_lines(original)
    candidate_lines = significant_lines(candidate)

    orig_index = 0
    cand_index = 0

    while orig_index < len(original_lines) or cand_index < len(candidate_lines):
        if cand_index >= len(candidate_lines):
            # Nothing left to match the remaining original lines against
            break

        orig_line = original_lines[orig_index] if orig_index < len(original_lines) else ""
        cand_line = candidate_lines[cand_index]
        whitelisted = is_logging_line(cand_line)

        if orig_index == len(original_lines) and not whitelisted:
            _LOG.debug("Rejected trailing addition: %r", cand_line)
            return False
        if not whitelisted and cand_line != orig_line:
            _LOG.debug(
                "Rejected unauthorized change at candidate line %d: %r (expected %r)",
                cand_index + 1, cand_line, orig_line,
            )
            return False
        if cand_line == orig_line and not whitelisted:
            orig_index += 1

        cand_index += 1

    if orig_index < len(original_lines):
        _LOG.debug(
            "Rejected: %d original line(s) missing from candidate",
            len(original_lines) - orig_index,
        )
        return False

    return True
