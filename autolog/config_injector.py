"""
config_injector.py - finalize the logging configuration of accepted code
=========================================================================
The model picks its own ``logging.basicConfig`` arguments; the user's choice
of log file, level and format always wins. These helpers work on raw text
and do not check that the result still parses.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Optional

from .errors import InvalidLogLevel

_LOG = logging.getLogger(__name__)

IMPORT_LOGGING = "import logging"
BASIC_CONFIG_CALL = "logging.basicConfig"
LEVELS = ("debug", "info", "warning", "error", "critical")

_ALIASED_LOGGING_IMPORT = re.compile(r"import\s+\w+\s+as\s+logging")
_TOP_LEVEL_IMPORT = re.compile(r"^(?:import|from)\s", re.M)


def normalize_level(level: str) -> str:
    """Return the upper-case level name, rejecting anything outside LEVELS."""
    if not level or level.strip().lower() not in LEVELS:
        raise InvalidLogLevel(
            f"Invalid log level '{level}'. Valid levels: {', '.join(LEVELS)}"
        )
    return level.strip().upper()


def build_config_line(file_name: str, file_path: str, level: str, fmt: str) -> str:
    if file_path and not file_path.endswith(("/", "\\")):
        file_path += "/"
    if not file_name.endswith(".log"):
        file_name += ".log"
    return (
        f"{BASIC_CONFIG_CALL}(filename='{file_path}{file_name}', "
        f"level=logging.{normalize_level(level)}, format='{fmt}')"
    )


def apply_logging_config(code: str, file_name: str, file_path: str, level: str, fmt: str) -> str:
    """
    Point the code's ``logging.basicConfig`` call at the requested file, level and format.

    Adds ``import logging`` at the top when missing. An existing basicConfig
    call is overwritten from the call to the end of its line; otherwise the
    new call goes on the line after the last top-level ``import``/``from``
    statement. A parenthesized import spanning several lines is not followed,
    so the call would land inside it.
    """
    config_line = build_config_line(file_name, file_path, level, fmt)
    modified = code

    if IMPORT_LOGGING not in modified:
        modified = IMPORT_LOGGING + "\n" + modified

    config_index = modified.find(BASIC_CONFIG_CALL)
    if config_index != -1:
        end_of_line = modified.find("\n", config_index)
        if end_of_line == -1:
            end_of_line = len(modified)
        _LOG.debug("Replacing existing basicConfig call at offset %d", config_index)
        return modified[:config_index] + config_line + modified[end_of_line:]

    imports = list(_TOP_LEVEL_IMPORT.finditer(modified))
    if not imports:
        # Only possible when "import logging" appears but not as a statement
        return config_line + "\n" + modified

    end_of_import = modified.find("\n", imports[-1].start())
    if end_of_import == -1:
        # Import is the last line and has no newline after it
        return modified + "\n" + config_line + "\n"

    _LOG.debug("Inserting basicConfig call after offset %d", end_of_import)
    return modified[: end_of_import + 1] + config_line + "\n" + modified[end_of_import + 1:]


def default_log_file_name(source_path: Optional[str | Path] = None) -> str:
    """Log file named after the source file, e.g. ``app.py`` -> ``app.log``."""
    if not source_path:
        return "default.log"
    return Path(source_path).stem + ".log"


def has_logging_import(code: str) -> bool:
    return IMPORT_LOGGING in code or bool(_ALIASED_LOGGING_IMPORT.search(code))


def add_variable_debug_log(code: str, line_number: int, variable: str) -> str:
    """Log the value of ``variable`` right after the 0-based ``line_number``."""
    variable = (variable or "").strip()
    if not variable:
        raise ValueError("No variable selected")

    lines = code.split("\n")
    if line_number < 0 or line_number >= len(lines):
        raise ValueError(f"Line {line_number} is outside the file (0-{len(lines) - 1})")

    target = lines[line_number]
    indent = target[: len(target) - len(target.lstrip())]
    statement = f'{indent}logging.debug("Variable value of {variable}: %s", {variable})'
    lines.insert(line_number + 1, statement)

    if not has_logging_import(code):
        lines.insert(0, IMPORT_LOGGING)

    return "\n".join(lines)
