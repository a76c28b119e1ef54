import logging.handlers
import os
import platform
import sys
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

# Import all model constants
from models import *

# Load environment variables from .env file
load_dotenv()

# --- Environment Setup ---
try:
    sys.stdout.reconfigure(encoding="utf-8")  # type: ignore
except Exception:
    pass

ENV_PREFIX = "AUTOLOG_"

# --- Path Constants ---
TOP_LEVEL_DIR = Path.cwd()
LOGS_DIR = TOP_LEVEL_DIR / "logs"

# --- Logging Constants ---
LOG_LEVEL_CONSOLE = "WARNING"
LOG_LEVEL_FILE = "DEBUG"
LOG_FILE_APP = "logs/app.log"
LOG_MAX_BYTES = 10 * 1024 * 1024  # 10MB
LOG_BACKUP_COUNT = 5
OS_NAME = platform.system()

# --- Model & Budget ---
MAIN_MODEL = os.environ.get(ENV_PREFIX + "MODEL", MAIN_MODEL)
MAX_TOKEN_COUNT = 4095
TOKEN_BUFFER = 120
AVG_CHARS_PER_TOKEN = 4
REQUEST_TIMEOUT = 60  # seconds
MAX_RESPONSE_TOKENS = 2048
TEMPERATURE = 0.1

# --- Logging task defaults ---
DEFAULT_LOG_FILE_PATH = "./"
DEFAULT_LOG_LEVEL = "debug"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _coerce(value: str, current: Any) -> Any:
    """Convert an environment override to the type of the constant it replaces."""
    if isinstance(current, bool):
        return value.strip().lower() in ("1", "true", "yes", "on")
    if isinstance(current, int):
        return int(value)
    if isinstance(current, float):
        return float(value)
    return value


def get_constant(name: str, default: Any = None) -> Any:
    """
    Look up a configuration constant.

    An environment variable named ``AUTOLOG_<NAME>`` wins over the module
    level value. Path-like names are returned as ``Path`` objects.
    """
    current = globals().get(name, default)
    override = os.environ.get(ENV_PREFIX + name)
    value = _coerce(override, current) if override is not None else current

    if (
        value is not None
        and isinstance(value, str)
        and ("PATH" in name.upper() or "DIR" in name.upper() or "FILE" in name.upper())
        and not any(x in name for x in ["MODEL", "FLAG", "LEVEL", "NAME", "FORMAT", "DEFAULT"])
    ):
        return Path(value)
    return value


# --- Logging Setup ---

def setup_logging(console_level: str | None = None):
    """Set up logging for the application."""
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)

    formatter = logging.Formatter('%(asctime)s - %(levelname)s - %(module)s - %(funcName)s - %(lineno)d - %(message)s')

    # File Handler
    log_file_path = Path(get_constant("LOG_FILE_APP"))
    if not log_file_path.is_absolute():
        log_file_path = TOP_LEVEL_DIR / log_file_path

    log_file_path.parent.mkdir(parents=True, exist_ok=True)

    file_handler = logging.handlers.RotatingFileHandler(
        log_file_path,
        maxBytes=LOG_MAX_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding='utf-8'
    )

    file_level = getattr(logging, LOG_LEVEL_FILE.upper(), logging.DEBUG)
    file_handler.setLevel(file_level)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    # Console Handler
    console_handler = logging.StreamHandler()
    level_name = (console_level or get_constant("LOG_LEVEL_CONSOLE")).upper()
    console_handler.setLevel(getattr(logging, level_name, logging.WARNING))
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logger.addHandler(console_handler)

    # Suppress verbose logs
    logging.getLogger('aiohttp').setLevel(logging.WARNING)
    logging.getLogger('asyncio').setLevel(logging.WARNING)

    logging.info("Logging setup complete. Writing to %s", log_file_path)
