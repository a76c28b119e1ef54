from .errors import (
    AutoLogError,
    AutoLogCancelled,
    EmptyResponse,
    InvalidLogLevel,
    TransportFailure,
    ValidationRejected,
)
from .fences import strip_fences
from .validator import LineClass, classify_line, is_valid_change
from .config_injector import (
    LEVELS,
    add_variable_debug_log,
    apply_logging_config,
    default_log_file_name,
)
from .chat_session import ChatSession, Role, Turn
from .auto_logging import AutoLogger, AutoLogResult, LoggingRequest
from .proposal import Proposal

__all__ = [
    "AutoLogError",
    "AutoLogCancelled",
    "EmptyResponse",
    "InvalidLogLevel",
    "TransportFailure",
    "ValidationRejected",
    "strip_fences",
    "LineClass",
    "classify_line",
    "is_valid_change",
    "LEVELS",
    "add_variable_debug_log",
    "apply_logging_config",
    "default_log_file_name",
    "ChatSession",
    "Role",
    "Turn",
    "AutoLogger",
    "AutoLogResult",
    "LoggingRequest",
    "Proposal",
]
