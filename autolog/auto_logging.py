"""
auto_logging.py - drive one "add logging to this file" task
============================================================
prompt -> reply -> validate -> (one corrective retry) -> configure -> result

Transport and empty-reply failures end the task with an error result
rather than an exception; the caller decides what to show the user.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field, replace
from typing import Optional

from config import get_constant

from .chat_session import ChatSession
from .config_injector import apply_logging_config, normalize_level
from .errors import AutoLogCancelled, EmptyResponse, TransportFailure, ValidationRejected
from .prompts import NOT_VALID_PROMPT, build_initial_prompt
from .validator import is_valid_change

_LOG = logging.getLogger(__name__)

MAX_ATTEMPTS = 2


@dataclass
class LoggingRequest:
    """Where and how the generated code should log."""

    file_name: str = "default.log"
    file_path: str = field(default_factory=lambda: get_constant("DEFAULT_LOG_FILE_PATH"))
    level: str = field(default_factory=lambda: get_constant("DEFAULT_LOG_LEVEL"))
    fmt: str = field(default_factory=lambda: get_constant("DEFAULT_FORMAT"))

    def validate(self) -> None:
        normalize_level(self.level)


@dataclass(kw_only=True, frozen=True)
class AutoLogResult:
    """
    Outcome of one task.

    Attributes:
        code: The validated, reconfigured source; None when the task failed
        error: Why no code was produced
        attempts: Number of chat requests that returned a reply
        cancelled: The caller cancelled while a request was in flight
    """

    code: Optional[str] = None
    error: Optional[str] = None
    attempts: int = 0
    cancelled: bool = False

    def __bool__(self):
        return self.code is not None

    def replace(self, **kwargs):
        return replace(self, **kwargs)


class AutoLogger:
    """Runs logging tasks against one ChatSession, one task at a time."""

    def __init__(self, session: ChatSession):
        self.session = session
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    async def run(
        self,
        source: str,
        request: LoggingRequest,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> AutoLogResult:
        if self._running:
            raise RuntimeError("A logging task is already running for this session")
        request.validate()

        self._running = True
        try:
            result = await self._run(source, request, cancel_event)
        finally:
            self._running = False

        if not result:
            # Nothing for the user to accept or discard; start the next task fresh
            self.session.clear()
        return result

    async def _run(
        self,
        source: str,
        request: LoggingRequest,
        cancel_event: Optional[asyncio.Event],
    ) -> AutoLogResult:
        prompt = build_initial_prompt(source)
        attempts = 0

        while attempts < MAX_ATTEMPTS:
            try:
                candidate = await self.session.send(prompt)
                attempts += 1
                self._check_cancelled(cancel_event)
            except (EmptyResponse, TransportFailure) as exc:
                return AutoLogResult(error=f"No response from AI: {exc}", attempts=attempts)
            except AutoLogCancelled as exc:
                _LOG.info("Logging task cancelled after %d attempt(s)", attempts)
                return AutoLogResult(error=str(exc), attempts=attempts, cancelled=True)

            if is_valid_change(source, candidate):
                _LOG.info("Accepted model reply on attempt %d", attempts)
                code = apply_logging_config(
                    candidate, request.file_name, request.file_path, request.level, request.fmt
                )
                return AutoLogResult(code=code, attempts=attempts)

            _LOG.warning("Model reply changed more than logging lines (attempt %d)", attempts)
            prompt = NOT_VALID_PROMPT

        rejected = ValidationRejected(
            f"AI response modified existing code after {attempts} attempts"
        )
        return AutoLogResult(error=str(rejected), attempts=attempts)

    @staticmethod
    def _check_cancelled(cancel_event: Optional[asyncio.Event]) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise AutoLogCancelled("Logging task cancelled by user")
