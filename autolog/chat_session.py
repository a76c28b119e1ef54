"""
chat_session.py - multi-turn conversation with a rough token budget
====================================================================
The whole turn history is sent on every request. Usage is estimated at
``len(text) / chars_per_token`` (rounded up), counted for prompts only.
When a reply would not fit in what is left of the budget it is returned
but not recorded, and the most recently appended turn is dropped to make
room for the next request.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Protocol

from config import get_constant

from .errors import EmptyResponse, TransportFailure
from .fences import strip_fences

_LOG = logging.getLogger(__name__)


class ChatClient(Protocol):
    async def call(self, messages: List[Dict[str, Optional[str]]], max_tokens: int = ..., temperature: float = ...) -> Optional[str]:
        ...


class Role(Enum):
    REQUESTER = "user"
    RESPONDER = "assistant"


@dataclass(frozen=True)
class Turn:
    role: Role
    content: Optional[str]

    def to_message(self) -> Dict[str, Optional[str]]:
        return {"role": self.role.value, "content": self.content}


class ChatSession:
    """Conversation state for one logging task. Call ``clear()`` when the task ends."""

    def __init__(
        self,
        client: ChatClient,
        max_token_count: Optional[int] = None,
        token_buffer: Optional[int] = None,
        chars_per_token: Optional[int] = None,
        max_response_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ):
        self.client = client
        self.max_token_count = max_token_count or get_constant("MAX_TOKEN_COUNT")
        self.token_buffer = token_buffer if token_buffer is not None else get_constant("TOKEN_BUFFER")
        self.chars_per_token = chars_per_token or get_constant("AVG_CHARS_PER_TOKEN")
        self.max_response_tokens = max_response_tokens or get_constant("MAX_RESPONSE_TOKENS")
        self.temperature = temperature if temperature is not None else get_constant("TEMPERATURE")
        self._turns: List[Turn] = []
        self._token_count = 0

    @property
    def turns(self) -> List[Turn]:
        return list(self._turns)

    @property
    def messages(self) -> List[Dict[str, Optional[str]]]:
        return [turn.to_message() for turn in self._turns]

    @property
    def token_count(self) -> int:
        return self._token_count

    def estimate_tokens(self, text: str) -> int:
        return math.ceil(len(text) / self.chars_per_token)

    def available_tokens(self) -> int:
        return self.max_token_count - self._token_count - self.token_buffer

    def clear(self) -> None:
        _LOG.debug("Clearing chat session (%d turns, %d tokens)", len(self._turns), self._token_count)
        self._turns = []
        self._token_count = 0

    async def send(self, prompt: str) -> str:
        """
        Send ``prompt`` with the full history and return the cleaned reply.

        Raises:
            EmptyResponse: the API returned no content.
            TransportFailure: the request itself failed.

        In both cases the prompt turn is removed again so the history only
        holds exchanges that completed.
        """
        prompt_tokens = self.estimate_tokens(prompt)
        self._turns.append(Turn(Role.REQUESTER, prompt))
        self._token_count += prompt_tokens

        try:
            reply = await self.client.call(
                messages=self.messages,
                max_tokens=self.max_response_tokens,
                temperature=self.temperature,
            )
            if not reply:
                raise EmptyResponse("Chat API returned an empty response")
        except (EmptyResponse, TransportFailure) as exc:
            _LOG.error("Chat request failed: %s", exc)
            self._rollback(prompt_tokens)
            raise

        reply = strip_fences(reply)

        response_tokens = self.estimate_tokens(reply)
        available = self.available_tokens()
        if response_tokens > available:
            if len(self._turns) > 1:
                dropped = self._turns.pop()
                _LOG.warning(
                    "Response (~%d tokens) exceeds remaining budget (%d); dropped last %s turn",
                    response_tokens, available, dropped.role.value,
                )
            else:
                _LOG.warning(
                    "Response (~%d tokens) exceeds remaining budget (%d); not recorded",
                    response_tokens, available,
                )
            return reply

        self._turns.append(Turn(Role.RESPONDER, reply))
        return reply

    def _rollback(self, prompt_tokens: int) -> None:
        self._turns.pop()
        self._token_count -= prompt_tokens
