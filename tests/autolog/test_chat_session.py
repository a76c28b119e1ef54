import pytest
from unittest.mock import AsyncMock, MagicMock

from autolog.chat_session import ChatSession, Role, Turn
from autolog.errors import EmptyResponse, TransportFailure


@pytest.fixture
def mock_llm_client():
    """Fixture to create a mock LLM client."""
    client = MagicMock()
    client.call = AsyncMock()
    return client


@pytest.fixture
def session(mock_llm_client):
    return ChatSession(mock_llm_client, max_token_count=4095, token_buffer=120, chars_per_token=4)


@pytest.mark.asyncio
async def test_send_records_both_turns(session: ChatSession, mock_llm_client):
    mock_llm_client.call.return_value = "x = 1"

    reply = await session.send("add logging")

    assert reply == "x = 1"
    assert session.turns == [Turn(Role.REQUESTER, "add logging"), Turn(Role.RESPONDER, "x = 1")]
    # Only the prompt counts against the budget
    assert session.token_count == 3


@pytest.mark.asyncio
async def test_send_passes_full_history(session: ChatSession, mock_llm_client):
    mock_llm_client.call.side_effect = ["first reply", "second reply"]

    await session.send("first")
    await session.send("second")

    messages = mock_llm_client.call.call_args.kwargs["messages"]
    assert messages == [
        {"role": "user", "content": "first"},
        {"role": "assistant", "content": "first reply"},
        {"role": "user", "content": "second"},
    ]


@pytest.mark.asyncio
async def test_send_strips_code_fences(session: ChatSession, mock_llm_client):
    mock_llm_client.call.return_value = "Sure!\n```python\nimport logging\n```\n"

    reply = await session.send("go")

    assert reply == "import logging"
    assert session.turns[-1].content == "import logging"


@pytest.mark.asyncio
@pytest.mark.parametrize("empty", [None, ""])
async def test_empty_reply_raises_and_rolls_back(session: ChatSession, mock_llm_client, empty):
    mock_llm_client.call.return_value = empty

    with pytest.raises(EmptyResponse):
        await session.send("hello there")

    assert session.turns == []
    assert session.token_count == 0


@pytest.mark.asyncio
async def test_transport_failure_rolls_back_prompt(session: ChatSession, mock_llm_client):
    mock_llm_client.call.side_effect = ["ok", TransportFailure("429 quota", status=429)]
    await session.send("first")

    with pytest.raises(TransportFailure):
        await session.send("second prompt")

    assert session.turns == [Turn(Role.REQUESTER, "first"), Turn(Role.RESPONDER, "ok")]
    assert session.token_count == 2


@pytest.mark.asyncio
async def test_oversized_first_reply_is_returned_but_not_recorded(mock_llm_client):
    session = ChatSession(mock_llm_client, max_token_count=20, token_buffer=0, chars_per_token=4)
    mock_llm_client.call.return_value = "y" * 100

    reply = await session.send("prompt")

    assert reply == "y" * 100
    assert session.turns == [Turn(Role.REQUESTER, "prompt")]


@pytest.mark.asyncio
async def test_oversized_later_reply_evicts_most_recent_turn(mock_llm_client):
    session = ChatSession(mock_llm_client, max_token_count=30, token_buffer=5, chars_per_token=4)
    mock_llm_client.call.side_effect = ["short", "z" * 100]

    await session.send("first")
    reply = await session.send("second")

    assert reply == "z" * 100
    # The prompt just sent is dropped and the reply is not stored
    assert session.turns == [Turn(Role.REQUESTER, "first"), Turn(Role.RESPONDER, "short")]


@pytest.mark.asyncio
async def test_reply_exactly_at_budget_is_recorded(mock_llm_client):
    session = ChatSession(mock_llm_client, max_token_count=10, token_buffer=2, chars_per_token=4)
    # prompt uses 1 token, leaving 10 - 1 - 2 = 7
    mock_llm_client.call.return_value = "r" * 28

    await session.send("p")

    assert session.turns[-1] == Turn(Role.RESPONDER, "r" * 28)


@pytest.mark.asyncio
async def test_clear_resets_history(session: ChatSession, mock_llm_client):
    mock_llm_client.call.return_value = "x"
    await session.send("a prompt")

    session.clear()

    assert session.turns == []
    assert session.messages == []
    assert session.token_count == 0


def test_estimate_tokens_rounds_up(session: ChatSession):
    assert session.estimate_tokens("") == 0
    assert session.estimate_tokens("abcd") == 1
    assert session.estimate_tokens("abcde") == 2


def test_defaults_come_from_config(mock_llm_client):
    session = ChatSession(mock_llm_client)
    assert session.max_token_count == 4095
    assert session.token_buffer == 120
    assert session.chars_per_token == 4
