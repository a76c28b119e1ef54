import pytest

from autolog.fences import strip_fences


def test_strips_python_fence():
    reply = "Here you go:\n```python\nimport logging\nx = 1\n```\nEnjoy!"
    assert strip_fences(reply) == "import logging\nx = 1"


def test_uses_last_closing_fence():
    reply = "```python\na = '```'\n```"
    assert strip_fences(reply) == "a = '```'"


def test_without_fence_returns_input():
    assert strip_fences("x = 1\n") == "x = 1\n"


def test_untagged_fence_is_left_alone():
    reply = "```\nx = 1\n```"
    assert strip_fences(reply) == reply


def test_opener_without_closer_returns_input():
    reply = "```python"
    assert strip_fences(reply) == reply


@pytest.mark.parametrize(
    "text",
    [
        "",
        "x = 1",
        "```python\nx = 1\n```",
        "intro\n```python\nprint(1)\n```\noutro",
        "```python",
        "``` python\nx\n```",
    ],
)
def test_idempotent(text):
    once = strip_fences(text)
    assert strip_fences(once) == once


def test_nested_python_fences_unwrap_one_layer_per_pass():
    # Known exception to idempotence: a fenced block inside a fenced block
    text = "```python\n```python\nx\n```\n```"

    once = strip_fences(text)

    assert once == "```python\nx\n```"
    assert strip_fences(once) == "x"
