"""Remove Markdown code fences wrapped around a model reply."""

START_MARKER = "```python"
END_MARKER = "```"


def strip_fences(text: str) -> str:
    """
    Return the code between the first ```python opener and the last ``` closer.

    The text is returned unchanged when either marker is missing or the
    closer does not come after the opener.
    """
    start = text.find(START_MARKER)
    end = text.rfind(END_MARKER)

    if start != -1 and end != -1 and end >= start + len(START_MARKER):
        return text[start + len(START_MARKER):end].strip()

    return text
