CODE_PLACEHOLDER = "<CODE>"

INITIAL_PROMPT = """As a professional Python developer, your task is to enhance the given Python code only by adding comprehensive logging. The logging should be implemented using Python's 'logging' module. Ensure that the logging captures key events, errors, and information at appropriate levels (debug, info, warning, error, critical) to aid in debugging and monitoring the program's behavior. Here is the code:

<CODE>

Please add logging to the above code following best practices in Python programming. You are allowed only to add logging statements and not modify the existing code, including simple print calls if they are needed for user interaction. Respond only with Python code.
"""

NOT_VALID_PROMPT = (
    "Provide the full code and note that you are allowed only to add logging "
    "statements and not modify the existing code."
)


def build_initial_prompt(code: str) -> str:
    return INITIAL_PROMPT.replace(CODE_PLACEHOLDER, code, 1)
