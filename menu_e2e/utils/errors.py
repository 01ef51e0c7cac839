"""
Error handling utilities for consistent error message extraction.
"""


def get_error_message(error: BaseException | object) -> str:
    """
    Safely extract a one-line error message from an unknown error type.

    Playwright errors carry a multi-line call log after the first line;
    only the headline is kept so log lines stay readable.
    """
    if isinstance(error, Exception):
        text = str(error).strip()
        if not text:
            return type(error).__name__
        return text.splitlines()[0]
    return "Unknown error"
