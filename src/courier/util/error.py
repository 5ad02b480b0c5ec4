"""Error formatting for display.

Turns call failures into short, user-facing text.
"""

import json

from ..api_client.result import ErrorKind, Failure


def _error_message(detail: str) -> str:
    """Pull a message out of a JSON error body, else return the text as-is."""
    try:
        payload = json.loads(detail)
    except ValueError:
        return detail
    if isinstance(payload, dict):
        err = payload.get("error")
        if isinstance(err, dict):
            message = err.get("message")
            if isinstance(message, str) and message.strip():
                return message
        if isinstance(err, str) and err.strip():
            return err
        message = payload.get("message")
        if isinstance(message, str) and message.strip():
            return message
    return detail


def format_failure(failure: Failure) -> str:
    """Format a ``Failure`` for display."""
    if failure.reason == ErrorKind.NETWORK:
        return f"Could not reach the server: {failure.detail}"
    if failure.reason == ErrorKind.DECODE:
        return f"Unexpected response from the server: {failure.detail}"
    message = _error_message(failure.detail.strip())
    if message:
        return f"Server returned HTTP {failure.status_code}: {message}"
    return f"Server returned HTTP {failure.status_code}"
