"""
Logging Utilities
=================

Helpers for logging values taken from session user records.

For Developers:
    Malformed user records are routine input for the resolver (stale
    fields, junk flags). Report them with log_expected_warning(); it logs
    at DEBUG under pytest so tests that feed bad records on purpose stay
    quiet, and at WARNING everywhere else.

    Pass any record-supplied value through sanitize_for_log() before it
    reaches a message or an extra field.
"""

import logging
import re
import sys
from typing import Any

# Maximum length for logged user input to prevent log flooding
MAX_LOG_INPUT_LENGTH = 200


def _is_running_in_pytest() -> bool:
    return "pytest" in sys.modules


def log_expected_warning(logger: logging.Logger, message: str, **kwargs) -> None:
    """
    Report a degraded-but-handled user record.

    Args:
        logger: Logger of the module that saw the record
        message: What was dropped or defaulted
        **kwargs: Passed through to the logger (e.g., extra={})
    """
    if _is_running_in_pytest():
        logger.debug(message, **kwargs)
    else:
        logger.warning(message, **kwargs)


def sanitize_for_log(value: Any, max_length: int = MAX_LOG_INPUT_LENGTH) -> str:
    """
    Sanitize a value for safe logging by removing CRLF and limiting length.

    Args:
        value: Value to sanitize (will be converted to string)
        max_length: Maximum length of output (default: 200)

    Returns:
        Sanitized string safe for logging

    Example:
        >>> sanitize_for_log("buyer\\n[FAKE] admin granted")
        'buyer [FAKE] admin granted'
    """
    text = str(value)

    # Remove CRLF characters to prevent log injection
    text = text.replace("\r", " ").replace("\n", " ").replace("\t", " ")

    # Remove other control characters
    text = re.sub(r"[\x00-\x1f\x7f-\x9f]", " ", text)

    if len(text) > max_length:
        text = text[:max_length] + "..."

    return text
