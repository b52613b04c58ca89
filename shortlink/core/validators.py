"""
Input Validators

Short codes arrive as raw path segments. Anything that could not have been
produced by the code generator is rejected here, before any query runs.
"""

import re
from typing import Optional

# URL-safe base64 alphabet: [A-Za-z0-9-_]
SHORT_CODE_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")
MAX_SHORT_CODE_LENGTH = 32


def sanitize_short_code(short_code: str) -> Optional[str]:
    """
    Validate short code format.

    Args:
        short_code: The short code taken from the request path

    Returns:
        The short code if it is well formed, None otherwise
    """
    if not short_code or not isinstance(short_code, str):
        return None

    if len(short_code) > MAX_SHORT_CODE_LENGTH:
        return None

    if not SHORT_CODE_PATTERN.match(short_code):
        return None

    return short_code
