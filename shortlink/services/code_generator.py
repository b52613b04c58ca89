"""
Short Code Generator

Codes are random bytes from the operating system CSPRNG, encoded with the
URL-safe base64 alphabet [A-Za-z0-9-_] and truncated to the requested length.
Every character carries 6 bits, so a 6 character code has 2**36 values.

The generator does not check for collisions; LinkStore handles conflicts.
"""

import base64
from secrets import token_bytes

from shortlink.core.exceptions import RandomSourceUnavailable

SHORT_CODE_ALPHABET = (
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    "abcdefghijklmnopqrstuvwxyz"
    "0123456789-_"
)


def generate_short_code(length: int) -> str:
    """
    Generate a random short code of exactly ``length`` characters.

    Base64 turns n bytes into at least n non-padding characters, so
    truncating never keeps a '=' character.

    Args:
        length: Number of characters, must be positive

    Returns:
        Short code drawn from SHORT_CODE_ALPHABET

    Raises:
        ValueError: If length is not positive
        RandomSourceUnavailable: If the OS cannot supply random bytes
    """
    if length <= 0:
        raise ValueError(f"Short code length must be positive, got {length}")

    try:
        raw = token_bytes(length)
    except (OSError, NotImplementedError) as e:
        raise RandomSourceUnavailable(e) from e

    return base64.urlsafe_b64encode(raw).decode("ascii")[:length]
