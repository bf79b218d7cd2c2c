"""ID generation utilities."""

import secrets
import string
import time

_ALPHABET = string.digits + string.ascii_lowercase


def generate_id(prefix: str = "") -> str:
    """Generate a unique ID with optional prefix.

    Format: {prefix}_{timestamp_base36}{random_8chars}
    Example: ws_m1a2b3c4d5e6f7
    """
    timestamp_b36 = _to_base36(int(time.time() * 1000))
    random_part = "".join(secrets.choice(_ALPHABET) for _ in range(8))

    if prefix:
        return f"{prefix}_{timestamp_b36}{random_part}"
    return f"{timestamp_b36}{random_part}"


def generate_element_id(kind: str, *positions: int) -> str:
    """Generate an editor element ID for a generated session or block.

    Positions keep the ID readable (``optimize-block-<ts>-0-2-<rand>``); the
    random suffix keeps IDs unique across requests issued in the same
    millisecond.

    Example:
        >>> generate_element_id("optimize-session", 0)
        'optimize-session-1718000000000-0-k3j9x2'
    """
    parts = [kind, str(int(time.time() * 1000))]
    parts.extend(str(p) for p in positions)
    parts.append("".join(secrets.choice(_ALPHABET) for _ in range(6)))
    return "-".join(parts)


def _to_base36(num: int) -> str:
    """Convert integer to base36 string."""
    if num == 0:
        return "0"

    result = []
    while num:
        result.append(_ALPHABET[num % 36])
        num //= 36

    return "".join(reversed(result))
