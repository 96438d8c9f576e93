"""
Finding ID Utility
==================
Generate identifiers for findings that arrive without one.

Rules:
    - Prefer uuid4, which draws from the OS secure random source.
    - If that source is unavailable, fall back to "f_" + base36(random)
      + base36(time_ns). The fallback is NOT cryptographically strong.
    - Ids are only guaranteed unique within a single response, never
      across processes or restarts.
"""
import random
import time
import uuid

_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"


def _base36(value: int) -> str:
    if value <= 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_ALPHABET[rem])
    return "".join(reversed(digits))


def fallback_id() -> str:
    """Non-cryptographic id: pseudo-random part plus a time-based part."""
    return "f_" + _base36(random.getrandbits(52)) + _base36(time.time_ns())


def generate_id() -> str:
    """
    Return a fresh finding id.

    Returns
    -------
    str
        A uuid4 string, or a ``f_``-prefixed fallback id when the OS random
        source cannot be used.
    """
    try:
        return str(uuid.uuid4())
    except NotImplementedError:
        return fallback_id()
