"""Result limit policy."""

from typing import Optional

MAX_RESULT_LIMIT = 50


def resolve_limit(value: Optional[int], default: int, ceiling: int = MAX_RESULT_LIMIT) -> int:
    """Return ``value`` when it lies in ``[1, ceiling]``, otherwise ``default``.

    Out-of-range limits fall back to the default rather than being clamped to
    the nearest bound, and are never an error. The ceiling itself never exceeds
    ``MAX_RESULT_LIMIT``.
    """
    ceiling = min(ceiling, MAX_RESULT_LIMIT)
    if value is None or value <= 0 or value > ceiling:
        return default
    return value
