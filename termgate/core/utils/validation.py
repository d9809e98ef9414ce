"""Input validation helpers."""

from __future__ import annotations

# Integer primary keys are 32-bit on every supported database.
MAX_ROW_ID = 2**31 - 1


def is_row_id(value) -> bool:
    """True for an int that can name a row; lookups with anything else find nothing."""
    return isinstance(value, int) and not isinstance(value, bool) and 0 < value <= MAX_ROW_ID
