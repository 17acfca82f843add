from __future__ import annotations


def attendance_percentage(present: int, total: int) -> float:
    """100 * present / total, or 0.0 when there are no records."""
    if total <= 0:
        return 0.0
    return present * 100.0 / total
