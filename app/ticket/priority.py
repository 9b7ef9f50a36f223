# app/ticket/priority.py
"""
Mapping between the native priority labels and the legacy 1-5 numeric scale.

Older rows and clients store priority as a number: ``<= 1`` is low,
``>= 4`` is high, anything else (including a missing value) is medium.
"""
from typing import Any

from app.ticket.models import TicketPriority

_SCALE = {
    TicketPriority.low: 1,
    TicketPriority.medium: 3,
    TicketPriority.high: 5,
}


def priority_from_scale(value: float | None) -> TicketPriority:
    if value is None:
        return TicketPriority.medium
    if value <= 1:
        return TicketPriority.low
    if value >= 4:
        return TicketPriority.high
    return TicketPriority.medium


def priority_to_scale(priority: TicketPriority | str) -> int:
    try:
        return _SCALE[TicketPriority(priority)]
    except ValueError:
        return _SCALE[TicketPriority.medium]


def coerce_priority(value: Any) -> Any:
    """Accept either a label or a legacy number; labels pass through untouched."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return priority_from_scale(value)
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return priority_from_scale(int(value))
    return value
