# src/taskman/core/events.py

"""
Inbound events produced by the presentation layer.

Views emit these; TaskBoard consumes them and calls into the store.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta

DELETE_CHOICE = "delete"


@dataclass(frozen=True, slots=True)
class DaySelected:
    day: date


@dataclass(frozen=True, slots=True)
class TaskFormResult:
    """Task form closed: accepted=True for Save, False for Cancel/Esc."""

    accepted: bool
    title: str
    notes: str = ""


@dataclass(frozen=True, slots=True)
class ChoiceResult:
    """Answer to a yes/no confirmation (e.g. choice_id="delete")."""

    choice_id: str
    confirmed: bool


Event = DaySelected | TaskFormResult | ChoiceResult


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def next_day(current: date | datetime) -> DaySelected:
    return DaySelected(day=_as_date(current) + timedelta(days=1))


def prev_day(current: date | datetime) -> DaySelected:
    return DaySelected(day=_as_date(current) - timedelta(days=1))


def today() -> DaySelected:
    return DaySelected(day=datetime.now().astimezone().date())
