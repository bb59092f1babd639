"""Upcoming weekend computation and the textual date forms searched for in schedules."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Tuple
from zoneinfo import ZoneInfo

SATURDAY = 5

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def date_forms(value: date) -> Tuple[str, ...]:
    """Return the spellings of ``value`` a schedule page may use, most specific first."""

    month = MONTH_NAMES[value.month - 1]
    abbreviated = month[:3]
    day = str(value.day)
    padded_day = f"{value.day:02d}"
    forms = [
        f"{month} {day}, {value.year}",
        f"{month} {day} {value.year}",
        f"{abbreviated} {day}, {value.year}",
        f"{abbreviated} {day} {value.year}",
        f"{value.month:02d}/{padded_day}/{value.year}",
        f"{value.month}/{day}/{value.year}",
        value.isoformat(),
    ]
    if padded_day != day:
        forms.extend(
            [
                f"{month} {padded_day}, {value.year}",
                f"{abbreviated} {padded_day}, {value.year}",
            ]
        )
    unique: List[str] = []
    for form in forms:
        if form not in unique:
            unique.append(form)
    return tuple(unique)


@dataclass(frozen=True)
class TargetWeekend:
    saturday: date
    sunday: date

    @classmethod
    def starting(cls, saturday: date) -> "TargetWeekend":
        return cls(saturday=saturday, sunday=saturday + timedelta(days=1))

    @property
    def iso_dates(self) -> Tuple[str, str]:
        return (self.saturday.isoformat(), self.sunday.isoformat())

    def forms(self) -> List[str]:
        return [*date_forms(self.saturday), *date_forms(self.sunday)]

    def form_lookup(self) -> Dict[str, str]:
        """Map each lower-cased textual form to the ISO date it stands for."""

        lookup: Dict[str, str] = {}
        for day in (self.saturday, self.sunday):
            for form in date_forms(day):
                lookup.setdefault(form.lower(), day.isoformat())
        return lookup

    def iso_for_form(self, form: str) -> Optional[str]:
        return self.form_lookup().get(form.strip().lower())

    def contains(self, iso_date: str) -> bool:
        return iso_date in self.iso_dates


def upcoming_weekend(reference: Optional[datetime], tz: ZoneInfo) -> TargetWeekend:
    """Return the first Saturday on or after ``reference`` (in ``tz``) and the Sunday after it.

    Without ``reference`` the current time in ``tz`` is used.
    """

    if reference is None:
        reference = datetime.now(tz=tz)
    if reference.tzinfo is None:
        local_day = reference.date()
    else:
        local_day = reference.astimezone(tz).date()
    offset = (SATURDAY - local_day.weekday()) % 7
    return TargetWeekend.starting(local_day + timedelta(days=offset))
