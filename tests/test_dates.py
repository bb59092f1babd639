from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from home_fixtures.dates import TargetWeekend, date_forms, upcoming_weekend

PACIFIC = ZoneInfo("America/Los_Angeles")


def test_date_forms_cover_common_spellings():
    forms = date_forms(date(2025, 8, 30))

    assert forms[0] == "August 30, 2025"
    for expected in ("August 30 2025", "Aug 30, 2025", "Aug 30 2025", "08/30/2025", "8/30/2025", "2025-08-30"):
        assert expected in forms
    assert len(forms) == len(set(forms))


def test_date_forms_add_zero_padded_day():
    forms = date_forms(date(2025, 9, 6))

    assert "September 6, 2025" in forms
    assert "September 06, 2025" in forms
    assert "09/06/2025" in forms
    assert "9/6/2025" in forms


def test_weekend_forms_list_saturday_first():
    weekend = TargetWeekend.starting(date(2025, 8, 30))

    forms = weekend.forms()

    assert weekend.sunday == date(2025, 8, 31)
    assert weekend.iso_dates == ("2025-08-30", "2025-08-31")
    assert forms.index("August 30, 2025") < forms.index("August 31, 2025")


def test_form_lookup_maps_back_to_iso_dates():
    weekend = TargetWeekend.starting(date(2025, 8, 30))

    assert weekend.iso_for_form("Aug 31, 2025") == "2025-08-31"
    assert weekend.iso_for_form(" 08/30/2025 ") == "2025-08-30"
    assert weekend.iso_for_form("Sep 1, 2025") is None
    assert weekend.contains("2025-08-31")
    assert not weekend.contains("2025-09-06")


def test_upcoming_weekend_from_weekday():
    weekend = upcoming_weekend(datetime(2025, 8, 28, 9, 0, tzinfo=PACIFIC), PACIFIC)

    assert weekend.saturday == date(2025, 8, 30)
    assert weekend.sunday == date(2025, 8, 31)


def test_upcoming_weekend_on_saturday_is_today():
    weekend = upcoming_weekend(datetime(2025, 8, 30, 23, 30, tzinfo=PACIFIC), PACIFIC)

    assert weekend.saturday == date(2025, 8, 30)


def test_upcoming_weekend_on_sunday_moves_to_next_saturday():
    weekend = upcoming_weekend(datetime(2025, 8, 31, 8, 0, tzinfo=PACIFIC), PACIFIC)

    assert weekend.saturday == date(2025, 9, 6)
    assert weekend.sunday == date(2025, 9, 7)


def test_upcoming_weekend_uses_source_timezone():
    # 05:00 UTC on Saturday is still Friday evening in Reno.
    friday_night = datetime(2025, 8, 30, 5, 0, tzinfo=timezone.utc)
    # 06:00 UTC on Sunday is Saturday night in Reno.
    saturday_night = datetime(2025, 8, 31, 6, 0, tzinfo=timezone.utc)

    assert upcoming_weekend(friday_night, PACIFIC).saturday == date(2025, 8, 30)
    assert upcoming_weekend(saturday_night, PACIFIC).saturday == date(2025, 8, 30)


def test_upcoming_weekend_naive_reference_is_taken_as_local():
    weekend = upcoming_weekend(datetime(2025, 12, 30, 12, 0), PACIFIC)

    assert weekend.saturday == date(2026, 1, 3)
    assert weekend.sunday == date(2026, 1, 4)


def test_upcoming_weekend_defaults_to_now():
    weekend = upcoming_weekend(None, PACIFIC)

    assert weekend.saturday.weekday() == 5
    assert (weekend.sunday - weekend.saturday).days == 1
