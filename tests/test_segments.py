from home_fixtures.segments import (
    RowCandidate,
    segment_lines,
    segment_rows,
    split_on_separator,
)

from .fixtures import AWAY_ROW, HOME_ROW, schedule_page


def test_rows_with_expected_cells_are_returned():
    rows = segment_rows(schedule_page(HOME_ROW, AWAY_ROW))

    # header row + two fixtures
    assert len(rows) == 3
    fixture = rows[1]
    assert isinstance(fixture, RowCandidate)
    assert fixture.match_id == "123"
    assert fixture.home_cell == "<a>Reno Apex U12 Boys</a>"
    assert fixture.result_cell == "-"
    assert fixture.division_cell == "<a>U12 Boys Premier</a>"
    assert fixture.raw.startswith("<tr>")


def test_short_rows_are_skipped_without_stopping_the_scan():
    short = "<tr><td>9</td><td>Aug 30, 2025</td><td>Reno Apex U14 Girls</td><td>-</td><td>Reno FC</td></tr>"

    rows = segment_rows(f"<table>{short}{HOME_ROW}</table>")

    assert [row.match_id for row in rows] == ["123"]


def test_unclosed_cells_are_closed_by_the_next_cell():
    rows = segment_rows("<tr><td>1<td>2<td>3</tr>", expected_cells=3)

    assert rows[0].cells == ("1", "2", "3")


def test_row_cut_by_window_end_is_dropped():
    truncated = HOME_ROW[: HOME_ROW.index("<td><a>Sacramento")]

    assert segment_rows(truncated) == []


def test_row_cut_by_window_start_is_ignored():
    tail = "Boys</a></td><td>-</td><td>x</td></tr>"

    rows = segment_rows(tail + HOME_ROW)

    assert [row.match_id for row in rows] == ["123"]


def test_segment_rows_handles_empty_window():
    assert segment_rows("") == []


def test_split_on_separator_uses_earliest_token():
    assert split_on_separator("Reno Apex vs Davis - Field 2") == ("Reno Apex", "Davis - Field 2", " vs ")
    assert split_on_separator("Reno Apex v. nobody") is None


def test_segment_lines_keeps_lines_naming_the_tracked_team():
    window = (
        "<h3>Saturday</h3>"
        "<p>Reno Apex 2012B vs. Davis Legacy 2012B</p>"
        "<p>Sacramento United - Elk Grove</p>"
        "<p>Reno Apex 2013G training</p>"
    )

    candidates = segment_lines(window, "reno apex", context_lines=1)

    assert len(candidates) == 1
    candidate = candidates[0]
    assert candidate.home_part == "Reno Apex 2012B"
    assert candidate.away_part == "Davis Legacy 2012B"
    assert candidate.separator == "vs."
    assert candidate.context.splitlines() == [
        "Saturday",
        "Reno Apex 2012B vs. Davis Legacy 2012B",
        "Sacramento United - Elk Grove",
    ]


def test_segment_lines_ignores_empty_sides():
    assert segment_lines("<p>Reno Apex - </p>", "Reno Apex") == []


def test_line_candidates_carry_their_heading_and_following_lines():
    window = (
        "<h3>Saturday, August 30, 2025</h3>"
        "<p>9:00 AM Reno Apex 2014B - Truckee SC 2014B</p>"
        "<p>10:30 AM Reno Apex 2012B - Davis Legacy 2012B</p>"
        "<p>* Idlewild Park - Field 3</p>"
        "<h3>Sunday, August 31, 2025</h3>"
        "<p>Reno Apex 2013G - Elk Grove 2013G</p>"
        "<p>* Rancho San Rafael Park</p>"
        "<p>Arrive 30 minutes early</p>"
    )

    candidates = segment_lines(window, "Reno Apex", context_lines=3)

    assert [(c.heading, c.following) for c in candidates] == [
        ("Saturday, August 30, 2025", ()),
        ("Saturday, August 30, 2025", ("* Idlewild Park - Field 3",)),
        ("Sunday, August 31, 2025", ("* Rancho San Rafael Park", "Arrive 30 minutes early")),
    ]


def test_line_candidate_without_heading():
    candidates = segment_lines("<p>Reno Apex 2012B - Davis Legacy 2012B</p>", "Reno Apex")

    assert candidates[0].heading == ""
    assert candidates[0].following == ()
