import logging

import pytest

from home_fixtures.home import has_home_marker, is_home_line, is_home_row, is_not_played
from home_fixtures.segments import LineCandidate, segment_rows

from .fixtures import schedule_row


def _row(**kwargs):
    values = dict(match_id="555", when="Aug 30, 2025 1:00 PM", home="Reno Apex U12 Boys", away="Sacramento United")
    values.update(kwargs)
    return segment_rows(schedule_row(**values))[0]


@pytest.mark.parametrize("marker", ["", "-", "–", "vs", "VS.", "<span> v </span>"])
def test_not_played_markers(marker):
    assert is_not_played(marker)


@pytest.mark.parametrize("result", ["2 - 1", "0-0", "W 3-2"])
def test_scores_count_as_played(result):
    assert not is_not_played(result)


def test_unplayed_row_with_tracked_home_team_is_home():
    assert is_home_row(_row(), "Reno Apex U12 Boys", "Reno Apex")


def test_away_row_is_skipped_and_logged(caplog):
    row = _row(home="Sacramento United", away="Reno Apex U12 Boys")

    with caplog.at_level(logging.INFO, logger="home_fixtures.home"):
        assert not is_home_row(row, "TBD", "Reno Apex")

    assert "Skipping away game 555" in caplog.text


def test_played_row_needs_home_marker():
    row = _row(result="2 - 1")
    with_marker = "<div>Game 555 (H)</div>" + schedule_row("555", "Aug 30", "Reno Apex U12 Boys", "Davis Legacy")

    assert not is_home_row(row, "Reno Apex U12 Boys", "Reno Apex", "<p>no markers</p>")
    assert is_home_row(row, "Reno Apex U12 Boys", "Reno Apex", with_marker)


def test_home_marker_must_be_near_the_match_id():
    far = "<p>5550 (H)</p>" + "x" * 500 + "<td>555</td>" + "x" * 500 + "(H)"

    assert not has_home_marker(far, "555", distance=300)
    assert has_home_marker("555 ( h )", "555")
    assert not has_home_marker("555 (H)", "")


def test_line_home_side_is_positional():
    home = LineCandidate("Reno Apex - Davis", "Reno Apex", "Davis", "-", "")
    away = LineCandidate("Davis - Reno Apex", "Davis", "Reno Apex", "-", "")

    assert is_home_line(home, "reno apex")
    assert not is_home_line(away, "reno apex")
