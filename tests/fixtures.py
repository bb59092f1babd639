"""Schedule page samples modelled on GotSport event schedules."""

from datetime import date

from home_fixtures.dates import TargetWeekend

WEEKEND = TargetWeekend.starting(date(2025, 8, 30))


def schedule_row(
    match_id: str,
    when: str,
    home: str,
    away: str,
    *,
    result: str = "-",
    location: str = "Reno Sports Complex - Field 1",
    division: str = "U12 Boys Premier",
) -> str:
    return (
        f"<tr><td>{match_id}</td><td>{when}</td>"
        f'<td><a href="/org_event/events/39474/schedules?team=1">{home}</a></td>'
        f"<td>{result}</td>"
        f'<td><a href="/org_event/events/39474/schedules?team=2">{away}</a></td>'
        f'<td><a href="/org_event/events/39474/schedules?pitch=77">{location}</a></td>'
        f'<td><a href="/org_event/events/39474/schedules?group=9">{division}</a></td></tr>'
    )


HOME_ROW = (
    "<tr><td>123</td><td>Aug 30, 2025 1:00PM PDT</td><td><a>Reno Apex U12 Boys</a></td>"
    "<td>-</td><td><a>Sacramento United</a></td><td><a>Reno Sports Complex - Field 1</a></td>"
    "<td><a>U12 Boys Premier</a></td></tr>"
)

AWAY_ROW = (
    "<tr><td>124</td><td>Aug 30, 2025 3:00PM PDT</td><td><a>Sacramento United</a></td>"
    "<td>-</td><td><a>Reno Apex U12 Boys</a></td><td><a>Reno Sports Complex - Field 1</a></td>"
    "<td><a>U12 Boys Premier</a></td></tr>"
)

HEADER_ROW = (
    "<tr><th>Match #</th><th>Time</th><th>Home Team</th><th>Results</th>"
    "<th>Away Team</th><th>Location</th><th>Division</th></tr>"
)


def schedule_page(*rows: str, heading: str = "Saturday, Aug 30, 2025") -> str:
    return (
        "<html><head><title>Schedule</title></head><body>"
        f"<h3>{heading}</h3>"
        f"<table class='table'>{HEADER_ROW}{''.join(rows)}</table>"
        "</body></html>"
    )


LINE_SCHEDULE = """
<html><body>
<div class="day">
  <h3>Saturday, August 30, 2025</h3>
  <p>10:30 AM Reno Apex 2012B Premier - Sacramento United 2012B</p>
  <p>* Idlewild Park - Field 3</p>
  <p>1:00 PM Davis Legacy 2013G - Reno Apex 2013G Gold</p>
  <p>* Rancho San Rafael Park</p>
</div>
</body></html>
"""

NO_TEAM_PAGE = """
<html><body>
<h1>Fall League</h1>
<p>No games have been scheduled for this club yet.</p>
</body></html>
"""

LINE_WEEKEND = """
<html><body>
<div class="day">
  <h3>Saturday, August 30, 2025</h3>
  <p>10:30 AM Reno Apex 2012B Premier - Sacramento United 2012B</p>
  <p>* Idlewild Park - Field 3</p>
  <h3>Sunday, August 31, 2025</h3>
  <p>1:00 PM Reno Apex 2013G Gold - Davis Legacy 2013G</p>
  <p>* Rancho San Rafael Park</p>
</div>
</body></html>
"""

LINE_DOUBLE_HEADER = """
<html><body>
<h3>Saturday, August 30, 2025</h3>
<p>9:00 AM Reno Apex 2014B Elite - Truckee SC 2014B</p>
<p>11:00 AM Reno Apex 2012B Premier - Sacramento United 2012B</p>
<p>* Idlewild Park - Field 3</p>
</body></html>
"""
