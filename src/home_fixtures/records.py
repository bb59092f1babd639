"""The game record returned to callers and its deduplication."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, Iterable, List, Tuple

TBD = "TBD"
LEAGUE = "League"

WIRE_KEYS = {
    "home_team": "homeTeam",
    "away_team": "awayTeam",
    "date": "date",
    "time": "time",
    "location": "location",
    "venue": "venue",
    "field": "field",
    "division": "division",
    "competition": "competition",
}


@dataclass(frozen=True)
class GameRecord:
    home_team: str
    away_team: str = TBD
    date: str = TBD
    time: str = TBD
    location: str = TBD
    venue: str = TBD
    field: str = TBD
    division: str = LEAGUE
    competition: str = ""

    def __post_init__(self) -> None:
        # Absent values are represented by their sentinel, never by "".
        for name in ("away_team", "date", "time", "location", "venue", "field"):
            if not (getattr(self, name) or "").strip():
                object.__setattr__(self, name, TBD)
        if not (self.division or "").strip():
            object.__setattr__(self, "division", LEAGUE)
        if not (self.competition or "").strip():
            object.__setattr__(self, "competition", self.division)

    def dedupe_key(self, *, match_away: bool = False) -> Tuple[str, ...]:
        key = (self.date, self.time, self.home_team.strip().lower())
        if match_away:
            key += (self.away_team.strip().lower(),)
        return key

    def to_dict(self) -> Dict[str, str]:
        return {WIRE_KEYS[name]: value for name, value in asdict(self).items()}


def dedupe_records(records: Iterable[GameRecord], *, match_away: bool = False) -> List[GameRecord]:
    """Drop repeated fixtures, keeping the first occurrence and the input order."""

    seen: set[Tuple[str, ...]] = set()
    unique: List[GameRecord] = []
    for record in records:
        signature = record.dedupe_key(match_away=match_away)
        if signature in seen:
            continue
        seen.add(signature)
        unique.append(record)
    return unique
