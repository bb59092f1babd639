"""Turn a schedule page into the tracked team's home games for one weekend.

The pipeline is linear: locate date windows, segment each window into
candidates, extract fields, keep home games on the target dates and
deduplicate. Parsing misses never raise; they only shrink the result.
"""
from __future__ import annotations

import logging
import multiprocessing
import time
from dataclasses import asdict
from datetime import date
from multiprocessing.connection import Connection
from typing import Callable, List, Optional

from . import fields, markup
from .config import AppConfig
from .dates import TargetWeekend
from .home import is_home_line, is_home_row
from .records import TBD, GameRecord, dedupe_records
from .segments import LineCandidate, RowCandidate, segment_lines, segment_rows
from .windows import DateWindow, locate_date_windows

LOGGER = logging.getLogger(__name__)

Pipeline = Callable[[str, TargetWeekend, AppConfig], List[GameRecord]]

# Seconds a terminated worker gets before it is killed.
WORKER_GRACE_SECONDS = 1.0


def record_from_row(
    row: RowCandidate,
    weekend: TargetWeekend,
    config: AppConfig,
    document: Optional[str] = None,
    *,
    default_date: Optional[str] = None,
) -> Optional[GameRecord]:
    tracked = config.tracked_team
    home_team = fields.extract_team_name(row.home_cell, tracked_team=tracked)
    if not is_home_row(row, home_team, tracked, document):
        return None

    away_team = fields.extract_team_name(row.away_cell)
    if away_team == TBD or markup.contains_ci(away_team, tracked):
        away_team = fields.extract_opponent(
            row.away_cell, tracked, min_length=config.opponent_min_length
        )
    location = fields.location_from_cell(row.location_cell)
    division = fields.extract_division(
        row.raw,
        home_team,
        club_prefixes=config.club_prefixes,
        strategies=config.division_strategies,
        division_cell=row.division_cell,
    )
    return GameRecord(
        home_team=home_team,
        away_team=away_team,
        date=fields.extract_date(row.date_cell or row.raw, weekend, fallback=default_date),
        time=fields.extract_time(row.date_cell or row.raw),
        location=location.location,
        venue=location.venue,
        field=location.field,
        division=division,
        competition=division,
    )


def _line_location(candidate: LineCandidate) -> fields.Location:
    location = fields.extract_location(candidate.away_part)
    if location.found:
        return location
    for line in candidate.following:
        location = fields.extract_location(line)
        if location.found:
            return location
    return fields.UNKNOWN_LOCATION


def record_from_line(
    candidate: LineCandidate,
    weekend: TargetWeekend,
    config: AppConfig,
    *,
    default_date: Optional[str] = None,
) -> Optional[GameRecord]:
    tracked = config.tracked_team
    if not is_home_line(candidate, tracked):
        return None
    home_team = fields.extract_team_name(candidate.home_part, tracked_team=tracked)
    if home_team == TBD:
        LOGGER.debug("No usable home team name in %r", candidate.line)
        return None

    away_team = fields.extract_team_name(candidate.away_part)
    if away_team == TBD or markup.contains_ci(away_team, tracked):
        away_team = fields.extract_opponent(
            candidate.context, tracked, min_length=config.opponent_min_length
        )
    time_text = fields.extract_time(candidate.line)
    if time_text == TBD and candidate.following:
        time_text = fields.extract_time("\n".join(candidate.following))
    location = _line_location(candidate)
    division = fields.extract_division(
        candidate.context,
        home_team,
        club_prefixes=config.club_prefixes,
        strategies=[name for name in config.division_strategies if name != "cell"],
    )
    return GameRecord(
        home_team=home_team,
        away_team=away_team,
        date=fields.extract_date(candidate.heading, weekend, fallback=default_date),
        time=time_text,
        location=location.location,
        venue=location.venue,
        field=location.field,
        division=division,
        competition=division,
    )


def _records_from_window(
    window: DateWindow,
    document: str,
    weekend: TargetWeekend,
    config: AppConfig,
) -> List[GameRecord]:
    anchor = weekend.iso_for_form(window.form) if window.form else None
    records: List[GameRecord] = []
    rows = segment_rows(window.text, expected_cells=config.expected_cells)
    if rows:
        headings = fields.date_positions(window.text)
        for row in rows:
            default_date = fields.date_before(headings, row.start) or anchor
            record = record_from_row(row, weekend, config, document, default_date=default_date)
            if record is not None:
                records.append(record)
        return records

    LOGGER.debug("No table rows in window, falling back to separator lines")
    for candidate in segment_lines(
        window.text, config.tracked_team, context_lines=config.context_lines
    ):
        record = record_from_line(candidate, weekend, config, default_date=anchor)
        if record is not None:
            records.append(record)
    return records


def extract_home_games(
    document: str,
    weekend: TargetWeekend,
    config: Optional[AppConfig] = None,
) -> List[GameRecord]:
    """Run the extraction pipeline on ``document`` for ``weekend``."""

    config = config or AppConfig()
    windows = locate_date_windows(document, weekend.forms(), radius=config.window_radius)
    LOGGER.debug("Located %s windows for %s", len(windows), ", ".join(weekend.iso_dates))

    collected: List[GameRecord] = []
    for window in windows:
        collected.extend(_records_from_window(window, document, weekend, config))

    on_weekend: List[GameRecord] = []
    for record in collected:
        if weekend.contains(record.date):
            on_weekend.append(record)
        else:
            LOGGER.debug("Dropping %s game on %s outside the target weekend", record.home_team, record.date)

    games = dedupe_records(on_weekend)
    LOGGER.info(
        "Found %s home games for %s on %s (%s candidates)",
        len(games),
        config.tracked_team,
        " / ".join(weekend.iso_dates),
        len(collected),
    )
    return games


def _run_worker(
    connection: Connection,
    pipeline: Pipeline,
    document: str,
    saturday: date,
    settings: dict,
) -> None:
    try:
        games = pipeline(document, TargetWeekend.starting(saturday), AppConfig(**settings))
        connection.send(("ok", [asdict(game) for game in games]))
    except Exception as exc:
        connection.send(("error", f"{type(exc).__name__}: {exc}"))
    finally:
        connection.close()


def _stop_worker(worker: multiprocessing.process.BaseProcess) -> None:
    if worker.is_alive():
        worker.terminate()
        worker.join(WORKER_GRACE_SECONDS)
    if worker.is_alive():
        worker.kill()
    worker.join()


def extract_with_timeout(
    document: str,
    weekend: TargetWeekend,
    config: Optional[AppConfig] = None,
    *,
    timeout: Optional[float] = None,
    pipeline: Optional[Pipeline] = None,
) -> List[GameRecord]:
    """Like ``extract_home_games`` but bounded in wall-clock time.

    The pipeline runs in a separate process that is terminated once the
    budget is spent. A timeout or an error inside the pipeline yields ``[]``.
    ``pipeline`` must be a module-level callable so the worker can import it.
    """

    config = config or AppConfig()
    budget = config.parse_timeout if timeout is None else timeout
    started = time.monotonic()
    context = multiprocessing.get_context("spawn")
    receiver, sender = context.Pipe(duplex=False)
    worker = context.Process(
        target=_run_worker,
        args=(sender, pipeline or extract_home_games, document, weekend.saturday, asdict(config)),
        name="extract",
        daemon=True,
    )
    worker.start()
    sender.close()
    try:
        if not receiver.poll(budget):
            LOGGER.warning(
                "Extraction exceeded %.1fs on a %s character document, returning no games",
                budget,
                len(document),
            )
            return []
        status, payload = receiver.recv()
    except EOFError:
        LOGGER.error("Extraction worker exited without a result")
        return []
    finally:
        receiver.close()
        _stop_worker(worker)
        LOGGER.debug("Extraction finished after %.2fs", time.monotonic() - started)

    if status != "ok":
        LOGGER.error("Extraction failed, returning no games: %s", payload)
        return []
    return [GameRecord(**values) for values in payload]
