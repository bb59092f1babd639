"""FastAPI application exposing the tracked team's upcoming home games."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional

from dateutil import parser as date_parser
from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .config import AppConfig, configure_logging, load_settings
from .dates import upcoming_weekend
from .extraction import extract_with_timeout
from .fetcher import FetchedDocument, FetchError, fetch_schedule

LOGGER = logging.getLogger(__name__)

SERVICE_NAME = "home-fixtures"

Fetcher = Callable[[str, str, AppConfig], FetchedDocument]


def _parse_reference(value: Optional[str], config: AppConfig) -> Optional[datetime]:
    if not value:
        return None
    try:
        parsed = date_parser.isoparse(value)
    except ValueError as exc:
        raise HTTPException(
            status_code=400, detail=f"Parameter 'reference' is not an ISO date: {value!r}"
        ) from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=config.tz)
    return parsed


def create_app(
    config: Optional[AppConfig] = None,
    *,
    fetch: Fetcher = fetch_schedule,
    clock: Optional[Callable[[], datetime]] = None,
) -> FastAPI:
    config = config or AppConfig()
    now = clock or (lambda: datetime.now(tz=config.tz))

    app = FastAPI(title="Home fixtures API", version=__version__)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health() -> Dict[str, str]:
        """Return static service metadata."""

        return {
            "status": "ok",
            "service": SERVICE_NAME,
            "version": __version__,
            "trackedTeam": config.tracked_team,
            "timezone": config.timezone,
        }

    @app.get("/api/games")
    def get_games(
        event: Optional[str] = Query(None, description="Event identifier of the schedule site."),
        club: Optional[str] = Query(None, description="Club identifier within the event."),
        reference: Optional[str] = Query(
            None, description="ISO date used instead of today to pick the weekend."
        ),
    ):
        """Return the tracked team's home games for the upcoming weekend."""

        event = (event or "").strip()
        club = (club or "").strip()
        if not event or not club:
            raise HTTPException(
                status_code=400, detail="Parameters 'event' and 'club' must not be empty."
            )

        reference_time = _parse_reference(reference, config) or now()
        weekend = upcoming_weekend(reference_time, config.tz)

        try:
            document = fetch(event, club, config)
        except FetchError as exc:
            return JSONResponse(
                status_code=502,
                content={"error": "fetch_failed", "detail": str(exc), "source": exc.url},
            )

        games = extract_with_timeout(document.html, weekend, config)
        payload: List[Dict[str, str]] = [game.to_dict() for game in games]
        return payload

    return app


def build_default_app() -> FastAPI:
    """Application factory for ASGI servers, configured from the environment."""

    config = load_settings()
    configure_logging(config.log_level)
    return create_app(config)
