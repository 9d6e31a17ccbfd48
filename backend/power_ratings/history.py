from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from sqlalchemy import select
from sqlalchemy.orm import Session

from .models import HistoricalGame

logger = logging.getLogger(__name__)

PLACEHOLDER_TEAMS = {"tbd", "tba", "to be determined"}


@dataclass(frozen=True)
class GameRecord:
    sport: str
    home_team: str
    away_team: str
    home_score: int
    away_score: int
    date: date


def to_int(x):
    try:
        if x is None:
            return None
        s = str(x).strip()
        if s == "" or s.lower() in ("-", "—", "n/a", "none"):
            return None
        return int(s)
    except (ValueError, TypeError):
        return None


def clean_team(name) -> str | None:
    s = (name or "").strip()
    if not s or s.lower() in PLACEHOLDER_TEAMS:
        return None
    return s


def normalize_game(sport: str, game_date: date, home_team, away_team, home_score, away_score) -> GameRecord | None:
    """
    Returns a GameRecord for a genuinely played, scored game, or None.

    0-0 is how unplayed games sit in the history table, so it is treated
    as "not played" rather than a real tie.
    """
    home = clean_team(home_team)
    away = clean_team(away_team)
    if home is None or away is None:
        return None

    hs = to_int(home_score)
    as_ = to_int(away_score)
    if hs is None or as_ is None or hs < 0 or as_ < 0:
        return None
    if hs == 0 and as_ == 0:
        return None

    return GameRecord(
        sport=sport,
        home_team=home,
        away_team=away,
        home_score=hs,
        away_score=as_,
        date=game_date,
    )


def load_completed_games(db: Session, sport: str) -> list[GameRecord]:
    """
    Every completed game for one sport, oldest first.
    Same-day games keep their insertion order (primary key).
    """
    stmt = (
        select(HistoricalGame)
        .where(HistoricalGame.sport == sport)
        .where(HistoricalGame.home_score.is_not(None))
        .where(HistoricalGame.away_score.is_not(None))
        .order_by(HistoricalGame.game_date.asc(), HistoricalGame.id.asc())
    )

    games = []
    skipped = 0
    for row in db.scalars(stmt):
        g = normalize_game(sport, row.game_date, row.home_team, row.away_team, row.home_score, row.away_score)
        if g is None:
            skipped += 1
            continue
        games.append(g)

    if skipped:
        logger.info("%s: skipped %d unplayed or placeholder games", sport, skipped)
    return games
