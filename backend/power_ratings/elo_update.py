from __future__ import annotations

import logging
import threading
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from .db import SessionLocal
from .elo import RatingState, compute_ratings, round_half_up
from .history import load_completed_games
from .repo import lock_sport, replace_sport_ratings, record_run
from .sports import BASE_ELO, MIN_GAMES_PUBLISHED, SportConfig, get_sport_config

logger = logging.getLogger(__name__)

# one publisher per sport inside this process; lock_sport covers other processes
_sport_locks: dict[str, threading.Lock] = defaultdict(threading.Lock)
_sport_locks_guard = threading.Lock()


def _lock_for(sport: str) -> threading.Lock:
    with _sport_locks_guard:
        return _sport_locks[sport]


def power_from_elo(elo: int) -> int:
    return round_half_up((elo - BASE_ELO) / 4)


def rank_ratings(states: dict[str, RatingState], updated_at: datetime,
                 min_games: int = MIN_GAMES_PUBLISHED) -> list[dict]:
    """
    Turn final states into published rows.

    Teams under min_games are dropped here only; they already counted in
    everyone else's ratings. Equal ratings are ordered by team name so the
    ranks are 1..n with no gaps and no shared ranks.
    """
    eligible = [s for s in states.values() if s.games_played >= min_games]
    eligible.sort(key=lambda s: (-s.rating, s.team))

    rows = []
    for i, s in enumerate(eligible):
        elo = round_half_up(s.rating)
        rows.append({
            "sport": s.sport,
            "team": s.team,
            "elo": elo,
            "power": power_from_elo(elo),
            "rank": i + 1,
            "games_played": s.games_played,
            "wins": s.wins,
            "losses": s.losses,
            "ties": s.ties,
            "peak_elo": float(s.peak_rating),
            "low_elo": float(s.low_rating),
            "last_5_change": float(sum(s.recent_changes)),
            "updated_at": updated_at,
        })
    return rows


def recompute_sport(db: Session, sport: str, config: SportConfig | None = None,
                    now: datetime | None = None) -> dict:
    """
    Full rebuild for one sport: load every completed game, fold, rank, and
    replace the sport's published rows. Nothing is written until the final
    commit, so a failure leaves the previous ratings in place.
    """
    config = config or get_sport_config(sport)
    now = now or datetime.now(timezone.utc)

    with _lock_for(config.sport):
        try:
            games = load_completed_games(db, config.sport)
            states = compute_ratings(games, config)
            rows = rank_ratings(states, now)

            lock_sport(db, config.sport)
            replace_sport_ratings(db, config.sport, rows)
            record_run(db, config.sport, games=len(games), teams=len(states), published=len(rows))
            db.commit()
        except Exception:
            db.rollback()
            raise

    logger.info(
        "%s: %d games, %d teams rated, %d published",
        config.sport, len(games), len(states), len(rows),
    )
    return {
        "sport": config.sport,
        "games": len(games),
        "teams": len(states),
        "updated": len(rows),
        "top_teams": [{"team": r["team"], "elo": r["elo"]} for r in rows[:3]],
    }


def _run_one(sport: str, session_factory) -> dict:
    db = session_factory()
    try:
        return recompute_sport(db, sport)
    finally:
        db.close()


def recompute_all(sports: list[str], session_factory=SessionLocal, workers: int = 1) -> dict:
    """
    Recompute each sport in its own session. A failing sport is logged and
    reported; the rest still run. Retrying is left to whoever scheduled us.
    """
    results: dict[str, dict] = {}
    failed: dict[str, str] = {}

    def run(sport: str):
        try:
            results[sport] = _run_one(sport, session_factory)
        except Exception as e:
            logger.exception("%s: Elo recompute failed", sport)
            failed[sport] = str(e)

    if workers > 1 and len(sports) > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            list(pool.map(run, sports))
    else:
        for sport in sports:
            run(sport)

    return {
        "ok": not failed,
        "results": {s: results[s] for s in sports if s in results},
        "failed": failed,
    }
