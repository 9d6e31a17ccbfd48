import time
import zlib
from sqlalchemy import delete, select, text
from sqlalchemy.orm import Session
from .models import TeamRating, EloRun

# ---- Locks ----
def lock_sport(db: Session, sport: str):
    """
    Serialize publication for one sport across processes. Held until the
    transaction ends. Only postgres has advisory locks; elsewhere this is a no-op.
    """
    if db.get_bind().dialect.name != "postgresql":
        return
    key = zlib.crc32(f"team_ratings:{sport}".encode("utf-8"))
    db.execute(text("SELECT pg_advisory_xact_lock(:key)"), {"key": key})

# ---- Team ratings ----
def replace_sport_ratings(db: Session, sport: str, rows: list[dict]) -> int:
    # whole partition goes in one transaction; caller commits
    db.execute(delete(TeamRating).where(TeamRating.sport == sport))
    db.add_all(TeamRating(**r) for r in rows)
    db.flush()
    return len(rows)

def list_ratings(db: Session, sport: str, team: str | None = None) -> list[TeamRating]:
    stmt = select(TeamRating).where(TeamRating.sport == sport)
    if team:
        stmt = stmt.where(TeamRating.team == team)
    return list(db.scalars(stmt.order_by(TeamRating.rank.asc())))

def get_team_rating(db: Session, sport: str, team: str) -> TeamRating | None:
    return db.get(TeamRating, (sport, team))

# ---- Elo Runs ----
def record_run(db: Session, sport: str, games: int, teams: int, published: int) -> EloRun:
    r = EloRun(
        sport=sport,
        processed_at=int(time.time()),
        games_processed=games,
        teams_rated=teams,
        teams_published=published,
    )
    db.add(r)
    return r

def recent_runs(db: Session, sport: str | None = None, limit: int = 20) -> list[EloRun]:
    stmt = select(EloRun)
    if sport:
        stmt = stmt.where(EloRun.sport == sport)
    return list(db.scalars(stmt.order_by(EloRun.id.desc()).limit(limit)))
