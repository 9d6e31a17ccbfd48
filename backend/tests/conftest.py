import os
import tempfile
from datetime import date

# must be set before power_ratings.db builds its engine
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite:///" + os.path.join(tempfile.mkdtemp(prefix="ratings-"), "app.sqlite3"),
)

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from power_ratings.db import init_db
from power_ratings.models import HistoricalGame
from power_ratings.sports import SportConfig


@pytest.fixture
def session_factory(tmp_path):
    """Fresh SQLite database per test."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'ratings.sqlite3'}",
        connect_args={"check_same_thread": False},
    )
    init_db(bind=engine)
    yield sessionmaker(bind=engine, autoflush=False, autocommit=False)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    s = session_factory()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def add_games(db):
    """add_games("nfl", [("2024-09-08", "KC", "BAL", 27, 20), ...])"""
    def _add(sport, games):
        for day, home, away, hs, as_ in games:
            db.add(HistoricalGame(
                sport=sport,
                game_date=date.fromisoformat(day),
                home_team=home,
                away_team=away,
                home_score=hs,
                away_score=as_,
            ))
        db.commit()
    return _add


@pytest.fixture
def worked_config():
    # K=20, home advantage 50, c=0.6
    return SportConfig("test", k_factor=20, home_advantage=50, margin_factor=0.6)
