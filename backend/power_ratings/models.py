from sqlalchemy import Column, String, Integer, Float, Date, DateTime, Index
from .db import Base

class HistoricalGame(Base):
    __tablename__ = "historical_games"
    id = Column(Integer, primary_key=True, autoincrement=True)
    sport = Column(String, nullable=False, index=True)
    game_date = Column(Date, nullable=False)
    home_team = Column(String, nullable=True)
    away_team = Column(String, nullable=True)
    home_score = Column(Integer, nullable=True)  # null until final
    away_score = Column(Integer, nullable=True)

    __table_args__ = (Index("ix_historical_games_sport_date", "sport", "game_date"),)

class TeamRating(Base):
    __tablename__ = "team_ratings"
    sport = Column(String, primary_key=True)
    team = Column(String, primary_key=True)
    elo = Column(Integer, nullable=False)
    power = Column(Integer, nullable=False)
    rank = Column(Integer, nullable=False)
    games_played = Column(Integer, nullable=False)
    wins = Column(Integer, nullable=False, default=0)
    losses = Column(Integer, nullable=False, default=0)
    ties = Column(Integer, nullable=False, default=0)
    peak_elo = Column(Float, nullable=False)
    low_elo = Column(Float, nullable=False)
    last_5_change = Column(Float, nullable=False, default=0.0)
    updated_at = Column(DateTime(timezone=True), nullable=False)

class EloRun(Base):
    __tablename__ = "elo_runs"
    id = Column(Integer, primary_key=True, autoincrement=True)
    sport = Column(String, nullable=False, index=True)
    processed_at = Column(Integer, nullable=False)  # unix ts
    games_processed = Column(Integer, nullable=False)
    teams_rated = Column(Integer, nullable=False)
    teams_published = Column(Integer, nullable=False)
