import os
from datetime import datetime, timezone
from fastapi import FastAPI, Depends, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from .db import init_db, get_db, SessionLocal
from .elo import pick_winner
from .elo_update import recompute_all
from .repo import list_ratings, get_team_rating, recent_runs
from .sports import (
    BASE_ELO,
    SPORT_CONFIGS,
    UnknownSportError,
    enabled_sports,
    get_sport_config,
)



app = FastAPI(title="Team Power Ratings API")

# CORS (Render/Netlify friendly)
# Set CORS_ORIGINS to comma-separated list, e.g.:
# https://your-site.netlify.app,http://localhost:5173
origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# swapped out in tests
session_factory = SessionLocal

@app.on_event("startup")
def startup():
    init_db()

def require_sport(sport: str | None) -> str:
    try:
        return get_sport_config(sport).sport
    except UnknownSportError:
        raise HTTPException(
            status_code=400,
            detail={"error": "valid sport parameter required", "valid_sports": list(SPORT_CONFIGS)},
        )

def rating_out(r) -> dict:
    return {
        "sport": r.sport,
        "team": r.team,
        "elo": r.elo,
        "power": r.power,
        "rank": r.rank,
        "games_played": r.games_played,
        "wins": r.wins,
        "losses": r.losses,
        "ties": r.ties,
        "peak_elo": r.peak_elo,
        "low_elo": r.low_elo,
        "last_5_change": r.last_5_change,
        "updated_at": r.updated_at.isoformat() if r.updated_at else None,
    }

@app.get("/api/team-ratings")
def team_ratings(sport: str | None = None, team: str | None = None, db: Session = Depends(get_db)):
    sport = require_sport(sport)
    rows = list_ratings(db, sport, team=team.strip() if team else None)
    return {"sport": sport, "count": len(rows), "ratings": [rating_out(r) for r in rows]}

@app.get("/api/matchup")
def matchup(sport: str, home: str, away: str, neutral: bool = False, db: Session = Depends(get_db)):
    sport = require_sport(sport)
    config = get_sport_config(sport)

    home_row = get_team_rating(db, sport, home)
    away_row = get_team_rating(db, sport, away)
    # unpublished teams sit at the baseline
    home_elo = home_row.elo if home_row else BASE_ELO
    away_elo = away_row.elo if away_row else BASE_ELO

    home_adv = 0.0 if neutral else config.home_advantage
    side, prob = pick_winner(home_elo, away_elo, home_adv=home_adv)

    return {
        "sport": sport,
        "home": home,
        "away": away,
        "home_elo": home_elo,
        "away_elo": away_elo,
        "neutral": neutral,
        "pick": home if side == "HOME" else away,
        "win_prob": round(float(prob), 4),
    }

@app.post("/api/admin/update-elo")
def admin_update_elo(sport: str | None = None):
    sports = [require_sport(sport)] if sport else enabled_sports()
    workers = int(os.getenv("ELO_WORKERS", "1"))

    result = recompute_all(sports, session_factory=session_factory, workers=workers)
    body = {
        "success": result["ok"],
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "results": result["results"],
        "failed": result["failed"],
    }
    if not result["ok"]:
        return JSONResponse(status_code=500, content=body)
    return body

@app.get("/api/admin/elo-runs")
def admin_elo_runs(sport: str | None = None, limit: int = 20, db: Session = Depends(get_db)):
    if sport:
        sport = require_sport(sport)
    runs = recent_runs(db, sport, limit=max(1, min(limit, 200)))
    return [
        {
            "sport": r.sport,
            "processed_at": r.processed_at,
            "games_processed": r.games_processed,
            "teams_rated": r.teams_rated,
            "teams_published": r.teams_published,
        }
        for r in runs
    ]
