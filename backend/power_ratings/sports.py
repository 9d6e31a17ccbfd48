import os
from dataclasses import dataclass
from types import MappingProxyType

BASE_ELO = 1500.0
MIN_GAMES_PUBLISHED = 3


class UnknownSportError(ValueError):
    pass


@dataclass(frozen=True)
class SportConfig:
    """Elo tuning for one sport.

    k_factor: how far ratings move per game.
    home_advantage: Elo points added to the home side when computing the
        expected score only. Never stored in a rating.
    margin_factor: scales ln(score diff + 1). Low-scoring sports get more.
    """
    sport: str
    k_factor: float
    home_advantage: float
    margin_factor: float = 0.6


SPORT_CONFIGS = MappingProxyType({
    "nfl": SportConfig("nfl", k_factor=20, home_advantage=48),
    "nba": SportConfig("nba", k_factor=15, home_advantage=60),
    "mlb": SportConfig("mlb", k_factor=8, home_advantage=24, margin_factor=0.8),
    "nhl": SportConfig("nhl", k_factor=12, home_advantage=33, margin_factor=0.8),
    "ncaaf": SportConfig("ncaaf", k_factor=20, home_advantage=55),
    "ncaab": SportConfig("ncaab", k_factor=15, home_advantage=55),
})


def get_sport_config(sport: str) -> SportConfig:
    key = (sport or "").strip().lower()
    try:
        return SPORT_CONFIGS[key]
    except KeyError:
        raise UnknownSportError(f"unknown sport: {sport!r}") from None


def enabled_sports() -> list[str]:
    """
    Sports the scheduled job runs. ELO_SPORTS=nfl,nba limits the batch;
    unset means every configured sport.
    """
    raw = os.getenv("ELO_SPORTS", "")
    sports = [s.strip().lower() for s in raw.split(",") if s.strip()]
    if not sports:
        return list(SPORT_CONFIGS)
    for s in sports:
        get_sport_config(s)
    return sports
