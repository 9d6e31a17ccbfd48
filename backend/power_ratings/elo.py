from __future__ import annotations

import math
from dataclasses import dataclass, field

from .history import GameRecord
from .sports import BASE_ELO, SportConfig

RECENT_CHANGES_KEPT = 5


def round_half_up(x: float) -> int:
    # halves go toward +inf, so round(-12.5) == -12 and round(0.5) == 1
    return math.floor(x + 0.5)


def win_prob(elo_a: float, elo_b: float) -> float:
    # Probability team A beats team B
    return 1 / (1 + 10 ** ((elo_b - elo_a) / 400))


def margin_multiplier(score_diff: int, margin_factor: float) -> float:
    return math.log(abs(score_diff) + 1) * margin_factor


def pick_winner(home_elo: float, away_elo: float, home_adv: float = 50.0):
    # simple home court bump
    p_home = win_prob(home_elo + home_adv, away_elo)
    if p_home >= 0.5:
        return "HOME", p_home
    return "AWAY", 1 - p_home


@dataclass
class RatingState:
    team: str
    sport: str
    rating: float = BASE_ELO
    games_played: int = 0
    wins: int = 0
    losses: int = 0
    ties: int = 0
    peak_rating: float = BASE_ELO
    low_rating: float = BASE_ELO
    recent_changes: list[int] = field(default_factory=list)

    def apply(self, delta: int, scored: int, allowed: int) -> None:
        self.rating += delta
        self.games_played += 1
        if scored > allowed:
            self.wins += 1
        elif scored < allowed:
            self.losses += 1
        else:
            self.ties += 1
        self.peak_rating = max(self.peak_rating, self.rating)
        self.low_rating = min(self.low_rating, self.rating)
        self.recent_changes.append(delta)
        if len(self.recent_changes) > RECENT_CHANGES_KEPT:
            self.recent_changes.pop(0)


def get_or_create_state(states: dict[str, RatingState], team: str, sport: str) -> RatingState:
    """Every team enters its first game at BASE_ELO with zero games played."""
    s = states.get(team)
    if s is None:
        s = RatingState(team=team, sport=sport)
        states[team] = s
    return s


def game_deltas(home_rating: float, away_rating: float, home_score: int, away_score: int,
                config: SportConfig) -> tuple[int, int]:
    """
    Returns (home delta, away delta) for one game.

    Each side is rounded on its own after multiplying, so the two deltas
    can differ by one point from being exact negatives.
    """
    expected_home = win_prob(home_rating + config.home_advantage, away_rating)
    expected_away = 1 - expected_home

    actual_home = 1 if home_score > away_score else 0
    actual_away = 1 - actual_home

    margin = margin_multiplier(home_score - away_score, config.margin_factor)
    k = config.k_factor

    d_home = round_half_up(k * margin * (actual_home - expected_home))
    d_away = round_half_up(k * margin * (actual_away - expected_away))
    return d_home, d_away


def apply_game(states: dict[str, RatingState], game: GameRecord, config: SportConfig) -> None:
    home = get_or_create_state(states, game.home_team, config.sport)
    away = get_or_create_state(states, game.away_team, config.sport)

    # both deltas come from the pre-game ratings
    d_home, d_away = game_deltas(home.rating, away.rating, game.home_score, game.away_score, config)

    home.apply(d_home, game.home_score, game.away_score)
    away.apply(d_away, game.away_score, game.home_score)


def compute_ratings(games: list[GameRecord], config: SportConfig) -> dict[str, RatingState]:
    """
    Fold an already date-ordered game list into final per-team state.
    Games are applied exactly once in the order given; nothing is re-sorted.
    """
    states: dict[str, RatingState] = {}
    for g in games:
        apply_game(states, g, config)
    return states
