"""
Tournament module for the 4-team padel mini round-robin.

Provides:
- Fixture scheduling: seed_round1, generate_round2, generate_round3, next_round
- Standings: compute_standings, champion
- Ratings: RatingEngine, compute_ratings, tier_of
- Statistics: compute_player_stats, compute_duo_stats, compute_player_profile
- LeagueStorage: Persists players, locations and tournaments
"""

from src.tournament.models import Player, Location, Match, Tournament, TeamKey
from src.tournament.scheduler import (
    seed_round1, generate_round2, generate_round3, next_round,
    draw_teams, adjust_score, SchedulerConfig, RoundOutcome
)
from src.tournament.standings import compute_standings, champion, StandingEntry
from src.tournament.rating import (
    RatingEngine, RatingConfig, RatingRecord, compute_ratings, tier_of, with_dynamic_ratings
)
from src.tournament.stats import compute_player_stats, compute_duo_stats, compute_player_profile
from src.tournament.storage import LeagueStorage
from src.tournament.display import format_standings, format_leaderboard

__all__ = [
    'Player',
    'Location',
    'Match',
    'Tournament',
    'TeamKey',
    'seed_round1',
    'generate_round2',
    'generate_round3',
    'next_round',
    'draw_teams',
    'adjust_score',
    'SchedulerConfig',
    'RoundOutcome',
    'compute_standings',
    'champion',
    'StandingEntry',
    'RatingEngine',
    'RatingConfig',
    'RatingRecord',
    'compute_ratings',
    'tier_of',
    'with_dynamic_ratings',
    'compute_player_stats',
    'compute_duo_stats',
    'compute_player_profile',
    'LeagueStorage',
    'format_standings',
    'format_leaderboard',
]
