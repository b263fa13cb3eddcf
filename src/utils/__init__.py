"""
Utilities module for the padel league.
"""
from src.utils.constants import (
    TEAM_SIZE, TEAMS_PER_TOURNAMENT, PLAYERS_PER_TOURNAMENT, COURTS, ROUNDS,
    MATCH_LIVE, MATCH_FINISHED, TOURNAMENT_FINISHED,
    TIE_TEAM1, TIE_FORBID,
    INITIAL_RATING, RATING_FLOOR, LEVEL_1, LEVEL_2, LEVEL_3, LEVEL_PRO
)

__all__ = [
    'TEAM_SIZE', 'TEAMS_PER_TOURNAMENT', 'PLAYERS_PER_TOURNAMENT', 'COURTS', 'ROUNDS',
    'MATCH_LIVE', 'MATCH_FINISHED', 'TOURNAMENT_FINISHED',
    'TIE_TEAM1', 'TIE_FORBID',
    'INITIAL_RATING', 'RATING_FLOOR', 'LEVEL_1', 'LEVEL_2', 'LEVEL_3', 'LEVEL_PRO',
]
