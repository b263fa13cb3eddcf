"""
Exceptions raised by the storage and service layers.

The scheduling, standings and rating functions never raise for malformed
history; they degrade to empty results instead.
"""


class LeagueError(Exception):
    """Base class for league errors."""


class PlayerNotFoundError(LeagueError):
    def __init__(self, player_id: str):
        super().__init__(f"Player not found: {player_id}")
        self.player_id = player_id


class TournamentNotFoundError(LeagueError):
    def __init__(self, tournament_id: str):
        super().__init__(f"Tournament not found: {tournament_id}")
        self.tournament_id = tournament_id


class LocationNotFoundError(LeagueError):
    def __init__(self, location_id: str):
        super().__init__(f"Location not found: {location_id}")
        self.location_id = location_id


class InvalidTournamentStateError(LeagueError):
    """The requested action does not apply to the tournament's current state."""
