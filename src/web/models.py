"""
Pydantic models for the league web API.

Defines request/response schemas for the REST endpoints.
"""
from pydantic import BaseModel, Field
from typing import List, Literal, Optional

from src.tournament.models import Location, Match, Player, Tournament
from src.tournament.rating import RatingRecord
from src.tournament.standings import StandingEntry
from src.tournament.stats import DuoStats, PlayerProfile, PlayerStats
from src.utils.constants import LOCATION_INDOOR, LOCATION_OUTDOOR


class PlayerCreate(BaseModel):
    """Request to add a player."""
    name: str = Field(min_length=1)
    last_name: Optional[str] = None
    nickname: Optional[str] = None


class PlayerOut(BaseModel):
    """A player with derived rating and level."""
    id: str
    name: str
    last_name: Optional[str] = None
    nickname: Optional[str] = None
    level: Optional[str] = None
    rating_points: Optional[int] = None

    @classmethod
    def from_player(cls, player: Player) -> "PlayerOut":
        return cls(
            id=player.id,
            name=player.name,
            last_name=player.last_name,
            nickname=player.nickname,
            level=player.level,
            rating_points=player.rating_points,
        )


class PlayerUpdate(BaseModel):
    """Request to rename a player; omitted fields are kept."""
    name: Optional[str] = Field(default=None, min_length=1)
    last_name: Optional[str] = None
    nickname: Optional[str] = None


class LocationCreate(BaseModel):
    """Request to register a venue."""
    name: str = Field(min_length=1)
    type: Literal[LOCATION_INDOOR, LOCATION_OUTDOOR] = LOCATION_INDOOR
    address: Optional[str] = None
    image_url: Optional[str] = None
    google_maps_url: Optional[str] = None
    website_url: Optional[str] = None


class LocationOut(BaseModel):
    """A venue."""
    id: str
    name: str
    type: str
    address: Optional[str] = None
    image_url: Optional[str] = None
    google_maps_url: Optional[str] = None
    website_url: Optional[str] = None

    @classmethod
    def from_location(cls, location: Location) -> "LocationOut":
        return cls(
            id=location.id,
            name=location.name,
            type=location.type,
            address=location.address,
            image_url=location.image_url,
            google_maps_url=location.google_maps_url,
            website_url=location.website_url,
        )



class TournamentCreate(BaseModel):
    """Request to schedule a tournament."""
    date: str = Field(description="ISO date or datetime")
    confirmed_player_ids: List[str] = Field(default_factory=list)
    time: Optional[str] = None
    duration: Optional[int] = Field(default=None, ge=0, description="Minutes")
    location_id: Optional[str] = None


class ConfirmedPlayersUpdate(BaseModel):
    """Replace the attendance list of a scheduled tournament."""
    player_ids: List[str]


class StartRequest(BaseModel):
    """Request to draw teams and start round 1."""
    teams: Optional[List[List[str]]] = Field(
        default=None,
        description="Four teams of two player ids (A, B, C, D); random draw when omitted"
    )
    seed: Optional[int] = Field(default=None, description="Seed for the random draw")


class ScoreUpdate(BaseModel):
    """Add or remove one point for a side of a match."""
    side: int = Field(ge=1, le=2)
    increment: bool = True


class MatchOut(BaseModel):
    """A match."""
    id: str
    team1: List[str]
    team2: List[str]
    score1: int
    score2: int
    court: int
    round: int
    status: str
    date: Optional[str] = None

    @classmethod
    def from_match(cls, match: Match) -> "MatchOut":
        return cls(**match.to_dict())


class TournamentOut(BaseModel):
    """A tournament with its matches."""
    id: str
    date: str
    status: str
    confirmed_player_ids: List[str]
    matches: Optional[List[MatchOut]] = None
    current_round: int = 0
    time: Optional[str] = None
    duration: Optional[int] = None
    location_id: Optional[str] = None

    @classmethod
    def from_tournament(cls, tournament: Tournament) -> "TournamentOut":
        matches = None
        if tournament.matches is not None:
            matches = [MatchOut.from_match(m) for m in tournament.matches]
        return cls(
            id=tournament.id,
            date=tournament.date,
            status=tournament.status,
            confirmed_player_ids=tournament.confirmed_player_ids,
            matches=matches,
            current_round=tournament.current_round,
            time=tournament.time,
            duration=tournament.duration,
            location_id=tournament.location_id,
        )


class RoundResponse(BaseModel):
    """Result of closing a round."""
    current_round: int
    advanced: bool
    completed: bool
    new_matches: List[MatchOut]


class StandingOut(BaseModel):
    """One row of the standings table."""
    rank: int
    team: List[str]
    label: str
    players: List[str]
    wins: int
    losses: int
    points_diff: int
    points_for: int
    played: int

    @classmethod
    def from_entry(cls, rank: int, entry: StandingEntry) -> "StandingOut":
        return cls(rank=rank, **entry.to_dict())


class RatingSnapshotOut(BaseModel):
    """A point on a player's rating chart."""
    label: str
    points: int
    level: str


class RatingOut(BaseModel):
    """Current rating and history for one player."""
    player_id: str
    current: int
    level: str
    history: List[RatingSnapshotOut]

    @classmethod
    def from_record(cls, player_id: str, record: RatingRecord) -> "RatingOut":
        return cls(player_id=player_id, **record.to_dict())


class PlayerStatsOut(BaseModel):
    """Career statistics for one player."""
    player_id: str
    games_played: int
    wins: int
    losses: int
    balance: int
    points_scored: int
    points_conceded: int
    max_win_streak: int
    tournaments_played: int
    tournaments_won: int

    @classmethod
    def from_stats(cls, stats: PlayerStats) -> "PlayerStatsOut":
        return cls(**stats.to_dict())


class DuoStatsOut(BaseModel):
    """Win rate of a pair that played together."""
    team: List[str]
    games: int
    wins: int
    win_rate: int

    @classmethod
    def from_duo(cls, duo: DuoStats) -> "DuoStatsOut":
        return cls(**duo.to_dict())


class PartnerOut(BaseModel):
    player_id: str
    name: str
    games: int
    wins: int


class RivalOut(BaseModel):
    player_id: str
    name: str
    games: int
    wins_against: int
    losses_against: int
    balance: int


class PlayerProfileOut(BaseModel):
    """Career profile: totals, titles, partners and rivals."""
    player_id: str
    games_played: int
    wins: int
    win_rate: int
    points_scored: int
    points_conceded: int
    max_win_streak: int
    tournaments: List[str]
    titles: List[str]
    partners: List[PartnerOut]
    victims: List[RivalOut]
    black_beasts: List[RivalOut]

    @classmethod
    def from_profile(cls, profile: PlayerProfile) -> "PlayerProfileOut":
        return cls(**profile.to_dict())
