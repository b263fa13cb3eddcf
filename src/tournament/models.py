"""
Data model for players, locations, teams, matches and tournaments.

Teams are not stored: a team is identified by its TeamKey, the sorted pair of
its players' ids. Matches reference players by id only; names are resolved
through a separate player lookup.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from src.utils.constants import (
    LOCATION_INDOOR,
    MATCH_LIVE,
    MATCH_STATUSES,
    TOURNAMENT_SCHEDULED,
    TOURNAMENT_STATUSES,
    TEAM_SIZE,
)


@dataclass(frozen=True, order=True)
class TeamKey:
    """Canonical identity of a two-player team."""
    players: Tuple[str, ...]

    @classmethod
    def of(cls, player_ids: Iterable[str]) -> "TeamKey":
        """Build a key from player ids in any order."""
        return cls(tuple(sorted(str(pid) for pid in player_ids)))

    def __str__(self) -> str:
        # Display only; ids may contain "-", so serialize teams as lists.
        return "-".join(self.players)

    def __contains__(self, player_id: str) -> bool:
        return player_id in self.players


def pair_key(a: TeamKey, b: TeamKey) -> Tuple[TeamKey, TeamKey]:
    """Unordered pair of teams as a hashable value."""
    return (a, b) if a <= b else (b, a)


def parse_date(value: Any) -> Optional[datetime]:
    """
    Parse an ISO date or datetime string.

    Timezone-aware values are converted to naive UTC so that all parsed
    dates compare with each other. Returns None when the value is empty or
    unparseable.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _team_ids(raw: Sequence[Any]) -> Tuple[str, ...]:
    # Backups embed whole player objects in teams; accept both shapes.
    ids = []
    for entry in raw:
        if isinstance(entry, dict):
            ids.append(str(entry["id"]))
        else:
            ids.append(str(entry))
    return tuple(ids)


@dataclass
class Player:
    """A league player. level and rating_points are derived values."""
    id: str
    name: str
    last_name: Optional[str] = None
    nickname: Optional[str] = None
    level: Optional[str] = None
    rating_points: Optional[int] = None

    @property
    def display_name(self) -> str:
        return self.nickname or self.name

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "lastName": self.last_name,
            "nickname": self.nickname,
            "level": self.level,
            "rankingPoints": self.rating_points,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Player":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            last_name=data.get("lastName"),
            nickname=data.get("nickname"),
            level=data.get("level"),
            rating_points=data.get("rankingPoints"),
        )


@dataclass
class Location:
    """A club or venue where tournaments are played."""
    id: str
    name: str
    type: str = LOCATION_INDOOR
    address: Optional[str] = None
    image_url: Optional[str] = None
    google_maps_url: Optional[str] = None
    website_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "address": self.address,
            "imageUrl": self.image_url,
            "googleMapsUrl": self.google_maps_url,
            "websiteUrl": self.website_url,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Location":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            type=data.get("type", LOCATION_INDOOR),
            address=data.get("address"),
            image_url=data.get("imageUrl"),
            google_maps_url=data.get("googleMapsUrl"),
            website_url=data.get("websiteUrl"),
        )


@dataclass
class Match:
    """A single match between two teams on one court."""
    id: str
    team1: Tuple[str, ...]
    team2: Tuple[str, ...]
    court: int
    round: int
    score1: int = 0
    score2: int = 0
    status: str = MATCH_LIVE
    date: Optional[str] = None

    @property
    def team1_key(self) -> TeamKey:
        return TeamKey.of(self.team1)

    @property
    def team2_key(self) -> TeamKey:
        return TeamKey.of(self.team2)

    @property
    def player_ids(self) -> Tuple[str, ...]:
        return tuple(self.team1) + tuple(self.team2)

    @property
    def is_tie(self) -> bool:
        return self.score1 == self.score2

    @property
    def winning_side(self) -> Optional[int]:
        """1 or 2 for the side with the strictly greater score, None on a tie."""
        if self.score1 > self.score2:
            return 1
        if self.score2 > self.score1:
            return 2
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "team1": list(self.team1),
            "team2": list(self.team2),
            "score1": self.score1,
            "score2": self.score2,
            "court": self.court,
            "round": self.round,
            "status": self.status,
            "date": self.date,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Match":
        team1 = _team_ids(data["team1"])
        team2 = _team_ids(data["team2"])
        if len(team1) != TEAM_SIZE or len(team2) != TEAM_SIZE:
            raise ValueError(f"Match {data.get('id')!r} must have {TEAM_SIZE} players per team")
        status = data.get("status", MATCH_LIVE)
        if status not in MATCH_STATUSES:
            raise ValueError(f"Match {data.get('id')!r} has unknown status {status!r}")
        return cls(
            id=str(data["id"]),
            team1=team1,
            team2=team2,
            score1=int(data.get("score1") or 0),
            score2=int(data.get("score2") or 0),
            court=int(data.get("court", 1)),
            round=int(data.get("round", 1)),
            status=status,
            date=data.get("date"),
        )


@dataclass
class Tournament:
    """
    A tournament session.

    matches is None until fixtures have been generated; a tournament without
    matches contributes nothing to standings or ratings.
    """
    id: str
    date: str
    status: str = TOURNAMENT_SCHEDULED
    confirmed_player_ids: List[str] = field(default_factory=list)
    matches: Optional[List[Match]] = None
    time: Optional[str] = None
    duration: Optional[int] = None
    location_id: Optional[str] = None

    @property
    def parsed_date(self) -> Optional[datetime]:
        return parse_date(self.date)

    @property
    def player_ids(self) -> List[str]:
        """Ids of players appearing in at least one match, first-seen order."""
        seen: Dict[str, None] = {}
        for match in self.matches or []:
            for pid in match.player_ids:
                seen.setdefault(pid, None)
        return list(seen)

    def round_matches(self, round_number: int) -> List[Match]:
        """Matches of one round, ordered by court."""
        return sorted(
            (m for m in self.matches or [] if m.round == round_number),
            key=lambda m: m.court
        )

    @property
    def current_round(self) -> int:
        """Highest round with fixtures, 0 before the draw."""
        return max((m.round for m in self.matches or []), default=0)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "date": self.date,
            "time": self.time,
            "duration": self.duration,
            "locationId": self.location_id,
            "status": self.status,
            "confirmedPlayerIds": list(self.confirmed_player_ids),
        }
        if self.matches is not None:
            data["matches"] = [m.to_dict() for m in self.matches]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Tournament":
        raw_matches = data.get("matches")
        status = data.get("status", TOURNAMENT_SCHEDULED)
        if status not in TOURNAMENT_STATUSES:
            raise ValueError(f"Tournament {data.get('id')!r} has unknown status {status!r}")
        return cls(
            id=str(data["id"]),
            date=data.get("date", ""),
            status=status,
            confirmed_player_ids=[str(pid) for pid in data.get("confirmedPlayerIds", [])],
            matches=None if raw_matches is None else [Match.from_dict(m) for m in raw_matches],
            time=data.get("time"),
            duration=data.get("duration"),
            location_id=data.get("locationId"),
        )


def player_lookup(players: Iterable[Player]) -> Dict[str, Player]:
    """Index players by id."""
    return {p.id: p for p in players}


def chronological(tournaments: Iterable[Tournament]) -> List[Tournament]:
    """
    Sort tournaments oldest first.

    The sort is stable; tournaments with unparseable dates keep their
    relative order and come first.
    """
    def key(t: Tournament):
        parsed = t.parsed_date
        return (parsed is not None, parsed or datetime.min)

    return sorted(tournaments, key=key)
