"""
League manager for the web interface.

Ties storage to the scheduling, standings and rating functions: the live
tournament flow (draw, scores, next round) and the derived views.
"""
import logging
import random
import uuid
from dataclasses import replace
from typing import Dict, List, Optional, Sequence

from src.tournament.errors import (
    InvalidTournamentStateError,
    PlayerNotFoundError,
)
from src.tournament.models import Location, Match, Player, TeamKey, Tournament, player_lookup
from src.tournament.rating import (
    RatingConfig,
    RatingRecord,
    compute_ratings,
    with_dynamic_ratings,
)
from src.tournament.scheduler import (
    RoundOutcome,
    SchedulerConfig,
    adjust_score,
    draw_teams,
    next_round,
    seed_round1,
)
from src.tournament.standings import StandingEntry, compute_standings
from src.tournament.stats import (
    DuoStats,
    PlayerProfile,
    PlayerStats,
    compute_duo_stats,
    compute_player_profile,
    compute_player_stats,
)
from src.tournament.storage import LeagueStorage
from src.utils.constants import (
    LOCATION_INDOOR,
    LOCATION_TYPES,
    MATCH_FINISHED,
    PLAYERS_PER_TOURNAMENT,
    TEAMS_PER_TOURNAMENT,
    TOURNAMENT_CANCELLED,
    TOURNAMENT_FINISHED,
    TOURNAMENT_LIVE,
    TIE_POLICIES,
    TOURNAMENT_SCHEDULED,
    TOURNAMENT_STATUSES,
)

logger = logging.getLogger(__name__)


def generate_id() -> str:
    return str(uuid.uuid4())[:8]


class LeagueManager:
    """
    Manages players and tournaments.

    Every derived view (ratings, standings, stats) is recomputed from storage
    on each call.
    """

    def __init__(
        self,
        storage: LeagueStorage,
        rating_config: Optional[RatingConfig] = None,
        tie_policy: Optional[str] = None
    ):
        """
        Initialize league manager.

        Args:
            storage: Storage backend
            rating_config: Optional rating rules
            tie_policy: Optional tie policy for closing rounds
        """
        if tie_policy is not None and tie_policy not in TIE_POLICIES:
            raise ValueError(f"Unknown tie policy {tie_policy!r}, expected one of {TIE_POLICIES}")
        self.storage = storage
        self.rating_config = rating_config or RatingConfig()
        self.tie_policy = tie_policy

    def _scheduler_config(self, tournament: Tournament) -> SchedulerConfig:
        if self.tie_policy:
            return SchedulerConfig(tie_policy=self.tie_policy, match_id_prefix=tournament.id)
        return SchedulerConfig(match_id_prefix=tournament.id)

    # -------------------------------------------------------------------------
    # Players
    # -------------------------------------------------------------------------

    def add_player(self, name: str, last_name: Optional[str] = None,
                   nickname: Optional[str] = None) -> Player:
        """Create a player."""
        player = Player(id=generate_id(), name=name, last_name=last_name, nickname=nickname)
        return self.storage.save_player(player)

    def list_players(self) -> List[Player]:
        """Roster with rating points and level filled in."""
        players = self.storage.list_players()
        return with_dynamic_ratings(players, self.ratings(players), self.rating_config)

    def delete_player(self, player_id: str):
        self.storage.delete_player(player_id)

    def update_player(
        self,
        player_id: str,
        name: Optional[str] = None,
        last_name: Optional[str] = None,
        nickname: Optional[str] = None
    ) -> Player:
        """Rename a player; fields left as None are kept."""
        player = self.storage.get_player(player_id)
        changes = {
            key: value for key, value in
            (("name", name), ("last_name", last_name), ("nickname", nickname))
            if value is not None
        }
        return self.storage.save_player(replace(player, **changes))

    def player_profile(self, player_id: str) -> PlayerProfile:
        """Career profile with partners and head-to-head rivals."""
        player = self.storage.get_player(player_id)
        return compute_player_profile(
            player.id,
            self.storage.list_players(),
            self.storage.list_tournaments(status=TOURNAMENT_FINISHED)
        )

    # -------------------------------------------------------------------------
    # Locations
    # -------------------------------------------------------------------------

    def add_location(
        self,
        name: str,
        type: str = LOCATION_INDOOR,
        address: Optional[str] = None,
        image_url: Optional[str] = None,
        google_maps_url: Optional[str] = None,
        website_url: Optional[str] = None
    ) -> Location:
        """Register a venue."""
        if type not in LOCATION_TYPES:
            raise ValueError(f"Unknown location type {type!r}, expected one of {LOCATION_TYPES}")
        location = Location(
            id=generate_id(),
            name=name,
            type=type,
            address=address,
            image_url=image_url,
            google_maps_url=google_maps_url,
            website_url=website_url,
        )
        return self.storage.save_location(location)

    def list_locations(self) -> List[Location]:
        return self.storage.list_locations()

    def delete_location(self, location_id: str):
        self.storage.delete_location(location_id)

    # -------------------------------------------------------------------------
    # Tournament flow
    # -------------------------------------------------------------------------

    def _check_players(self, player_ids: Sequence[str]) -> List[str]:
        known = {p.id for p in self.storage.list_players()}
        for pid in player_ids:
            if pid not in known:
                raise PlayerNotFoundError(pid)
        return list(dict.fromkeys(player_ids))

    def create_tournament(
        self,
        date: str,
        confirmed_player_ids: Sequence[str] = (),
        time: Optional[str] = None,
        duration: Optional[int] = None,
        location_id: Optional[str] = None
    ) -> Tournament:
        """Schedule a new tournament."""
        confirmed = self._check_players(confirmed_player_ids)
        if location_id is not None:
            self.storage.get_location(location_id)

        tournament = Tournament(
            id=generate_id(),
            date=date,
            status=TOURNAMENT_SCHEDULED,
            confirmed_player_ids=confirmed,
            time=time,
            duration=duration,
            location_id=location_id,
        )
        return self.storage.save_tournament(tournament)

    def set_confirmed_players(self, tournament_id: str, player_ids: Sequence[str]) -> Tournament:
        """Replace the attendance list of a tournament that has not started."""
        tournament = self.storage.load_tournament(tournament_id)
        if tournament.status != TOURNAMENT_SCHEDULED:
            raise InvalidTournamentStateError(
                f"Tournament {tournament_id} is {tournament.status}, not {TOURNAMENT_SCHEDULED}"
            )
        confirmed = self._check_players(player_ids)
        logger.debug("Tournament %s has %d confirmed players", tournament_id, len(confirmed))
        return self.storage.save_tournament(replace(tournament, confirmed_player_ids=confirmed))

    def get_tournament(self, tournament_id: str) -> Tournament:
        return self.storage.load_tournament(tournament_id)

    def list_tournaments(self, status: Optional[str] = None) -> List[Tournament]:
        if status is not None and status not in TOURNAMENT_STATUSES:
            raise InvalidTournamentStateError(f"Unknown tournament status {status!r}")
        return self.storage.list_tournaments(status=status)

    def start_tournament(
        self,
        tournament_id: str,
        teams: Optional[Sequence[Sequence[str]]] = None,
        seed: Optional[int] = None
    ) -> Tournament:
        """
        Seed round 1 and set the tournament live.

        Args:
            tournament_id: A scheduled tournament with eight confirmed players
            teams: Four teams (A, B, C, D) of confirmed players; drawn at
                random when omitted
            seed: Optional seed for the random draw
        """
        tournament = self.storage.load_tournament(tournament_id)
        if tournament.status != TOURNAMENT_SCHEDULED:
            raise InvalidTournamentStateError(
                f"Tournament {tournament_id} is {tournament.status}, not {TOURNAMENT_SCHEDULED}"
            )
        confirmed = tournament.confirmed_player_ids
        if len(confirmed) != PLAYERS_PER_TOURNAMENT:
            raise InvalidTournamentStateError(
                f"Tournament needs {PLAYERS_PER_TOURNAMENT} confirmed players, has {len(confirmed)}"
            )

        if teams is None:
            keys = draw_teams(confirmed, random.Random(seed))
        else:
            if len(teams) != TEAMS_PER_TOURNAMENT:
                raise InvalidTournamentStateError(f"Expected {TEAMS_PER_TOURNAMENT} teams")
            keys = [TeamKey.of(team) for team in teams]
            if {pid for key in keys for pid in key.players} != set(confirmed):
                raise InvalidTournamentStateError("Teams must use exactly the confirmed players")

        try:
            matches = seed_round1(*keys, config=self._scheduler_config(tournament), date=tournament.date)
        except ValueError as e:
            raise InvalidTournamentStateError(str(e)) from e

        started = replace(tournament, status=TOURNAMENT_LIVE, matches=matches)
        logger.info("Tournament %s started", tournament_id)
        return self.storage.save_tournament(started)

    def _live(self, tournament_id: str) -> Tournament:
        tournament = self.storage.load_tournament(tournament_id)
        if tournament.status != TOURNAMENT_LIVE:
            raise InvalidTournamentStateError(f"Tournament {tournament_id} is not live")
        return tournament

    def update_score(self, tournament_id: str, match_id: str, side: int,
                     increment: bool = True) -> Match:
        """Add or remove a point on a match of the current round."""
        tournament = self._live(tournament_id)
        current_round = tournament.current_round
        for i, match in enumerate(tournament.matches):
            if match.id != match_id:
                continue
            if match.round != current_round or match.status == MATCH_FINISHED:
                raise InvalidTournamentStateError(f"Match {match_id} is not in play")
            updated = adjust_score(match, side, increment)
            matches = list(tournament.matches)
            matches[i] = updated
            self.storage.save_tournament(replace(tournament, matches=matches))
            return updated
        raise InvalidTournamentStateError(f"Match {match_id} not found in tournament {tournament_id}")

    def advance(self, tournament_id: str) -> RoundOutcome:
        """
        Close the current round.

        Closing the last round finishes the tournament.
        """
        tournament = self._live(tournament_id)
        outcome = next_round(
            tournament.matches,
            tournament.current_round,
            self._scheduler_config(tournament)
        )
        if outcome.completed:
            self.storage.save_tournament(
                replace(tournament, status=TOURNAMENT_FINISHED, matches=outcome.matches)
            )
            logger.info("Tournament %s finished", tournament_id)
        elif outcome.advanced:
            self.storage.save_tournament(replace(tournament, matches=outcome.matches))
        return outcome

    def cancel_tournament(self, tournament_id: str) -> Tournament:
        tournament = self.storage.load_tournament(tournament_id)
        if tournament.status == TOURNAMENT_FINISHED:
            raise InvalidTournamentStateError(f"Tournament {tournament_id} is already finished")
        return self.storage.save_tournament(replace(tournament, status=TOURNAMENT_CANCELLED))

    def delete_tournament(self, tournament_id: str):
        self.storage.delete_tournament(tournament_id)

    # -------------------------------------------------------------------------
    # Derived views
    # -------------------------------------------------------------------------

    def standings(self, tournament_id: str) -> List[StandingEntry]:
        tournament = self.storage.load_tournament(tournament_id)
        lookup = player_lookup(self.storage.list_players())
        return compute_standings(tournament.matches or [], lookup)

    def ratings(self, players: Optional[List[Player]] = None) -> Dict[str, RatingRecord]:
        if players is None:
            players = self.storage.list_players()
        history = self.storage.list_tournaments(status=TOURNAMENT_FINISHED)
        return compute_ratings(players, history, self.rating_config)

    def rating_history(self, player_id: str) -> RatingRecord:
        player = self.storage.get_player(player_id)
        return self.ratings()[player.id]

    def player_stats(self) -> List[PlayerStats]:
        return compute_player_stats(
            self.storage.list_players(),
            self.storage.list_tournaments(status=TOURNAMENT_FINISHED)
        )

    def duo_stats(self, min_games: int = 2) -> List[DuoStats]:
        return compute_duo_stats(
            self.storage.list_tournaments(status=TOURNAMENT_FINISHED),
            min_games=min_games
        )
