"""
Rating engine for league players.

Ratings are replayed from the full history of finished tournaments on every
call:
- Each player starts at 1000.
- Per match: +20 for each winner, -12 for everyone else, floored at 800.
- Once per tournament: +50 for each member of the champion team.
- After each tournament, every player who took part gets a history snapshot.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Mapping, Optional

from src.tournament.models import Player, Tournament, chronological, parse_date
from src.tournament.standings import champion
from src.utils.constants import (
    CHAMPION_BONUS,
    DATE_LABEL_FORMAT,
    DEFAULT_LEVEL,
    INITIAL_RATING,
    LOSS_DELTA,
    RATING_FLOOR,
    START_LABEL,
    TIERS,
    TOURNAMENT_FINISHED,
    WIN_DELTA,
)

logger = logging.getLogger(__name__)


def tier_of(points: int) -> str:
    """
    Map a rating to its level label.

    1600+ is Pro, 1400+ Level 3, 1200+ Level 2, anything lower Level 1.
    """
    for threshold, level in TIERS:
        if points >= threshold:
            return level
    return DEFAULT_LEVEL


@dataclass
class RatingConfig:
    """Rating rules."""
    initial_rating: int = INITIAL_RATING
    floor: int = RATING_FLOOR
    win_delta: int = WIN_DELTA
    loss_delta: int = LOSS_DELTA
    champion_bonus: int = CHAMPION_BONUS
    start_label: str = START_LABEL
    date_label_format: str = DATE_LABEL_FORMAT


@dataclass
class RatingSnapshot:
    """A player's rating after one tournament."""
    label: str
    points: int
    level: str

    def to_dict(self) -> dict:
        return {"label": self.label, "points": self.points, "level": self.level}


@dataclass
class RatingRecord:
    """Current rating and chronological history for one player."""
    current: int
    history: List[RatingSnapshot] = field(default_factory=list)

    @property
    def level(self) -> str:
        return tier_of(self.current)

    def to_dict(self) -> dict:
        return {
            "current": self.current,
            "level": self.level,
            "history": [s.to_dict() for s in self.history],
        }


class RatingEngine:
    """
    Replays tournament history into per-player ratings.

    The engine holds only its rules; every call to compute() starts from
    scratch, so the result always matches the history passed in.
    """

    def __init__(self, config: Optional[RatingConfig] = None):
        self.config = config or RatingConfig()

    def date_label(self, tournament: Tournament) -> str:
        """Short label for a tournament date, e.g. '05 Jan'."""
        parsed = parse_date(tournament.date)
        if parsed is None:
            return str(tournament.date)
        return parsed.strftime(self.config.date_label_format)

    def _apply_delta(self, record: RatingRecord, won: bool):
        cfg = self.config
        record.current += cfg.win_delta if won else -cfg.loss_delta
        if record.current < cfg.floor:
            record.current = cfg.floor

    def compute(
        self,
        players: Iterable[Player],
        tournaments: Iterable[Tournament]
    ) -> Dict[str, RatingRecord]:
        """
        Compute ratings for every player in the roster.

        Args:
            players: The player roster
            tournaments: Tournament history in any order; only finished
                tournaments with matches are replayed

        Returns:
            Mapping of player id to RatingRecord, in roster order
        """
        cfg = self.config
        ratings: Dict[str, RatingRecord] = {}
        for player in players:
            ratings[player.id] = RatingRecord(
                current=cfg.initial_rating,
                history=[RatingSnapshot(cfg.start_label, cfg.initial_rating, tier_of(cfg.initial_rating))],
            )

        for tournament in chronological(tournaments):
            if tournament.status != TOURNAMENT_FINISHED:
                continue
            if tournament.matches is None:
                logger.debug("Skipping tournament %s: no matches", tournament.id)
                continue

            champions = set(champion(tournament.matches))

            for match in tournament.matches:
                side = match.winning_side
                for pid in match.team1:
                    record = ratings.get(pid)
                    if record is not None:
                        self._apply_delta(record, side == 1)
                for pid in match.team2:
                    record = ratings.get(pid)
                    if record is not None:
                        self._apply_delta(record, side == 2)

            label = self.date_label(tournament)
            for pid in tournament.player_ids:
                record = ratings.get(pid)
                if record is None:
                    logger.debug("Unknown player %s in tournament %s", pid, tournament.id)
                    continue
                if pid in champions:
                    record.current += cfg.champion_bonus
                record.history.append(RatingSnapshot(label, record.current, tier_of(record.current)))

        return ratings


def compute_ratings(
    players: Iterable[Player],
    tournaments: Iterable[Tournament],
    config: Optional[RatingConfig] = None
) -> Dict[str, RatingRecord]:
    """Compute ratings with the given (or default) rules."""
    return RatingEngine(config).compute(players, tournaments)


def with_dynamic_ratings(
    players: Iterable[Player],
    ratings: Mapping[str, RatingRecord],
    config: Optional[RatingConfig] = None
) -> List[Player]:
    """
    Copies of the players with rating_points and level taken from ratings.

    Players missing from ratings get the initial rating.
    """
    initial = (config or RatingConfig()).initial_rating
    result = []
    for player in players:
        record = ratings.get(player.id)
        points = record.current if record else initial
        result.append(replace(player, rating_points=points, level=tier_of(points)))
    return result
