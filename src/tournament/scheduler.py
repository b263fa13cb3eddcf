"""
Fixture scheduling for the 4-team, 3-round mini round-robin.

Round 1 is seeded from a draw, round 2 pairs the round-1 winners against each
other and the losers against each other, and round 3 completes the
round-robin so that every pair of teams meets exactly once.
"""

import logging
import random
from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence, Set, Tuple, Union

from src.tournament.models import Match, TeamKey, pair_key
from src.utils.constants import (
    COURTS,
    MATCH_FINISHED,
    MATCH_LIVE,
    PLAYERS_PER_TOURNAMENT,
    ROUNDS,
    TEAM_SIZE,
    TEAMS_PER_TOURNAMENT,
    TIE_FORBID,
    TIE_POLICIES,
    TIE_TEAM1,
)

logger = logging.getLogger(__name__)

TeamLike = Union[TeamKey, Sequence[str]]


@dataclass
class SchedulerConfig:
    """Configuration for fixture generation."""
    tie_policy: str = TIE_TEAM1
    match_id_prefix: str = "m"

    def __post_init__(self):
        if self.tie_policy not in TIE_POLICIES:
            raise ValueError(f"Unknown tie policy: {self.tie_policy}")


@dataclass
class RoundOutcome:
    """Result of closing a round."""
    matches: List[Match]
    current_round: int
    advanced: bool = False
    completed: bool = False
    new_matches: List[Match] = field(default_factory=list)


def _as_key(team: TeamLike) -> TeamKey:
    return team if isinstance(team, TeamKey) else TeamKey.of(team)


def _make_match(
    team1: TeamKey,
    team2: TeamKey,
    court: int,
    round_number: int,
    config: SchedulerConfig,
    date: Optional[str] = None
) -> Match:
    return Match(
        id=f"{config.match_id_prefix}-r{round_number}-c{court}",
        team1=team1.players,
        team2=team2.players,
        court=court,
        round=round_number,
        status=MATCH_LIVE,
        date=date,
    )


def _by_court(matches: Sequence[Match]) -> List[Match]:
    return sorted(matches, key=lambda m: m.court)


def decide(match: Match, tie_policy: str = TIE_TEAM1) -> Optional[Tuple[TeamKey, TeamKey]]:
    """
    Return (winner, loser) for seeding the next round.

    team2 wins only with a strictly greater score; otherwise team1 is taken
    as the winner. Under the "forbid" policy a tie has no winner and None
    is returned.
    """
    if match.is_tie and tie_policy == TIE_FORBID:
        return None
    if match.score2 > match.score1:
        return match.team2_key, match.team1_key
    return match.team1_key, match.team2_key


def played_pairs(matches: Sequence[Match]) -> Set[Tuple[TeamKey, TeamKey]]:
    """Unordered team pairs that have already met."""
    return {pair_key(m.team1_key, m.team2_key) for m in matches}


def draw_teams(player_ids: Sequence[str], rng: Optional[random.Random] = None) -> List[TeamKey]:
    """
    Randomly split eight players into four teams.

    Args:
        player_ids: The confirmed players
        rng: Optional random source for reproducible draws

    Returns:
        Four TeamKeys in draw order (A, B, C, D)

    Raises:
        ValueError: If there are not exactly eight distinct players
    """
    ids = list(dict.fromkeys(player_ids))
    if len(ids) != PLAYERS_PER_TOURNAMENT or len(player_ids) != PLAYERS_PER_TOURNAMENT:
        raise ValueError(f"A draw needs exactly {PLAYERS_PER_TOURNAMENT} distinct players")

    rng = rng or random.Random()
    pool = ids[:]
    rng.shuffle(pool)
    return [TeamKey.of(pool[i:i + TEAM_SIZE]) for i in range(0, len(pool), TEAM_SIZE)]


def seed_round1(
    team_a: TeamLike,
    team_b: TeamLike,
    team_c: TeamLike,
    team_d: TeamLike,
    config: Optional[SchedulerConfig] = None,
    date: Optional[str] = None
) -> List[Match]:
    """
    Create the round-1 fixtures: A vs B on court 1, C vs D on court 2.

    Raises:
        ValueError: If the teams are not four distinct pairs of eight
            distinct players
    """
    config = config or SchedulerConfig()
    teams = [_as_key(t) for t in (team_a, team_b, team_c, team_d)]

    if any(len(t.players) != TEAM_SIZE for t in teams):
        raise ValueError(f"Every team needs exactly {TEAM_SIZE} players")
    all_players = [pid for t in teams for pid in t.players]
    if len(set(all_players)) != PLAYERS_PER_TOURNAMENT:
        raise ValueError(f"Teams must cover {PLAYERS_PER_TOURNAMENT} distinct players")

    logger.debug("Seeding round 1: %s vs %s, %s vs %s", *teams)
    return [
        _make_match(teams[0], teams[1], COURTS[0], 1, config, date),
        _make_match(teams[2], teams[3], COURTS[1], 1, config, date),
    ]


def generate_round2(
    round1_matches: Sequence[Match],
    config: Optional[SchedulerConfig] = None,
    date: Optional[str] = None
) -> List[Match]:
    """
    Pair winners against winners and losers against losers.

    Args:
        round1_matches: The two round-1 matches

    Returns:
        Court 1: winner(court 1) vs winner(court 2);
        court 2: loser(court 1) vs loser(court 2).
        Empty when the round cannot be closed yet.
    """
    config = config or SchedulerConfig()
    if len(round1_matches) < len(COURTS):
        return []

    c1, c2 = _by_court(round1_matches)[:2]
    first = decide(c1, config.tie_policy)
    second = decide(c2, config.tie_policy)
    if first is None or second is None:
        logger.debug("Round 1 has a tied match; round 2 not generated")
        return []

    (win1, lose1), (win2, lose2) = first, second
    date = date if date is not None else c1.date
    return [
        _make_match(win1, win2, COURTS[0], 2, config, date),
        _make_match(lose1, lose2, COURTS[1], 2, config, date),
    ]


def generate_round3(
    round1_matches: Sequence[Match],
    round2_matches: Sequence[Match],
    config: Optional[SchedulerConfig] = None,
    date: Optional[str] = None
) -> List[Match]:
    """
    Complete the round-robin with the one remaining pair of fixtures.

    The first team of round-1 court 1 is matched with the first of the other
    three teams (in round-1 order) it has not met yet; the two teams left
    over form the court-2 match.

    Returns:
        The two round-3 matches, or an empty list when rounds 1-2 are
        incomplete or do not leave a valid completion.
    """
    config = config or SchedulerConfig()
    if len(round1_matches) < len(COURTS) or len(round2_matches) < len(COURTS):
        return []
    if config.tie_policy == TIE_FORBID and any(m.is_tie for m in round2_matches):
        logger.debug("Round 2 has a tied match; round 3 not generated")
        return []

    r1 = _by_court(round1_matches)[:2]
    teams = [r1[0].team1_key, r1[0].team2_key, r1[1].team1_key, r1[1].team2_key]
    if len(set(teams)) != TEAMS_PER_TOURNAMENT:
        logger.warning("Round 1 does not hold %d distinct teams", TEAMS_PER_TOURNAMENT)
        return []

    played = played_pairs(list(r1) + list(round2_matches))
    team0 = teams[0]
    for i in range(1, len(teams)):
        if pair_key(team0, teams[i]) in played:
            continue
        others = [t for idx, t in enumerate(teams) if idx not in (0, i)]
        if pair_key(others[0], others[1]) in played:
            break
        date = date if date is not None else r1[0].date
        return [
            _make_match(team0, teams[i], COURTS[0], 3, config, date),
            _make_match(others[0], others[1], COURTS[1], 3, config, date),
        ]

    logger.warning("No round-robin completion exists for the given rounds")
    return []


def next_round(
    matches: Sequence[Match],
    current_round: int,
    config: Optional[SchedulerConfig] = None
) -> RoundOutcome:
    """
    Close the current round and generate the following one.

    The current round's matches are marked finished and the next round's
    fixtures appended. Closing round 3 completes the tournament. When fewer
    than two matches exist for the current round, or a tie blocks closing
    under the "forbid" policy, nothing changes.

    Args:
        matches: All matches of the tournament so far
        current_round: The round being closed (1-3)

    Returns:
        RoundOutcome with the updated match list
    """
    config = config or SchedulerConfig()
    matches = list(matches)
    unchanged = RoundOutcome(matches=matches, current_round=current_round)

    current = [m for m in matches if m.round == current_round]
    if len(current) < len(COURTS) or not 1 <= current_round <= ROUNDS:
        return unchanged

    closed = [
        replace(m, status=MATCH_FINISHED) if m.round == current_round else m
        for m in matches
    ]

    if current_round == ROUNDS:
        if config.tie_policy == TIE_FORBID and any(m.is_tie for m in current):
            return unchanged
        logger.debug("Round %d closed; tournament complete", current_round)
        return RoundOutcome(matches=closed, current_round=current_round, completed=True)

    if current_round == 1:
        new = generate_round2(current, config)
    else:
        round1 = [m for m in closed if m.round == 1]
        new = generate_round3(round1, current, config)

    if not new:
        return unchanged

    logger.debug("Round %d closed; generated round %d", current_round, current_round + 1)
    return RoundOutcome(
        matches=closed + new,
        current_round=current_round + 1,
        advanced=True,
        new_matches=new,
    )


def adjust_score(match: Match, side: int, increment: bool = True) -> Match:
    """
    Add or remove one point for a side of a live match.

    Scores never drop below zero. Finished matches are returned unchanged.
    """
    if match.status == MATCH_FINISHED or side not in (1, 2):
        return match
    delta = 1 if increment else -1
    if side == 1:
        return replace(match, score1=max(0, match.score1 + delta))
    return replace(match, score2=max(0, match.score2 + delta))
