"""
Team standings for a set of matches.

Used for the live leaderboard during a tournament and for final results.
"""

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from src.tournament.models import Match, Player, TeamKey


@dataclass
class StandingEntry:
    """Aggregated results for one team."""
    team: TeamKey
    label: str
    players: Tuple[str, ...]
    wins: int = 0
    losses: int = 0
    points_diff: int = 0
    points_for: int = 0
    played: int = 0

    def to_dict(self) -> dict:
        return {
            "team": list(self.team.players),
            "label": self.label,
            "players": list(self.players),
            "wins": self.wins,
            "losses": self.losses,
            "points_diff": self.points_diff,
            "points_for": self.points_for,
            "played": self.played,
        }


def team_label(players: Sequence[str], lookup: Optional[Mapping[str, Player]] = None) -> str:
    """Display label for a team, e.g. 'Fred & Rui'."""
    names = []
    for pid in players:
        player = (lookup or {}).get(pid)
        names.append(player.display_name if player else pid)
    return " & ".join(names)


def compute_standings(
    matches: Sequence[Match],
    players: Optional[Mapping[str, Player]] = None
) -> List[StandingEntry]:
    """
    Rank teams by wins, then by point differential.

    A win needs a strictly greater score; a tied match is neither a win nor a
    loss for either team. Teams still level on both keys keep the order in
    which they first appeared.

    Args:
        matches: Any list of matches, finished or live
        players: Optional id -> Player lookup used for display labels

    Returns:
        Standing entries, best first. Empty when there are no matches.
    """
    table: Dict[TeamKey, StandingEntry] = {}

    def entry(team: Tuple[str, ...]) -> StandingEntry:
        key = TeamKey.of(team)
        if key not in table:
            table[key] = StandingEntry(team=key, label=team_label(team, players), players=tuple(team))
        return table[key]

    for match in matches:
        e1 = entry(match.team1)
        e2 = entry(match.team2)

        e1.played += 1
        e2.played += 1
        e1.points_for += match.score1
        e2.points_for += match.score2
        e1.points_diff += match.score1 - match.score2
        e2.points_diff += match.score2 - match.score1

        if match.winning_side == 1:
            e1.wins += 1
            e2.losses += 1
        elif match.winning_side == 2:
            e2.wins += 1
            e1.losses += 1

    return sorted(table.values(), key=lambda e: (-e.wins, -e.points_diff))


def champion(matches: Sequence[Match]) -> Tuple[str, ...]:
    """Player ids of the top team, empty when there are no matches."""
    standings = compute_standings(matches)
    if not standings:
        return ()
    return standings[0].players
