"""
Career statistics across finished tournaments.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

from src.tournament.models import Match, Player, TeamKey, Tournament, chronological
from src.tournament.standings import champion
from src.utils.constants import RIVALS_SHOWN, TOURNAMENT_FINISHED


@dataclass
class PlayerStats:
    """Aggregate record for one player."""
    player_id: str
    games_played: int = 0
    wins: int = 0
    losses: int = 0
    points_scored: int = 0
    points_conceded: int = 0
    current_streak: int = 0
    max_win_streak: int = 0
    tournaments_played: int = 0
    tournaments_won: int = 0

    @property
    def balance(self) -> int:
        return self.wins - self.losses

    @property
    def win_rate(self) -> float:
        if self.games_played == 0:
            return 0.0
        return self.wins / self.games_played

    def to_dict(self) -> dict:
        return {
            "player_id": self.player_id,
            "games_played": self.games_played,
            "wins": self.wins,
            "losses": self.losses,
            "balance": self.balance,
            "points_scored": self.points_scored,
            "points_conceded": self.points_conceded,
            "max_win_streak": self.max_win_streak,
            "tournaments_played": self.tournaments_played,
            "tournaments_won": self.tournaments_won,
        }


@dataclass
class DuoStats:
    """Record of a pair of players playing together."""
    team: TeamKey
    games: int = 0
    wins: int = 0

    @property
    def win_rate(self) -> int:
        """Win rate as a rounded percentage."""
        if self.games == 0:
            return 0
        return round(self.wins / self.games * 100)

    def to_dict(self) -> dict:
        return {
            "team": list(self.team.players),
            "games": self.games,
            "wins": self.wins,
            "win_rate": self.win_rate,
        }


def _finished(tournaments: Iterable[Tournament]) -> List[Tournament]:
    return [
        t for t in chronological(tournaments)
        if t.status == TOURNAMENT_FINISHED and t.matches is not None
    ]


def compute_player_stats(
    players: Iterable[Player],
    tournaments: Iterable[Tournament]
) -> List[PlayerStats]:
    """
    Per-player match and title record.

    Matches are replayed oldest first (by tournament date, then round) so
    win streaks follow the order they were played in. Only players with at
    least one game are returned, sorted by titles and then by balance.
    """
    stats: Dict[str, PlayerStats] = {p.id: PlayerStats(player_id=p.id) for p in players}

    for tournament in _finished(tournaments):
        for pid in champion(tournament.matches):
            if pid in stats:
                stats[pid].tournaments_won += 1
        for pid in tournament.player_ids:
            if pid in stats:
                stats[pid].tournaments_played += 1

        for match in sorted(tournament.matches, key=lambda m: (m.round, m.court)):
            _record_match(stats, match)

    active = [s for s in stats.values() if s.games_played > 0]
    return sorted(active, key=lambda s: (-s.tournaments_won, -s.balance))


def _record_match(stats: Dict[str, PlayerStats], match: Match):
    for side, team in ((1, match.team1), (2, match.team2)):
        scored, conceded = (match.score1, match.score2) if side == 1 else (match.score2, match.score1)
        won = match.winning_side == side
        for pid in team:
            s = stats.get(pid)
            if s is None:
                continue
            s.games_played += 1
            s.points_scored += scored
            s.points_conceded += conceded
            if won:
                s.wins += 1
                s.current_streak += 1
                s.max_win_streak = max(s.max_win_streak, s.current_streak)
            else:
                s.losses += 1
                s.current_streak = 0


def compute_duo_stats(tournaments: Iterable[Tournament], min_games: int = 2) -> List[DuoStats]:
    """
    Win rates of player pairs that played together at least min_games times.

    Sorted by win rate, then by games played.
    """
    duos: Dict[TeamKey, DuoStats] = {}
    for tournament in _finished(tournaments):
        for match in tournament.matches:
            pairs: Tuple[Tuple[TeamKey, int], ...] = ((match.team1_key, 1), (match.team2_key, 2))
            for key, side in pairs:
                duo = duos.setdefault(key, DuoStats(team=key))
                duo.games += 1
                if match.winning_side == side:
                    duo.wins += 1

    selected = [d for d in duos.values() if d.games >= min_games]
    return sorted(selected, key=lambda d: (-d.win_rate, -d.games))


@dataclass
class PartnerRecord:
    """Games played alongside one partner."""
    player_id: str
    name: str
    games: int = 0
    wins: int = 0

    def to_dict(self) -> dict:
        return {"player_id": self.player_id, "name": self.name, "games": self.games, "wins": self.wins}


@dataclass
class RivalRecord:
    """Head-to-head record against one opponent."""
    player_id: str
    name: str
    games: int = 0
    wins_against: int = 0
    losses_against: int = 0

    @property
    def balance(self) -> int:
        return self.wins_against - self.losses_against

    def to_dict(self) -> dict:
        return {
            "player_id": self.player_id,
            "name": self.name,
            "games": self.games,
            "wins_against": self.wins_against,
            "losses_against": self.losses_against,
            "balance": self.balance,
        }


@dataclass
class PlayerProfile:
    """
    One player's career: totals, tournaments and titles, partners and rivals.

    victims are the opponents with a positive balance, best first;
    black_beasts those with a negative balance, worst first.
    """
    player_id: str
    games_played: int = 0
    wins: int = 0
    points_scored: int = 0
    points_conceded: int = 0
    max_win_streak: int = 0
    tournaments: List[str] = field(default_factory=list)
    titles: List[str] = field(default_factory=list)
    partners: List[PartnerRecord] = field(default_factory=list)
    victims: List[RivalRecord] = field(default_factory=list)
    black_beasts: List[RivalRecord] = field(default_factory=list)

    @property
    def win_rate(self) -> int:
        """Win rate as a rounded percentage."""
        if self.games_played == 0:
            return 0
        return round(self.wins / self.games_played * 100)

    def to_dict(self) -> dict:
        return {
            "player_id": self.player_id,
            "games_played": self.games_played,
            "wins": self.wins,
            "win_rate": self.win_rate,
            "points_scored": self.points_scored,
            "points_conceded": self.points_conceded,
            "max_win_streak": self.max_win_streak,
            "tournaments": list(self.tournaments),
            "titles": list(self.titles),
            "partners": [p.to_dict() for p in self.partners],
            "victims": [r.to_dict() for r in self.victims],
            "black_beasts": [r.to_dict() for r in self.black_beasts],
        }


def compute_player_profile(
    player_id: str,
    players: Iterable[Player],
    tournaments: Iterable[Tournament],
    top_rivals: int = RIVALS_SHOWN
) -> PlayerProfile:
    """
    Career profile of one player over finished tournaments.

    Partners are sorted by wins, then games. At most top_rivals victims and
    black beasts are kept. A player with no games gets an empty profile.

    Args:
        player_id: The player to profile
        players: Roster used to name partners and rivals
        tournaments: Tournament history in any order
        top_rivals: How many victims and black beasts to keep
    """
    lookup = {p.id: p for p in players}
    profile = PlayerProfile(player_id=player_id)
    partners: Dict[str, PartnerRecord] = {}
    rivals: Dict[str, RivalRecord] = {}
    streak = 0

    def name(pid: str) -> str:
        player = lookup.get(pid)
        return player.display_name if player else pid

    for tournament in _finished(tournaments):
        mine = [m for m in tournament.matches if player_id in m.player_ids]
        if not mine:
            continue
        profile.tournaments.append(tournament.id)
        if player_id in champion(tournament.matches):
            profile.titles.append(tournament.id)

        for match in sorted(mine, key=lambda m: (m.round, m.court)):
            side = 1 if player_id in match.team1 else 2
            own, other = (match.team1, match.team2) if side == 1 else (match.team2, match.team1)
            won = match.winning_side == side

            profile.games_played += 1
            profile.points_scored += match.score1 if side == 1 else match.score2
            profile.points_conceded += match.score2 if side == 1 else match.score1
            if won:
                profile.wins += 1
                streak += 1
                profile.max_win_streak = max(profile.max_win_streak, streak)
            else:
                streak = 0

            for pid in own:
                if pid == player_id:
                    continue
                partner = partners.setdefault(pid, PartnerRecord(player_id=pid, name=name(pid)))
                partner.games += 1
                if won:
                    partner.wins += 1

            for pid in other:
                rival = rivals.setdefault(pid, RivalRecord(player_id=pid, name=name(pid)))
                rival.games += 1
                if won:
                    rival.wins_against += 1
                else:
                    rival.losses_against += 1

    profile.partners = sorted(partners.values(), key=lambda p: (-p.wins, -p.games))
    profile.victims = sorted(
        (r for r in rivals.values() if r.balance > 0), key=lambda r: -r.balance
    )[:top_rivals]
    profile.black_beasts = sorted(
        (r for r in rivals.values() if r.balance < 0), key=lambda r: r.balance
    )[:top_rivals]
    return profile
