"""
Display formatting for league results.

Provides ASCII-formatted standings, rating leaderboards, rating histories,
fixtures and career statistics for terminal output.
"""

from typing import List, Mapping, Optional, Sequence

from src.tournament.models import Match, Player
from src.tournament.rating import RatingRecord
from src.tournament.standings import StandingEntry
from src.tournament.stats import DuoStats, PlayerProfile, PlayerStats


def _name(player_id: str, players: Optional[Mapping[str, Player]]) -> str:
    player = (players or {}).get(player_id)
    return player.display_name if player else player_id


def format_standings(standings: Sequence[StandingEntry], title: str = "STANDINGS") -> str:
    """
    Format team standings as an ASCII table.

    Args:
        standings: Entries as returned by compute_standings
        title: Heading line

    Returns:
        Formatted string for terminal display
    """
    lines = []
    lines.append(f"=== {title} ===")
    lines.append("")

    lines.append(f"{'Rank':<6}{'Team':<28}{'W-L':<8}{'Diff':<8}{'Pts':<6}")
    lines.append("-" * 56)

    for i, entry in enumerate(standings, 1):
        wl = f"{entry.wins}-{entry.losses}"
        diff = f"{entry.points_diff:+d}"
        lines.append(f"{i:<6}{entry.label:<28}{wl:<8}{diff:<8}{entry.points_for:<6}")

    if standings:
        lines.append("")
        lines.append(f"Champions: {standings[0].label}")

    return "\n".join(lines)


def format_leaderboard(
    ratings: Mapping[str, RatingRecord],
    players: Mapping[str, Player]
) -> str:
    """
    Format the rating leaderboard, highest rating first.

    Shows each player's change over their most recent tournament.
    """
    ranked = sorted(ratings.items(), key=lambda item: item[1].current, reverse=True)

    lines = []
    lines.append("=== RATINGS ===")
    lines.append("")
    lines.append(f"{'Rank':<6}{'Player':<24}{'Rating':<14}{'Level':<10}{'Played':<8}")
    lines.append("-" * 62)

    for i, (pid, record) in enumerate(ranked, 1):
        rating_str = f"{record.current}"
        if len(record.history) > 1:
            change = record.history[-1].points - record.history[-2].points
            if change != 0:
                sign = "+" if change > 0 else ""
                rating_str = f"{record.current} ({sign}{change})"
        played = len(record.history) - 1
        lines.append(f"{i:<6}{_name(pid, players):<24}{rating_str:<14}{record.level:<10}{played:<8}")

    return "\n".join(lines)


def format_rating_history(player: Player, record: RatingRecord) -> str:
    """Format one player's rating trajectory."""
    lines = [f"{player.display_name}: {record.current} ({record.level})", ""]
    for snapshot in record.history:
        lines.append(f"  {snapshot.label:<10}{snapshot.points:>6}  {snapshot.level}")
    return "\n".join(lines)


def format_player_stats(stats: Sequence[PlayerStats], players: Mapping[str, Player]) -> str:
    """Format the career statistics table."""
    lines = []
    lines.append("=== PLAYER STATS ===")
    lines.append("")
    lines.append(f"{'Player':<24}{'J':<5}{'W':<5}{'L':<5}{'Bal':<6}{'Streak':<8}{'Titles':<7}")
    lines.append("-" * 60)
    for s in stats:
        lines.append(
            f"{_name(s.player_id, players):<24}{s.games_played:<5}{s.wins:<5}{s.losses:<5}"
            f"{s.balance:<+6d}{s.max_win_streak:<8}{s.tournaments_won:<7}"
        )
    return "\n".join(lines)


def format_round(matches: List[Match], players: Optional[Mapping[str, Player]] = None) -> str:
    """Format the fixtures of one round, one line per court."""
    lines = []
    for m in sorted(matches, key=lambda m: m.court):
        team1 = " & ".join(_name(pid, players) for pid in m.team1)
        team2 = " & ".join(_name(pid, players) for pid in m.team2)
        lines.append(f"  Court {m.court}: {team1} {m.score1}-{m.score2} {team2}")
    return "\n".join(lines)


def format_duo_stats(duos: Sequence[DuoStats], players: Mapping[str, Player]) -> str:
    """Format pair win rates, best first."""
    lines = []
    lines.append("=== DUOS ===")
    lines.append("")
    lines.append(f"{'Duo':<32}{'J':<5}{'W':<5}{'Win %':<6}")
    lines.append("-" * 48)
    for d in duos:
        label = " & ".join(_name(pid, players) for pid in d.team.players)
        lines.append(f"{label:<32}{d.games:<5}{d.wins:<5}{d.win_rate:<6}")
    return "\n".join(lines)


def format_player_profile(player: Player, profile: PlayerProfile) -> str:
    """Format one player's career profile with partners and rivals."""
    lines = [
        f"{player.display_name}: {profile.wins}/{profile.games_played} wins ({profile.win_rate}%)",
        f"  Points: {profile.points_scored} for, {profile.points_conceded} against",
        f"  Best streak: {profile.max_win_streak}",
        f"  Tournaments: {len(profile.tournaments)}, titles: {len(profile.titles)}",
    ]

    if profile.partners:
        lines.append("")
        lines.append("Partners:")
        for p in profile.partners:
            lines.append(f"  {p.name:<24}{p.wins}/{p.games}")

    for title, rivals in (("Victims", profile.victims), ("Black beasts", profile.black_beasts)):
        if rivals:
            lines.append("")
            lines.append(f"{title}:")
            for r in rivals:
                lines.append(f"  {r.name:<24}{r.wins_against}-{r.losses_against} ({r.balance:+d})")

    return "\n".join(lines)
