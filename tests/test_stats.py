"""
Unit tests for career statistics.
"""

from src.tournament.models import Match, Player, TeamKey, Tournament
from src.tournament.stats import compute_duo_stats, compute_player_profile, compute_player_stats
from src.utils.constants import TOURNAMENT_FINISHED, TOURNAMENT_LIVE

A = ("p1", "p2")
B = ("p3", "p4")
C = ("p5", "p6")
D = ("p7", "p8")


def roster():
    return [Player(id=f"p{i}", name=f"Player {i}") for i in range(1, 11)]


def match(team1, team2, s1, s2, rnd, court) -> Match:
    return Match(
        id=f"r{rnd}c{court}", team1=team1, team2=team2,
        score1=s1, score2=s2, court=court, round=rnd, status="finished"
    )


def full_tournament(tid, date, status=TOURNAMENT_FINISHED):
    # Listed out of order on purpose; replay sorts by round and court.
    return Tournament(id=tid, date=date, status=status, matches=[
        match(A, D, 6, 1, 3, 1),
        match(B, C, 4, 6, 3, 2),
        match(A, B, 6, 3, 1, 1),
        match(C, D, 6, 4, 1, 2),
        match(A, C, 6, 2, 2, 1),
        match(B, D, 5, 6, 2, 2),
    ])


class TestPlayerStats:
    """Tests for compute_player_stats."""

    def test_single_tournament(self):
        """Wins, losses, points and titles are counted per player."""
        stats = {s.player_id: s for s in compute_player_stats(roster(), [full_tournament("t1", "2025-01-05")])}

        p1 = stats["p1"]
        assert (p1.games_played, p1.wins, p1.losses) == (3, 3, 0)
        assert (p1.points_scored, p1.points_conceded) == (18, 6)
        assert p1.tournaments_won == 1
        assert p1.tournaments_played == 1
        assert p1.win_rate == 1.0

        p3 = stats["p3"]
        assert (p3.wins, p3.losses, p3.balance) == (0, 3, -3)
        assert p3.tournaments_won == 0

    def test_sorted_by_titles_then_balance(self):
        """Champions first, then by win-loss balance."""
        stats = compute_player_stats(roster(), [full_tournament("t1", "2025-01-05")])
        assert [s.player_id for s in stats] == ["p1", "p2", "p5", "p6", "p7", "p8", "p3", "p4"]

    def test_inactive_players_excluded(self):
        """Players without games do not appear."""
        stats = compute_player_stats(roster(), [full_tournament("t1", "2025-01-05")])
        assert "p9" not in {s.player_id for s in stats}

    def test_win_streak_follows_play_order(self):
        """Streaks are counted in round order and across tournaments."""
        tournaments = [full_tournament("t2", "2025-01-12"), full_tournament("t1", "2025-01-05")]
        stats = {s.player_id: s for s in compute_player_stats(roster(), tournaments)}

        assert stats["p1"].max_win_streak == 6
        # C: win, loss, win in each tournament
        assert stats["p5"].max_win_streak == 2
        assert stats["p7"].max_win_streak == 1

    def test_tie_is_not_a_win(self):
        """A tied match counts as a loss for both sides."""
        t = Tournament(id="t1", date="2025-01-05", status=TOURNAMENT_FINISHED,
                       matches=[match(A, B, 3, 3, 1, 1)])
        stats = {s.player_id: s for s in compute_player_stats(roster(), [t])}

        assert stats["p1"].wins == 0
        assert stats["p1"].losses == 1
        assert stats["p3"].losses == 1

    def test_only_finished_tournaments(self):
        """Live and match-less tournaments are ignored."""
        tournaments = [
            full_tournament("t1", "2025-01-05", status=TOURNAMENT_LIVE),
            Tournament(id="t2", date="2025-01-12", status=TOURNAMENT_FINISHED),
        ]
        assert compute_player_stats(roster(), tournaments) == []

    def test_to_dict(self):
        """Serialized stats include the derived balance."""
        stats = compute_player_stats(roster(), [full_tournament("t1", "2025-01-05")])
        data = stats[0].to_dict()

        assert data["player_id"] == "p1"
        assert data["balance"] == 3
        assert data["tournaments_won"] == 1


class TestDuoStats:
    """Tests for compute_duo_stats."""

    def test_win_rates(self):
        """Each pair's record is kept under its team key."""
        duos = compute_duo_stats([full_tournament("t1", "2025-01-05")])

        assert [d.team for d in duos] == [TeamKey.of(t) for t in (A, C, D, B)]
        assert [d.win_rate for d in duos] == [100, 67, 33, 0]
        assert all(d.games == 3 for d in duos)

    def test_min_games(self):
        """Pairs below the minimum are left out."""
        t = Tournament(id="t1", date="2025-01-05", status=TOURNAMENT_FINISHED,
                       matches=[match(A, B, 6, 3, 1, 1)])

        assert compute_duo_stats([t]) == []
        assert len(compute_duo_stats([t], min_games=1)) == 2

    def test_player_order_in_team_ignored(self):
        """The same pair listed in a different order is one duo."""
        t = Tournament(id="t1", date="2025-01-05", status=TOURNAMENT_FINISHED, matches=[
            match(("p1", "p2"), B, 6, 3, 1, 1),
            match(("p2", "p1"), C, 2, 6, 2, 1),
        ])
        duos = {d.team: d for d in compute_duo_stats([t])}

        assert duos[TeamKey.of(A)].games == 2
        assert duos[TeamKey.of(A)].win_rate == 50


class TestPlayerProfile:
    """Tests for compute_player_profile."""

    def test_totals_and_titles(self):
        """Games, points and titles come from the player's own matches."""
        profile = compute_player_profile("p1", roster(), [full_tournament("t1", "2025-01-05")])

        assert (profile.games_played, profile.wins, profile.win_rate) == (3, 3, 100)
        assert (profile.points_scored, profile.points_conceded) == (18, 6)
        assert profile.tournaments == ["t1"]
        assert profile.titles == ["t1"]

    def test_partners(self):
        """The partner record counts shared games and wins."""
        profile = compute_player_profile("p1", roster(), [full_tournament("t1", "2025-01-05")])

        assert len(profile.partners) == 1
        partner = profile.partners[0]
        assert (partner.player_id, partner.name, partner.games, partner.wins) == ("p2", "Player 2", 3, 3)

    def test_victims_and_black_beasts(self):
        """Opponents split by head-to-head balance."""
        tournament = full_tournament("t1", "2025-01-05")

        winner = compute_player_profile("p1", roster(), [tournament])
        assert [r.player_id for r in winner.victims] == ["p3", "p4", "p5", "p6", "p7", "p8"]
        assert winner.black_beasts == []

        loser = compute_player_profile("p3", roster(), [tournament])
        assert loser.victims == []
        assert [r.player_id for r in loser.black_beasts] == ["p1", "p2", "p7", "p8", "p5", "p6"]
        assert loser.black_beasts[0].balance == -1
        assert loser.titles == []

    def test_rival_balance_orders_lists(self):
        """Bigger balances come first and the lists are capped."""
        tournaments = [
            full_tournament("t1", "2025-01-05"),
            Tournament(id="t2", date="2025-01-12", status=TOURNAMENT_FINISHED,
                       matches=[match(A, C, 6, 0, 1, 1)]),
        ]
        profile = compute_player_profile("p1", roster(), tournaments, top_rivals=3)

        assert [r.player_id for r in profile.victims] == ["p5", "p6", "p3"]
        assert profile.victims[0].balance == 2
        assert profile.max_win_streak == 4

    def test_only_finished_tournaments(self):
        """Live tournaments are left out."""
        tournaments = [full_tournament("t1", "2025-01-05", status=TOURNAMENT_LIVE)]
        profile = compute_player_profile("p1", roster(), tournaments)

        assert profile.games_played == 0
        assert profile.tournaments == []

    def test_player_without_games(self):
        """A player who never played gets an empty profile."""
        profile = compute_player_profile("p9", roster(), [full_tournament("t1", "2025-01-05")])
        data = profile.to_dict()

        assert data["games_played"] == 0
        assert data["win_rate"] == 0
        assert data["partners"] == [] and data["victims"] == []
