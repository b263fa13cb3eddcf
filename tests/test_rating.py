"""
Unit tests for the rating engine.
"""

import json
import random

import pytest

from src.tournament.models import Match, Player, Tournament
from src.tournament.rating import (
    RatingConfig,
    RatingEngine,
    compute_ratings,
    tier_of,
    with_dynamic_ratings,
)
from src.utils.constants import TOURNAMENT_FINISHED, TOURNAMENT_LIVE

A = ("p1", "p2")
B = ("p3", "p4")
C = ("p5", "p6")
D = ("p7", "p8")


def roster(n: int = 8):
    return [Player(id=f"p{i}", name=f"Player {i}") for i in range(1, n + 1)]


def match(team1, team2, s1, s2, rnd=1, court=1) -> Match:
    return Match(
        id=f"r{rnd}c{court}", team1=team1, team2=team2,
        score1=s1, score2=s2, court=court, round=rnd, status="finished"
    )


def tournament(tid, date, matches, status=TOURNAMENT_FINISHED) -> Tournament:
    return Tournament(id=tid, date=date, status=status, matches=matches)


def full_tournament(tid, date):
    """A sweeps every match; C second, D third, B last."""
    return tournament(tid, date, [
        match(A, B, 6, 3, 1, 1),
        match(C, D, 6, 4, 1, 2),
        match(A, C, 6, 2, 2, 1),
        match(B, D, 5, 6, 2, 2),
        match(A, D, 6, 1, 3, 1),
        match(B, C, 4, 6, 3, 2),
    ])


class TestTierOf:
    """Tests for the level mapping."""

    @pytest.mark.parametrize("points,level", [
        (800, "Level 1"),
        (1199, "Level 1"),
        (1200, "Level 2"),
        (1399, "Level 2"),
        (1400, "Level 3"),
        (1599, "Level 3"),
        (1600, "Pro"),
        (2500, "Pro"),
    ])
    def test_boundaries(self, points, level):
        """Thresholds are inclusive."""
        assert tier_of(points) == level


class TestComputeRatings:
    """Tests for compute_ratings."""

    def test_initial_state(self):
        """Players with no tournaments stay at the start snapshot."""
        ratings = compute_ratings(roster(2), [])

        assert list(ratings) == ["p1", "p2"]
        assert ratings["p1"].current == 1000
        assert [s.to_dict() for s in ratings["p1"].history] == [
            {"label": "start", "points": 1000, "level": "Level 1"}
        ]

    def test_win_then_loss(self):
        """1000 + 20 - 12 = 1008 for a non-champion."""
        t = tournament("t1", "2025-01-05", [
            match(A, B, 6, 3),
            match(C, A, 6, 0, rnd=2),
        ])
        ratings = compute_ratings(roster(), [t])

        assert ratings["p1"].current == 1008
        assert ratings["p3"].current == 988
        # C won once and is the champion: +20 +50
        assert ratings["p5"].current == 1070

    def test_eight_losses(self):
        """Eight losses from 1000 reach 904."""
        t = tournament("t1", "2025-01-05", [match(A, B, 0, 6, rnd=i) for i in range(8)])
        ratings = compute_ratings(roster(), [t])
        assert ratings["p1"].current == 904

    def test_floor_clamp(self):
        """A loss from 810 stops at 800."""
        config = RatingConfig(initial_rating=810)
        t = tournament("t1", "2025-01-05", [match(A, B, 0, 6)])
        ratings = compute_ratings(roster(), [t], config)
        assert ratings["p1"].current == 800

    def test_floor_is_applied_per_match(self):
        """Repeated losses never go below the floor."""
        t = tournament("t1", "2025-01-05", [match(A, B, 0, 6, rnd=i) for i in range(30)])
        ratings = compute_ratings(roster(), [t])
        assert ratings["p1"].current == 800

    def test_champion_bonus_once(self):
        """Winning all three matches gives one +50 per player."""
        ratings = compute_ratings(roster(), [full_tournament("t1", "2025-01-05")])

        assert ratings["p1"].current == 1000 + 3 * 20 + 50
        assert ratings["p2"].current == 1000 + 3 * 20 + 50
        # C: two wins, one loss, no bonus
        assert ratings["p5"].current == 1000 + 2 * 20 - 12

    def test_tie_is_a_loss_for_both_sides(self):
        """Neither side of a tied match has a strictly greater score."""
        t = tournament("t1", "2025-01-05", [match(A, B, 4, 4), match(C, D, 6, 0, court=2)])
        ratings = compute_ratings(roster(), [t])

        assert ratings["p1"].current == 988
        assert ratings["p3"].current == 988

    def test_history_entries(self):
        """One snapshot per tournament played, labelled with its date."""
        t1 = full_tournament("t1", "2025-01-05")
        t2 = full_tournament("t2", "2025-02-10T19:30:00.000Z")
        ratings = compute_ratings(roster(), [t1, t2])

        history = ratings["p1"].history
        assert [s.label for s in history] == ["start", "05 Jan", "10 Feb"]
        assert [s.points for s in history] == [1000, 1110, 1220]
        assert [s.level for s in history] == ["Level 1", "Level 1", "Level 2"]
        assert ratings["p1"].level == "Level 2"

    def test_absent_player_gets_no_entry(self):
        """Only players who took part get a snapshot."""
        t = tournament("t1", "2025-01-05", [match(A, B, 6, 3)])
        ratings = compute_ratings(roster(), [t])

        assert len(ratings["p1"].history) == 2
        assert len(ratings["p5"].history) == 1
        assert ratings["p5"].current == 1000

    def test_unknown_player_skipped(self):
        """Ids missing from the roster are ignored."""
        t = tournament("t1", "2025-01-05", [match(("p1", "ghost"), B, 6, 3)])
        ratings = compute_ratings(roster(), [t])

        assert "ghost" not in ratings
        assert ratings["p1"].current == 1000 + 20 + 50

    def test_tournament_without_matches_skipped(self):
        """A tournament with no match list changes nothing."""
        t = tournament("t1", "2025-01-05", None)
        ratings = compute_ratings(roster(), [t])

        assert ratings["p1"].current == 1000
        assert len(ratings["p1"].history) == 1

    def test_unfinished_tournament_skipped(self):
        """Live tournaments are not replayed."""
        t = tournament("t1", "2025-01-05", [match(A, B, 6, 3)], status=TOURNAMENT_LIVE)
        ratings = compute_ratings(roster(), [t])
        assert ratings["p1"].current == 1000

    def test_chronological_replay(self):
        """History follows tournament dates, not input order."""
        early = tournament("t1", "2025-01-05", [match(A, B, 0, 6)])
        late = tournament("t2", "2025-03-01", [match(A, B, 6, 0)])
        ratings = compute_ratings(roster(), [late, early])

        assert [s.label for s in ratings["p1"].history] == ["start", "05 Jan", "01 Mar"]
        assert [s.points for s in ratings["p1"].history] == [1000, 988, 1058]

    def test_input_order_does_not_matter(self):
        """Shuffling the tournament list gives the same result."""
        tournaments = [
            full_tournament("t1", "2025-01-05"),
            tournament("t2", "2025-01-12", [match(B, C, 6, 1), match(A, D, 2, 6, court=2)]),
            tournament("t3", "2025-02-02", [match(D, C, 6, 4), match(B, A, 6, 5, court=2)]),
        ]
        expected = compute_ratings(roster(), tournaments)

        rng = random.Random(3)
        for _ in range(5):
            shuffled = tournaments[:]
            rng.shuffle(shuffled)
            result = compute_ratings(roster(), shuffled)
            assert {k: v.to_dict() for k, v in result.items()} == \
                {k: v.to_dict() for k, v in expected.items()}

    def test_deterministic(self):
        """Two calls serialize identically."""
        tournaments = [full_tournament("t1", "2025-01-05"), full_tournament("t2", "2025-01-06")]
        first = json.dumps({k: v.to_dict() for k, v in compute_ratings(roster(), tournaments).items()})
        second = json.dumps({k: v.to_dict() for k, v in compute_ratings(roster(), tournaments).items()})
        assert first == second

    def test_inputs_unchanged(self):
        """Players and tournaments are not modified."""
        players = roster()
        tournaments = [full_tournament("t2", "2025-02-01"), full_tournament("t1", "2025-01-01")]
        before = [t.to_dict() for t in tournaments]

        compute_ratings(players, tournaments)

        assert [t.to_dict() for t in tournaments] == before
        assert [t.id for t in tournaments] == ["t2", "t1"]
        assert all(p.rating_points is None for p in players)

    def test_engine_is_stateless(self):
        """Reusing an engine does not carry ratings between calls."""
        engine = RatingEngine()
        t = full_tournament("t1", "2025-01-05")
        engine.compute(roster(), [t])
        assert engine.compute(roster(), [t])["p1"].current == 1110


class TestDynamicRatings:
    """Tests for with_dynamic_ratings."""

    def test_players_get_points_and_level(self):
        """Copies carry the derived rating and level."""
        players = roster()
        tournaments = [full_tournament(f"t{i}", f"2025-01-{i + 1:02d}") for i in range(2)]
        updated = with_dynamic_ratings(players, compute_ratings(players, tournaments))

        p1 = next(p for p in updated if p.id == "p1")
        assert p1.rating_points == 1220
        assert p1.level == "Level 2"
        assert players[0].rating_points is None

    def test_missing_rating_uses_initial(self):
        """Players without a record get the starting rating."""
        updated = with_dynamic_ratings(roster(1), {})
        assert updated[0].rating_points == 1000
        assert updated[0].level == "Level 1"
