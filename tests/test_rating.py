"""
Unit tests for rating and standings recomputation.
"""
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from engine.errors import MalformedScore
from engine.models import Match
from engine.rating import coerce_score, compute_rating, ranking_table, recompute, team_standings


class TestComputeRating:
    """Tests for the rating formula."""

    def test_no_games_keeps_default(self):
        assert compute_rating(0, 0, 0) == 1000

    def test_two_wins_one_loss_plus_nine(self):
        rating = compute_rating(3, 2, 9)
        assert rating == pytest.approx(1296.67, abs=0.01)

    def test_clamped_high(self):
        assert compute_rating(1, 1, 100) == 1500

    def test_clamped_low(self):
        assert compute_rating(1, 0, -100) == 500


class TestRecompute:
    """Tests for rebuilding stats from match history."""

    def test_doubles_stats(self):
        matches = [
            Match(("A", "B"), ("C", "D"), 11, 5),
            Match(("A", "C"), ("B", "D"), 7, 11),
            Match(("A", "D"), ("B", "C"), 11, 8),
        ]
        players = recompute(matches, ["A", "B", "C", "D"])

        a = players["A"]
        assert a.games_played == 3
        assert a.games_won == 2
        assert a.games_lost == 1
        assert a.points_for == 29
        assert a.points_against == 24
        assert a.point_diff == 5
        assert a.rating == pytest.approx(1000 + (2 / 3) * 400 + (5 / 3) * 10)

    def test_tie_counts_neither_win_nor_loss(self):
        players = recompute([Match(("A",), ("B",), 9, 9)], ["A", "B"])
        assert players["A"].games_played == 1
        assert players["A"].games_won == 0
        assert players["A"].games_lost == 0

    def test_unscored_matches_ignored(self):
        players = recompute([Match(("A",), ("B",))], ["A", "B"])
        assert players["A"].games_played == 0
        assert players["A"].rating == 1000

    def test_one_side_scored_other_counts_as_zero(self):
        players = recompute([Match(("A",), ("B",), score_a=6)], ["A", "B"])
        assert players["A"].games_won == 1
        assert players["B"].points_for == 0
        assert players["B"].points_against == 6

    def test_idempotent(self):
        matches = [Match(("A", "B"), ("C", "D"), 11, 5), Match(("A", "C"), ("B", "D"), 4, 11)]
        first = recompute(matches, ["A", "B", "C", "D"])
        second = recompute(matches, ["A", "B", "C", "D"])
        assert first == second

    def test_players_without_games_listed(self):
        players = recompute([Match(("A",), ("B",), 2, 1)], ["A", "B", "C"])
        assert players["C"].games_played == 0
        assert players["C"].rating == 1000


class TestTables:
    """Tests for ranking and scoreboard ordering."""

    def test_ranking_order_and_rounding(self):
        matches = [
            Match(("A",), ("B",), 11, 2),
            Match(("A",), ("C",), 5, 11),
            Match(("A",), ("B",), 11, 5),
        ]
        rows = ranking_table(recompute(matches, ["A", "B", "C"]))

        assert [r['player'] for r in rows] == ["C", "A", "B"]
        assert [r['rank'] for r in rows] == [1, 2, 3]
        assert rows[1]['rating'] == 1296.67
        assert rows[1]['won'] == 2
        assert rows[1]['lost'] == 1
        assert rows[1]['diff'] == 9
        assert rows[2]['rating'] == 925.0

    def test_ranking_ties_broken_by_name(self):
        rows = ranking_table(recompute([], ["Zed", "Amy"]))
        assert [r['player'] for r in rows] == ["Amy", "Zed"]

    def test_team_standings_order(self):
        matches = [
            Match(("A",), ("B",), 21, 10),
            Match(("C",), ("D",), 21, 19),
            Match(("A",), ("C",), 15, 21),
            Match(("B",), ("D",), 21, 5),
        ]
        rows = team_standings(recompute(matches, ["A", "B", "C", "D"]))

        assert [r['team'] for r in rows] == ["C", "A", "B", "D"]
        assert rows[0] == {'team': 'C', 'won': 2, 'lost': 0, 'points': 42, 'diff': 8}


class TestCoerceScore:
    """Tests for score input coercion."""

    @pytest.mark.parametrize("raw,expected", [
        (11, 11),
        ("11", 11),
        (" 7 ", 7),
        ("0", 0),
        (3.0, 3),
        ("", None),
        ("   ", None),
        (None, None),
    ])
    def test_valid(self, raw, expected):
        assert coerce_score(raw) == expected

    @pytest.mark.parametrize("raw", ["abc", "1.5", "-3", -1, 2.5, True])
    def test_malformed(self, raw):
        with pytest.raises(MalformedScore):
            coerce_score(raw)
