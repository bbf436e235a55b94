"""
Ratings and standings recomputed from the full match history.
"""
from typing import Dict, Iterable, List, Optional

from engine.errors import MalformedScore
from engine.models import DEFAULT_RATING, MAX_RATING, MIN_RATING, Match, Player, clamp

WIN_RATE_WEIGHT = 400
POINT_DIFF_WEIGHT = 10


def coerce_score(raw) -> Optional[int]:
    """
    Convert score input to an int.

    Blank input (None or whitespace) means "not entered" and returns None.
    Anything else that is not a non-negative whole number raises
    MalformedScore.
    """
    if raw is None:
        return None
    if isinstance(raw, bool):
        raise MalformedScore(raw)
    if isinstance(raw, int):
        if raw < 0:
            raise MalformedScore(raw)
        return raw
    if isinstance(raw, float):
        if not raw.is_integer() or raw < 0:
            raise MalformedScore(raw)
        return int(raw)
    text = str(raw).strip()
    if not text:
        return None
    try:
        value = int(text)
    except ValueError:
        raise MalformedScore(raw) from None
    if value < 0:
        raise MalformedScore(raw)
    return value


def compute_rating(games_played: int, games_won: int, point_diff: int) -> float:
    """1000 + win rate * 400 + average point diff * 10, clamped to [500, 1500]."""
    if games_played <= 0:
        return DEFAULT_RATING
    win_rate = games_won / games_played
    avg_point_diff = point_diff / games_played
    return clamp(DEFAULT_RATING + win_rate * WIN_RATE_WEIGHT + avg_point_diff * POINT_DIFF_WEIGHT,
                 MIN_RATING, MAX_RATING)


def _accrue(player: Player, scored: int, conceded: int):
    player.games_played += 1
    player.points_for += scored
    player.points_against += conceded
    if scored > conceded:
        player.games_won += 1
    elif scored < conceded:
        player.games_lost += 1


def recompute(completed_matches: Iterable[Match], roster: Iterable[str]) -> Dict[str, Player]:
    """
    Rebuild every player's stats and rating from scratch.

    Only matches with at least one score entered count; a missing side
    counts as 0. Names outside the roster are picked up as they appear.
    """
    players = {name: Player(name) for name in roster}
    for match in completed_matches:
        if not match.is_completed:
            continue
        score_a, score_b = match.scores()
        for name in match.team_a:
            _accrue(players.setdefault(name, Player(name)), score_a, score_b)
        for name in match.team_b:
            _accrue(players.setdefault(name, Player(name)), score_b, score_a)

    for player in players.values():
        player.rating = compute_rating(player.games_played, player.games_won, player.point_diff)
    return players


def ranking_table(players: Dict[str, Player]) -> List[Dict]:
    """
    Ranking rows ordered by rating, then point differential, then name.

    Rating is rounded to two decimals for display.
    """
    ordered = sorted(players.values(), key=lambda p: (-p.rating, -p.point_diff, p.name))
    rows = []
    for rank, player in enumerate(ordered, start=1):
        rows.append({
            'rank': rank,
            'player': player.name,
            'rating': round(player.rating, 2),
            'games': player.games_played,
            'won': player.games_won,
            'lost': player.games_lost,
            'points_for': player.points_for,
            'points_against': player.points_against,
            'diff': player.point_diff,
        })
    return rows


def team_standings(players: Dict[str, Player]) -> List[Dict]:
    """Fixed-team scoreboard: wins, then point diff, then points scored."""
    ordered = sorted(players.values(), key=lambda p: (-p.games_won, -p.point_diff, -p.points_for, p.name))
    return [
        {
            'team': p.name,
            'won': p.games_won,
            'lost': p.games_lost,
            'points': p.points_for,
            'diff': p.point_diff,
        }
        for p in ordered
    ]
