"""
Data models shared by the scheduling engine.
"""
from itertools import combinations
from typing import Dict, Iterable, List, Optional, Tuple

DEFAULT_RATING = 1000.0
MIN_RATING = 500.0
MAX_RATING = 1500.0


def pair_key(a: str, b: str) -> Tuple[str, str]:
    """Order-independent key for two identifiers: pair_key(a, b) == pair_key(b, a)."""
    return (a, b) if a <= b else (b, a)


class Player:
    def __init__(self, name, rating=DEFAULT_RATING):
        self.name = name
        self.rating = rating
        self.games_played = 0
        self.games_won = 0
        self.games_lost = 0
        self.points_for = 0
        self.points_against = 0

    @property
    def point_diff(self):
        return self.points_for - self.points_against

    def __eq__(self, other):
        if not isinstance(other, Player):
            return NotImplemented
        return (self.name, self.rating, self.games_played, self.games_won, self.games_lost,
                self.points_for, self.points_against) == \
               (other.name, other.rating, other.games_played, other.games_won, other.games_lost,
                other.points_for, other.points_against)

    def __repr__(self):
        return f"Player(name={self.name}, rating={self.rating:.2f}, games={self.games_played})"


class Match:
    """
    Two opposing teams on one court.

    A team is a tuple of identifiers: two player names in rotating-doubles
    mode, a single team name in fixed-team mode. Scores stay None until
    entered.
    """

    def __init__(self, team_a, team_b, score_a=None, score_b=None):
        self.team_a = tuple(team_a)
        self.team_b = tuple(team_b)
        self.score_a = score_a
        self.score_b = score_b

    @property
    def players(self) -> List[str]:
        return list(self.team_a) + list(self.team_b)

    @property
    def is_completed(self) -> bool:
        """A match counts once either side has a score entered."""
        return self.score_a is not None or self.score_b is not None

    def scores(self) -> Tuple[int, int]:
        return (self.score_a or 0, self.score_b or 0)

    def to_dict(self):
        return {
            'team_a': list(self.team_a),
            'team_b': list(self.team_b),
            'score_a': self.score_a,
            'score_b': self.score_b,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(data['team_a'], data['team_b'], data.get('score_a'), data.get('score_b'))

    def __repr__(self):
        return f"Match(team_a={self.team_a}, team_b={self.team_b}, score={self.score_a}-{self.score_b})"


class Round:
    """Matches in court order plus whoever sits out."""

    def __init__(self, number, matches=None, sit_out=None):
        self.number = number
        self.matches = matches if matches else []
        self.sit_out = sit_out if sit_out else []

    def to_dict(self):
        return {
            'number': self.number,
            'matches': [m.to_dict() for m in self.matches],
            'sit_out': list(self.sit_out),
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            number=data['number'],
            matches=[Match.from_dict(m) for m in data.get('matches') or []],
            sit_out=list(data.get('sit_out') or []),
        )

    def __repr__(self):
        return f"Round(number={self.number}, matches={len(self.matches)}, sit_out={self.sit_out})"


class CostTable:
    """
    Count of how often each unordered pair of identifiers shared a context
    (teammates or opponents). Every pair of the roster starts at zero.
    """

    def __init__(self, names: Iterable[str]):
        self.names = list(names)
        self.counts: Dict[Tuple[str, str], int] = {}
        self.reset()

    def reset(self):
        self.counts = {pair_key(a, b): 0 for a, b in combinations(self.names, 2)}

    def get(self, a: str, b: str) -> int:
        return self.counts.get(pair_key(a, b), 0)

    def increment(self, a: str, b: str, amount: int = 1):
        key = pair_key(a, b)
        self.counts[key] = self.counts.get(key, 0) + amount

    def total(self) -> int:
        return sum(self.counts.values())

    def __repr__(self):
        repeated = sum(1 for v in self.counts.values() if v > 1)
        return f"CostTable(pairs={len(self.counts)}, total={self.total()}, repeated={repeated})"


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def find_duplicates(names: Iterable[str]) -> List[str]:
    """Names that appear more than once, in first-repeat order."""
    seen = set()
    duplicates: List[str] = []
    for name in names:
        if name in seen and name not in duplicates:
            duplicates.append(name)
        seen.add(name)
    return duplicates


def team_label(team: Tuple[str, ...], joiner: str = ' & ') -> str:
    return joiner.join(team)


def player_ratings(players: Dict[str, Player]) -> Dict[str, float]:
    return {name: player.rating for name, player in players.items()}


def find_match(rounds: List[Round], round_index: int, court_index: int) -> Optional[Match]:
    if not 0 <= round_index < len(rounds):
        return None
    matches = rounds[round_index].matches
    if not 0 <= court_index < len(matches):
        return None
    return matches[court_index]
