"""
Fixed-team round robin using the circle method.
"""
from typing import List, Optional, Sequence, Tuple

from engine.models import Match, Round

BYE = None


def circle_rounds(teams: Sequence[str]) -> List[List[Tuple[str, str]]]:
    """
    Logical rounds of the circle method.

    An odd team count gets a bye entry; pairings touching the bye are left
    out. Position 0 stays fixed and the last entry moves to position 1
    between rounds.
    """
    entries: List[Optional[str]] = list(teams)
    if len(entries) % 2 != 0:
        entries.append(BYE)

    n = len(entries)
    rounds = []
    for _ in range(n - 1):
        pairings = []
        for i in range(n // 2):
            team_a = entries[i]
            team_b = entries[n - 1 - i]
            if team_a is BYE or team_b is BYE:
                continue
            pairings.append((team_a, team_b))
        rounds.append(pairings)
        entries.insert(1, entries.pop())
    return rounds


def circle_pairings(teams: Sequence[str]) -> List[Tuple[str, str]]:
    """Every unordered team pair exactly once, in generation order."""
    return [pairing for logical_round in circle_rounds(teams) for pairing in logical_round]


def bucket_into_rounds(pairings: Sequence[Tuple[str, str]], teams: Sequence[str], courts: int) -> List[Round]:
    """
    Pack pairings into physical rounds of at most `courts` matches.

    Pairings are taken greedily in order; one whose team is already seated
    in the round waits for a later round.
    """
    pending = list(pairings)
    rounds = []
    while pending:
        seated = set()
        placed = []
        waiting = []
        for team_a, team_b in pending:
            if len(placed) < courts and team_a not in seated and team_b not in seated:
                placed.append((team_a, team_b))
                seated.add(team_a)
                seated.add(team_b)
            else:
                waiting.append((team_a, team_b))
        matches = [Match((team_a,), (team_b,)) for team_a, team_b in placed]
        sit_out = [team for team in teams if team not in seated]
        rounds.append(Round(number=len(rounds) + 1, matches=matches, sit_out=sit_out))
        pending = waiting
    return rounds


def schedule(teams: Sequence[str], courts: int) -> List[Round]:
    """Full fixed-team schedule covering every team pair once."""
    if len(teams) < 2 or courts < 1:
        return []
    return bucket_into_rounds(circle_pairings(teams), teams, courts)
