"""
Opponent scheduling: group partner pairs into head-to-head matches.
"""
import logging
import math
import random
from typing import Dict, List, Optional, Sequence, Tuple

from engine.errors import NoFeasiblePartition
from engine.models import DEFAULT_RATING, CostTable, Match

logger = logging.getLogger(__name__)

# Balance outweighs opponent novelty once ranking is enabled
BALANCE_WEIGHT = 5
RATING_SCALE = 100.0

Pair = Tuple[str, ...]


class OpponentScheduler:
    """
    Pair up teams so the summed squared opponent repeats (and, in ranked
    mode, squared rating imbalance) is lowest. Court order of the chosen
    matches is shuffled with the injected random source.
    """

    def __init__(self, opponent_cost: CostTable, ratings: Optional[Dict[str, float]] = None,
                 ranked: bool = False, rng: Optional[random.Random] = None):
        self.opponent_cost = opponent_cost
        self.ratings = ratings or {}
        self.ranked = ranked
        self.rng = rng if rng is not None else random.Random()

    def _average_rating(self, team: Pair) -> float:
        return sum(self.ratings.get(p, DEFAULT_RATING) for p in team) / len(team)

    def match_cost(self, team_a: Pair, team_b: Pair) -> float:
        cost = float(sum(self.opponent_cost.get(p, q) ** 2 for p in team_a for q in team_b))
        if self.ranked:
            gap = abs(self._average_rating(team_a) - self._average_rating(team_b)) / RATING_SCALE
            cost += BALANCE_WEIGHT * gap ** 2
        return cost

    def match(self, partner_pairs: Sequence[Pair]) -> List[Match]:
        pairs = [tuple(p) for p in partner_pairs]
        if len(pairs) % 2 != 0:
            raise NoFeasiblePartition(f"Cannot match an odd number of teams ({len(pairs)})")
        if not pairs:
            return []

        best, best_cost = self._search(pairs, [], 0.0, None, math.inf)
        if best is None:
            raise NoFeasiblePartition(f"No opponent grouping found for {len(pairs)} teams")

        logger.debug("Opponent grouping cost %.2f for %d matches", best_cost, len(best))
        matches = [Match(team_a, team_b) for team_a, team_b in best]
        self.rng.shuffle(matches)
        return matches

    def _search(self, remaining, chosen, cost, best, best_cost):
        if not remaining:
            if cost < best_cost:
                return list(chosen), cost
            return best, best_cost

        first, rest = remaining[0], remaining[1:]
        for i, other in enumerate(rest):
            candidate = cost + self.match_cost(first, other)
            if candidate >= best_cost:
                continue
            chosen.append((first, other))
            best, best_cost = self._search(rest[:i] + rest[i + 1:], chosen, candidate, best, best_cost)
            chosen.pop()
        return best, best_cost
