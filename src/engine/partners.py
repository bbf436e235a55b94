"""
Partner matching for rotating-doubles rounds.

Exhaustive branch-and-bound over the ways to split the active players into
pairs. The lowest-indexed unused player is always paired next, so every
partition is visited once and in a fixed order.
"""
import logging
import math
from typing import Dict, List, Optional, Sequence, Tuple

from engine.errors import NoFeasiblePartition
from engine.models import DEFAULT_RATING, CostTable

logger = logging.getLogger(__name__)

RATING_GAP_WEIGHT = 0.1

Pair = Tuple[str, str]


class PartnerMatcher:
    """
    Split active players into partner pairs minimizing the summed cost.

    A pair costs (times already partnered) ** 3, plus in ranked mode
    |rating gap| * RATING_GAP_WEIGHT.
    """

    def __init__(self, partnership_cost: CostTable, ratings: Optional[Dict[str, float]] = None, ranked: bool = False):
        self.partnership_cost = partnership_cost
        self.ratings = ratings or {}
        self.ranked = ranked
        self.nodes_visited = 0

    def pair_cost(self, a: str, b: str) -> float:
        repeats = self.partnership_cost.get(a, b)
        cost = float(repeats ** 3)
        if self.ranked:
            gap = abs(self.ratings.get(a, DEFAULT_RATING) - self.ratings.get(b, DEFAULT_RATING))
            cost += gap * RATING_GAP_WEIGHT
        return cost

    def match(self, active_players: Sequence[str]) -> List[Pair]:
        players = list(active_players)
        if len(players) % 2 != 0:
            raise NoFeasiblePartition(f"Cannot pair an odd number of players ({len(players)})")
        if not players:
            return []

        self.nodes_visited = 0
        used = [False] * len(players)
        best_pairs, best_cost = self._search(players, used, [], 0.0, None, math.inf)
        if best_pairs is None:
            raise NoFeasiblePartition(f"No partner partition found for {len(players)} players")

        logger.debug("Partner search visited %d nodes, best cost %.2f", self.nodes_visited, best_cost)
        return best_pairs

    def partition_cost(self, pairs: Sequence[Pair]) -> float:
        return sum(self.pair_cost(a, b) for a, b in pairs)

    def _search(self, players, used, chosen, cost, best_pairs, best_cost):
        """Returns (best_pairs, best_cost) after exploring below `chosen`."""
        self.nodes_visited += 1
        try:
            first = used.index(False)
        except ValueError:
            if cost < best_cost:
                return list(chosen), cost
            return best_pairs, best_cost

        used[first] = True
        for other in range(first + 1, len(players)):
            if used[other]:
                continue
            candidate = cost + self.pair_cost(players[first], players[other])
            # costs never go down further along a branch
            if candidate >= best_cost:
                continue
            used[other] = True
            chosen.append((players[first], players[other]))
            best_pairs, best_cost = self._search(players, used, chosen, candidate, best_pairs, best_cost)
            chosen.pop()
            used[other] = False
            if best_cost == 0 and not self.ranked:
                break
        used[first] = False
        return best_pairs, best_cost
