"""
Tournament session: owns all mutable scheduling state for one tournament.

Rotating-doubles rounds are produced one at a time and react to entered
scores; fixed-team schedules are produced in full at start.
"""
import logging
import random
from typing import Dict, List

from engine import round_robin
from engine.errors import (
    DuplicateIdentifier, InsufficientRoster, MalformedScore, NoFeasiblePartition, TournamentError,
)
from engine.models import CostTable, Match, Round, find_duplicates, find_match, player_ratings
from engine.opponents import OpponentScheduler
from engine.partners import PartnerMatcher
from engine.rating import coerce_score, ranking_table, recompute, team_standings
from engine.rotation import SitOutRotator, active_player_count

logger = logging.getLogger(__name__)

FIXED_TEAM = 'fixed-team'
ROTATING_DOUBLES = 'rotating-doubles'
MODE_ALIASES = {
    'teams': FIXED_TEAM,
    'fixed': FIXED_TEAM,
    FIXED_TEAM: FIXED_TEAM,
    'americano': ROTATING_DOUBLES,
    'doubles': ROTATING_DOUBLES,
    ROTATING_DOUBLES: ROTATING_DOUBLES,
}
MIN_ENTRIES = {FIXED_TEAM: 2, ROTATING_DOUBLES: 4}
# six courts = 24 active players, about the limit of the exhaustive partner search
DEFAULT_MAX_COURTS = 6


def normalize_mode(mode: str) -> str:
    try:
        return MODE_ALIASES[str(mode).strip().lower()]
    except KeyError:
        raise TournamentError(f"Unknown mode: {mode}") from None


def get_default_settings() -> Dict:
    """Return default tournament settings."""
    return {
        'mode': ROTATING_DOUBLES,
        'courts': 2,
        'ranked': False,
        'seed': None,
        'max_courts': DEFAULT_MAX_COURTS,
    }


class TournamentSession:
    def __init__(self, roster, courts, mode=ROTATING_DOUBLES, ranked=False, seed=None,
                 max_courts=DEFAULT_MAX_COURTS):
        self.mode = normalize_mode(mode)
        self.roster = list(roster)
        self.max_courts = max_courts
        self.courts = max(1, min(int(courts), max_courts))
        # ranking only applies to rotating doubles
        self.ranked = bool(ranked) and self.mode == ROTATING_DOUBLES
        self.seed = seed

        self._validate_roster()

        self._rng = random.Random(seed)
        self.rounds: List[Round] = []
        self.partnership = CostTable(self.roster)
        self.opponents = CostTable(self.roster)
        self.rotator = SitOutRotator(self.roster)
        self.players = recompute([], self.roster)

    def _validate_roster(self):
        duplicates = find_duplicates(self.roster)
        if duplicates:
            raise DuplicateIdentifier(duplicates)
        needed = MIN_ENTRIES[self.mode]
        if len(self.roster) < needed:
            raise InsufficientRoster(self.mode, needed, len(self.roster))

    @property
    def round_number(self) -> int:
        return len(self.rounds)

    def _round_rng(self, number: int) -> random.Random:
        """Court-order shuffles are reproducible per round when a seed is set."""
        if self.seed is None:
            return self._rng
        return random.Random(f"{self.seed}-{number}")

    def start(self) -> List[Round]:
        """Generate the opening schedule: everything for fixed-team, round 1 otherwise."""
        self.reset()
        if self.mode == FIXED_TEAM:
            self.rounds = round_robin.schedule(self.roster, self.courts)
            for rnd in self.rounds:
                self._record_costs(rnd)
            logger.info("Generated %d fixed-team rounds for %d teams on %d courts",
                        len(self.rounds), len(self.roster), self.courts)
        else:
            self.next_round()
        return self.rounds

    def next_round(self) -> Round:
        """Generate the next rotating-doubles round from the current state."""
        if self.mode != ROTATING_DOUBLES:
            raise TournamentError("Fixed-team schedules are generated in full at start")

        self.recompute_ratings()
        ratings = player_ratings(self.players)
        number = self.round_number + 1

        active_count = active_player_count(len(self.roster), self.courts)
        sitters, new_queue = self.rotator.peek(len(self.roster) - active_count)
        sitting = set(sitters)
        active = [name for name in self.roster if name not in sitting]

        try:
            pairs = PartnerMatcher(self.partnership, ratings, self.ranked).match(active)
            matches = OpponentScheduler(self.opponents, ratings, self.ranked, self._round_rng(number)).match(pairs)
        except NoFeasiblePartition as e:
            logger.warning("Round %d left empty: %s", number, e)
            matches = []

        rnd = Round(number=number, matches=matches, sit_out=sitters)
        self.rotator.commit(new_queue)
        self._record_costs(rnd)
        self.rounds.append(rnd)
        logger.info("Generated round %d: %d matches, %d sitting out", number, len(matches), len(sitters))
        return rnd

    def _record_costs(self, rnd: Round):
        for match in rnd.matches:
            for team in (match.team_a, match.team_b):
                if len(team) == 2:
                    self.partnership.increment(team[0], team[1])
            for p in match.team_a:
                for q in match.team_b:
                    self.opponents.increment(p, q)

    def _match_at(self, round_index: int, court_index: int) -> Match:
        match = find_match(self.rounds, round_index, court_index)
        if match is None:
            raise IndexError(f"No match at round {round_index}, court {court_index}")
        return match

    def enter_score(self, round_index: int, court_index: int, side: str, raw) -> Match:
        """
        Record one side's score. Blank input clears the side; anything that
        is not a whole number is recorded as 0.
        """
        match = self._match_at(round_index, court_index)
        side = str(side).strip().lower()
        if side not in ('a', 'b'):
            raise TournamentError(f"Unknown side: {side}")
        try:
            value = coerce_score(raw)
        except MalformedScore as e:
            logger.warning("%s; using 0", e)
            value = 0
        if side == 'a':
            match.score_a = value
        else:
            match.score_b = value
        self.recompute_ratings()
        return match

    def set_match_score(self, round_index: int, court_index: int, score_a, score_b) -> Match:
        self.enter_score(round_index, court_index, 'a', score_a)
        return self.enter_score(round_index, court_index, 'b', score_b)

    def completed_matches(self) -> List[Match]:
        return [m for rnd in self.rounds for m in rnd.matches if m.is_completed]

    def recompute_ratings(self):
        self.players = recompute(self.completed_matches(), self.roster)
        return self.players

    def ranking(self) -> List[Dict]:
        return ranking_table(self.players)

    def standings(self) -> List[Dict]:
        return team_standings(self.players)

    def reset(self):
        """Drop every round and all derived state, keeping roster and settings."""
        self.rounds = []
        self.partnership.reset()
        self.opponents.reset()
        self.rotator.reset()
        self._rng = random.Random(self.seed)
        self.players = recompute([], self.roster)

    def to_dict(self) -> Dict:
        return {
            'mode': self.mode,
            'roster': list(self.roster),
            'courts': self.courts,
            'ranked': self.ranked,
            'seed': self.seed,
            'max_courts': self.max_courts,
            'round_number': self.round_number,
            'sit_out_queue': list(self.rotator.queue),
            'rounds': [rnd.to_dict() for rnd in self.rounds],
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'TournamentSession':
        """Rebuild a session from its stored record, replaying cost tables and ratings."""
        session = cls(
            roster=data['roster'],
            courts=data['courts'],
            mode=data['mode'],
            ranked=data.get('ranked', False),
            seed=data.get('seed'),
            max_courts=data.get('max_courts', DEFAULT_MAX_COURTS),
        )
        session.rounds = [Round.from_dict(r) for r in data.get('rounds') or []]
        for rnd in session.rounds:
            session._record_costs(rnd)
        session.rotator.restore(data.get('sit_out_queue'))
        session.recompute_ratings()
        return session

    def __repr__(self):
        return (f"TournamentSession(mode={self.mode}, players={len(self.roster)}, "
                f"courts={self.courts}, rounds={self.round_number})")
