"""
Error taxonomy for the scheduling engine.
"""


class TournamentError(Exception):
    """Base class for scheduling errors."""


class InsufficientRoster(TournamentError):
    def __init__(self, mode, needed, found):
        self.mode = mode
        self.needed = needed
        self.found = found
        unit = 'teams' if mode == 'fixed-team' else 'players'
        super().__init__(f"Not enough {unit} for one court. Needed: {needed}, Found: {found}.")


class DuplicateIdentifier(TournamentError):
    def __init__(self, names):
        self.names = list(names)
        super().__init__(f"Duplicate names in roster: {', '.join(self.names)}")


class NoFeasiblePartition(TournamentError):
    """A solver exhausted its search space without covering every entry."""


class MalformedScore(TournamentError, ValueError):
    def __init__(self, raw):
        self.raw = raw
        super().__init__(f"Score is not a whole number: {raw!r}")
