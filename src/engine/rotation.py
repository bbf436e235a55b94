"""
Sit-out rotation for rotating-doubles rounds.

The queue is ordered by time since a player last sat out: the front has
waited longest and sits next. Sitters go to the back.
"""
from typing import List, Sequence, Tuple

PLAYERS_PER_COURT = 4


def active_player_count(roster_size: int, courts: int) -> int:
    """Largest multiple of four not exceeding min(courts * 4, roster_size)."""
    slots = min(courts * PLAYERS_PER_COURT, roster_size)
    return (slots // PLAYERS_PER_COURT) * PLAYERS_PER_COURT


def sit_out_count(roster_size: int, courts: int) -> int:
    return roster_size - active_player_count(roster_size, courts)


def next_sit_outs(queue: Sequence[str], sit_count: int, roster: Sequence[str]) -> Tuple[List[str], List[str]]:
    """
    Take the first sit_count entries of the queue as sitters.

    Returns (sitters, new_queue) where new_queue is the rest of the queue in
    its original order followed by the sitters. A queue shorter than
    sit_count is refilled from the roster first.
    """
    queue = list(queue)
    if sit_count <= 0:
        return [], queue
    if len(queue) < sit_count:
        queue = list(roster)
    sitters = queue[:sit_count]
    return sitters, queue[sit_count:] + sitters


class SitOutRotator:
    """Holds the sit-out queue for one tournament."""

    def __init__(self, roster):
        self.roster = list(roster)
        self.queue = list(self.roster)

    def peek(self, sit_count: int) -> Tuple[List[str], List[str]]:
        """Sitters and resulting queue, without committing the rotation."""
        return next_sit_outs(self.queue, sit_count, self.roster)

    def commit(self, new_queue: List[str]):
        self.queue = list(new_queue)

    def next_sit_outs(self, sit_count: int) -> List[str]:
        sitters, new_queue = self.peek(sit_count)
        self.commit(new_queue)
        return sitters

    def restore(self, queue):
        """Adopt a stored queue if it is still a permutation of the roster."""
        queue = list(queue or [])
        if sorted(queue) == sorted(self.roster):
            self.queue = queue
        else:
            self.queue = list(self.roster)

    def reset(self):
        self.queue = list(self.roster)

    def __repr__(self):
        return f"SitOutRotator(queue={self.queue})"
