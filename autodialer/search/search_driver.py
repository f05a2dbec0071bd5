"""
Brute-Force Search Driver

Walks the combination space and tries every candidate on the lock. The lock
gives no feedback, so the search never stops on its own; the operator halts
it once the lock has physically opened.
"""

import logging
import time
from typing import Callable, Iterable, Iterator, List, Optional, Tuple

from ..control.combination import CombinationDialer
from ..control.opening_probe import OpeningProbe
from ..model.lock_state import DIAL_POSITIONS, LockState


Combination = Tuple[int, int, int]


def iter_candidates(start_offset: int = 0, step: int = 2) -> Iterator[Combination]:
    """
    Yield candidate combinations as ``(disk2, disk1, disk0)``.

    Disk 2 counts up from ``start_offset``, disk 1 counts down from the
    highest graduation on the step grid, disk 0 counts up from 0.
    """
    highest = DIAL_POSITIONS - step
    for disk2 in range(start_offset, DIAL_POSITIONS, step):
        for disk1 in range(highest, -1, -step):
            for disk0 in range(0, DIAL_POSITIONS, step):
                yield disk2, disk1, disk0


class SearchDriver:
    """Dials and probes every candidate combination in turn."""

    def __init__(self, state: LockState, dialer: CombinationDialer, probe: OpeningProbe,
                 step: int = 2):
        """
        Initialize search driver.

        Args:
            state: Lock state, provides the start offset
            dialer: Combination dialer
            probe: Opening probe run after each combination
            step: Graduation step between candidate numbers
        """
        self.state = state
        self.dialer = dialer
        self.probe = probe
        self.step = step
        self.logger = logging.getLogger(__name__)

        self._candidate_callbacks: List[Callable[[Combination], None]] = []
        self.attempts = 0

    def add_candidate_callback(self, callback: Callable[[Combination], None]):
        """Add callback notified before each candidate is dialed."""
        self._candidate_callbacks.append(callback)

    def candidates(self) -> Iterator[Combination]:
        return iter_candidates(self.state.start_offset, self.step)

    async def run(self, candidates: Optional[Iterable[Combination]] = None) -> int:
        """
        Dial and probe candidates.

        Args:
            candidates: Combinations to try (defaults to the full space from
                the current start offset)

        Returns:
            int: Number of candidates tried
        """
        if candidates is None:
            candidates = self.candidates()

        self.logger.info(f"Starting to test combinations (start offset {self.state.start_offset})")
        start_time = time.time()
        tried = 0

        for combination in candidates:
            disk2, disk1, disk0 = combination
            self.logger.info(f"Testing combination {disk2} - {disk1} - {disk0}")
            self._notify_candidate_callbacks(combination)

            await self.dialer.dial_combination(disk2, disk1, disk0)
            await self.probe.try_open()

            tried += 1
            self.attempts += 1

        self.logger.info(f"Tested {tried} combinations in {time.time() - start_time:.1f}s")
        return tried

    def _notify_candidate_callbacks(self, combination: Combination):
        for callback in self._candidate_callbacks:
            try:
                callback(combination)
            except Exception as e:
                self.logger.error(f"Candidate callback error: {e}")
