# ttlsort/loop.py
import enum
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from ttlsort.codec import check_value

logger = logging.getLogger(__name__)


class SortState(enum.Enum):
    RUNNING = "running"
    CONVERGED = "converged"
    RANGE_CONFLICT = "range_conflict"
    ITERATIONS_EXHAUSTED = "iterations_exhausted"


@dataclass
class SortOutcome:
    state: SortState
    values: List[int] = field(default_factory=list)
    rounds: int = 0
    hops_to_target: Optional[int] = None

    @property
    def sorted(self) -> bool:
        return self.state is SortState.CONVERGED


def is_sorted(values: Sequence[int]) -> bool:
    return all(a <= b for a, b in zip(values, values[1:]))


class ConvergenceLoop:
    def __init__(self, coordinator, settings, sleep: Callable[[float], None] = time.sleep):
        self.coordinator = coordinator
        self.settings = settings
        self.sleep = sleep

    def run(self, destination: str, values: Sequence[int]) -> SortOutcome:
        for v in values:
            check_value(v)
        max_val = max(values, default=0)

        outcome = SortOutcome(state=SortState.RUNNING, values=list(values))
        while outcome.state is SortState.RUNNING:
            if outcome.rounds >= self.settings.max_rounds:
                outcome.state = SortState.ITERATIONS_EXHAUSTED
                break

            result = self.coordinator.run_round(destination, outcome.values)
            outcome.rounds += 1
            # the array literally becomes whatever order the replies came in
            outcome.values = list(result.values)
            if result.hops_to_target is not None:
                outcome.hops_to_target = result.hops_to_target
            logger.info("Current sorted array: %s", outcome.values)

            if result.hops_to_target is not None and max_val > result.hops_to_target:
                logger.error(
                    "We are sorting elements with values higher than distance to target host "
                    "(%d hops). Try adjusting the --target to be more hops away.",
                    result.hops_to_target)
                outcome.state = SortState.RANGE_CONFLICT
            elif is_sorted(outcome.values):
                outcome.state = SortState.CONVERGED
            elif outcome.rounds < self.settings.max_rounds:
                logger.info("Chilling for %ss (anti-flood detection)", self.settings.chill_s)
                self.sleep(self.settings.chill_s)

        if outcome.state is SortState.CONVERGED:
            logger.info("Et voilà! %s", outcome.values)
        elif outcome.state is SortState.ITERATIONS_EXHAUSTED:
            logger.info("Final result (try increasing --iters if you're not satisfied): %s",
                        outcome.values)
        return outcome
