# ttlsort/coordinator.py
import logging
import queue
from typing import List, Sequence

from ttlsort.listener import DONE, ReplyListener
from ttlsort.schemas import RoundResult
from ttlsort.sender import launch_probes

logger = logging.getLogger(__name__)

# how often to check whether the capture has ended while no reply comes in
POLL_INTERVAL_S = 0.05


class RoundCoordinator:
    def __init__(self, prober, settings):
        self.prober = prober
        self.settings = settings

    def run_round(self, destination: str, values: Sequence[int]) -> RoundResult:
        """
        Fire every value at destination at once and return them in the
        order their replies came back. Values whose reply misses the read
        deadline are dropped from the result.
        """
        if not values:
            return RoundResult()

        sock = self.prober.open_listener()
        try:
            return self._collect(sock, destination, list(values))
        finally:
            sock.close()

    def _collect(self, sock, destination: str, values: List[int]) -> RoundResult:
        events = queue.Queue(maxsize=len(values) + 1)
        listener = ReplyListener(self.prober, self.settings, destination, values)
        listener.start(sock, events)
        launch_probes(self.prober, destination, values)

        result = RoundResult()
        waiting = list(values)
        joined = False
        while True:
            try:
                item = events.get(timeout=POLL_INTERVAL_S)
            except queue.Empty:
                if not joined and not listener.running:
                    listener.join()
                    joined = True
                continue
            if item is DONE:
                break
            if isinstance(item, BaseException):
                raise item

            result.values.append(item.value)
            is_original_dst = item.origin == destination
            logger.debug("isOriginalDst=%s (%s, %s)", is_original_dst, destination, item.origin)
            if is_original_dst and (result.hops_to_target is None
                                    or item.value < result.hops_to_target):
                result.hops_to_target = item.value

            waiting.remove(item.value)
            logger.debug("Still waiting for %s", waiting)

        if waiting:
            logger.warning("No reply this round for %s", waiting)
        return result
