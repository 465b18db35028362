# ttlsort/listener.py
import logging
from typing import Optional, Sequence

from scapy.all import ICMP, IP

from ttlsort import codec
from ttlsort.errors import ProtocolError
from ttlsort.schemas import ReplyEvent
from ttlsort.wire import (ICMP_ECHO_REPLY, ICMP_TIME_EXCEEDED, error_body,
                          quoted_identifier)

logger = logging.getLogger(__name__)

# Terminal marker put on the event queue once the listener is finished
DONE = object()


class ReplyListener:
    """
    Reads one round's worth of ICMP replies and turns each of them into a
    ReplyEvent. The listener is the only producer on the round's queue.
    """

    def __init__(self, prober, settings, destination: str, values: Sequence[int]):
        self.prober = prober
        self.settings = settings
        self.destination = destination
        # values still owed a reply; duplicates are owed one reply each
        self.outstanding = list(values)
        self.expected = len(self.outstanding)
        self.emitted = 0
        self._capture = None
        self._events = None

    def parse_reply(self, pkt) -> Optional[ReplyEvent]:
        if IP not in pkt or ICMP not in pkt:
            raise ProtocolError(f"not an ICMP/IPv4 packet: {pkt.summary()}")

        origin = pkt[IP].src
        icmp_type = pkt[ICMP].type

        if icmp_type == ICMP_TIME_EXCEEDED:
            identifier = quoted_identifier(error_body(pkt), self.destination)
            if identifier is None:
                logger.debug("Ignoring time exceeded for foreign traffic from %s", origin)
                return None
            kind = "time_exceeded"
        elif icmp_type == ICMP_ECHO_REPLY:
            identifier = pkt[ICMP].id
            kind = "echo_reply"
        elif self.settings.strict_icmp:
            raise ProtocolError(f"unexpected ICMP type {icmp_type} from {origin}")
        else:
            logger.warning("Skipping unexpected ICMP type %d from %s", icmp_type, origin)
            return None

        try:
            value = codec.decode(identifier)
        except ValueError:
            logger.debug("Ignoring ICMP with foreign ID=%d from %s", identifier, origin)
            return None

        if kind == "time_exceeded":
            logger.info("Time exceeded\tID=%d\t%s", identifier, origin)
        else:
            logger.info("Echo reply\t\tID=%d\t%s", identifier, origin)
        return ReplyEvent(value=value, origin=origin, kind=kind)

    def _handle(self, pkt) -> None:
        if self.emitted >= self.expected:
            return
        event = self.parse_reply(pkt)
        if event is None:
            return
        if event.value not in self.outstanding:
            # late reply from an earlier round, or a second reply for this value
            logger.debug("Ignoring reply for %d, not outstanding this round", event.value)
            return
        self.outstanding.remove(event.value)
        self.emitted += 1
        self._events.put(event)

    def _done(self, pkt) -> bool:
        return self.emitted >= self.expected

    def start(self, sock, events) -> None:
        self._events = events
        self._capture = self.prober.start_capture(sock, self._handle, self._done,
                                                  self.settings.read_timeout_s)

    @property
    def running(self) -> bool:
        return self._capture is not None and self._capture.running

    def join(self) -> None:
        """Wait for the capture to end, then put DONE or the fatal error on the queue."""
        try:
            self.prober.finish_capture(self._capture)
        except Exception as e:
            # hand it to the coordinator, it owns the decision to abort
            self._events.put(e)
            return
        if self.emitted < self.expected:
            logger.warning("Read deadline hit after %d/%d replies",
                           self.emitted, self.expected)
        self._events.put(DONE)
