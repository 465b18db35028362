# ttlsort/prober/base.py
from abc import ABC, abstractmethod
from typing import Callable

from scapy.all import ICMP

from ttlsort.wire import ICMP_ECHO_REQUEST

PacketHandler = Callable[[object], None]
StopCondition = Callable[[object], bool]


def inbound_icmp(pkt) -> bool:
    # the capture also sees our own echo requests leaving the box
    return ICMP in pkt and pkt[ICMP].type != ICMP_ECHO_REQUEST


class Prober(ABC):
    @abstractmethod
    def open_listener(self):
        """Open the receiving socket shared by one round's listener."""
        raise NotImplementedError

    @abstractmethod
    def send_probe(self, destination: str, value: int) -> None:
        """Send exactly one echo request to destination with TTL=value."""
        raise NotImplementedError

    @abstractmethod
    def start_capture(self, sock, handler: PacketHandler, stop: StopCondition,
                      timeout: float):
        """
        Start feeding inbound ICMP packets read from sock to handler in the
        background, until stop(pkt) is true or timeout seconds have passed.
        Returns a capture handle with a ``running`` attribute.
        """
        raise NotImplementedError

    @abstractmethod
    def finish_capture(self, capture) -> None:
        """Wait for a capture to end and re-raise whatever stopped it."""
        raise NotImplementedError
