# ttlsort/prober/scapy_prober.py
import logging
from typing import Optional

from scapy.all import AsyncSniffer, conf, send
from scapy.error import Scapy_Exception

from ttlsort.errors import SetupError
from ttlsort.prober.base import Prober, inbound_icmp
from ttlsort.wire import build_probe

logger = logging.getLogger(__name__)


class ScapyProber(Prober):
    """
    Raw-socket prober on top of scapy. Needs root (or CAP_NET_RAW) and a
    libpcap/tcpdump install for the BPF filter.
    """

    def __init__(self, iface: Optional[str] = None, payload: bytes = b"don't mind me"):
        self.iface = iface
        self.payload = payload

    def open_listener(self):
        try:
            sock = conf.L2listen(iface=self.iface, filter="icmp")
        except (OSError, Scapy_Exception) as e:
            raise SetupError(f"could not open ICMP listener: {e}") from e
        logger.debug("Listening for ICMP on %s", self.iface or conf.iface)
        return sock

    def send_probe(self, destination: str, value: int) -> None:
        # send() opens and closes its own L3 socket, one per probe
        send(build_probe(destination, value, self.payload), verbose=False)

    def start_capture(self, sock, handler, stop, timeout):
        # Start sniffer before any probe goes out
        sniffer = AsyncSniffer(opened_socket=sock, prn=handler, lfilter=inbound_icmp,
                               stop_filter=stop, timeout=timeout, store=False)
        try:
            sniffer.start()
        except (OSError, Scapy_Exception) as e:
            raise SetupError(f"could not start ICMP capture: {e}") from e
        return sniffer

    def finish_capture(self, capture):
        # AsyncSniffer.join() re-raises whatever ended the sniffing thread
        try:
            capture.join()
        except (OSError, Scapy_Exception) as e:
            raise SetupError(f"ICMP capture failed: {e}") from e
