# ttlsort/prober/fake.py
import threading

from ttlsort.errors import SetupError
from ttlsort.prober.base import Prober, inbound_icmp


class FakeSocket:
    def __init__(self):
        self.closed = False

    def close(self):
        self.closed = True


class FakeCapture:
    def __init__(self, error=None):
        self.running = False
        self.error = error


class FakeProber(Prober):
    """
    script: list of scapy packets handed to the listener in that order, as
    if they had arrived off the wire. Running out of script behaves like
    hitting the read deadline. The whole script is replayed when the
    capture starts; finish_capture raises what the replay raised.
    """

    def __init__(self, script=None, fail_open=False, fail_send=None, fail_capture=None):
        self.script = list(script or [])
        self.fail_open = fail_open
        self.fail_send = set(fail_send or ())
        self.fail_capture = fail_capture
        self.sent = []
        self.sockets = []
        self._lock = threading.Lock()

    def open_listener(self):
        if self.fail_open:
            raise SetupError("fake listener refused to open")
        sock = FakeSocket()
        self.sockets.append(sock)
        return sock

    def send_probe(self, destination, value):
        if value in self.fail_send:
            raise OSError(f"fake send failure for {value}")
        with self._lock:
            self.sent.append((destination, value))

    def start_capture(self, sock, handler, stop, timeout):
        try:
            self._replay(handler, stop)
        except Exception as e:
            return FakeCapture(error=e)
        return FakeCapture(error=self.fail_capture)

    def _replay(self, handler, stop):
        for pkt in self.script:
            if not inbound_icmp(pkt):
                continue
            handler(pkt)
            if stop(pkt):
                return

    def finish_capture(self, capture):
        if capture.error is not None:
            raise capture.error
