# tests/test_scapy_prober.py
import pytest
from scapy.error import Scapy_Exception

from ttlsort.errors import ProtocolError, SetupError
from ttlsort.prober.scapy_prober import ScapyProber


class StoppedSniffer:
    """Stands in for an AsyncSniffer whose thread died with error."""

    def __init__(self, error=None):
        self.error = error
        self.running = False

    def join(self):
        if self.error is not None:
            raise self.error


@pytest.mark.parametrize("error", [OSError("Network is down"), Scapy_Exception("bad filter")])
def test_capture_failures_become_setup_errors(error):
    with pytest.raises(SetupError):
        ScapyProber().finish_capture(StoppedSniffer(error))


def test_protocol_errors_pass_through_unchanged():
    with pytest.raises(ProtocolError):
        ScapyProber().finish_capture(StoppedSniffer(ProtocolError("type 3")))


def test_clean_capture_finishes_quietly():
    ScapyProber().finish_capture(StoppedSniffer())
