# ttlsort/wire.py
"""
Probe construction and the bits of ICMP layout we parse by hand.

A Time Exceeded message quotes the datagram that expired: its IPv4 header
followed by (at least) the first 8 bytes of our echo request. With the
minimal 20-byte header we send, the quoted echo header starts at byte 20
and its identifier occupies bytes 24..25, big-endian. Routers that add IP
options to the quote or truncate it break this layout.
"""
import socket
import struct
from typing import Optional

from scapy.all import ICMP, IP, Raw

from ttlsort import codec
from ttlsort.errors import ProtocolError

ICMP_ECHO_REPLY = 0
ICMP_ECHO_REQUEST = 8
ICMP_TIME_EXCEEDED = 11

IPPROTO_ICMP = 1
ICMP_HEADER_LEN = 8

# offsets inside the quoted datagram
QUOTED_IP_HEADER_LEN = 20
QUOTED_PROTO_OFFSET = 9
QUOTED_DST_OFFSET = 16
QUOTED_TYPE_OFFSET = QUOTED_IP_HEADER_LEN
QUOTED_ID_OFFSET = QUOTED_IP_HEADER_LEN + 4
QUOTED_MIN_LEN = QUOTED_ID_OFFSET + 2

_ID = struct.Struct("!H")


def build_probe(destination: str, value: int, payload: bytes) -> IP:
    return (IP(dst=destination, ttl=value)
            / ICMP(type=ICMP_ECHO_REQUEST, id=codec.encode(value))
            / Raw(load=payload))


def error_body(pkt) -> bytes:
    """Raw bytes following the 8-byte header of the outer ICMP message."""
    return bytes(pkt[ICMP])[ICMP_HEADER_LEN:]


def quoted_identifier(body: bytes, destination: Optional[str] = None) -> Optional[int]:
    """
    Pull the echo identifier out of a Time Exceeded body.

    Returns None when the quoted datagram is not an ICMP echo request (to
    destination, if given), i.e. the error is about somebody else's traffic.
    """
    if len(body) < QUOTED_MIN_LEN:
        raise ProtocolError(
            f"quoted datagram too short: {len(body)} bytes, need {QUOTED_MIN_LEN}")
    if body[QUOTED_PROTO_OFFSET] != IPPROTO_ICMP:
        return None
    if body[QUOTED_TYPE_OFFSET] != ICMP_ECHO_REQUEST:
        return None
    if destination is not None and \
            body[QUOTED_DST_OFFSET:QUOTED_DST_OFFSET + 4] != socket.inet_aton(destination):
        return None
    (identifier,) = _ID.unpack_from(body, QUOTED_ID_OFFSET)
    return identifier
