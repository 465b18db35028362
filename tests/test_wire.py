# tests/test_wire.py
import pytest
from scapy.all import ICMP, IP, UDP, Raw

from ttlsort.codec import encode
from ttlsort.errors import ProtocolError
from ttlsort.wire import (QUOTED_ID_OFFSET, QUOTED_MIN_LEN, build_probe,
                          error_body, quoted_identifier)

from packets import DEST, ME, time_exceeded


def test_build_probe_sets_ttl_and_identifier():
    pkt = build_probe(DEST, 7, b"don't mind me")
    assert pkt[IP].dst == DEST
    assert pkt[IP].ttl == 7
    assert pkt[ICMP].type == 8
    assert pkt[ICMP].id == encode(7)
    assert pkt[Raw].load == b"don't mind me"


def test_quoted_identifier_reads_both_id_bytes():
    body = bytes(IP(src=ME, dst=DEST, ttl=2) / ICMP(type=8, id=350))
    assert quoted_identifier(body) == 350
    # the low byte sits 25 bytes into the body
    assert body[QUOTED_ID_OFFSET + 1] == 350 & 0xFF


def test_error_body_strips_outer_icmp_header():
    pkt = time_exceeded("10.0.0.1", 12)
    body = error_body(pkt)
    assert body[0] >> 4 == 4
    assert quoted_identifier(body) == encode(12)


def test_quoted_identifier_rejects_short_quote():
    with pytest.raises(ProtocolError):
        quoted_identifier(b"\x45" + b"\x00" * (QUOTED_MIN_LEN - 2))


def test_quoted_identifier_ignores_non_icmp_quote():
    body = bytes(IP(src=ME, dst=DEST) / UDP(sport=4000, dport=33434))
    assert quoted_identifier(body) is None


def test_quoted_identifier_ignores_non_echo_quote():
    body = bytes(IP(src=ME, dst=DEST) / ICMP(type=13, id=encode(5)))
    assert quoted_identifier(body) is None


def test_quoted_identifier_checks_quoted_destination():
    body = bytes(IP(src=ME, dst=DEST, ttl=2) / ICMP(type=8, id=encode(2)))
    assert quoted_identifier(body, DEST) == encode(2)
    assert quoted_identifier(body, "198.51.100.1") is None
