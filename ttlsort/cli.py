# ttlsort/cli.py
# Usage examples:
#   sudo python3 -m ttlsort 5 3 1 4 2
#   sudo python3 -m ttlsort --target example.com --iters 5 --chill 2 9 7 8
import argparse
import logging
import socket

from ttlsort.codec import MAX_TTL, MIN_TTL
from ttlsort.config import Settings
from ttlsort.coordinator import RoundCoordinator
from ttlsort.errors import SetupError, TTLSortError
from ttlsort.log import configure_logging
from ttlsort.loop import ConvergenceLoop

logger = logging.getLogger(__name__)


def resolve_target(host: str) -> str:
    """First IPv4 address of host."""
    try:
        infos = socket.getaddrinfo(host, None, socket.AF_INET)
    except (socket.gaierror, UnicodeError) as e:
        raise SetupError(f"Couldn't lookup {host}: {e}") from e
    for _family, _type, _proto, _canon, sockaddr in infos:
        logger.info("Will send echo requests to %s", sockaddr[0])
        return sockaddr[0]
    raise SetupError(f"Couldn't lookup {host}")


def build_argparser():
    ap = argparse.ArgumentParser(
        prog="ttlsort",
        description="Sort integers by using them as ICMP echo TTLs")
    ap.add_argument("values", type=int, nargs="*", help="Integers to sort (1..255)")
    ap.add_argument("--target", default="www.baidu.com", help="Target to use for sorting")
    ap.add_argument("--iters", type=int, default=3,
                    help="Perform the sort up to this many times (or until sorted)")
    ap.add_argument("--chill", type=float, default=3,
                    help="Seconds to sleep between sorts (anti-flood detection)")
    ap.add_argument("--timeout", type=float, default=10,
                    help="Seconds to wait for replies in each round")
    ap.add_argument("--iface", default=None, help="Interface to listen on")
    ap.add_argument("--lenient", action="store_true",
                    help="Skip unexpected ICMP types instead of aborting")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return ap


def settings_from_args(args) -> Settings:
    return Settings(
        target=args.target,
        max_rounds=args.iters,
        chill_s=args.chill,
        read_timeout_s=args.timeout,
        iface=args.iface,
        strict_icmp=not args.lenient,
        verbose=args.verbose,
    )


def main(argv=None, prober=None) -> int:
    ap = build_argparser()
    args = ap.parse_args(argv)
    bad = [v for v in args.values if not MIN_TTL <= v <= MAX_TTL]
    if bad:
        ap.error(f"values must be between {MIN_TTL} and {MAX_TTL}: {bad}")

    s = settings_from_args(args)
    configure_logging(s)
    logger.info("Will sort %s at most %d times and sleep for %ss between iterations.",
                args.values, s.max_rounds, s.chill_s)

    try:
        destination = resolve_target(s.target)
        if prober is None:
            from ttlsort.prober.scapy_prober import ScapyProber
            prober = ScapyProber(iface=s.iface, payload=s.payload)
        loop = ConvergenceLoop(RoundCoordinator(prober, s), s)
        loop.run(destination, args.values)
    except TTLSortError as e:
        logger.error("%s", e)
        return 1
    return 0
