# ttlsort/sender.py
import logging
import threading
from typing import Iterable, List

from scapy.error import Scapy_Exception

logger = logging.getLogger(__name__)


def fire_probe(prober, destination: str, value: int) -> None:
    # No retries here: a lost probe is just a missing reply this round
    try:
        prober.send_probe(destination, value)
    except (OSError, Scapy_Exception) as e:
        logger.error("Failed to send probe TTL=%d to %s: %s", value, destination, e)
        return
    logger.debug("Sent echo request TTL=%d to %s", value, destination)


def launch_probes(prober, destination: str, values: Iterable[int]) -> List[threading.Thread]:
    """Start one fire-and-forget sender thread per value."""
    threads = []
    for value in values:
        t = threading.Thread(target=fire_probe, args=(prober, destination, value),
                             name=f"probe-ttl-{value}", daemon=True)
        t.start()
        threads.append(t)
    return threads
