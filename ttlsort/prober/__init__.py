from ttlsort.prober.base import Prober, inbound_icmp

__all__ = ["Prober", "inbound_icmp"]
