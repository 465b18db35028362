# ttlsort/config.py
from dataclasses import dataclass
from typing import Optional


@dataclass
class Settings:
    target: str = "www.baidu.com"
    max_rounds: int = 3
    chill_s: float = 3.0            # sleep between rounds (anti-flood detection)
    read_timeout_s: float = 10.0    # per-round listener deadline
    payload: bytes = b"don't mind me"
    iface: Optional[str] = None     # None lets scapy pick conf.iface

    # Unknown ICMP types abort the round; False logs and skips them instead
    strict_icmp: bool = True

    verbose: bool = False
