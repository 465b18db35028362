# ttlsort/codec.py
"""
Value <-> ICMP echo identifier mapping.

Identifiers are shifted by ID_OFFSET so that probes don't look like the
low ids other ping tools tend to use.
"""
from ttlsort.errors import InvalidValueError

MIN_TTL = 1
MAX_TTL = 255
ID_OFFSET = 100


def check_value(value: int) -> int:
    if not MIN_TTL <= value <= MAX_TTL:
        raise InvalidValueError(
            f"{value} is not a usable TTL (expected {MIN_TTL}..{MAX_TTL})")
    return value


def encode(value: int) -> int:
    return check_value(value) + ID_OFFSET


def decode(identifier: int) -> int:
    value = identifier - ID_OFFSET
    if not MIN_TTL <= value <= MAX_TTL:
        raise ValueError(f"identifier {identifier} was not produced by encode()")
    return value
