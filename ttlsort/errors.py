# ttlsort/errors.py


class TTLSortError(Exception):
    """Base class for everything that aborts a run."""


class SetupError(TTLSortError):
    """Socket, interface or name resolution failure."""


class ProtocolError(TTLSortError):
    """An ICMP message we can't make sense of."""


class InvalidValueError(TTLSortError, ValueError):
    pass
