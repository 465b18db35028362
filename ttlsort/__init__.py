"""Sort integers by firing them at the internet as ICMP echo TTLs."""

__version__ = "0.1.0"
