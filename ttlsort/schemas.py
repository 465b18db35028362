# ttlsort/schemas.py
from dataclasses import dataclass, field
from typing import List, Literal, Optional

ReplyKind = Literal["time_exceeded", "echo_reply"]


@dataclass(frozen=True)
class ReplyEvent:
    value: int          # decoded from the echo identifier
    origin: str         # address of the responder
    kind: ReplyKind = "time_exceeded"


@dataclass
class RoundResult:
    values: List[int] = field(default_factory=list)   # arrival order
    hops_to_target: Optional[int] = None               # None: destination never answered
