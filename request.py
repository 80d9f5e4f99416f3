
from dataclasses import dataclass, field
from typing import Any, Tuple

@dataclass(frozen=True)
class QueryRequest:
    sql: str
    params: Tuple[Any, ...] = field(default_factory=tuple)
