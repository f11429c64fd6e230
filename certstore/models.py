from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class KeyInfo:
    """Read-only metadata snapshot for one stored key.

    ``key`` is the physical key (configured prefix included) and is meant for
    diagnostics. A failed metadata probe yields the zero value; callers treat
    ``is_zero`` as "unknown or absent".
    """

    key: str = ""
    modified: datetime | None = None
    size: int = 0
    is_terminal: bool = False

    @classmethod
    def zero(cls) -> KeyInfo:
        return cls()

    @property
    def is_zero(self) -> bool:
        return self == KeyInfo()
