"""Result values returned by store operations."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class FailureKind(str, Enum):
    NOT_FOUND = "not_found"
    DUPLICATE = "duplicate"
    INVALID_REFERENCE = "invalid_reference"
    MALFORMED_INPUT = "malformed_input"


@dataclass(frozen=True)
class Outcome:
    """Success, or a typed reason the operation was rejected.

    A rejected operation never changes the store. ``value`` carries the
    operation's product when there is one (the id of a new process).
    """
    ok: bool
    kind: Optional[FailureKind] = None
    message: str = ""
    value: Any = None

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, value: Any = None) -> "Outcome":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, kind: FailureKind, message: str) -> "Outcome":
        return cls(ok=False, kind=kind, message=message)
