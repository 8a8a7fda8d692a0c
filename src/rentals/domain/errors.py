"""Domain-level errors.

Business rule violations are values, not exceptions.  Every expected
failure is described by a ``DomainError`` tagged with an ``ErrorKind`` so
callers (CLI, webhook adapters) can map it to their own semantics without
catching anything.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorKind(Enum):
    VALIDATION = "ValidationError"
    STATE_CONFLICT = "StateConflict"
    NOT_FOUND = "NotFound"
    CAPACITY_EXCEEDED = "CapacityExceeded"


@dataclass(frozen=True)
class DomainError:
    """A business rule or invariant was violated.

    ``code`` narrows the kind where it matters to callers, e.g.
    ``InvalidRange`` or ``CurrencyMismatch`` for validation errors.
    """

    kind: ErrorKind
    message: str
    code: str | None = None

    def __str__(self) -> str:
        return self.message
