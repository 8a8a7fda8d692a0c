"""The notion of "now" used by expiry and calendar logic.

Handlers take a ``Clock`` so tests can pin time; domain methods take an
explicit ``now``.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
