"""Helpers shared by the CLI command modules."""

from __future__ import annotations

import asyncio
from typing import Awaitable, TypeVar

import click

from rentals.domain.model.booking import FulfillmentMethod
from rentals.domain.model.rate_tier import RateTierSpec
from rentals.domain.result import Err, Result

T = TypeVar("T")

FULFILLMENT_CHOICE = click.Choice([m.value for m in FulfillmentMethod], case_sensitive=False)


def run(call: Awaitable[Result[T]]) -> T:
    """Run a handler coroutine and unwrap its result for display."""
    result = asyncio.run(call)
    if isinstance(result, Err):
        raise click.ClickException(f"{result.kind.value}: {result.message}")
    return result.value


def parse_tiers(raw: str | None) -> list[RateTierSpec] | None:
    """Parse '3:900,7:700' (min days:cents per day) into tier specs."""
    if raw is None:
        return None
    specs: list[RateTierSpec] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if not pair:
            continue
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid tier format '{pair}'. Expected 'MinDays:CentsPerDay'."
            )
        days_str, cents_str = pair.split(":", 1)
        try:
            specs.append(RateTierSpec(int(days_str), int(cents_str)))
        except ValueError:
            raise click.BadParameter(f"Invalid tier '{pair}'.")
    return specs


def format_cents(cents: int, currency: str) -> str:
    return f"{currency} {cents // 100}.{cents % 100:02d}"
