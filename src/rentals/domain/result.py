"""Explicit success/failure values returned by domain operations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from rentals.domain.errors import DomainError, ErrorKind

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    error: DomainError

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind

    @property
    def message(self) -> str:
        return self.error.message


Result = Union[Ok[T], Err]


def validation_error(message: str, code: str | None = None) -> Err:
    return Err(DomainError(ErrorKind.VALIDATION, message, code))


def state_conflict(message: str, code: str | None = None) -> Err:
    return Err(DomainError(ErrorKind.STATE_CONFLICT, message, code))


def not_found(message: str) -> Err:
    return Err(DomainError(ErrorKind.NOT_FOUND, message))


def capacity_exceeded(message: str) -> Err:
    return Err(DomainError(ErrorKind.CAPACITY_EXCEEDED, message))
