"""Result values for engine operations.

``attempt`` runs an engine operation and returns ``Success`` or ``Failure``
instead of raising, so callers can branch on ``Failure.kind``.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from esstax.exceptions import ErrorKind, EssComputationError

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    kind: ErrorKind
    message: str
    details: dict = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return False


Outcome = Success[T] | Failure


def attempt(operation: Callable[..., T], *args: Any, **kwargs: Any) -> Outcome[T]:
    """Call ``operation``; engine errors become a Failure, anything else propagates."""
    try:
        return Success(operation(*args, **kwargs))
    except EssComputationError as exc:
        return Failure(kind=exc.kind, message=str(exc), details=exc.details)
