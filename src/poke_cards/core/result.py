from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, NoReturn, TypeAlias, TypeVar

from poke_cards.core.errors import CardsError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def is_ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    error: CardsError

    @property
    def is_ok(self) -> bool:
        return False

    def unwrap(self) -> NoReturn:
        raise self.error


Result: TypeAlias = Ok[T] | Err


def capture(fn: Callable[..., T], *args: object, **kwargs: object) -> Result[T]:
    """Run `fn` and fold a raised CardsError into an Err.

    Anything that is not a CardsError propagates unchanged.
    """

    try:
        return Ok(fn(*args, **kwargs))
    except CardsError as e:
        return Err(e)
