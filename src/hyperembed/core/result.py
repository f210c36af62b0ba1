"""Explicit success/failure variants for callers that prefer not to catch."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

from hyperembed.core.errors import ERRORS_BY_KIND, ErrorKind, HyperembedError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """A successful result holding a value."""

    value: T

    def is_ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    """A failed result holding the error kind and message."""

    kind: ErrorKind
    message: str
    node_index: int | None = None

    @classmethod
    def from_exception(cls, error: HyperembedError) -> Err:
        """Build an Err from a raised hyperembed error."""
        return cls(kind=error.kind, message=error.message, node_index=error.node_index)

    def is_ok(self) -> bool:
        return False

    def to_exception(self) -> HyperembedError:
        """Rebuild the exception matching this error kind."""
        return ERRORS_BY_KIND[self.kind](self.message, node_index=self.node_index)

    def unwrap(self) -> Any:
        raise self.to_exception()


Result = Union[Ok[T], Err]
