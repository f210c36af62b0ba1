"""Exceptions raised by the hyperembed geometry and codec core."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Closed set of failure kinds reported by the core."""

    NULL_INPUT = "null_input"
    INVALID_DIMENSION = "invalid_dimension"
    OUT_OF_RANGE = "out_of_range"
    MALFORMED_BUFFER = "malformed_buffer"


class HyperembedError(Exception):
    """Base exception for all hyperembed errors.

    Attributes:
        kind: The failure kind, used by result variants and callers that
            dispatch on the kind instead of the class.
        node_index: Index of the offending node or record, when known.
    """

    kind: ErrorKind

    def __init__(self, message: str, node_index: int | None = None):
        super().__init__(message)
        self.message = message
        self.node_index = node_index

    def at_node(self, node_index: int) -> HyperembedError:
        """Return a copy of this error annotated with a node index."""
        return type(self)(f"node {node_index}: {self.message}", node_index=node_index)


class NullInputError(HyperembedError, TypeError):
    """A required argument is absent."""

    kind = ErrorKind.NULL_INPUT


class InvalidDimensionError(HyperembedError, ValueError):
    """
    A vector has the wrong number of coordinates.

    Raised when:
    - A Euclidean/Poincaré vector has fewer than 2 coordinates
    - A Lorentz point has fewer than 3 coordinates
    - Vectors within one batch or codec call disagree on dimension
    """

    kind = ErrorKind.INVALID_DIMENSION


class OutOfRangeError(HyperembedError, ValueError):
    """
    A point lies outside the domain of the requested map.

    Raised when:
    - A Poincaré point has norm >= 1 or non-finite coordinates
    - A Lorentz point is not on (or near) the upper sheet of the hyperboloid
    """

    kind = ErrorKind.OUT_OF_RANGE


class MalformedBufferError(HyperembedError, ValueError):
    """A binary buffer's declared shape does not match its byte length."""

    kind = ErrorKind.MALFORMED_BUFFER


ERRORS_BY_KIND: dict[ErrorKind, type[HyperembedError]] = {
    ErrorKind.NULL_INPUT: NullInputError,
    ErrorKind.INVALID_DIMENSION: InvalidDimensionError,
    ErrorKind.OUT_OF_RANGE: OutOfRangeError,
    ErrorKind.MALFORMED_BUFFER: MalformedBufferError,
}
