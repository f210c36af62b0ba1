"""Core value types, errors and result variants."""

from hyperembed.core.errors import (
    ErrorKind,
    HyperembedError,
    InvalidDimensionError,
    MalformedBufferError,
    NullInputError,
    OutOfRangeError,
)
from hyperembed.core.graph import Graph
from hyperembed.core.result import Err, Ok, Result
from hyperembed.core.types import Embedding, Vector, create_vector

__all__ = [
    "Embedding",
    "Err",
    "ErrorKind",
    "Graph",
    "HyperembedError",
    "InvalidDimensionError",
    "MalformedBufferError",
    "NullInputError",
    "Ok",
    "OutOfRangeError",
    "Result",
    "Vector",
    "create_vector",
]
