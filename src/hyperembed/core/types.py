"""Vector and embedding value types shared by the engine, provider and codec."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Union

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from hyperembed.core.errors import NullInputError

# Smallest Euclidean / Poincaré dimension accepted by every operation.
MIN_DIMENSION = 2


class Vector(BaseModel):
    """An immutable ordered sequence of doubles.

    The model itself does not enforce a minimum dimension; operations that
    consume vectors validate it and report ``InvalidDimensionError`` with the
    offending index.
    """

    values: tuple[float, ...] = Field(..., description="Coordinates")

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_array(cls, data: Sequence[float] | np.ndarray) -> Vector:
        """Create a vector from any flat sequence of numbers."""
        return cls(values=tuple(np.asarray(data, dtype=np.float64).ravel().tolist()))

    @property
    def dim(self) -> int:
        return len(self.values)

    def to_numpy(self) -> np.ndarray:
        """Return the coordinates as a read-only float64 array."""
        return freeze(np.array(self.values, dtype=np.float64))

    def __len__(self) -> int:
        return len(self.values)

    def __getitem__(self, index: int) -> float:
        return self.values[index]


class Embedding(BaseModel):
    """An identified vector, as produced by the codec."""

    id: int | str = Field(..., description="Positional index or caller-supplied key")
    vector: tuple[float, ...] = Field(..., description="Embedding coordinates")

    model_config = ConfigDict(frozen=True)

    @property
    def dim(self) -> int:
        return len(self.vector)

    @property
    def data(self) -> tuple[float, ...]:
        """Alias for ``vector``."""
        return self.vector

    def to_numpy(self) -> np.ndarray:
        return freeze(np.array(self.vector, dtype=np.float64))

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {"id": self.id, "vector": list(self.vector)}


VectorLike = Union[Vector, Embedding, Sequence[float], np.ndarray]


def create_vector(data: Sequence[float] | np.ndarray) -> Vector:
    """Shorthand for :meth:`Vector.from_array`."""
    return Vector.from_array(data)


def freeze(array: np.ndarray) -> np.ndarray:
    """Mark an array read-only and return it."""
    array.flags.writeable = False
    return array


def as_float_array(value: VectorLike | None, name: str = "point") -> np.ndarray:
    """Coerce a vector-like value to a float64 numpy array.

    Raises:
        NullInputError: If ``value`` is None.
    """
    if value is None:
        raise NullInputError(f"Input cannot be None: {name}")
    if isinstance(value, Vector):
        return np.array(value.values, dtype=np.float64)
    if isinstance(value, Embedding):
        return np.array(value.vector, dtype=np.float64)
    return np.asarray(value, dtype=np.float64)
