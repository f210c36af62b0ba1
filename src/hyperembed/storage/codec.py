"""Binary wire format for ordered batches of embeddings.

Layout (all little-endian)::

    offset 0   uint32  record_count
    offset 4   uint32  dimension
    offset 8   float64[record_count * dimension]  row-major values

No compression and no version field: callers that need forward
compatibility wrap the payload in their own envelope.
"""

from __future__ import annotations

import logging
import struct
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from hyperembed.core.errors import (
    HyperembedError,
    InvalidDimensionError,
    MalformedBufferError,
    NullInputError,
)
from hyperembed.core.types import MIN_DIMENSION, Embedding, VectorLike, as_float_array

logger = logging.getLogger(__name__)

HEADER = struct.Struct("<II")
HEADER_SIZE = HEADER.size
VALUE_DTYPE = np.dtype("<f8")
VALUE_SIZE = VALUE_DTYPE.itemsize
MAX_UINT32 = 0xFFFFFFFF

BufferLike = bytes | bytearray | memoryview


@dataclass(frozen=True)
class BufferHeader:
    """Decoded header of an embedding buffer."""

    record_count: int
    dimension: int

    @property
    def body_size(self) -> int:
        return self.record_count * self.dimension * VALUE_SIZE

    @property
    def total_size(self) -> int:
        return HEADER_SIZE + self.body_size


def _as_rows(vectors: Sequence[VectorLike] | np.ndarray) -> np.ndarray:
    if isinstance(vectors, np.ndarray):
        rows = np.asarray(vectors, dtype=np.float64)
        if rows.ndim == 1 and rows.size == 0:
            return rows.reshape(0, 0)
        if rows.ndim != 2:
            raise InvalidDimensionError(
                f"Expected a 2-D array of embeddings, got shape {rows.shape}"
            )
        if rows.shape[0] and rows.shape[1] < MIN_DIMENSION:
            raise InvalidDimensionError(
                f"Embeddings need at least {MIN_DIMENSION} coordinates, got {rows.shape[1]}"
            ).at_node(0)
        return rows

    arrays = []
    dim: int | None = None
    for index, vector in enumerate(vectors):
        try:
            arr = as_float_array(vector, "embedding")
        except HyperembedError as exc:
            raise exc.at_node(index) from exc
        if arr.ndim != 1:
            raise InvalidDimensionError(
                f"Expected a 1-D embedding, got shape {arr.shape}"
            ).at_node(index)
        if dim is None:
            if arr.size < MIN_DIMENSION:
                raise InvalidDimensionError(
                    f"Embeddings need at least {MIN_DIMENSION} coordinates, got {arr.size}"
                ).at_node(index)
            dim = arr.size
        elif arr.size != dim:
            raise InvalidDimensionError(
                f"Mixed dimensions in one batch: expected {dim} coordinates, got {arr.size}"
            ).at_node(index)
        arrays.append(arr)

    if not arrays:
        return np.empty((0, 0), dtype=np.float64)
    return np.stack(arrays)


def encode_embeddings(
    vectors: Sequence[VectorLike] | np.ndarray | None,
    dimension: int | None = None,
) -> bytes:
    """Encode an ordered collection of same-dimension vectors.

    Args:
        vectors: Vectors, embeddings, sequences, 1-D arrays or one 2-D array.
        dimension: Dimension to record in the header of an empty collection.
            For non-empty input it must match the vectors when given.

    Returns:
        A fresh ``bytes`` buffer.

    Raises:
        NullInputError: If ``vectors`` or any element is None.
        InvalidDimensionError: On mixed, too small or oversized dimensions.
    """
    if vectors is None:
        raise NullInputError("Input cannot be None: vectors")

    rows = _as_rows(vectors)
    count = rows.shape[0]
    dim = rows.shape[1] if count else (dimension or 0)

    if count and dimension is not None and dimension != dim:
        raise InvalidDimensionError(
            f"Declared dimension {dimension} does not match embeddings of dimension {dim}"
        )
    if count > MAX_UINT32 or dim > MAX_UINT32 or dim < 0:
        raise InvalidDimensionError(
            f"Shape ({count}, {dim}) does not fit the uint32 header"
        )

    body = np.ascontiguousarray(rows, dtype=VALUE_DTYPE).tobytes()
    logger.debug(f"Encoded {count} embeddings of dimension {dim} ({len(body)} body bytes)")
    return HEADER.pack(count, dim) + body


def read_header(buffer: BufferLike | None) -> BufferHeader:
    """Parse and validate the header of an embedding buffer.

    Raises:
        NullInputError: If ``buffer`` is None.
        MalformedBufferError: If the buffer is shorter than the header or its
            length does not match the declared shape.
    """
    if buffer is None:
        raise NullInputError("Input cannot be None: buffer")

    view = memoryview(buffer).cast("B")
    if len(view) < HEADER_SIZE:
        raise MalformedBufferError(
            f"Buffer of {len(view)} bytes is shorter than the {HEADER_SIZE}-byte header"
        )

    count, dim = HEADER.unpack_from(view, 0)
    header = BufferHeader(record_count=count, dimension=dim)
    if count and dim < MIN_DIMENSION:
        raise MalformedBufferError(
            f"Header declares {count} records of invalid dimension {dim}"
        )
    if len(view) != header.total_size:
        raise MalformedBufferError(
            f"Header declares {count} x {dim} values ({header.total_size} bytes), "
            f"buffer has {len(view)} bytes"
        )
    return header


def decode_matrix(buffer: BufferLike | None) -> np.ndarray:
    """Decode a buffer into a fresh ``(count, dimension)`` float64 array."""
    header = read_header(buffer)
    if header.record_count == 0:
        return np.empty((0, header.dimension), dtype=np.float64)
    body = np.frombuffer(
        memoryview(buffer).cast("B"),
        dtype=VALUE_DTYPE,
        count=header.record_count * header.dimension,
        offset=HEADER_SIZE,
    )
    return body.reshape(header.record_count, header.dimension).astype(np.float64, copy=True)


def decode_embeddings(
    buffer: BufferLike | None,
    ids: Sequence[int | str] | None = None,
) -> list[Embedding]:
    """Decode a buffer produced by :func:`encode_embeddings`.

    Args:
        buffer: The encoded bytes.
        ids: Optional external keys, one per record. Defaults to the
            positional index of each record.

    Returns:
        Embeddings in their original order.

    Raises:
        MalformedBufferError: If the declared shape is inconsistent with the
            buffer length.
    """
    matrix = decode_matrix(buffer)
    if ids is None:
        ids = range(len(matrix))
    elif len(ids) != len(matrix):
        raise ValueError(f"Got {len(ids)} ids for {len(matrix)} decoded embeddings")

    return [
        Embedding(id=key, vector=tuple(row))
        for key, row in zip(ids, matrix.tolist())
    ]
