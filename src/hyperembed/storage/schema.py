"""PyArrow schema definitions for embedding collections."""

from __future__ import annotations

from collections.abc import Sequence

import pyarrow as pa

from hyperembed.core.errors import InvalidDimensionError
from hyperembed.core.types import MIN_DIMENSION, Embedding


def create_embedding_schema(dimension: int) -> pa.Schema:
    """Create the PyArrow schema for an embedding table.

    Uses a fixed-size list so every row carries exactly ``dimension`` values.

    Args:
        dimension: Number of coordinates per embedding.

    Returns:
        PyArrow schema with ``position``, ``key``, ``numeric_id`` and
        ``vector`` columns.
    """
    if dimension < MIN_DIMENSION:
        raise InvalidDimensionError(
            f"Embeddings need at least {MIN_DIMENSION} coordinates, got {dimension}"
        )
    return pa.schema(
        [
            pa.field("position", pa.uint32(), nullable=False),
            pa.field("key", pa.utf8(), nullable=True),
            pa.field("numeric_id", pa.int64(), nullable=True),
            pa.field("vector", pa.list_(pa.float64(), dimension), nullable=False),
        ]
    )


def embedding_to_dict(embedding: Embedding, position: int) -> dict:
    """Convert an Embedding to a row dictionary.

    String ids go to ``key`` and integer ids to ``numeric_id``; the other
    column stays null.
    """
    is_key = isinstance(embedding.id, str)
    return {
        "position": position,
        "key": embedding.id if is_key else None,
        "numeric_id": None if is_key else embedding.id,
        "vector": list(embedding.vector),
    }


def embeddings_to_table(embeddings: Sequence[Embedding], dimension: int | None = None) -> pa.Table:
    """Build a PyArrow table from embeddings, preserving order.

    Args:
        embeddings: Embeddings sharing one dimension.
        dimension: Dimension for an empty table; inferred otherwise.
    """
    if embeddings:
        dimension = embeddings[0].dim
    elif dimension is None:
        raise InvalidDimensionError("dimension is required for an empty embedding table")

    for index, embedding in enumerate(embeddings):
        if embedding.dim != dimension:
            raise InvalidDimensionError(
                f"Mixed dimensions in one table: expected {dimension} coordinates, "
                f"got {embedding.dim}"
            ).at_node(index)

    schema = create_embedding_schema(dimension)
    rows = [embedding_to_dict(embedding, position) for position, embedding in enumerate(embeddings)]
    return pa.Table.from_pylist(rows, schema=schema)


def dict_to_embedding(row: dict) -> Embedding:
    """Convert a table row back to an Embedding."""
    key = row.get("key")
    if key is None:
        key = row.get("numeric_id")
    vector = row["vector"]
    if hasattr(vector, "tolist"):
        vector = vector.tolist()
    return Embedding(id=key if key is not None else row["position"], vector=tuple(vector))


def table_to_embeddings(table: pa.Table) -> list[Embedding]:
    """Read embeddings back from a table built by :func:`embeddings_to_table`."""
    rows = table.sort_by("position").to_pylist()
    return [dict_to_embedding(row) for row in rows]
