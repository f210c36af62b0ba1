"""Graph input accepted by the embedding provider."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import numpy as np
from pydantic import BaseModel, Field, field_validator

from hyperembed.core.errors import InvalidDimensionError, NullInputError
from hyperembed.core.types import Vector


class Graph(BaseModel):
    """Node feature vectors plus an edge list referencing node positions."""

    nodes: list[Vector | None] = Field(default_factory=list, description="Node vectors in order")
    edges: list[tuple[int, int]] = Field(
        default_factory=list, description="(source, target) node index pairs"
    )

    @field_validator("nodes", mode="before")
    @classmethod
    def _coerce_nodes(cls, nodes: Any) -> Any:
        if nodes is None:
            return nodes
        coerced = []
        for node in nodes:
            if isinstance(node, (Vector, Mapping)) or node is None:
                coerced.append(node)
                continue
            arr = np.asarray(node, dtype=np.float64)
            # Non-flat nodes are left as-is so field validation rejects them.
            coerced.append({"values": tuple(arr.tolist())} if arr.ndim == 1 else node)
        return coerced

    @classmethod
    def from_input(cls, graph: Graph | Mapping[str, Any] | None) -> Graph:
        """Accept a Graph or any mapping with ``nodes`` and ``edges`` keys."""
        if graph is None:
            raise NullInputError("Input cannot be None: graph")
        if isinstance(graph, Graph):
            return graph
        graph = dict(graph)
        check_node_shapes(graph.get("nodes"))
        return cls.model_validate(graph)

    def __len__(self) -> int:
        return len(self.nodes)

    def dangling_edges(self) -> list[tuple[int, int]]:
        """Edges whose endpoints fall outside ``[0, len(nodes))``."""
        n = len(self.nodes)
        return [(u, v) for u, v in self.edges if not (0 <= u < n and 0 <= v < n)]

    def node_matrix(self) -> np.ndarray:
        """Stack node coordinates into an ``(N, n)`` array.

        Callers must have checked that all nodes share one dimension.
        """
        if not self.nodes:
            return np.empty((0, 0), dtype=np.float64)
        return np.array([node.values for node in self.nodes], dtype=np.float64)


def check_node_shapes(nodes: Any) -> None:
    """Reject raw nodes that are not flat sequences of numbers.

    Raises:
        InvalidDimensionError: For the first nested or ragged node, annotated
            with its index.
    """
    if nodes is None:
        return
    for index, node in enumerate(nodes):
        if node is None or isinstance(node, (Vector, Mapping)):
            continue
        try:
            ndim = np.asarray(node, dtype=np.float64).ndim
        except (TypeError, ValueError) as exc:
            raise InvalidDimensionError(
                "Invalid input dimensions: node is not a flat sequence of numbers"
            ).at_node(index) from exc
        if ndim != 1:
            raise InvalidDimensionError(
                f"Invalid input dimensions: expected a 1-D node, got {ndim}-D"
            ).at_node(index)
