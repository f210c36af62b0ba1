"""Public functional API for hyperembed.

Thin module-level wrappers over :class:`ProjectionEngine` and the codec for
callers that do not need to hold an engine instance.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

import numpy as np

from hyperembed.core.graph import Graph
from hyperembed.core.types import VectorLike
from hyperembed.embeddings.projection import DEFAULT_TOLERANCE, ProjectionEngine
from hyperembed.embeddings.provider import OptimizedProvider
from hyperembed.storage.codec import decode_embeddings, encode_embeddings

__all__ = [
    "project_to_hyperbolic",
    "project_from_hyperbolic",
    "compute_hyperbolic_distance",
    "pairwise_distances",
    "encode_embeddings",
    "decode_embeddings",
    "generate_embeddings",
]


def _engine(tolerance: float = DEFAULT_TOLERANCE) -> ProjectionEngine:
    return ProjectionEngine(tolerance=tolerance)


def project_to_hyperbolic(point: VectorLike | None) -> np.ndarray:
    """Lift a Poincaré-ball point onto the hyperboloid."""
    return _engine().project_to_hyperbolic(point)


def project_from_hyperbolic(point: VectorLike | None) -> np.ndarray:
    """Map a hyperboloid point back into the Poincaré ball."""
    return _engine().project_from_hyperbolic(point)


def compute_hyperbolic_distance(a: VectorLike | None, b: VectorLike | None) -> float:
    """Geodesic distance between two hyperboloid points."""
    return _engine().compute_hyperbolic_distance(a, b)


def pairwise_distances(points: Sequence[VectorLike] | np.ndarray) -> np.ndarray:
    """Symmetric geodesic distance matrix of hyperboloid points."""
    return _engine().pairwise_distances(points)


def generate_embeddings(
    graph: Graph | Mapping[str, Any],
    batch_size: int | None = None,
) -> list[np.ndarray]:
    """Project every node of a graph with a default :class:`OptimizedProvider`."""
    return OptimizedProvider().generate_batch_embeddings(graph, batch_size=batch_size)
