"""Batch-oriented embedding provider for small graphs."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Any

import numpy as np
from tqdm import tqdm

from hyperembed.core.graph import Graph
from hyperembed.core.types import VectorLike
from hyperembed.embeddings.projection import MIN_LORENTZ_DIMENSION, ProjectionEngine, as_matrix
from hyperembed.storage.config import EngineConfig

logger = logging.getLogger(__name__)

GraphLike = Graph | Mapping[str, Any]


class OptimizedProvider:
    """Produce one hyperboloid embedding per graph node.

    Edges are accepted for graph-aware refinement by callers; the provider
    itself projects each node vector independently and keeps node order.
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        engine: ProjectionEngine | None = None,
    ):
        """Initialize the provider.

        Args:
            config: Batch size, worker count and tolerance. Read from the
                environment if None.
            engine: Projection engine to drive. Built from ``config`` if None.
        """
        self.config = config or EngineConfig.default()
        self.engine = engine or ProjectionEngine(tolerance=self.config.tolerance)

    def is_optimized(self) -> bool:
        """Report that the batched code path is active."""
        return True

    def _prepare(self, graph: GraphLike | None) -> np.ndarray:
        """Validate a graph and return its ``(N, n)`` node matrix."""
        graph = Graph.from_input(graph)
        dangling = graph.dangling_edges()
        if dangling:
            logger.warning(
                f"Ignoring {len(dangling)} edges that reference nodes outside [0, {len(graph)})"
            )
        return self.engine.validate_ball_points(graph.nodes)

    def generate_embeddings(self, graph: GraphLike | None) -> list[np.ndarray]:
        """Project every node of ``graph`` onto the hyperboloid.

        Args:
            graph: A Graph, or a mapping with ``nodes`` and ``edges``.

        Returns:
            One read-only Lorentz point per node, in node order.

        Raises:
            NullInputError: If the graph or a node is missing.
            InvalidDimensionError: If a node has fewer than 2 coordinates or
                its dimension differs from the first node's.
            OutOfRangeError: If a node lies on or outside the unit ball.
            All errors report the first offending node in ``node_index``.
        """
        rows = self._prepare(graph)
        return [self.engine.project_to_hyperbolic(row) for row in rows]

    def generate_batch_embeddings(
        self,
        graph: GraphLike | None,
        batch_size: int | None = None,
        show_progress: bool = False,
    ) -> list[np.ndarray]:
        """Chunked equivalent of :meth:`generate_embeddings`.

        Nodes are projected in vectorized batches, across worker threads when
        ``config.max_workers > 1``. Results always follow node order.

        Args:
            graph: A Graph, or a mapping with ``nodes`` and ``edges``.
            batch_size: Nodes per batch. Defaults to ``config.batch_size``.
            show_progress: Whether to show a progress bar.

        Returns:
            One read-only Lorentz point per node, in node order.
        """
        if batch_size is None:
            batch_size = self.config.batch_size
        if batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {batch_size}")

        rows = self._prepare(graph)
        total = len(rows)
        chunks = [rows[i : i + batch_size] for i in range(0, total, batch_size)]
        logger.debug(f"Projecting {total} nodes in {len(chunks)} batches of up to {batch_size}")

        if self.config.parallel and len(chunks) > 1:
            with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
                lifted = executor.map(self.engine.project_batch_to_hyperbolic, chunks)
                lifted = list(self._progress(lifted, len(chunks), show_progress))
        else:
            lifted = [
                self.engine.project_batch_to_hyperbolic(chunk)
                for chunk in self._progress(chunks, len(chunks), show_progress)
            ]

        return [point for chunk in lifted for point in chunk]

    def _progress(self, iterable, total: int, show_progress: bool):
        if show_progress:
            return tqdm(iterable, total=total, desc="Projecting nodes")
        return iterable

    def find_similar(
        self,
        points: Sequence[VectorLike] | np.ndarray,
        query_index: int,
        k: int = 10,
    ) -> list[tuple[int, float]]:
        """Find the k nearest neighbors of one hyperboloid point.

        Args:
            points: Lorentz points, e.g. the output of :meth:`generate_embeddings`.
            query_index: Position of the query point in ``points``.
            k: Number of neighbors to return.

        Returns:
            ``(index, distance)`` pairs sorted by ascending geodesic distance,
            excluding the query itself.
        """
        rows = as_matrix(points, MIN_LORENTZ_DIMENSION)
        if not 0 <= query_index < len(rows):
            raise IndexError(f"query_index {query_index} out of range for {len(rows)} points")
        if k < 1:
            return []

        query = rows[query_index]
        inner = rows[:, 0] * query[0] - rows[:, 1:] @ query[1:]
        distances = np.arccosh(np.maximum(inner, 1.0))
        distances[query_index] = np.inf

        order = np.argsort(distances, kind="stable")[: min(k, len(rows) - 1)]
        return [(int(i), float(distances[i])) for i in order]
