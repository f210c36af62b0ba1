"""Projections between the Poincaré ball and the Lorentz hyperboloid."""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np

from hyperembed.core.errors import (
    HyperembedError,
    InvalidDimensionError,
    NullInputError,
    OutOfRangeError,
)
from hyperembed.core.result import Err, Ok, Result
from hyperembed.core.types import MIN_DIMENSION, VectorLike, as_float_array, freeze

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = 1e-5

# A Lorentz point carries one extra (time-like) coordinate.
MIN_LORENTZ_DIMENSION = MIN_DIMENSION + 1


def as_vector(point: VectorLike | None, min_dim: int, name: str = "point") -> np.ndarray:
    """Coerce one point to a 1-D float array with at least ``min_dim`` coordinates."""
    arr = as_float_array(point, name)
    if arr.ndim != 1:
        raise InvalidDimensionError(
            f"Invalid input dimensions: expected a 1-D {name}, got shape {arr.shape}"
        )
    if arr.size < min_dim:
        raise InvalidDimensionError(
            f"Invalid input dimensions: expected at least {min_dim} coordinates, got {arr.size}"
        )
    return arr


def as_matrix(
    points: Sequence[VectorLike] | np.ndarray | None,
    min_dim: int,
    name: str = "points",
) -> np.ndarray:
    """Coerce a batch of vectors to an ``(N, n)`` float64 array.

    Per-item errors carry the index of the first offending item.
    """
    if points is None:
        raise NullInputError(f"Input cannot be None: {name}")

    if isinstance(points, np.ndarray):
        rows = np.asarray(points, dtype=np.float64)
        if rows.ndim == 1 and rows.size == 0:
            return rows.reshape(0, 0)
        if rows.ndim != 2:
            raise InvalidDimensionError(
                f"Invalid input dimensions: expected a 2-D array of {name}, got shape {rows.shape}"
            )
        if rows.shape[0] and rows.shape[1] < min_dim:
            raise InvalidDimensionError(
                f"Invalid input dimensions: expected at least {min_dim} coordinates, "
                f"got {rows.shape[1]}"
            ).at_node(0)
        return rows

    vectors = []
    for index, point in enumerate(points):
        try:
            vectors.append(as_vector(point, min_dim))
        except HyperembedError as exc:
            raise exc.at_node(index) from exc
    if not vectors:
        return np.empty((0, 0), dtype=np.float64)

    dim = vectors[0].size
    for index, vector in enumerate(vectors):
        if vector.size != dim:
            raise InvalidDimensionError(
                f"Invalid input dimensions: expected {dim} coordinates, got {vector.size}"
            ).at_node(index)
    return np.stack(vectors)


def outside_ball(rows: np.ndarray) -> np.ndarray:
    """Boolean mask of rows that are non-finite or not strictly inside the unit ball."""
    finite = np.isfinite(rows).all(axis=1)
    with np.errstate(over="ignore", invalid="ignore"):
        norms = np.linalg.norm(rows, axis=1)
    return ~finite | ~(norms < 1.0)


def range_error(row: np.ndarray) -> OutOfRangeError:
    """Build the error for a point on or outside the unit sphere."""
    with np.errstate(over="ignore", invalid="ignore"):
        norm = float(np.linalg.norm(row))
    return OutOfRangeError(
        f"Point outside valid hyperbolic range: norm {norm:.6g} is not strictly below 1"
    )


def _lift_rows(rows: np.ndarray) -> np.ndarray:
    """Inverse stereographic map from ball rows to hyperboloid rows (x0 first)."""
    norm_sq = np.sum(rows**2, axis=1, keepdims=True)
    spatial = (2 * rows) / (1 - norm_sq)
    # x0 = (1 + |p|^2) / (1 - |p|^2) analytically; recomputing it from the
    # spatial part keeps the point on the sheet to working precision.
    x0 = np.sqrt(1 + np.sum(spatial**2, axis=1, keepdims=True))
    return np.concatenate([x0, spatial], axis=1)


def _unlift_rows(rows: np.ndarray) -> np.ndarray:
    """Stereographic map from hyperboloid rows (x0 first) back to the ball."""
    x0 = rows[:, :1]
    return rows[:, 1:] / (1 + x0)


class ProjectionEngine:
    """Engine for moving points between the Poincaré ball and the hyperboloid.

    All methods are pure: they validate their inputs, never mutate them and
    return fresh read-only arrays. Hyperbolic points use the Lorentz form
    ``(x0, x1, ..., xn)`` with the time-like coordinate first and satisfy
    ``x0^2 - sum(xi^2) = 1``, ``x0 > 0`` (curvature -1).
    """

    def __init__(self, tolerance: float = DEFAULT_TOLERANCE):
        """Initialize the engine.

        Args:
            tolerance: Absolute tolerance for hyperboloid constraint checks.
        """
        if tolerance <= 0:
            raise ValueError(f"tolerance must be positive, got {tolerance}")
        self.tolerance = tolerance

    def project_to_hyperbolic(self, point: VectorLike | None) -> np.ndarray:
        """Lift a Poincaré-ball point onto the hyperboloid.

        Args:
            point: ``n >= 2`` coordinates with Euclidean norm strictly below 1.

        Returns:
            Read-only array of ``n + 1`` Lorentz coordinates.

        Raises:
            NullInputError: If ``point`` is None.
            InvalidDimensionError: If ``point`` has fewer than 2 coordinates.
            OutOfRangeError: If ``point`` is on or outside the unit sphere, or
                has non-finite coordinates.
        """
        arr = as_vector(point, MIN_DIMENSION)
        row = arr[np.newaxis, :]
        if outside_ball(row)[0]:
            raise range_error(arr)
        return freeze(_lift_rows(row)[0])

    def project_from_hyperbolic(self, point: VectorLike | None) -> np.ndarray:
        """Map a hyperboloid point back into the Poincaré ball.

        Points near (not exactly on) the sheet are accepted. The round trip
        with :meth:`project_to_hyperbolic` is accurate to well beyond three
        decimals for points comfortably inside the ball, but precision
        degrades as the ball norm approaches 1: the lift's Jacobian diverges
        there, so tiny relative errors in large Lorentz coordinates become
        visible in the recovered ball point.

        Args:
            point: ``n + 1 >= 3`` Lorentz coordinates, time-like first.

        Returns:
            Read-only array of ``n`` ball coordinates.

        Raises:
            NullInputError: If ``point`` is None.
            InvalidDimensionError: If ``point`` has fewer than 3 coordinates.
            OutOfRangeError: If ``point`` is not on the upper sheet (``x0 <= 0``),
                has non-finite coordinates, or maps outside the open ball.
        """
        arr = as_vector(point, MIN_LORENTZ_DIMENSION)
        if not np.isfinite(arr).all() or arr[0] <= 0:
            raise OutOfRangeError(
                "Point is not on the upper sheet of the hyperboloid: "
                f"time-like coordinate {arr[0]:.6g} must be finite and positive"
            )
        result = _unlift_rows(arr[np.newaxis, :])
        if outside_ball(result)[0]:
            raise OutOfRangeError(
                "Point is too far from the hyperboloid to map into the open unit ball"
            )
        return freeze(result[0])

    def lorentz_inner(self, a: VectorLike | None, b: VectorLike | None) -> float:
        """Lorentzian inner product ``a0 b0 - sum(ai bi)``."""
        u, v = self._as_pair(a, b)
        return float(u[0] * v[0] - np.dot(u[1:], v[1:]))

    def compute_hyperbolic_distance(self, a: VectorLike | None, b: VectorLike | None) -> float:
        """Geodesic distance between two hyperboloid points.

        Uses ``arccosh(<a, b>_L)``, clamping the inner product to at least 1 so
        floating-point drift below the theoretical minimum cannot leave the
        domain of ``arccosh``.

        Returns:
            A finite, non-negative distance; exactly 0.0 for identical inputs.
        """
        u, v = self._as_pair(a, b)
        if np.array_equal(u, v):
            return 0.0
        inner = u[0] * v[0] - np.dot(u[1:], v[1:])
        return float(np.arccosh(max(inner, 1.0)))

    def constraint_residual(self, point: VectorLike | None) -> float:
        """Return ``x0^2 - sum(xi^2) - 1`` for a Lorentz point."""
        arr = as_vector(point, MIN_LORENTZ_DIMENSION)
        return float(arr[0] ** 2 - np.sum(arr[1:] ** 2) - 1)

    def is_on_hyperboloid(self, point: VectorLike | None, tol: float | None = None) -> bool:
        """Check the Lorentz constraint and ``x0 > 0`` within a tolerance."""
        arr = as_vector(point, MIN_LORENTZ_DIMENSION)
        tol = self.tolerance if tol is None else tol
        if not np.isfinite(arr).all() or arr[0] <= 0:
            return False
        return abs(self.constraint_residual(arr)) <= tol

    def validate_poincare(self, point: VectorLike | None) -> bool:
        """Return True if ``point`` lies strictly inside the unit ball."""
        arr = as_vector(point, MIN_DIMENSION)
        return not bool(outside_ball(arr[np.newaxis, :])[0])

    def validate_ball_points(self, points: Sequence[VectorLike] | np.ndarray | None) -> np.ndarray:
        """Check a batch of ball points and stack them into an ``(N, n)`` array.

        Errors carry the index of the first offending point, whatever the
        kind of failure.
        """
        if points is None or isinstance(points, np.ndarray):
            rows = as_matrix(points, MIN_DIMENSION)
            if rows.shape[0] == 0:
                return rows
            outside = np.flatnonzero(outside_ball(rows))
            if outside.size:
                index = int(outside[0])
                raise range_error(rows[index]).at_node(index)
            return rows

        vectors = []
        dim = None
        for index, point in enumerate(points):
            try:
                arr = as_vector(point, MIN_DIMENSION)
                if dim is None:
                    dim = arr.size
                elif arr.size != dim:
                    raise InvalidDimensionError(
                        f"Invalid input dimensions: expected {dim} coordinates, got {arr.size}"
                    )
                if outside_ball(arr[np.newaxis, :])[0]:
                    raise range_error(arr)
            except HyperembedError as exc:
                raise exc.at_node(index) from exc
            vectors.append(arr)
        if not vectors:
            return np.empty((0, 0), dtype=np.float64)
        return np.stack(vectors)

    def project_batch_to_hyperbolic(
        self, points: Sequence[VectorLike] | np.ndarray | None
    ) -> np.ndarray:
        """Vectorized :meth:`project_to_hyperbolic` over ``(N, n)`` points.

        Returns:
            Read-only ``(N, n + 1)`` array of Lorentz coordinates.
        """
        rows = self.validate_ball_points(points)
        if rows.shape[0] == 0:
            return freeze(np.empty((0, rows.shape[1] + 1 if rows.shape[1] else 0)))
        return freeze(_lift_rows(rows))

    def project_batch_from_hyperbolic(
        self, points: Sequence[VectorLike] | np.ndarray | None
    ) -> np.ndarray:
        """Vectorized :meth:`project_from_hyperbolic` over ``(N, n + 1)`` points."""
        rows = as_matrix(points, MIN_LORENTZ_DIMENSION)
        if rows.shape[0] == 0:
            return freeze(np.empty((0, max(rows.shape[1] - 1, 0))))

        off_sheet = np.flatnonzero(~np.isfinite(rows).all(axis=1) | (rows[:, 0] <= 0))
        if off_sheet.size:
            index = int(off_sheet[0])
            raise OutOfRangeError(
                "Point is not on the upper sheet of the hyperboloid"
            ).at_node(index)

        result = _unlift_rows(rows)
        outside = np.flatnonzero(outside_ball(result))
        if outside.size:
            raise OutOfRangeError(
                "Point is too far from the hyperboloid to map into the open unit ball"
            ).at_node(int(outside[0]))
        return freeze(result)

    def pairwise_distances(self, points: Sequence[VectorLike] | np.ndarray | None) -> np.ndarray:
        """Compute the symmetric geodesic distance matrix of hyperboloid points.

        Args:
            points: ``(N, n + 1)`` Lorentz coordinates.

        Returns:
            ``(N, N)`` distance matrix with a zero diagonal.
        """
        rows = as_matrix(points, MIN_LORENTZ_DIMENSION)
        n = rows.shape[0]
        if n == 0:
            return freeze(np.zeros((0, 0)))

        time = rows[:, 0]
        spatial = rows[:, 1:]
        inner = np.outer(time, time) - spatial @ spatial.T
        distances = np.arccosh(np.maximum(inner, 1.0))
        distances = (distances + distances.T) / 2
        np.fill_diagonal(distances, 0.0)
        return freeze(distances)

    def try_project_to_hyperbolic(self, point: VectorLike | None) -> Result[np.ndarray]:
        """Like :meth:`project_to_hyperbolic` but returns ``Ok`` or ``Err``."""
        try:
            return Ok(self.project_to_hyperbolic(point))
        except HyperembedError as exc:
            return Err.from_exception(exc)

    def _as_pair(
        self, a: VectorLike | None, b: VectorLike | None
    ) -> tuple[np.ndarray, np.ndarray]:
        u = as_vector(a, MIN_LORENTZ_DIMENSION, name="first point")
        v = as_vector(b, MIN_LORENTZ_DIMENSION, name="second point")
        if u.size != v.size:
            raise InvalidDimensionError(
                f"Invalid input dimensions: points have {u.size} and {v.size} coordinates"
            )
        return u, v
