"""Gyrovector arithmetic on the Poincaré ball (curvature -1).

Mathematical background:
- Poincaré ball: {x in R^n : ||x|| < 1}
- Möbius addition: u (+) v = ((1 + 2<u,v> + |v|^2) u + (1 - |u|^2) v) / (1 + 2<u,v> + |u|^2 |v|^2)
- Möbius scalar multiplication: r (x) v = tanh(r artanh(|v|)) v / |v|
- Conformal factor: lambda_p = 2 / (1 - |p|^2)

Every function validates its ball arguments the same way the projection
engine does and returns fresh read-only arrays.
"""

from __future__ import annotations

import logging

import numpy as np

from hyperembed.core.errors import InvalidDimensionError
from hyperembed.core.types import MIN_DIMENSION, VectorLike, as_float_array, freeze
from hyperembed.embeddings.projection import as_vector, outside_ball, range_error

logger = logging.getLogger(__name__)

EPS = 1e-15
BOUNDARY_EPS = 1e-5


def _ball_point(point: VectorLike | None, name: str = "point") -> np.ndarray:
    arr = as_vector(point, MIN_DIMENSION, name)
    if outside_ball(arr[np.newaxis, :])[0]:
        raise range_error(arr)
    return arr


def _tangent_vector(vector: VectorLike | None, dim: int | None = None) -> np.ndarray:
    arr = as_vector(vector, MIN_DIMENSION, "tangent vector")
    if dim is not None and arr.size != dim:
        raise InvalidDimensionError(
            f"Invalid input dimensions: expected {dim} coordinates, got {arr.size}"
        )
    return arr


def _same_dim(u: np.ndarray, v: np.ndarray) -> None:
    if u.shape[-1] != v.shape[-1]:
        raise InvalidDimensionError(
            f"Invalid input dimensions: points have {u.shape[-1]} and {v.shape[-1]} coordinates"
        )


def _mobius_add(u: np.ndarray, v: np.ndarray) -> np.ndarray:
    """Möbius addition broadcasting over the last axis."""
    uv = np.sum(u * v, axis=-1, keepdims=True)
    u_sq = np.sum(u**2, axis=-1, keepdims=True)
    v_sq = np.sum(v**2, axis=-1, keepdims=True)
    numerator = (1 + 2 * uv + v_sq) * u + (1 - u_sq) * v
    denominator = 1 + 2 * uv + u_sq * v_sq
    return numerator / np.maximum(denominator, EPS)


def _conformal_factor(p: np.ndarray) -> float:
    return 2.0 / (1.0 - float(np.dot(p, p)))


def mobius_add(u: VectorLike | None, v: VectorLike | None) -> np.ndarray:
    """Möbius addition ``u (+) v``, the hyperbolic analogue of vector addition."""
    a = _ball_point(u, "first point")
    b = _ball_point(v, "second point")
    _same_dim(a, b)
    return freeze(_mobius_add(a, b))


def mobius_scalar_mult(r: float, v: VectorLike | None) -> np.ndarray:
    """Möbius scalar multiplication ``r (x) v``."""
    arr = _ball_point(v)
    norm = float(np.linalg.norm(arr))
    if norm < EPS:
        return freeze(np.zeros_like(arr))
    return freeze(np.tanh(r * np.arctanh(norm)) * arr / norm)


def exp_map0(v: VectorLike | None) -> np.ndarray:
    """Map a tangent vector at the origin onto the ball."""
    arr = _tangent_vector(v)
    norm = float(np.linalg.norm(arr))
    if norm < EPS:
        return freeze(np.zeros_like(arr))
    return freeze(np.tanh(norm) * arr / norm)


def log_map0(y: VectorLike | None) -> np.ndarray:
    """Inverse of :func:`exp_map0`."""
    arr = _ball_point(y)
    norm = float(np.linalg.norm(arr))
    if norm < EPS:
        return freeze(np.zeros_like(arr))
    return freeze(np.arctanh(norm) * arr / norm)


def exp_map(p: VectorLike | None, v: VectorLike | None) -> np.ndarray:
    """Exponential map ``exp_p(v)`` from the tangent space at ``p`` to the ball."""
    base = _ball_point(p, "base point")
    tangent = _tangent_vector(v, base.size)
    norm = float(np.linalg.norm(tangent))
    if norm < EPS:
        return freeze(base.copy())
    step = np.tanh(_conformal_factor(base) * norm / 2) * tangent / norm
    return freeze(_mobius_add(base, step))


def log_map(p: VectorLike | None, q: VectorLike | None) -> np.ndarray:
    """Logarithmic map ``log_p(q)``, the inverse of :func:`exp_map`."""
    base = _ball_point(p, "base point")
    target = _ball_point(q, "target point")
    _same_dim(base, target)
    diff = _mobius_add(-base, target)
    norm = float(np.linalg.norm(diff))
    if norm < EPS:
        return freeze(np.zeros_like(base))
    scale = (2 / _conformal_factor(base)) * np.arctanh(min(norm, 1 - EPS)) / norm
    return freeze(scale * diff)


def poincare_distance(u: VectorLike | None, v: VectorLike | None) -> float:
    """Compute the Poincaré distance between two ball points.

    ``d(u, v) = arccosh(1 + 2 |u - v|^2 / ((1 - |u|^2)(1 - |v|^2)))``, which
    agrees with the geodesic distance between the lifted hyperboloid points.
    """
    a = _ball_point(u, "first point")
    b = _ball_point(v, "second point")
    _same_dim(a, b)
    diff_sq = float(np.sum((a - b) ** 2))
    if diff_sq == 0.0:
        return 0.0
    delta = 2 * diff_sq / ((1 - float(np.dot(a, a))) * (1 - float(np.dot(b, b))))
    return float(np.arccosh(1 + delta))


def project_to_ball(points: VectorLike | np.ndarray | None, eps: float = BOUNDARY_EPS) -> np.ndarray:
    """Radially clamp points so their norm is at most ``1 - eps``.

    Accepts a single point or an ``(N, n)`` batch. Points already inside the
    clamped radius are returned unchanged.
    """
    arr = np.array(_as_batch(points), dtype=np.float64)
    rows = np.atleast_2d(arr)
    max_radius = 1.0 - eps
    radii = np.linalg.norm(rows, axis=1)
    mask = radii > max_radius
    if np.any(mask):
        logger.warning(f"Clamping {int(np.sum(mask))} points to the unit ball.")
        rows[mask] = rows[mask] / radii[mask][:, np.newaxis] * max_radius
    return freeze(arr)


def scale_poincare(coords: VectorLike | np.ndarray | None, factor: float) -> np.ndarray:
    """Scale points towards the origin in hyperbolic space.

    This scales the hyperbolic distance from the origin by ``factor``:
    ``r_new = tanh(factor * arctanh(r))``. If ``factor < 1``, points move
    closer to the center.
    """
    arr = _as_ball_batch(coords)
    rows = np.atleast_2d(arr)
    radii = np.linalg.norm(rows, axis=1)
    scale_ratios = np.ones_like(radii)
    mask = radii > 1e-12
    r = radii[mask]
    scale_ratios[mask] = np.tanh(factor * np.arctanh(r)) / r
    return freeze((rows * scale_ratios[:, np.newaxis]).reshape(arr.shape))


def center_poincare(coords: np.ndarray | None) -> np.ndarray:
    """Center a batch of ball points using a Möbius translation.

    Moves the Euclidean centroid of the points to the origin. Batches whose
    centroid is already at the origin, or too close to the boundary to
    translate stably, are returned unchanged.
    """
    arr = _as_ball_batch(coords)
    if arr.ndim != 2 or len(arr) == 0:
        return freeze(arr.copy())

    centroid = np.mean(arr, axis=0)
    centroid_norm = float(np.linalg.norm(centroid))
    if centroid_norm > 0.99 or centroid_norm < 1e-6:
        return freeze(arr.copy())

    return freeze(_mobius_add(-centroid[np.newaxis, :], arr))


def _as_batch(points: VectorLike | np.ndarray | None) -> np.ndarray:
    arr = as_float_array(points, "points")
    if arr.ndim == 1:
        return as_vector(arr, MIN_DIMENSION)
    if arr.ndim != 2 or (arr.shape[0] and arr.shape[1] < MIN_DIMENSION):
        raise InvalidDimensionError(
            f"Invalid input dimensions: expected (N, n >= {MIN_DIMENSION}) points, got shape {arr.shape}"
        )
    return arr


def _as_ball_batch(points: VectorLike | np.ndarray | None) -> np.ndarray:
    arr = _as_batch(points)
    rows = arr if arr.ndim == 2 else arr[np.newaxis, :]
    if len(rows) == 0:
        return arr
    outside = np.flatnonzero(outside_ball(rows))
    if outside.size:
        index = int(outside[0])
        error = range_error(rows[index])
        raise error.at_node(index) if arr.ndim == 2 else error
    return arr
