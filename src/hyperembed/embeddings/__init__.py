"""Hyperbolic projection, arithmetic and batch embedding modules."""

from hyperembed.embeddings.arithmetic import (
    center_poincare,
    exp_map,
    exp_map0,
    log_map,
    log_map0,
    mobius_add,
    mobius_scalar_mult,
    poincare_distance,
    project_to_ball,
    scale_poincare,
)
from hyperembed.embeddings.projection import ProjectionEngine
from hyperembed.embeddings.provider import OptimizedProvider

__all__ = [
    "OptimizedProvider",
    "ProjectionEngine",
    "center_poincare",
    "exp_map",
    "exp_map0",
    "log_map",
    "log_map0",
    "mobius_add",
    "mobius_scalar_mult",
    "poincare_distance",
    "project_to_ball",
    "scale_poincare",
]
