"""Tests for Poincaré-ball arithmetic."""

import logging

import numpy as np
import pytest

from hyperembed import NullInputError, OutOfRangeError, ProjectionEngine
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

U = np.array([0.3, -0.2])
V = np.array([-0.1, 0.4])


class TestMobius:
    def test_origin_is_identity(self):
        np.testing.assert_allclose(mobius_add([0.0, 0.0], V), V)
        np.testing.assert_allclose(mobius_add(U, [0.0, 0.0]), U)

    def test_inverse(self):
        np.testing.assert_allclose(mobius_add(-U, U), [0.0, 0.0], atol=1e-15)

    def test_result_stays_in_ball(self):
        assert np.linalg.norm(mobius_add([0.9, 0.0], [0.9, 0.0])) < 1

    def test_scalar_mult_scales_distance_from_origin(self):
        origin = np.zeros(2)
        doubled = mobius_scalar_mult(2.0, U)
        assert poincare_distance(origin, doubled) == pytest.approx(2 * poincare_distance(origin, U))

    def test_scalar_mult_of_origin(self):
        np.testing.assert_array_equal(mobius_scalar_mult(3.0, [0.0, 0.0]), [0.0, 0.0])

    def test_rejects_points_outside_ball(self):
        with pytest.raises(OutOfRangeError):
            mobius_add([1.0, 0.0], V)

    def test_rejects_null(self):
        with pytest.raises(NullInputError):
            mobius_add(None, V)


class TestMaps:
    def test_exp_log_at_origin(self):
        np.testing.assert_allclose(exp_map0(log_map0(U)), U)

    def test_exp_map0_of_zero(self):
        np.testing.assert_array_equal(exp_map0([0.0, 0.0]), [0.0, 0.0])

    def test_exp_log_at_point(self):
        np.testing.assert_allclose(exp_map(U, log_map(U, V)), V, atol=1e-12)

    def test_log_map_of_base_is_zero(self):
        np.testing.assert_array_equal(log_map(U, U), [0.0, 0.0])

    def test_exp_map_at_origin_matches_exp_map0(self):
        # lambda_0 = 2, so exp_0(v) = tanh(|v|) v / |v|
        tangent = np.array([0.7, -1.1])
        np.testing.assert_allclose(exp_map([0.0, 0.0], tangent), exp_map0(tangent))


class TestPoincareDistance:
    def test_agrees_with_lorentz_distance(self):
        engine = ProjectionEngine()
        rng = np.random.default_rng(0)
        for _ in range(20):
            u, v = rng.uniform(-0.5, 0.5, size=(2, 3))
            expected = engine.compute_hyperbolic_distance(
                engine.project_to_hyperbolic(u), engine.project_to_hyperbolic(v)
            )
            assert poincare_distance(u, v) == pytest.approx(expected, rel=1e-7)

    def test_identical_points(self):
        assert poincare_distance(U, U) == 0.0

    def test_symmetry(self):
        assert poincare_distance(U, V) == pytest.approx(poincare_distance(V, U))


class TestBallUtilities:
    def test_project_to_ball_clamps(self, caplog):
        with caplog.at_level(logging.WARNING, logger="hyperembed.embeddings.arithmetic"):
            clamped = project_to_ball([[2.0, 0.0], [0.1, 0.1]])
        assert np.linalg.norm(clamped[0]) == pytest.approx(1 - 1e-5)
        np.testing.assert_array_equal(clamped[1], [0.1, 0.1])
        assert "Clamping 1 points" in caplog.text

    def test_project_to_ball_single_point(self):
        clamped = project_to_ball([0.0, 3.0], eps=0.01)
        np.testing.assert_allclose(clamped, [0.0, 0.99])

    def test_scale_poincare_halves_distance(self):
        origin = np.zeros(2)
        scaled = scale_poincare(U, 0.5)
        assert poincare_distance(origin, scaled) == pytest.approx(0.5 * poincare_distance(origin, U))

    def test_scale_poincare_identity(self):
        points = np.array([[0.1, 0.2], [0.0, 0.0], [-0.5, 0.3]])
        np.testing.assert_allclose(scale_poincare(points, 1.0), points)

    def test_scale_poincare_reports_offending_row(self):
        with pytest.raises(OutOfRangeError) as exc_info:
            scale_poincare([[0.1, 0.1], [1.0, 0.5]], 0.5)
        assert exc_info.value.node_index == 1

    def test_center_poincare_is_isometry(self):
        points = np.array([[0.5, 0.1], [0.6, 0.3], [0.4, -0.1], [0.7, 0.0]])
        centered = center_poincare(points)
        for i in range(len(points)):
            for j in range(len(points)):
                assert poincare_distance(centered[i], centered[j]) == pytest.approx(
                    poincare_distance(points[i], points[j]), abs=1e-9
                )

    def test_center_poincare_moves_centroid_to_origin(self):
        points = np.array([[0.5, 0.1], [0.5, 0.1]])
        np.testing.assert_allclose(center_poincare(points), np.zeros((2, 2)), atol=1e-12)

    def test_center_poincare_leaves_centered_batch(self):
        points = np.array([[0.3, 0.0], [-0.3, 0.0]])
        np.testing.assert_array_equal(center_poincare(points), points)


class TestPackageExports:
    def test_arithmetic_exported_from_embeddings(self):
        from hyperembed import embeddings

        assert embeddings.mobius_add is mobius_add
        assert embeddings.poincare_distance is poincare_distance
        assert "center_poincare" in embeddings.__all__
