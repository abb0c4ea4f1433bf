"""Unit tests for distance correlation."""

import math
import warnings

import numpy as np
import pytest

from vdjpool.core.errors import LengthMismatchError
from vdjpool.utils import distance_correlation, dot_distance, pairwise_distances


def _reference_distance_correlation(x, y):
    """Straightforward double-loop transcription of the statistic."""
    n = len(x)
    a = [[0.0] * n for _ in range(n)]
    b = [[0.0] * n for _ in range(n)]
    a1m, a2m, b1m, b2m = [0.0] * n, [0.0] * n, [0.0] * n, [0.0] * n
    am = bm = 0.0
    for i in range(n):
        for j in range(n):
            if i != j:
                aa = math.sqrt(sum(p * q for p, q in zip(x[i], x[j])))
                bb = math.sqrt(sum(p * q for p, q in zip(y[i], y[j])))
                a[i][j], b[i][j] = aa, bb
                a1m[i] += aa
                a2m[j] += aa
                b1m[i] += bb
                b2m[j] += bb
                am += aa
                bm += bb

    dcov = dvar_x = dvar_y = 0.0
    for i in range(n):
        for j in range(n):
            A = a[i][j] - (a1m[i] - a2m[j] - am / n) / n
            B = b[i][j] - (b1m[i] - b2m[j] - bm / n) / n
            dcov += A * B
            dvar_x += A * A
            dvar_y += B * B

    if dcov < 0 or dvar_x * dvar_y == 0:
        return float("nan")
    return math.sqrt(dcov) / math.sqrt(math.sqrt(dvar_x * dvar_y))


class TestDotDistance:
    """Tests for the pairwise vector statistic."""

    def test_value(self):
        """Test square root of the dot product."""
        assert dot_distance([1, 2], [3, 4]) == pytest.approx(math.sqrt(11))

    def test_length_mismatch(self):
        """Test vectors of length 3 and 4 are rejected, not truncated."""
        with pytest.raises(LengthMismatchError):
            dot_distance([1, 2, 3], [1, 2, 3, 4])

    def test_length_mismatch_is_value_error(self):
        """Test the error is catchable as ValueError."""
        with pytest.raises(ValueError):
            dot_distance([1], [1, 2])

    def test_negative_dot_is_nan(self):
        """Test a negative dot product yields NaN without raising."""
        assert math.isnan(dot_distance([1.0], [-1.0]))


class TestPairwiseDistances:
    """Tests for pairwise_distances."""

    def test_dot_matrix(self):
        """Test the dot-product matrix has a zero diagonal."""
        a = pairwise_distances([[1.0], [4.0], [9.0]])
        expected = np.array([
            [0.0, 2.0, 3.0],
            [2.0, 0.0, 6.0],
            [3.0, 6.0, 0.0],
        ])
        np.testing.assert_allclose(a, expected)

    def test_euclidean_metric(self):
        """Test that scipy metrics can replace the dot-product statistic."""
        a = pairwise_distances([[0.0, 0.0], [3.0, 4.0]], metric="euclidean")
        np.testing.assert_allclose(a, [[0.0, 5.0], [5.0, 0.0]])

    def test_ragged_vectors(self):
        """Test that vectors of unequal length are rejected."""
        with pytest.raises(LengthMismatchError):
            pairwise_distances([[1.0, 2.0], [1.0, 2.0, 3.0]])

    def test_parallel_matches_serial(self, feature_x):
        """Test that threaded row blocks give the same matrix."""
        serial = pairwise_distances(feature_x)
        parallel = pairwise_distances(feature_x, n_jobs=3)
        np.testing.assert_allclose(parallel, serial, rtol=1e-12)


class TestDistanceCorrelation:
    """Tests for distance_correlation."""

    def test_matches_reference(self, feature_x, feature_y):
        """Test agreement with a loop-based transcription."""
        expected = _reference_distance_correlation(feature_x.tolist(), feature_y.tolist())
        actual = distance_correlation(feature_x, feature_y)
        if math.isnan(expected):
            assert math.isnan(actual)
        else:
            assert actual == pytest.approx(expected, rel=1e-9)

    def test_symmetric(self, feature_x, feature_y):
        """Test swapping x and y gives the same value."""
        forward = distance_correlation(feature_x, feature_y)
        backward = distance_correlation(feature_y, feature_x)
        np.testing.assert_allclose(forward, backward, rtol=1e-12)

    def test_bounds(self, feature_x, feature_y):
        """Test the result lies in [0, 1] unless degenerate."""
        r = distance_correlation(feature_x, feature_y)
        assert math.isnan(r) or 0.0 <= r <= 1.0 + 1e-12

    def test_self_correlation_is_one(self, feature_x):
        """Test that a set is perfectly dependent on itself."""
        assert distance_correlation(feature_x, feature_x) == pytest.approx(1.0)

    def test_two_observations(self):
        """Test a hand-computed two-observation case."""
        # a = [[0, 2], [2, 0]] centers to [[1, 3], [3, 1]];
        # b = [[0, 3], [3, 0]] centers to 1.5 times that, so dCor = 1
        assert distance_correlation([[1.0], [4.0]], [[1.0], [9.0]]) == pytest.approx(1.0)

    def test_zero_vectors_nan(self):
        """Test that zero variance yields NaN, not zero."""
        x = [[0.0, 0.0]] * 5
        y = [[1.0, 2.0], [2.0, 1.0], [0.5, 0.5], [3.0, 1.0], [1.0, 1.0]]
        assert math.isnan(distance_correlation(x, y))

    def test_constant_nonzero_vectors_finite(self):
        """Test that identical non-zero vectors keep a non-zero centered variance."""
        # Off-diagonal entries are a constant c and the diagonal is 0, so the
        # centering adds (n - 1) * c / n everywhere instead of cancelling
        x = [[1.0, 1.0]] * 4
        y = [[2.0]] * 4
        r = distance_correlation(x, y)
        assert math.isfinite(r)
        assert r == pytest.approx(1.0)

    def test_single_observation_nan(self):
        """Test that one observation is degenerate."""
        assert math.isnan(distance_correlation([[1.0, 2.0]], [[3.0]]))

    def test_negative_dot_product_nan(self):
        """Test that negative dot products propagate as NaN."""
        assert math.isnan(distance_correlation([[1.0], [-1.0]], [[1.0], [2.0]]))

    def test_no_runtime_warnings(self):
        """Test that degenerate inputs do not emit numpy warnings."""
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            distance_correlation([[0.0]] * 3, [[0.0]] * 3)
            distance_correlation([[1.0], [-1.0]], [[1.0], [2.0]])

    def test_length_mismatch(self):
        """Test that x and y must have the same number of vectors."""
        with pytest.raises(LengthMismatchError):
            distance_correlation([[1.0], [2.0]], [[1.0], [2.0], [3.0]])

    def test_ragged_x(self):
        """Test that vectors within x must have equal length."""
        with pytest.raises(LengthMismatchError):
            distance_correlation([[1.0], [2.0, 3.0]], [[1.0], [2.0]])

    def test_empty(self):
        """Test that empty inputs are rejected."""
        with pytest.raises(ValueError):
            distance_correlation([], [])

    def test_parallel_matches_serial(self, feature_x, feature_y):
        """Test that threading only perturbs the result within tolerance."""
        serial = distance_correlation(feature_x, feature_y)
        parallel = distance_correlation(feature_x, feature_y, n_jobs=2)
        np.testing.assert_allclose(parallel, serial, rtol=1e-9)

    def test_euclidean_metric(self, feature_x, feature_y):
        """Test the euclidean statistic gives a bounded value."""
        r = distance_correlation(feature_x, feature_y, metric="euclidean")
        assert math.isnan(r) or 0.0 <= r <= 1.0 + 1e-12
