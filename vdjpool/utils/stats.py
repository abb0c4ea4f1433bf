"""Statistical utilities for vdjpool.

Provides the distance correlation between two paired sets of feature
vectors (e.g. per-sample repertoire profiles) and the pairwise vector
statistic it is built on.

The default pairwise statistic is the square root of the dot product of
two vectors, ``sqrt(sum_k u[k] * v[k])``, kept for compatibility with
published results. Passing ``metric="euclidean"`` (or any metric accepted
by :func:`scipy.spatial.distance.cdist`) swaps in a true distance.
"""

from __future__ import annotations

from typing import Iterable, Sequence, Union

import numpy as np
from joblib import Parallel, delayed, effective_n_jobs
from scipy.spatial.distance import cdist

from ..core.errors import LengthMismatchError

ArrayLike = Union[Iterable[float], np.ndarray]

DOT_METRIC = "dot"


def dot_distance(u: ArrayLike, v: ArrayLike) -> float:
    """Square root of the dot product of two vectors.

    Parameters
    ----------
    u : ArrayLike
        First vector.
    v : ArrayLike
        Second vector.

    Returns
    -------
    float
        ``sqrt(u . v)``. NaN if the dot product is negative.

    Raises
    ------
    LengthMismatchError
        If the vectors differ in length.
    """
    u = np.asarray(list(u), dtype=float)
    v = np.asarray(list(v), dtype=float)
    if u.size != v.size:
        raise LengthMismatchError(
            f"Vectors should be of same length, got {u.size} and {v.size}"
        )
    with np.errstate(invalid="ignore"):
        return float(np.sqrt(np.dot(u, v)))


def _as_matrix(vectors: Sequence[ArrayLike], name: str) -> np.ndarray:
    """Stack equal-length vectors into an (n, d) float matrix."""
    rows = [np.asarray(list(row), dtype=float) for row in vectors]
    lengths = sorted({row.size for row in rows})
    if len(lengths) > 1:
        raise LengthMismatchError(
            f"All vectors of {name} should be of same length, got lengths {lengths}"
        )
    if not rows:
        return np.empty((0, 0))
    return np.vstack(rows)


def _pairwise_block(X: np.ndarray, rows: np.ndarray, metric: str) -> np.ndarray:
    """Pairwise statistic between X[rows] and every row of X."""
    if metric == DOT_METRIC:
        with np.errstate(invalid="ignore"):
            return np.sqrt(X[rows] @ X.T)
    return cdist(X[rows], X, metric=metric)


def pairwise_distances(
    vectors: Sequence[ArrayLike],
    metric: str = DOT_METRIC,
    n_jobs: int = 1,
) -> np.ndarray:
    """Compute the n x n pairwise statistic matrix with a zero diagonal.

    Parameters
    ----------
    vectors : Sequence[ArrayLike]
        n vectors of equal length.
    metric : str
        "dot" for the square-rooted dot product, or a scipy cdist metric.
    n_jobs : int
        Number of threads computing row blocks (default: 1).

    Returns
    -------
    np.ndarray
        Matrix ``a`` with ``a[i, j]`` the statistic between vectors i and j
        for ``i != j``, and 0 on the diagonal.

    Raises
    ------
    LengthMismatchError
        If the vectors differ in length.
    """
    X = _as_matrix(vectors, "vectors")
    n = X.shape[0]
    if n == 0:
        return np.zeros((0, 0))

    if n_jobs == 1:
        a = _pairwise_block(X, np.arange(n), metric)
    else:
        blocks = np.array_split(np.arange(n), min(effective_n_jobs(n_jobs), n))
        parts = Parallel(n_jobs=n_jobs, prefer="threads")(
            delayed(_pairwise_block)(X, block, metric) for block in blocks
        )
        a = np.vstack(parts)

    np.fill_diagonal(a, 0.0)
    return a


def _double_center(a: np.ndarray) -> np.ndarray:
    """Center a pairwise matrix by its row, column and grand sums."""
    n = a.shape[0]
    row_sums = a.sum(axis=1)
    col_sums = a.sum(axis=0)
    grand_sum = a.sum()
    return a - (row_sums[:, None] - col_sums[None, :] - grand_sum / n) / n


def distance_correlation(
    x: Sequence[ArrayLike],
    y: Sequence[ArrayLike],
    metric: str = DOT_METRIC,
    n_jobs: int = 1,
) -> float:
    """Compute the distance correlation between paired vector sets.

    For every pair of observations ``i != j`` the pairwise statistic is
    computed within ``x`` and within ``y``, both matrices are centered,
    and the result is ``sqrt(dCov) / (dVarX * dVarY) ** 0.25``.

    Parameters
    ----------
    x : Sequence[ArrayLike]
        n vectors of equal length.
    y : Sequence[ArrayLike]
        n vectors of equal length (may differ from the length of x's vectors).
    metric : str
        Pairwise statistic, see :func:`pairwise_distances`.
    n_jobs : int
        Number of threads for the pairwise computation.

    Returns
    -------
    float
        Distance correlation in [0, 1]. NaN when either variance is zero,
        the covariance is negative, or a pairwise dot product is negative.

    Raises
    ------
    LengthMismatchError
        If x and y differ in length, or vectors within x (or y) differ.
    ValueError
        If x and y are empty.
    """
    n = len(x)
    if n != len(y):
        raise LengthMismatchError(
            f"x and y should be of same length, got {n} and {len(y)}"
        )
    if n == 0:
        raise ValueError("Distance correlation requires at least one observation")

    a = pairwise_distances(x, metric=metric, n_jobs=n_jobs)
    b = pairwise_distances(y, metric=metric, n_jobs=n_jobs)

    with np.errstate(invalid="ignore", divide="ignore"):
        A = _double_center(a)
        B = _double_center(b)

        dcov_xy = np.sum(A * B)
        dvar_x = np.sum(A * A)
        dvar_y = np.sum(B * B)

        return float(np.sqrt(dcov_xy) / np.sqrt(np.sqrt(dvar_x * dvar_y)))
