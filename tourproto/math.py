# SPDX-FileCopyrightText: 2020-2023 tourproto Development Team
#
# SPDX-License-Identifier: BSD-3-Clause

""" General purpose math primitives """
import numpy as np
import pandas as pd


def is_orthonormal(x, tol: float = 0.001) -> bool:
    r"""Test if a numeric matrix is orthonormal, i.e. :math:`X^T X = I`

    Parameters
    ----------
    x
        The matrix to test. A 1D array is treated as a single column
    tol
        Tolerance on the largest element-wise difference from the identity
    """
    x = np.asarray(x, dtype=float)
    if x.ndim == 1:
        x = x[:, np.newaxis]

    actual = x.T @ x
    expected = np.eye(x.shape[1])

    return bool(np.max(np.abs(actual - expected)) < tol)


def orthonormalise(x) -> np.ndarray:
    """Orthonormalise the columns of `x` keeping the direction of each
    column as close as possible to the original one"""
    x = np.asarray(x, dtype=float)
    if x.ndim == 1:
        x = x[:, np.newaxis]

    q, r = np.linalg.qr(x)

    # QR is unique up to the sign of the columns: keep the original sign
    signs = np.sign(np.diag(r))
    signs[signs == 0] = 1

    return q * signs


def orthonormalise_by(x, by) -> np.ndarray:
    """Make each column of `x` orthogonal to the matching column of `by`, then
    normalise it. Columns that vanish are left to zero"""
    x = np.array(x, dtype=float)
    by = np.asarray(by, dtype=float)

    for j in range(x.shape[1]):
        b = by[:, j]
        x[:, j] = x[:, j] - (b @ x[:, j]) / (b @ b) * b
        norm = np.linalg.norm(x[:, j])
        x[:, j] = x[:, j] / norm if norm > 1e-12 else 0.0

    return x


def scale_sd(data):
    """Center each column by its mean and scale it by its standard
    deviation"""
    if isinstance(data, pd.DataFrame):
        return (data - data.mean()) / data.std()

    data = np.asarray(data, dtype=float)
    return (data - data.mean(axis=0)) / data.std(axis=0, ddof=1)


def scale_01(data):
    """Rescale each column to the :math:`[0, 1]` range"""
    if isinstance(data, pd.DataFrame):
        return (data - data.min()) / (data.max() - data.min())

    data = np.asarray(data, dtype=float)
    lo = data.min(axis=0)
    hi = data.max(axis=0)

    return (data - lo) / (hi - lo)
