# SPDX-FileCopyrightText: 2020-2023 tourproto Development Team
#
# SPDX-License-Identifier: BSD-3-Clause

""" Helpers to build starting bases and pick the manipulation variable """
from typing import Callable, Optional

import numpy as np

from sklearn.discriminant_analysis import LinearDiscriminantAnalysis

from .exceptions import ConfigurationError
from .math import orthonormalise


def _principal_axes(data) -> np.ndarray:
    data = np.asarray(data, dtype=float)
    centered = data - data.mean(axis=0)

    # Right singular vectors are the PCA rotation, sorted by variance
    _, _, vt = np.linalg.svd(centered, full_matrices=False)

    return vt.T


def basis_pca(data, d: int = 2) -> np.ndarray:
    r"""The basis of the first `d` principal components of `data`

    Parameters
    ----------
    data
        A :math:`n \times p` numeric table of observations
    d
        Number of dimensions of the projection space
    """

    return _principal_axes(data)[:, :d]


def basis_random(p: int, d: int = 2, seed: Optional[int] = None) -> np.ndarray:
    r"""A random orthonormal :math:`p \times d` basis"""
    rng = np.random.default_rng(seed)

    return orthonormalise(rng.normal(size=(p, d)))


def manip_var_of(basis) -> int:
    """The (0-based) index of the variable with the largest contribution to
    `basis`, a sensible default for the manipulation variable"""
    basis = np.asarray(basis, dtype=float)
    if basis.ndim == 1:
        basis = basis[:, np.newaxis]

    return int(np.argmax(np.linalg.norm(basis, axis=1)))


def manip_var_pca(data, func: Callable = max) -> int:
    """The index of the variable with the max (or min, with ``func=min``)
    absolute value in the first principal component"""
    abs_pc1 = np.abs(_principal_axes(data)[:, 0])

    return int(np.flatnonzero(abs_pc1 == func(abs_pc1))[0])


def _discriminant_axes(data, cls) -> np.ndarray:
    lda = LinearDiscriminantAnalysis().fit(
        np.asarray(data, dtype=float), np.asarray(cls)
    )

    return lda.scalings_


def basis_lda(data, cls, d: int = 2) -> np.ndarray:
    r"""The basis of the first `d` linear discriminants of `data` grouped by
    `cls`

    The discriminant scalings are not orthonormal, they are orthonormalised
    before being returned

    Parameters
    ----------
    data
        A :math:`n \times p` numeric table of observations
    cls
        The class of each observation
    d
        Number of dimensions of the projection space. At most the number of
        classes minus one
    """
    scalings = _discriminant_axes(data, cls)
    if scalings.shape[1] < d:
        raise ConfigurationError(
            f"Only {scalings.shape[1]} linear discriminant(s) available, "
            f"{d} requested"
        )

    return orthonormalise(scalings[:, :d])


def manip_var_lda(data, cls, func: Callable = max) -> int:
    """The index of the variable with the max (or min, with ``func=min``)
    absolute value in the first linear discriminant"""
    abs_ld1 = np.abs(orthonormalise(_discriminant_axes(data, cls)[:, 0]))[:, 0]

    return int(np.flatnonzero(abs_ld1 == func(abs_ld1))[0])
