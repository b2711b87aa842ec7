# SPDX-FileCopyrightText: 2020-2023 tourproto Development Team
#
# SPDX-License-Identifier: BSD-3-Clause

""" This module contains the primitives to turn an array of projection bases
(and optionally the data projected through them) into long tables, with one
row per variable (or observation) and frame """
from __future__ import annotations

import numpy as np
import pandas as pd

from typing import List, NamedTuple, Optional, Sequence, Union

from .dimension import Dimensionality, SUPPORTED_DIMENSIONALITIES
from .exceptions import ConfigurationError

COORDINATES = ("x", "y")


class BasisArray:
    r"""A sequence of projection bases, one per frame of a tour

    Parameters
    ----------
    array
        A :math:`p \times d \times N_\text{frames}` array. A
        :math:`p \times d` matrix (or :class:`pandas.DataFrame`) is
        considered a single frame, a 1D array a single 1D basis
    manip_var
        The (0-based) index of the variable rotated in a manual tour. If
        given, `array` is assumed to be an already interpolated path
    data
        An optional :math:`n \times p` dataset attached to the bases

    Attributes
    ----------
    array
        The :math:`p \times d \times N_\text{frames}` array
    manip_var
        The manipulation variable or ``None``
    data
        The attached dataset or ``None``
    """

    def __init__(
        self,
        array,
        manip_var: Optional[int] = None,
        data: Optional[Union[pd.DataFrame, np.ndarray]] = None,
    ):
        array = np.asarray(array, dtype=float)

        if array.ndim == 1:
            array = array[:, np.newaxis]
        if array.ndim == 2:
            array = array[:, :, np.newaxis]
        if array.ndim != 3:
            raise ConfigurationError(
                "A basis array needs to have 3 dimensions "
                "(variables, target dimensions, frames), got "
                f"{array.ndim}"
            )

        if manip_var is not None and not 0 <= manip_var < array.shape[0]:
            raise ConfigurationError(
                f"The manipulation variable {manip_var} is not one of the "
                f"{array.shape[0]} variables (0-based)"
            )

        self.array = array
        self.manip_var = None if manip_var is None else int(manip_var)
        self.data = data

    @classmethod
    def coerce(cls, value) -> BasisArray:
        if isinstance(value, BasisArray):
            return value

        return cls(value)

    @property
    def num_variables(self) -> int:
        return self.array.shape[0]

    @property
    def target_dims(self) -> int:
        return self.array.shape[1]

    @property
    def num_frames(self) -> int:
        return self.array.shape[2]

    @property
    def dimensionality(self) -> Dimensionality:
        """The :class:`Dimensionality` of the projection space. Raises
        :class:`ConfigurationError` if it's not 1D or 2D"""
        if self.target_dims not in SUPPORTED_DIMENSIONALITIES:
            raise ConfigurationError(
                "Tours project onto 1 or 2 dimensions, the basis array has "
                f"{self.target_dims} columns"
            )

        return Dimensionality(self.target_dims)

    def __getitem__(self, frame: int) -> np.ndarray:
        return self.array[:, :, frame]

    def __len__(self):
        return self.num_frames


class TourTables(NamedTuple):
    """The long tables of a tour. `data` is ``None`` when no data was
    projected"""

    basis: pd.DataFrame
    data: Optional[pd.DataFrame] = None


_VOWELS = set("aeiou")


def _shorten(name: str, minlength: int) -> str:
    chars = list(name.strip())
    if len(chars) <= minlength:
        return "".join(chars)

    # Drop lower case vowels starting from the end, never the first char,
    # then the other lower case letters, then truncate
    for droppable in (lambda c: c in _VOWELS, str.islower):
        i = len(chars) - 1
        while len(chars) > minlength and i > 0:
            if droppable(chars[i]):
                del chars[i]
            i -= 1

    return "".join(chars[:minlength])


def abbreviate(names: Sequence[str], minlength: int = 3) -> List[str]:
    """Abbreviate `names` to (at least) `minlength` characters. Names whose
    abbreviations collide are abbreviated with a larger length"""

    names = [str(n) for n in names]
    abbrevs = [_shorten(n, minlength) for n in names]

    length = minlength
    while len(set(abbrevs)) < len(abbrevs) and length < max(map(len, names)):
        length += 1
        seen = list(abbrevs)
        abbrevs = [
            _shorten(n, length) if seen.count(a) > 1 else a
            for n, a in zip(names, abbrevs)
        ]

    return abbrevs


def _labels(
    labels: Optional[Sequence[str]], data, num_variables: int
) -> List[str]:
    if labels is not None:
        labels = [str(label) for label in np.atleast_1d(labels)]
        if len(labels) == 1:
            return labels * num_variables

        if len(labels) != num_variables:
            raise ConfigurationError(
                f"Got {len(labels)} labels for {num_variables} variables. "
                "Provide 1 label or 1 label per variable"
            )
        return labels

    if isinstance(data, pd.DataFrame):
        return abbreviate(data.columns, 3)

    return [f"V{i}" for i in range(1, num_variables + 1)]


def array_to_tables(
    basis_array,
    data: Optional[Union[pd.DataFrame, np.ndarray]] = None,
    labels: Optional[Sequence[str]] = None,
) -> TourTables:
    r"""Turns a tour path array into long :class:`pandas.DataFrame`

    Parameters
    ----------
    basis_array
        A :class:`BasisArray` (or anything :class:`BasisArray` accepts)
    data
        An optional :math:`n \times p` numeric dataset to project through
        each frame
    labels
        Optional labels for the variables, of length 1 or :math:`p`. Defaults
        to the abbreviated column names of `data` or to ``V1...Vp``

    Returns
    -------
    tables
        A :class:`TourTables`. The `basis` table has one row per variable and
        frame with columns ``x``, ``y`` (2D tours only), ``frame`` (1-based)
        and ``label``; ``manip_var`` is stored in its
        :attr:`~pandas.DataFrame.attrs`. The `data` table has one row per
        observation and frame, each projected coordinate being mean-centered
        frame by frame
    """

    basis_array = BasisArray.coerce(basis_array)
    dims = basis_array.dimensionality
    p = basis_array.num_variables
    num_frames = basis_array.num_frames
    columns = list(COORDINATES[:dims])

    frames = np.repeat(np.arange(1, num_frames + 1), p)

    # Stack frame by frame: (p, d, F) -> (F * p, d)
    coords = np.transpose(basis_array.array, (2, 0, 1)).reshape(-1, dims)

    basis = pd.DataFrame(coords, columns=columns)
    basis["frame"] = frames
    basis["label"] = _labels(labels, data, p) * num_frames
    basis.attrs["manip_var"] = basis_array.manip_var

    if data is None:
        return TourTables(basis)

    values = np.asarray(data, dtype=float)
    if values.ndim != 2 or values.shape[1] != p:
        raise ConfigurationError(
            f"The data to project needs {p} columns, one per variable of "
            f"the basis, got shape {values.shape}"
        )

    n = values.shape[0]

    # (n, p) @ (F, p, d) -> (F, n, d)
    projected = values @ np.transpose(basis_array.array, (2, 0, 1))

    # Translation must not affect the projected shape across frames
    projected = projected - projected.mean(axis=1, keepdims=True)

    data_table = pd.DataFrame(projected.reshape(-1, dims), columns=columns)
    data_table["frame"] = np.repeat(np.arange(1, num_frames + 1), n)
    data_table["label"] = [str(i) for i in range(1, n + 1)] * num_frames

    return TourTables(basis, data_table)
