# SPDX-FileCopyrightText: 2020-2023 tourproto Development Team
#
# SPDX-License-Identifier: BSD-3-Clause

""" Relative placement of the tour glyphs (axes, origin marks...) inside the
region occupied by the projected data """
from __future__ import annotations

import warnings

import numpy as np
import pandas as pd

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple, Union

from scipy.stats import gaussian_kde

from .exceptions import ConfigurationError


class Position(Enum):
    """Named placements available to the layer builders"""

    CENTER = "center"
    LEFT = "left"
    RIGHT = "right"
    BOTTOMLEFT = "bottomleft"
    TOPRIGHT = "topright"
    OFF = "off"

    @classmethod
    def coerce(cls, value: Union[str, Position]) -> Position:
        if isinstance(value, Position):
            return value

        try:
            return cls(str(value).lower())
        except ValueError:
            choices = ", ".join(p.value for p in cls)
            raise ConfigurationError(
                f"Unknown position {value!r}. Expected one of: {choices}"
            ) from None


# scale (fraction of the y range), x offset and y offset (fractions of the x
# and y range, relative to the center of the region)
_PLACEMENTS = {
    Position.CENTER: (0.30, 0.0, 0.0),
    Position.LEFT: (0.30, -0.70, 0.0),
    Position.RIGHT: (0.30, 0.70, 0.0),
    Position.BOTTOMLEFT: (0.25, -0.25, -0.50),
    Position.TOPRIGHT: (0.25, 0.25, 0.50),
}


@dataclass(frozen=True)
class PanZoom:
    """A manual alternative to a named :class:`Position`: the points are
    scaled by `zoom` and then offset by `pan`

    Attributes
    ----------
    pan
        The offset along :math:`x` and :math:`y`
    zoom
        The scale factors along :math:`x` and :math:`y`
    """

    pan: Tuple[float, float] = (0.0, 0.0)
    zoom: Tuple[float, float] = (1.0, 1.0)

    def __post_init__(self):
        if len(self.pan) != 2 or len(self.zoom) != 2:
            raise ConfigurationError("`pan` and `zoom` need 2 values each")

    def apply(self, points):
        return _transform(points, self.zoom, self.pan)


PositionLike = Union[str, Position, PanZoom]


@dataclass(frozen=True)
class MapRegion:
    """The rectangle the relative glyphs are mapped to"""

    x_min: float
    x_max: float
    y_min: float
    y_max: float

    @property
    def x_range(self) -> float:
        return self.x_max - self.x_min

    @property
    def y_range(self) -> float:
        return self.y_max - self.y_min

    @property
    def x_center(self) -> float:
        return (self.x_min + self.x_max) / 2

    @property
    def y_center(self) -> float:
        return (self.y_min + self.y_max) / 2

    @classmethod
    def unit(cls) -> MapRegion:
        r"""The :math:`[-1, 1] \times [-1, 1]` box"""
        return cls(-1.0, 1.0, -1.0, 1.0)

    @classmethod
    def from_points(cls, points) -> MapRegion:
        """The extent of the first two columns of `points`"""
        values = _as_array(points)

        return cls(
            float(values[:, 0].min()),
            float(values[:, 0].max()),
            float(values[:, 1].min()),
            float(values[:, 1].max()),
        )

    @classmethod
    def from_density(cls, values: Sequence[float]) -> MapRegion:
        """The box used by 1D tours: along :math:`x` the 1st and 99th
        percentiles of `values`, along :math:`y` 1.8 times the range of
        their kernel density estimate"""
        values = np.asarray(values, dtype=float)
        x_lo, x_hi = np.quantile(values, [0.01, 0.99])
        y = density_estimate(values)[1]

        return cls(
            float(x_lo),
            float(x_hi),
            1.8 * float(y.min()),
            1.8 * float(y.max()),
        )


def density_estimate(
    values: Sequence[float], num_points: int = 512
) -> Tuple[np.ndarray, np.ndarray]:
    """Gaussian kernel density estimate of `values` evaluated on a regular
    grid that extends 3 bandwidths beyond the data

    Returns
    -------
    grid
        The evaluation points
    density
        The estimated density at each point of `grid`
    """
    values = np.asarray(values, dtype=float)
    if values.size < 2 or np.ptp(values) == 0:
        raise ConfigurationError(
            "The density of the projected data cannot be estimated: "
            f"{values.size} value(s) with no spread"
        )

    kde = gaussian_kde(values, bw_method="silverman")
    bandwidth = kde.factor * values.std(ddof=1)

    grid = np.linspace(
        values.min() - 3 * bandwidth, values.max() + 3 * bandwidth, num_points
    )

    return grid, kde(grid)


def _as_array(points) -> np.ndarray:
    if isinstance(points, pd.DataFrame):
        points = points.iloc[:, :2]

    values = np.asarray(points, dtype=float)
    if values.ndim == 1:
        values = values[np.newaxis, :]

    return values


def _transform(points, scale, offset):
    """Apply ``point * scale + offset`` to the first two columns (or the
    only one) of `points`, preserving its type"""
    if points.shape[1] > 2:
        warnings.warn(
            "Relative mapping is only defined for 2 variables, points have "
            f"{points.shape[1]} columns. Only the first 2 are transformed"
        )

    # Tables without y only have their x column transformed
    num_cols = min(2, points.shape[1])

    if isinstance(points, pd.DataFrame):
        ret = points.copy()
        for i in range(num_cols):
            col = ret.columns[i]
            ret[col] = ret[col].astype(float) * scale[i] + offset[i]
        return ret

    ret = np.array(points, dtype=float)
    for i in range(num_cols):
        ret[:, i] = ret[:, i] * scale[i] + offset[i]

    return ret


def map_relative(
    points,
    position: PositionLike = Position.CENTER,
    to: Optional[Union[MapRegion, pd.DataFrame, np.ndarray]] = None,
):
    """Scale and offset `points` to a named placement relative to the region
    `to`

    Parameters
    ----------
    points
        A :class:`pandas.DataFrame` or a 2-column array. Only the first two
        columns are transformed. A single column is taken as :math:`x`
    position
        A :class:`Position` (or its name) or a :class:`PanZoom`. With
        :attr:`Position.OFF` nothing is produced and ``None`` is returned
    to
        The :class:`MapRegion` to map to, or a table whose extent is used.
        Defaults to the unit box

    Returns
    -------
    points
        The transformed copy of `points`, of the same type
    """

    if not isinstance(points, pd.DataFrame):
        points = _as_array(points)

    if isinstance(position, PanZoom):
        return position.apply(points)

    position = Position.coerce(position)
    if position is Position.OFF:
        return None

    if to is None:
        to = MapRegion.unit()
    elif not isinstance(to, MapRegion):
        to = MapRegion.from_points(to)

    scale, x_off, y_off = _PLACEMENTS[position]
    scale = scale * to.y_range

    return _transform(
        points,
        (scale, scale),
        (to.x_center + x_off * to.x_range, to.y_center + y_off * to.y_range),
    )


def pan_zoom(
    pan: Tuple[float, float] = (0.0, 0.0),
    zoom: Tuple[float, float] = (1.0, 1.0),
    x=None,
):
    """Pan (offset) and zoom (scale) a 2-column table

    When `x` is ``None``, the :class:`PanZoom` is returned so that it can be
    used as `position` argument of the layer builders
    """
    pz = PanZoom(tuple(pan), tuple(zoom))
    if x is None:
        return pz

    if not isinstance(x, pd.DataFrame):
        x = _as_array(x)

    return pz.apply(x)
