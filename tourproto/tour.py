# SPDX-FileCopyrightText: 2020-2023 tourproto Development Team
#
# SPDX-License-Identifier: BSD-3-Clause

""" The tour session: initialization of a tour and the state shared by the
layer builders and the animation backends """
from __future__ import annotations

import logging

import pandas as pd

from dataclasses import dataclass
from typing import Optional

from .array import BasisArray, array_to_tables
from .dimension import Dimensionality
from .exceptions import DimensionMismatch, StateError
from .interpolate import GeodesicInterpolator, Interpolator
from .layer import TourPlot
from .position import MapRegion

logger = logging.getLogger(__name__)


@dataclass
class TourState:
    """The reshaped tables of the current tour, with the quantities commonly
    consumed by the layer builders

    Attributes
    ----------
    basis
        The long table of the bases, one row per variable and frame
    data
        The long table of the projected data, one row per observation and
        frame, or ``None``
    map_to
        The :class:`MapRegion` glyphs are placed relative to
    frame_count
        The number of frames of the tour
    observation_count
        The number of observations (0 without data)
    variable_count
        The number of variables
    manip_var
        The (0-based) manipulation variable of a manual tour, or ``None``
    """

    basis: pd.DataFrame
    data: Optional[pd.DataFrame]
    map_to: MapRegion
    frame_count: int
    observation_count: int
    variable_count: int
    manip_var: Optional[int] = None

    @property
    def dimensionality(self) -> Dimensionality:
        if "y" in self.basis.columns:
            return Dimensionality.TWOD

        return Dimensionality.ONED

    @property
    def data_row_count(self) -> int:
        """Number of rows of the long data table"""
        return 0 if self.data is None else len(self.data)

    def require_dimensionality(self, dims: Dimensionality, caller: str):
        """Raise :class:`DimensionMismatch` if the tour is not `dims`"""
        if self.dimensionality is not dims:
            raise DimensionMismatch(
                f"`{caller}` expects a {int(dims)}D tour, the current tour is "
                f"{int(self.dimensionality)}D"
            )


class TourSession:
    """Owns the state of the most recently initialized tour

    The state is overwritten by each :meth:`begin` and cleared by the
    animation backends once consumed, so that a stale tour is never
    animated twice

    Parameters
    ----------
    interpolator
        The :class:`Interpolator` used to refine the paths of non-manual
        tours. Defaults to :class:`GeodesicInterpolator`

    Attributes
    ----------
    state
        The :class:`TourState` of the current tour, or ``None``
    """

    def __init__(self, interpolator: Optional[Interpolator] = None):
        self.interpolator = interpolator or GeodesicInterpolator()
        self.state: Optional[TourState] = None

    def begin(self, basis_array, data=None, angle: float = 0.05) -> TourPlot:
        r"""Initialize a new tour

        Parameters
        ----------
        basis_array
            A :class:`BasisArray`, a :math:`p \times d \times N` array or a
            single :math:`p \times d` basis
        data
            The data to project. Defaults to the data attached to
            `basis_array`, if any
        angle
            The target angle (in radians) between frames when interpolating
            a non-manual tour path

        Returns
        -------
        plot
            An empty :class:`TourPlot` the layers are added to
        """

        basis_array = BasisArray.coerce(basis_array)

        # Fail early on anything else than 1D or 2D
        dims = basis_array.dimensionality

        if data is None:
            data = basis_array.data

        if basis_array.manip_var is None and basis_array.num_frames > 1:
            logger.info(
                f"Interpolating {basis_array.num_frames} bases with "
                f"angle {angle}"
            )
            basis_array = BasisArray(
                self.interpolator.interpolate(basis_array.array, angle),
                data=basis_array.data,
            )

        tables = array_to_tables(basis_array, data)

        if tables.data is None:
            map_to = MapRegion.unit()
        elif dims is Dimensionality.TWOD:
            map_to = MapRegion.from_points(tables.data)
        else:
            map_to = MapRegion.from_density(tables.data["x"])

        frame_count = int(tables.basis["frame"].nunique())
        observation_count = (
            0 if tables.data is None else len(tables.data) // frame_count
        )

        self.state = TourState(
            basis=tables.basis,
            data=tables.data,
            map_to=map_to,
            frame_count=frame_count,
            observation_count=observation_count,
            variable_count=len(tables.basis) // frame_count,
            manip_var=tables.basis.attrs.get("manip_var"),
        )

        logger.info(
            f"New {int(dims)}D tour: {frame_count} frames, "
            f"{self.state.variable_count} variables, "
            f"{observation_count} observations"
        )

        return TourPlot(self)

    def require(self) -> TourState:
        """The current :class:`TourState`. Raises :class:`StateError` if no
        tour is active"""
        if self.state is None:
            raise StateError(
                "There is no active tour, have you called `begin_tour()` "
                "(or `TourSession.begin()`) yet?"
            )

        return self.state

    def clear(self):
        logger.debug("Clearing the tour state")
        self.state = None


default_session = TourSession()


def get_session(session: Optional[TourSession] = None) -> TourSession:
    """`session`, or the module-level :data:`default_session` if ``None``"""
    return default_session if session is None else session


def begin_tour(
    basis_array,
    data=None,
    angle: float = 0.05,
    session: Optional[TourSession] = None,
) -> TourPlot:
    """Initialize a tour on `session` (by default the module-level
    :data:`default_session`). See :meth:`TourSession.begin`"""

    return get_session(session).begin(basis_array, data, angle)


def last_tour(session: Optional[TourSession] = None) -> Optional[TourState]:
    """The state of the last initialized tour, or ``None``"""
    return get_session(session).state


def set_last_tour(
    value: Optional[TourState], session: Optional[TourSession] = None
):
    get_session(session).state = value
