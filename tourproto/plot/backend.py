# SPDX-FileCopyrightText: 2020-2023 tourproto Development Team
#
# SPDX-License-Identifier: BSD-3-Clause

""" Backends used to animate a :class:`~.TourPlot` """
from __future__ import annotations

import abc
import logging
import warnings

import numpy as np
import pandas as pd

from typing import Any, Dict, Iterable, List, Sequence, Tuple, TYPE_CHECKING

from matplotlib import colormaps
from matplotlib.colors import is_color_like, to_hex

from ..exceptions import ConfigurationError
from ..layer import GeomType, Layer

if TYPE_CHECKING:
    from ..layer import TourPlot
    from ..tour import TourState

logger = logging.getLogger(__name__)

#: Colours of categorical aesthetics
PALETTE: List[str] = [to_hex(c) for c in colormaps["Dark2"].colors]

#: Markers of categorical shapes
MARKERS: List[str] = ["o", "^", "s", "D", "v", "P", "X", "*"]

DEFAULT_COLOR = "black"

# Columns holding coordinates, used to compute the plot limits
_X_COLUMNS = ("x", "xend", "xmin", "xmax")
_Y_COLUMNS = ("y", "yend", "ymin", "ymax")


def discrete_map(
    values: Iterable[Any], palette: Sequence[str], colors: bool = True
) -> np.ndarray:
    """Map categorical `values` to `palette`, cycling through it if there are
    more levels than entries. Values that are already valid (entries of
    `palette`, or any colour if `colors`) are returned as they are"""

    values = np.asarray(list(values), dtype=object)
    if all(
        v in palette or (colors and is_color_like(v)) for v in set(values)
    ):
        return values

    codes = pd.Categorical(values).codes
    return np.asarray(palette, dtype=object)[codes % len(palette)]


def resolve(
    data: pd.DataFrame,
    style: Dict[str, Any],
    aesthetic: str,
    palette: Sequence[str],
    default: Any = None,
) -> Any:
    """The value(s) of `aesthetic` for the rows of `data`: static styling
    wins over a mapped column, that is mapped to `palette`"""

    if aesthetic in style:
        return style[aesthetic]

    if aesthetic in data.columns:
        return discrete_map(
            data[aesthetic], palette, colors=aesthetic != "shape"
        )

    return default


def per_row(value, n: int) -> np.ndarray:
    """`value` as an array with one entry per row"""
    if isinstance(value, str) or np.ndim(value) == 0:
        return np.full(n, value, dtype=object)

    return np.resize(np.asarray(value, dtype=object), n)


def colors_of(data: pd.DataFrame, style: Dict[str, Any]) -> np.ndarray:
    """The colour of each row of `data`"""
    return per_row(
        resolve(data, style, "color", PALETTE, DEFAULT_COLOR), len(data)
    )


def groups(data: pd.DataFrame, column: str) -> List[Any]:
    """The distinct values of `column`, or a single ``None`` group"""
    if column not in data.columns:
        return [None]

    return list(pd.unique(data[column]))


def frame_sequence(
    frame_count: int,
    fps: int = 8,
    rewind: bool = False,
    start_pause: float = 1,
    end_pause: float = 1,
) -> List[int]:
    """The (1-based) frames in the order they are shown

    The first frame is held for ``fps * start_pause`` extra frames and the
    last one for ``fps * end_pause``. With `rewind` the tour is then played
    backwards
    """
    frames = list(range(1, frame_count + 1))

    sequence = [1] * int(fps * start_pause) + frames
    sequence += [frame_count] * int(fps * end_pause)
    if rewind:
        sequence += frames[-2::-1]

    return sequence


def plot_limits(
    layers: Iterable[Layer], state: TourState, margin: float = 0.05
) -> Tuple[Tuple[float, float], Tuple[float, float]]:
    """Fixed limits enclosing every layer (over all the frames) and the
    region the glyphs are mapped to"""

    region = state.map_to
    xs = [region.x_min, region.x_max]
    ys = [region.y_min, region.y_max]

    for layer in layers:
        for col in _X_COLUMNS:
            if col in layer.data.columns:
                xs.extend([layer.data[col].min(), layer.data[col].max()])
        if layer.geom in (GeomType.DENSITY, GeomType.RUG):
            continue
        for col in _Y_COLUMNS:
            if col in layer.data.columns:
                ys.extend([layer.data[col].min(), layer.data[col].max()])

    x_lo, x_hi = float(np.nanmin(xs)), float(np.nanmax(xs))
    y_lo, y_hi = float(np.nanmin(ys)), float(np.nanmax(ys))
    dx = margin * (x_hi - x_lo)
    dy = margin * (y_hi - y_lo)

    return (x_lo - dx, x_hi + dx), (y_lo - dy, y_hi + dy)


class AnimationBackend(metaclass=abc.ABCMeta):
    """An abstract interface representing an animation backend"""

    @staticmethod
    def _consume(plot: TourPlot) -> Tuple[TourState, bool]:
        """Read the state of the tour `plot` was created from

        Returns
        -------
        state
            The :class:`TourState` of the tour
        animated
            ``False`` if the tour has a single frame. Otherwise the state is
            cleared from the session, so that it can't be animated twice
        """

        if len(plot) == 0:
            raise ConfigurationError(
                "No layers found, did you forget to add a proto_*?"
            )

        state = plot.session.require()

        if state.frame_count == 1:
            warnings.warn(
                "The tour only has 1 frame, rendering a static plot instead"
            )
            return state, False

        logger.debug(f"Animating {state.frame_count} frames")
        plot.session.clear()

        return state, True

    @abc.abstractmethod
    def animate(self, plot: TourPlot, **options):
        """Animate the layers of `plot`, one tour frame at a time

        Parameters
        ----------
        plot
            The :class:`TourPlot` to animate
        options
            Backend specific options
        """

        raise NotImplementedError
