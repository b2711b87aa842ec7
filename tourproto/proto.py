# SPDX-FileCopyrightText: 2020-2023 tourproto Development Team
#
# SPDX-License-Identifier: BSD-3-Clause

""" Layer builders ("protos") of a tour. Each builder reads the state of the
current tour from a :class:`~.TourSession` and returns a list of
:class:`~.Layer` to be added to a :class:`~.TourPlot`

>>> plot = begin_tour(path, data)
>>> plot.add_layer(proto_basis()).add_layer(proto_point())
"""
from __future__ import annotations

import logging
import warnings

import numpy as np
import pandas as pd

from typing import Any, Dict, Iterable, List, Optional, Union

from .aes import AesArgs, IdentityArgs
from .dimension import Dimensionality
from .exceptions import ConfigurationError
from .layer import GeomType, Layer
from .position import PanZoom, Position, PositionLike, map_relative
from .tour import TourSession, TourState, get_session

logger = logging.getLogger(__name__)

GREY50 = "#7f7f7f"
GREY60 = "#999999"
GREY80 = "#cccccc"

AesLike = Optional[Union[AesArgs, Dict[str, Any]]]
IdentityLike = Optional[Union[IdentityArgs, Dict[str, Any]]]
RowIndex = Union[int, Iterable[int]]


def _init(
    session: Optional[TourSession],
    caller: str,
    dims: Optional[Dimensionality] = None,
) -> TourState:
    state = get_session(session).require()
    if dims is not None:
        state.require_dimensionality(dims, caller)

    return state


def _position(position: PositionLike) -> Union[Position, PanZoom]:
    if isinstance(position, PanZoom):
        return position

    return Position.coerce(position)


def _map_xy(table: pd.DataFrame, position, state: TourState) -> pd.DataFrame:
    """Map the ``x``, ``y`` columns of `table`, keeping the others"""
    ret = table.copy()
    ret[["x", "y"]] = map_relative(
        table[["x", "y"]], position, state.map_to
    ).to_numpy()

    return ret


def _origin(position, state: TourState) -> np.ndarray:
    return map_relative(
        pd.DataFrame({"x": [0.0], "y": [0.0]}), position, state.map_to
    ).to_numpy()[0]


def _axes_style(state: TourState, manip_col: str, width: float):
    """Colour and width of each axis. The manipulation variable, if any,
    is highlighted"""
    if state.manip_var is None:
        return GREY50, width, GREY50

    colors = np.full(state.variable_count, GREY50, dtype=object)
    colors[state.manip_var] = manip_col
    widths = np.full(state.variable_count, float(width))
    widths[state.manip_var] = 1.5 * width

    return (
        np.tile(colors, state.frame_count),
        np.tile(widths, state.frame_count),
        colors,
    )


def _replicated(state: TourState, aes_args: AesLike, identity_args):
    aes = AesArgs.coerce(aes_args).replicate(
        state.data_row_count, state.observation_count
    )
    identity = IdentityArgs.coerce(identity_args).replicate(
        state.data_row_count, state.observation_count
    )

    return aes, identity


def _with_aes(data: pd.DataFrame, aes: AesArgs) -> pd.DataFrame:
    data = data.copy()
    for name, value in aes.items().items():
        data[name] = value

    return data


def _style(identity: IdentityArgs, **defaults) -> Dict[str, Any]:
    style = dict(defaults)
    style.update(identity.items())

    return style


def _row_mask(state: TourState, rownum_index: RowIndex) -> np.ndarray:
    rows = {str(int(i)) for i in np.atleast_1d(rownum_index)}

    return state.data["label"].isin(rows).to_numpy()


def _subset(data: pd.DataFrame, style: Dict[str, Any], mask: np.ndarray):
    style = {
        k: v[mask] if isinstance(v, np.ndarray) and len(v) == len(mask)
        else v
        for k, v in style.items()
    }

    return data[mask], style


def _no_data(state: TourState, caller: str) -> bool:
    if state.data is None:
        logger.info(
            f"`{caller}` draws the projected data, but the tour has none. "
            "Did you initialize a manual tour without passing data?"
        )
        return True

    return False


def proto_basis(
    position: PositionLike = Position.LEFT,
    manip_col: str = "blue",
    line_size: float = 1.0,
    text_size: float = 10.0,
    session: Optional[TourSession] = None,
) -> List[Layer]:
    """The axes of a 2D basis: the contribution of each variable to the
    projection plane, inscribed in a unit circle

    Parameters
    ----------
    position
        Where to place the axes relative to the data, a :class:`Position`
        (or its name) or a :class:`PanZoom`
    manip_col
        The colour of the manipulation variable of a manual tour
    line_size
        The width of the axes and of the circle
    text_size
        The font size of the variable labels
    session
        The :class:`TourSession` to read the tour from. Defaults to the
        module-level session
    """

    state = _init(session, "proto_basis", Dimensionality.TWOD)
    position = _position(position)
    if position is Position.OFF:
        return []

    angles = np.linspace(0, 2 * np.pi, 360)
    circle = pd.DataFrame({"x": np.cos(angles), "y": np.sin(angles)})
    circle = map_relative(circle, position, state.map_to)

    center = _origin(position, state)
    axes = _map_xy(state.basis, position, state)
    axes["xend"] = center[0]
    axes["yend"] = center[1]

    colors, widths, _ = _axes_style(state, manip_col, line_size)

    return [
        Layer(
            GeomType.PATH, circle, {"color": GREY80, "linewidth": line_size}
        ),
        Layer(GeomType.SEGMENT, axes, {"color": colors, "linewidth": widths}),
        Layer(
            GeomType.TEXT,
            axes,
            {"color": colors, "size": text_size, "outward": True},
        ),
    ]


def proto_basis1d(
    position: PositionLike = Position.LEFT,
    manip_col: str = "blue",
    segment_size: float = 2.0,
    text_size: float = 10.0,
    session: Optional[TourSession] = None,
) -> List[Layer]:
    """The axes of a 1D basis: one horizontal bar per variable, showing its
    contribution to the projection, inside a rectangle of unit width

    Parameters
    ----------
    position
        Where to place the axes relative to the data
    manip_col
        The colour of the manipulation variable of a manual tour
    segment_size
        The thickness of the bars
    text_size
        The font size of the variable labels
    session
        The :class:`TourSession` to read the tour from
    """

    state = _init(session, "proto_basis1d", Dimensionality.ONED)
    position = _position(position)
    if position is Position.OFF:
        return []

    p = state.variable_count
    basis = state.basis
    rows = np.arange(p, 0, -1, dtype=float)

    bars = pd.DataFrame(
        {
            "x": basis["x"].to_numpy(),
            "y": np.resize(rows, len(basis)),
            "frame": basis["frame"].to_numpy(),
            "label": basis["label"].to_numpy(),
        }
    )
    labels = pd.DataFrame(
        {
            "x": -1.33,
            "y": rows,
            "label": basis.loc[basis["frame"] == 1, "label"].to_numpy(),
        }
    )
    box = pd.DataFrame({"x": [-1.0, 1.0], "y": [0.5, p + 0.5]})
    zero = pd.DataFrame({"x": [0.0, 0.0], "y": [0.5, p + 0.5]})

    bars = _map_xy(bars, position, state)
    labels = _map_xy(labels, position, state)
    box = map_relative(box, position, state.map_to)
    zero = map_relative(zero, position, state.map_to)
    center = _origin(position, state)

    bars["xend"] = center[0]
    bars["yend"] = bars["y"]

    colors, widths, text_colors = _axes_style(state, manip_col, segment_size)

    zero_line = pd.DataFrame(
        {
            "x": [zero["x"].iloc[0]],
            "y": [zero["y"].min()],
            "xend": [zero["x"].iloc[0]],
            "yend": [zero["y"].max()],
        }
    )
    rect = pd.DataFrame(
        {
            "xmin": [box["x"].min()],
            "xmax": [box["x"].max()],
            "ymin": [box["y"].min()],
            "ymax": [box["y"].max()],
        }
    )

    return [
        Layer(
            GeomType.SEGMENT,
            zero_line,
            {"color": GREY80, "linestyle": "--", "linewidth": 1.0},
        ),
        Layer(GeomType.RECT, rect, {"color": GREY60}),
        Layer(
            GeomType.TEXT, labels, {"color": text_colors, "size": text_size}
        ),
        Layer(GeomType.SEGMENT, bars, {"color": colors, "linewidth": widths}),
    ]


def proto_point(
    aes_args: AesLike = None,
    identity_args: IdentityLike = None,
    session: Optional[TourSession] = None,
) -> List[Layer]:
    """The projected data as points

    Parameters
    ----------
    aes_args
        An :class:`AesArgs` (or a mapping of its fields): values mapped to
        the colour or the shape of each observation, e.g.
        ``dict(color=species, shape=species)``
    identity_args
        An :class:`IdentityArgs` (or a mapping of its fields): static
        styling such as ``dict(size=8, alpha=0.7)``
    session
        The :class:`TourSession` to read the tour from
    """

    state = _init(session, "proto_point", Dimensionality.TWOD)
    if _no_data(state, "proto_point"):
        return []

    aes, identity = _replicated(state, aes_args, identity_args)

    return [
        Layer(GeomType.POINT, _with_aes(state.data, aes), _style(identity))
    ]


def proto_origin(
    size_frac: float = 0.05, session: Optional[TourSession] = None
) -> List[Layer]:
    """A cross marking the origin of the projection space

    Parameters
    ----------
    size_frac
        The length of the arms of the cross, as a fraction of the extent of
        the projection space
    session
        The :class:`TourSession` to read the tour from
    """

    state = _init(session, "proto_origin", Dimensionality.TWOD)
    if _no_data(state, "proto_origin"):
        return []

    cx, cy = _origin(Position.CENTER, state)
    region = state.map_to
    lo = min(region.x_min, region.y_min)
    hi = max(region.x_max, region.y_max)
    tail = size_frac / 2 * (hi - lo)

    cross = pd.DataFrame(
        {
            "x": [cx - tail, cx],
            "xend": [cx + tail, cx],
            "y": [cy, cy - tail],
            "yend": [cy, cy + tail],
        }
    )

    return [
        Layer(
            GeomType.SEGMENT,
            cross,
            {"color": GREY60, "linewidth": 1.0, "alpha": 0.7},
        )
    ]


def proto_origin1d(session: Optional[TourSession] = None) -> List[Layer]:
    """A vertical line marking the origin of a 1D projection"""

    state = _init(session, "proto_origin1d", Dimensionality.ONED)
    if _no_data(state, "proto_origin1d"):
        return []

    cx = _origin(Position.CENTER, state)[0]
    line = pd.DataFrame(
        {
            "x": [cx],
            "xend": [cx],
            "y": [state.map_to.y_min],
            "yend": [state.map_to.y_max],
        }
    )

    return [
        Layer(
            GeomType.SEGMENT,
            line,
            {"color": GREY60, "linewidth": 1.0, "alpha": 0.7},
        )
    ]


def proto_density(
    aes_args: AesLike = None,
    identity_args: IdentityLike = None,
    density_position: str = "identity",
    session: Optional[TourSession] = None,
) -> List[Layer]:
    """The density of a 1D projection, with rug marks for each observation

    Parameters
    ----------
    aes_args
        Values mapped to an aesthetic. Use ``fill`` to colour the area below
        each group's curve
    identity_args
        Static styling
    density_position
        ``"identity"`` overlays the densities of each group, ``"stack"``
        stacks them (not supported by the plotly backend)
    session
        The :class:`TourSession` to read the tour from
    """

    state = _init(session, "proto_density", Dimensionality.ONED)
    if density_position not in ("identity", "stack"):
        raise ConfigurationError(
            "`density_position` needs to be 'identity' or 'stack', got "
            f"{density_position!r}"
        )
    if _no_data(state, "proto_density"):
        return []

    aes = AesArgs.coerce(aes_args)
    if aes.color is not None and aes.fill is None:
        warnings.warn(
            "proto_density: `color` used without `fill`, did you mean to use "
            "`fill` to color below the curve?"
        )

    aes, identity = _replicated(state, aes, identity_args)
    data = _with_aes(state.data, aes)

    return [
        Layer(
            GeomType.DENSITY,
            data,
            _style(identity, edgecolor="black", position=density_position),
        ),
        Layer(GeomType.RUG, data, _style(identity)),
    ]


def proto_text(
    aes_args: AesLike = None,
    identity_args: IdentityLike = None,
    label: Optional[Iterable[str]] = None,
    rownum_index: Optional[RowIndex] = None,
    session: Optional[TourSession] = None,
) -> List[Layer]:
    """The projected data as text

    Parameters
    ----------
    aes_args
        Values mapped to an aesthetic
    identity_args
        Static styling
    label
        The text of each observation. Defaults to the (1-based) row number
    rownum_index
        The (1-based) row numbers to keep. Defaults to all
    session
        The :class:`TourSession` to read the tour from
    """

    state = _init(session, "proto_text", Dimensionality.TWOD)
    if _no_data(state, "proto_text"):
        return []

    aes, identity = _replicated(state, aes_args, identity_args)
    data = _with_aes(state.data, aes)
    if label is not None:
        data["label"] = np.resize(
            np.asarray(list(label), dtype=str), state.data_row_count
        )

    style = _style(identity)
    if rownum_index is not None:
        data, style = _subset(data, style, _row_mask(state, rownum_index))

    return [Layer(GeomType.TEXT, data, style)]


def proto_hex(
    aes_args: AesLike = None,
    identity_args: IdentityLike = None,
    bins: int = 30,
    session: Optional[TourSession] = None,
) -> List[Layer]:
    """A hexagonal heatmap of the projected data. Not drawn by the plotly
    backend

    Parameters
    ----------
    bins
        Number of hexagons in the horizontal direction
    """

    state = _init(session, "proto_hex", Dimensionality.TWOD)
    if _no_data(state, "proto_hex"):
        return []

    aes, identity = _replicated(state, aes_args, identity_args)

    return [
        Layer(
            GeomType.HEX,
            _with_aes(state.data, aes),
            _style(identity, bins=bins),
        )
    ]


def proto_default(
    aes_args: AesLike = None,
    identity_args: IdentityLike = None,
    session: Optional[TourSession] = None,
) -> List[Layer]:
    """The usual layers of a 2D tour: origin, points and basis"""

    return [
        *proto_origin(session=session),
        *proto_point(aes_args, identity_args, session=session),
        *proto_basis(session=session),
    ]


def proto_default1d(
    aes_args: AesLike = None,
    identity_args: IdentityLike = None,
    session: Optional[TourSession] = None,
) -> List[Layer]:
    """The usual layers of a 1D tour: origin, density and basis"""

    return [
        *proto_origin1d(session=session),
        *proto_density(aes_args, identity_args, session=session),
        *proto_basis1d(session=session),
    ]


def proto_highlight(
    rownum_index: RowIndex,
    aes_args: AesLike = None,
    identity_args: IdentityLike = None,
    mark_initial: Optional[bool] = None,
    session: Optional[TourSession] = None,
) -> List[Layer]:
    """Draws attention to a subset of the observations of a 2D tour.
    Add it before or after :func:`proto_point` to draw it behind or in
    front of the other points

    Parameters
    ----------
    rownum_index
        The (1-based) row numbers of the observations to highlight
    aes_args
        Values mapped to an aesthetic
    identity_args
        Static styling. Defaults to big red stars
    mark_initial
        Whether to leave a fainter mark at the initial position of the
        highlighted observations. Defaults to ``True`` if a single
        observation is highlighted
    session
        The :class:`TourSession` to read the tour from
    """

    state = _init(session, "proto_highlight", Dimensionality.TWOD)
    if _no_data(state, "proto_highlight"):
        return []

    if identity_args is None:
        identity_args = IdentityArgs(color="red", size=10.0, shape="*")
    if mark_initial is None:
        mark_initial = np.size(rownum_index) == 1

    aes, identity = _replicated(state, aes_args, identity_args)
    data, style = _subset(
        _with_aes(state.data, aes),
        _style(identity),
        _row_mask(state, rownum_index),
    )

    layers = [Layer(GeomType.POINT, data, style)]
    if mark_initial:
        first = (data["frame"] == 1).to_numpy()
        initial, initial_style = _subset(data, style, first)
        initial_style["alpha"] = 0.5
        layers.insert(
            0,
            Layer(
                GeomType.POINT, initial.drop(columns="frame"), initial_style
            ),
        )

    return layers


def proto_highlight1d(
    rownum_index: RowIndex,
    aes_args: AesLike = None,
    identity_args: IdentityLike = None,
    mark_initial: Optional[bool] = None,
    session: Optional[TourSession] = None,
) -> List[Layer]:
    """Draws attention to a subset of the observations of a 1D tour with a
    vertical line at their projected position

    Parameters
    ----------
    rownum_index
        The (1-based) row numbers of the observations to highlight
    aes_args
        Values mapped to an aesthetic
    identity_args
        Static styling. Defaults to red dashed lines
    mark_initial
        Whether to leave a fainter mark at the initial position of the
        highlighted observations
    session
        The :class:`TourSession` to read the tour from
    """

    state = _init(session, "proto_highlight1d", Dimensionality.ONED)
    if _no_data(state, "proto_highlight1d"):
        return []

    if identity_args is None:
        identity_args = IdentityArgs(
            color="red", linewidth=1.5, linestyle="--", alpha=0.5
        )
    if mark_initial is None:
        mark_initial = np.size(rownum_index) == 1

    aes, identity = _replicated(state, aes_args, identity_args)
    data, style = _subset(
        _with_aes(state.data, aes),
        _style(identity),
        _row_mask(state, rownum_index),
    )

    lines = data.assign(
        xend=data["x"], y=state.map_to.y_min, yend=state.map_to.y_max
    )

    layers = [Layer(GeomType.SEGMENT, lines, style)]
    if mark_initial:
        first = (lines["frame"] == 1).to_numpy()
        initial, initial_style = _subset(lines, style, first)
        initial_style.update(alpha=0.5, linestyle="--")
        layers.insert(
            0,
            Layer(
                GeomType.SEGMENT,
                initial.drop(columns="frame"),
                initial_style,
            ),
        )

    return layers
