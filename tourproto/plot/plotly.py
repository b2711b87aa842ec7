# SPDX-FileCopyrightText: 2020-2023 tourproto Development Team
#
# SPDX-License-Identifier: BSD-3-Clause

""" A :mod:`plotly` backend that renders a tour as an interactive figure with
a frame slider, a play button and a hover tooltip """
from __future__ import annotations

import logging
import warnings

import numpy as np
import pandas as pd
import plotly.graph_objects as go

from typing import Any, Dict, List, TYPE_CHECKING

from scipy.stats import gaussian_kde

from ..layer import GeomType, Layer
from ..position import density_estimate
from .backend import (
    AnimationBackend,
    DEFAULT_COLOR,
    MARKERS,
    PALETTE,
    colors_of,
    groups,
    per_row,
    plot_limits,
    resolve,
)

if TYPE_CHECKING:
    from ..layer import TourPlot

logger = logging.getLogger(__name__)

# matplotlib markers to plotly symbols
_SYMBOLS = {
    "o": "circle",
    ".": "circle",
    "^": "triangle-up",
    "v": "triangle-down",
    "s": "square",
    "D": "diamond",
    "P": "cross",
    "X": "x",
    "*": "star",
    "+": "cross-thin-open",
    "x": "x-thin-open",
}

# matplotlib line styles to plotly dashes
_DASHES = {
    "-": "solid",
    "solid": "solid",
    "--": "dash",
    "dashed": "dash",
    ":": "dot",
    "dotted": "dot",
    "-.": "dashdot",
    "dashdot": "dashdot",
}

_OUTWARD = {
    (True, True): "top right",
    (True, False): "bottom right",
    (False, True): "top left",
    (False, False): "bottom left",
}


def _opacity(style: Dict[str, Any], default: float = 1.0) -> float:
    """A single opacity for a whole trace"""
    alpha = style.get("alpha")
    if alpha is None:
        return default

    alpha = np.ravel(alpha)
    if alpha.size == 0:
        return default

    return float(alpha[0])


def _dash(style: Dict[str, Any]) -> str:
    linestyle = style.get("linestyle", "-")
    return _DASHES.get(linestyle, linestyle)


def _interleave(starts, ends) -> List[Any]:
    """Coordinates of disconnected segments, separated by ``None``"""
    starts = np.asarray(starts, dtype=object)
    ends = np.asarray(ends, dtype=object)

    return np.column_stack(
        [starts, ends, np.full(len(starts), None, dtype=object)]
    ).ravel().tolist()


class PlotlyBackend(AnimationBackend):
    """A :mod:`plotly`-based backend to animate tours.

    Each layer is drawn with the same number of traces in each frame, so
    that the frames only update the trace data. The hexagonal heatmaps are
    not supported
    """

    @staticmethod
    def _points(layer: Layer, data: pd.DataFrame, style) -> List[go.Scatter]:
        n = len(data)
        symbols = per_row(resolve(data, style, "shape", MARKERS, "o"), n)
        alpha = style.get("alpha")

        marker = dict(
            color=list(colors_of(data, style)),
            symbol=[_SYMBOLS.get(s, s) for s in symbols],
            size=list(per_row(style.get("size", 6.0), n)),
        )
        if alpha is not None:
            marker["opacity"] = list(per_row(alpha, n))

        return [
            go.Scatter(
                x=data["x"],
                y=data["y"],
                mode="markers",
                marker=marker,
                hovertext=data["label"] if "label" in data.columns else None,
                hoverinfo="text",
            )
        ]

    @staticmethod
    def _text(layer: Layer, data: pd.DataFrame, style) -> List[go.Scatter]:
        n = len(data)
        position = "middle center"
        if style.get("outward"):
            position = [
                _OUTWARD[(bool(x >= xend), bool(y >= yend))]
                for x, y, xend, yend in zip(
                    data["x"], data["y"], data["xend"], data["yend"]
                )
            ]

        return [
            go.Scatter(
                x=data["x"],
                y=data["y"],
                mode="text",
                text=data["label"],
                textposition=position,
                textfont=dict(
                    color=list(colors_of(data, style)),
                    size=list(per_row(style.get("size", 10.0), n)),
                ),
                opacity=_opacity(style),
                hoverinfo="skip",
            )
        ]

    @staticmethod
    def _path(layer: Layer, data: pd.DataFrame, style) -> List[go.Scatter]:
        return [
            go.Scatter(
                x=data["x"],
                y=data["y"],
                mode="lines",
                line=dict(
                    color=style.get("color", DEFAULT_COLOR),
                    width=style.get("linewidth", 1.0),
                    dash=_dash(style),
                ),
                opacity=_opacity(style),
                hoverinfo="skip",
            )
        ]

    @staticmethod
    def _segments(layer: Layer, data: pd.DataFrame, style) -> List[go.Scatter]:
        # A trace has a single line style: one trace per (colour, width)
        # found over all the frames
        keys = dict.fromkeys(
            zip(
                colors_of(layer.data, layer.style),
                per_row(
                    layer.style.get("linewidth", 1.0), len(layer.data)
                ).astype(float),
            )
        )

        colors = colors_of(data, style)
        widths = per_row(style.get("linewidth", 1.0), len(data)).astype(float)

        traces = []
        for color, width in keys:
            mask = (colors == color) & (widths == width)
            rows = data[mask]
            traces.append(
                go.Scatter(
                    x=_interleave(rows["x"], rows["xend"]),
                    y=_interleave(rows["y"], rows["yend"]),
                    mode="lines",
                    line=dict(color=color, width=width, dash=_dash(style)),
                    opacity=_opacity(style),
                    hoverinfo="skip",
                )
            )

        return traces

    @staticmethod
    def _rect(layer: Layer, data: pd.DataFrame, style) -> List[go.Scatter]:
        x: List[Any] = []
        y: List[Any] = []
        for _, row in data.iterrows():
            x += [row["xmin"], row["xmax"], row["xmax"], row["xmin"]]
            x += [row["xmin"], None]
            y += [row["ymin"], row["ymin"], row["ymax"], row["ymax"]]
            y += [row["ymin"], None]

        return [
            go.Scatter(
                x=x,
                y=y,
                mode="lines",
                line=dict(
                    color=style.get("color", DEFAULT_COLOR),
                    width=style.get("linewidth", 1.0),
                ),
                hoverinfo="skip",
            )
        ]

    @staticmethod
    def _density(layer: Layer, data: pd.DataFrame, style) -> List[go.Scatter]:
        key = "fill" if "fill" in layer.data.columns else "color"
        fills = per_row(
            resolve(data, {}, key, PALETTE, DEFAULT_COLOR), len(data)
        )
        colors = per_row(style.get("color", fills), len(data))
        x = data["x"].to_numpy(dtype=float)
        grid = density_estimate(x)[0]

        traces = []
        for level in groups(layer.data, key):
            mask = (
                np.ones(len(data), dtype=bool)
                if level is None
                else (data[key] == level).to_numpy()
            )

            density = np.full(len(grid), np.nan)
            color = DEFAULT_COLOR
            if mask.any():
                color = colors[mask][0]
                try:
                    density = gaussian_kde(x[mask], bw_method="silverman")(
                        grid
                    )
                except (np.linalg.LinAlgError, ValueError) as e:
                    logger.info(
                        f"Not drawing the density of group {level!r}: {e}"
                    )

            options: Dict[str, Any] = {}
            if key == "fill" and mask.any():
                options = dict(fill="tozeroy", fillcolor=fills[mask][0])

            traces.append(
                go.Scatter(
                    x=grid,
                    y=density,
                    mode="lines",
                    line=dict(color=style.get("edgecolor", color), width=1.0),
                    opacity=_opacity(style, 0.5 if options else 1.0),
                    hoverinfo="skip",
                    **options,
                )
            )

        return traces

    @staticmethod
    def _rug(
        layer: Layer, data: pd.DataFrame, style, bottom: float
    ) -> List[go.Scatter]:
        return [
            go.Scatter(
                x=data["x"],
                y=np.full(len(data), bottom),
                mode="markers",
                marker=dict(
                    symbol="line-ns-open",
                    color=list(colors_of(data, style)),
                ),
                opacity=_opacity(style),
                hoverinfo="skip",
            )
        ]

    def frame_traces(
        self, layers: List[Layer], frame: int, bottom: float
    ) -> List[go.Scatter]:
        """The traces of the (1-based) `frame` of `layers`"""

        traces: List[go.Scatter] = []
        for layer in layers:
            data, style = layer.frame_view(frame)

            if layer.geom is GeomType.POINT:
                traces += self._points(layer, data, style)
            elif layer.geom is GeomType.TEXT:
                traces += self._text(layer, data, style)
            elif layer.geom is GeomType.PATH:
                traces += self._path(layer, data, style)
            elif layer.geom is GeomType.SEGMENT:
                traces += self._segments(layer, data, style)
            elif layer.geom is GeomType.RECT:
                traces += self._rect(layer, data, style)
            elif layer.geom is GeomType.DENSITY:
                traces += self._density(layer, data, style)
            elif layer.geom is GeomType.RUG:
                traces += self._rug(layer, data, style, bottom)

        return traces

    def animate(self, plot: TourPlot, fps: int = 8, **layout) -> go.Figure:
        """Animate the tour

        Parameters
        ----------
        plot
            The :class:`TourPlot` to animate
        fps
            The number of frames per second
        layout
            Passed to :meth:`plotly.graph_objects.Figure.update_layout`

        Returns
        -------
        figure
            The :class:`plotly.graph_objects.Figure`. It has no frames if
            the tour has a single frame
        """

        state, animated = self._consume(plot)

        layers = []
        for layer in plot:
            if layer.geom is GeomType.HEX:
                warnings.warn(
                    "The plotly backend doesn't draw hexagonal heatmaps, "
                    "skipping the proto_hex layer"
                )
                continue

            if (
                layer.geom is GeomType.DENSITY
                and layer.style.get("position") == "stack"
            ):
                warnings.warn(
                    "The plotly backend doesn't stack densities, falling "
                    "back to density_position='identity'"
                )

            layers.append(layer)

        (x_lo, x_hi), (y_lo, y_hi) = plot_limits(layers, state)
        axis = dict(
            showgrid=False,
            zeroline=False,
            showline=False,
            showticklabels=False,
        )

        fig = go.Figure(data=self.frame_traces(layers, 1, y_lo))
        fig.update_layout(
            showlegend=False,
            plot_bgcolor="white",
            xaxis=dict(
                range=[x_lo, x_hi], scaleanchor="y", scaleratio=1, **axis
            ),
            yaxis=dict(range=[y_lo, y_hi], **axis),
        )

        if animated:
            frames = range(1, state.frame_count + 1)
            options = dict(
                frame=dict(duration=1000 / fps, redraw=False),
                transition=dict(duration=0),
                mode="immediate",
            )

            fig.frames = [
                go.Frame(data=self.frame_traces(layers, f, y_lo), name=str(f))
                for f in frames
            ]
            fig.update_layout(
                updatemenus=[
                    dict(
                        type="buttons",
                        showactive=False,
                        buttons=[
                            dict(
                                label="Play",
                                method="animate",
                                args=[None, dict(fromcurrent=True, **options)],
                            )
                        ],
                    )
                ],
                sliders=[
                    dict(
                        active=0,
                        currentvalue=dict(prefix="Frame: "),
                        steps=[
                            dict(
                                method="animate",
                                label=str(f),
                                args=[[str(f)], options],
                            )
                            for f in frames
                        ],
                    )
                ],
            )

        fig.update_layout(**layout)

        return fig


def animate_plotly(plot: TourPlot, **options) -> go.Figure:
    """Animate `plot` with a :class:`PlotlyBackend`. See
    :meth:`PlotlyBackend.animate` for the options"""
    return PlotlyBackend().animate(plot, **options)
