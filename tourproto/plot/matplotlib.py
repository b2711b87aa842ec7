# SPDX-FileCopyrightText: 2020-2023 tourproto Development Team
#
# SPDX-License-Identifier: BSD-3-Clause

""" A :mod:`matplotlib` backend that renders a tour as a
:class:`~matplotlib.animation.FuncAnimation`, optionally saved as a gif """
from __future__ import annotations

import logging

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from typing import Any, Callable, Dict, List, Optional, Tuple, TYPE_CHECKING

from matplotlib.animation import FuncAnimation, PillowWriter
from matplotlib.axes import Axes
from matplotlib.collections import LineCollection
from matplotlib.figure import Figure
from matplotlib.patches import Rectangle
from scipy.stats import gaussian_kde

from ..dimension import Dimensionality
from ..layer import GeomType, Layer
from ..position import density_estimate
from .backend import (
    AnimationBackend,
    DEFAULT_COLOR,
    MARKERS,
    PALETTE,
    colors_of,
    frame_sequence,
    groups,
    per_row,
    plot_limits,
    resolve,
)

if TYPE_CHECKING:
    from ..layer import TourPlot
    from ..tour import TourState

logger = logging.getLogger(__name__)

Limits = Tuple[Tuple[float, float], Tuple[float, float]]
Painter = Callable[[Axes, pd.DataFrame, Dict[str, Any]], None]


def _sliced(value, mask: np.ndarray):
    if np.ndim(value) == 0:
        return value

    return np.asarray(value)[mask]


def _draw_path(ax: Axes, data, style):
    ax.plot(
        data["x"],
        data["y"],
        color=style.get("color", DEFAULT_COLOR),
        linewidth=style.get("linewidth", 1.0),
        linestyle=style.get("linestyle", "-"),
        alpha=style.get("alpha"),
    )


def _draw_segment(ax: Axes, data, style):
    segments = np.stack(
        [data[["x", "y"]].to_numpy(), data[["xend", "yend"]].to_numpy()],
        axis=1,
    )
    colors = colors_of(data, style)

    ax.add_collection(
        LineCollection(
            segments,
            colors=list(colors),
            linewidths=style.get("linewidth", 1.0),
            linestyles=style.get("linestyle", "solid"),
            alpha=style.get("alpha"),
        )
    )


def _draw_text(ax: Axes, data, style):
    n = len(data)
    colors = colors_of(data, style)
    sizes = per_row(style.get("size", 10.0), n)
    x = data["x"].to_numpy()
    y = data["y"].to_numpy()
    labels = data["label"].to_numpy()

    for i in range(n):
        ha, va = "center", "center"
        if style.get("outward"):
            ha = "left" if x[i] >= data["xend"].iloc[i] else "right"
            va = "bottom" if y[i] >= data["yend"].iloc[i] else "top"

        ax.text(
            x[i],
            y[i],
            labels[i],
            color=colors[i],
            fontsize=sizes[i],
            ha=ha,
            va=va,
            alpha=style.get("alpha"),
        )


def _draw_point(ax: Axes, data, style):
    n = len(data)
    colors = colors_of(data, style)
    markers = per_row(resolve(data, style, "shape", MARKERS, "o"), n)
    sizes = np.square(per_row(style.get("size", 6.0), n).astype(float))
    alpha = style.get("alpha")

    x = data["x"].to_numpy()
    y = data["y"].to_numpy()

    # scatter takes a single marker per call
    for marker in pd.unique(markers):
        mask = markers == marker
        ax.scatter(
            x[mask],
            y[mask],
            c=list(colors[mask]),
            s=sizes[mask],
            marker=marker,
            alpha=_sliced(alpha, mask),
        )


def _draw_rect(ax: Axes, data, style):
    for _, row in data.iterrows():
        ax.add_patch(
            Rectangle(
                (row["xmin"], row["ymin"]),
                row["xmax"] - row["xmin"],
                row["ymax"] - row["ymin"],
                fill=False,
                edgecolor=style.get("color", DEFAULT_COLOR),
                linewidth=style.get("linewidth", 1.0),
            )
        )


def _draw_density(ax: Axes, data, style):
    key = "fill" if "fill" in data.columns else "color"
    fills = per_row(resolve(data, {}, key, PALETTE, DEFAULT_COLOR), len(data))
    colors = per_row(style.get("color", fills), len(data))
    stacked = style.get("position") == "stack"

    x = data["x"].to_numpy(dtype=float)
    grid = density_estimate(x)[0]
    base = np.zeros_like(grid)

    for level in groups(data, key):
        mask = (
            np.ones(len(data), dtype=bool)
            if level is None
            else (data[key] == level).to_numpy()
        )
        try:
            density = gaussian_kde(x[mask], bw_method="silverman")(grid)
        except (np.linalg.LinAlgError, ValueError) as e:
            logger.info(f"Not drawing the density of group {level!r}: {e}")
            continue

        top = base + density if stacked else density
        color = colors[mask][0]

        if key == "fill":
            ax.fill_between(
                grid,
                base if stacked else 0,
                top,
                facecolor=fills[mask][0],
                edgecolor=style.get("edgecolor", color),
                alpha=style.get("alpha", 0.5),
            )
        else:
            ax.plot(
                grid,
                top,
                color=color,
                linewidth=style.get("linewidth", 1.0),
                alpha=style.get("alpha"),
            )

        if stacked:
            base = top


def _draw_rug(ax: Axes, data, style):
    n = len(data)
    colors = colors_of(data, style)
    bottom = ax.get_ylim()[0]

    ax.scatter(
        data["x"],
        np.full(n, bottom),
        c=list(colors),
        marker="|",
        alpha=style.get("alpha"),
    )


def _draw_hex(ax: Axes, data, style):
    (x_lo, x_hi), (y_lo, y_hi) = ax.get_xlim(), ax.get_ylim()

    ax.hexbin(
        data["x"],
        data["y"],
        gridsize=style.get("bins", 30),
        extent=(x_lo, x_hi, y_lo, y_hi),
        mincnt=1,
        cmap="viridis",
        alpha=style.get("alpha"),
    )


_PAINTERS: Dict[GeomType, Painter] = {
    GeomType.PATH: _draw_path,
    GeomType.SEGMENT: _draw_segment,
    GeomType.TEXT: _draw_text,
    GeomType.POINT: _draw_point,
    GeomType.RECT: _draw_rect,
    GeomType.DENSITY: _draw_density,
    GeomType.RUG: _draw_rug,
    GeomType.HEX: _draw_hex,
}


class MatplotlibBackend(AnimationBackend):
    """A :mod:`matplotlib`-based backend to animate tours.

    Each frame of the animation clears the axes and draws every layer
    again, with fixed limits so that the view does not jump

    Parameters
    ----------
    figsize
        The size of the created figure, in inches
    """

    def __init__(self, figsize: Optional[Tuple[float, float]] = None):
        self.figsize = figsize

    @staticmethod
    def draw_frame(
        ax: Axes,
        layers: List[Layer],
        state: TourState,
        frame: int,
        limits: Limits,
    ):
        """Draw the (1-based) `frame` of all the `layers` on `ax`"""
        (x_lo, x_hi), (y_lo, y_hi) = limits

        ax.clear()
        ax.set_xlim(x_lo, x_hi)
        ax.set_ylim(y_lo, y_hi)
        if state.dimensionality is Dimensionality.TWOD:
            ax.set_aspect("equal")
        ax.set_axis_off()

        for layer in layers:
            data, style = layer.frame_view(frame)
            if data.empty:
                continue

            _PAINTERS[layer.geom](ax, data, style)

    def animate(
        self,
        plot: TourPlot,
        fps: int = 8,
        rewind: bool = False,
        start_pause: float = 1,
        end_pause: float = 1,
        filename: Optional[str] = None,
    ):
        """Animate the tour

        Parameters
        ----------
        plot
            The :class:`TourPlot` to animate
        fps
            The number of frames per second
        rewind
            Whether to play the tour backwards once it reaches the end
        start_pause
            The time (in seconds) the first frame is held
        end_pause
            The time (in seconds) the last frame is held
        filename
            If given, the animation is saved there as a gif

        Returns
        -------
        animation
            The :class:`~matplotlib.animation.FuncAnimation`, or a
            :class:`~matplotlib.figure.Figure` if the tour has a single
            frame
        """

        state, animated = self._consume(plot)
        layers = list(plot)
        limits = plot_limits(layers, state)

        fig: Figure
        ax: Axes
        fig, ax = plt.subplots(figsize=self.figsize)

        if not animated:
            self.draw_frame(ax, layers, state, 1, limits)
            return fig

        def ani_init():
            self.draw_frame(ax, layers, state, 1, limits)

        def ani_step(frame: int):
            self.draw_frame(ax, layers, state, frame, limits)

        frames = frame_sequence(
            state.frame_count, fps, rewind, start_pause, end_pause
        )
        ani = FuncAnimation(
            fig,
            func=ani_step,
            init_func=ani_init,
            frames=frames,
            interval=1000 / fps,
            cache_frame_data=False,
        )

        if filename is not None:
            logger.info(f"Saving {len(frames)} frames to {filename}")
            ani.save(filename, writer=PillowWriter(fps=fps))

        return ani


def animate_matplotlib(plot: TourPlot, **options):
    """Animate `plot` with a :class:`MatplotlibBackend`. See
    :meth:`MatplotlibBackend.animate` for the options"""
    return MatplotlibBackend().animate(plot, **options)
