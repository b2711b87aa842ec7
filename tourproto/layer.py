# SPDX-FileCopyrightText: 2020-2023 tourproto Development Team
#
# SPDX-License-Identifier: BSD-3-Clause

""" Backend independent description of what needs to be drawn """
from __future__ import annotations

import numpy as np
import pandas as pd

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Tuple, Union, TYPE_CHECKING

if TYPE_CHECKING:
    from .tour import TourSession


class GeomType(Enum):
    """The kind of glyph of a :class:`Layer` and the columns it reads"""

    #: A polyline through ``x``, ``y``
    PATH = "path"
    #: Segments from ``x``, ``y`` to ``xend``, ``yend``
    SEGMENT = "segment"
    #: ``label`` written at ``x``, ``y``
    TEXT = "text"
    #: Markers at ``x``, ``y``
    POINT = "point"
    #: A rectangle from ``xmin``, ``ymin`` to ``xmax``, ``ymax``
    RECT = "rect"
    #: Kernel density estimate of ``x``
    DENSITY = "density"
    #: Ticks along the bottom at ``x``
    RUG = "rug"
    #: Hexagonal binning of ``x``, ``y``
    HEX = "hex"


@dataclass
class Layer:
    """A renderable layer of a tour

    Attributes
    ----------
    geom
        The :class:`GeomType` to draw
    data
        The table to draw. Mapped aesthetics (``color``, ``shape``, ``fill``)
        are stored as columns next to the coordinates
    style
        Static styling. Array-valued entries have one value per row of
        :attr:`data`
    """

    geom: GeomType
    data: pd.DataFrame
    style: Dict[str, Any] = field(default_factory=dict)

    @property
    def animated(self) -> bool:
        """Whether the layer changes frame by frame"""
        return "frame" in self.data.columns

    def frame_view(self, frame: int) -> Tuple[pd.DataFrame, Dict[str, Any]]:
        """The rows (and row-aligned styling) to draw at `frame`. Static
        layers are returned as they are"""
        if not self.animated:
            return self.data, self.style

        mask = (self.data["frame"] == frame).to_numpy()
        style = {
            k: v[mask] if isinstance(v, np.ndarray) and len(v) == len(mask)
            else v
            for k, v in self.style.items()
        }

        return self.data[mask], style


LayerLike = Union[Layer, Iterable[Layer], None]


class TourPlot:
    """The head of a tour plot: an accumulator of :class:`Layer`.

    It does not store any tour data, the layer builders read it from the
    :class:`TourSession` that created the plot

    Attributes
    ----------
    session
        The :class:`TourSession` the plot was created by
    layers
        The list of accumulated layers
    """

    def __init__(self, session: TourSession):
        self.session = session
        self.layers: List[Layer] = []

    def add_layer(self, layer: LayerLike) -> TourPlot:
        """Append one or more layers. Nested lists (as returned by the
        ``proto_*`` builders) are flattened

        Returns
        -------
        plot
            The plot itself, to allow chaining
        """
        if layer is None:
            return self

        if isinstance(layer, Layer):
            self.layers.append(layer)
            return self

        for item in layer:
            self.add_layer(item)

        return self

    def __len__(self):
        return len(self.layers)

    def __iter__(self):
        return iter(self.layers)
