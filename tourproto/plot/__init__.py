# SPDX-FileCopyrightText: 2020-2023 tourproto Development Team
#
# SPDX-License-Identifier: BSD-3-Clause

from .backend import AnimationBackend, frame_sequence  # noqa F401
from .matplotlib import MatplotlibBackend, animate_matplotlib  # noqa F401
from .plotly import PlotlyBackend, animate_plotly  # noqa F401

__all__ = [
    "AnimationBackend",
    "MatplotlibBackend",
    "PlotlyBackend",
    "animate_matplotlib",
    "animate_plotly",
    "frame_sequence",
]

DefaultBackend = MatplotlibBackend
