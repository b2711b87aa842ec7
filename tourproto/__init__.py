# SPDX-FileCopyrightText: 2020-2023 tourproto Development Team
#
# SPDX-License-Identifier: BSD-3-Clause

""" Animated 1D and 2D projection tours of multivariate data """

from .aes import AesArgs, IdentityArgs, rep_len_args  # noqa F401
from .array import BasisArray, TourTables, array_to_tables  # noqa F401
from .basis import (  # noqa F401
    basis_lda,
    basis_pca,
    basis_random,
    manip_var_of,
    manip_var_lda,
    manip_var_pca,
)
from .dimension import Dimensionality  # noqa F401
from .exceptions import (  # noqa F401
    ConfigurationError,
    DimensionMismatch,
    ReplicationWarning,
    StateError,
    TourError,
)
from .interpolate import GeodesicInterpolator, Interpolator  # noqa F401
from .layer import GeomType, Layer, TourPlot  # noqa F401
from .math import is_orthonormal, orthonormalise, scale_01, scale_sd  # noqa
from .position import MapRegion, PanZoom, Position  # noqa F401
from .position import map_relative, pan_zoom  # noqa F401
from .proto import (  # noqa F401
    proto_basis,
    proto_basis1d,
    proto_default,
    proto_default1d,
    proto_density,
    proto_hex,
    proto_highlight,
    proto_highlight1d,
    proto_origin,
    proto_origin1d,
    proto_point,
    proto_text,
)
from .tour import (  # noqa F401
    TourSession,
    TourState,
    begin_tour,
    default_session,
    get_session,
    last_tour,
    set_last_tour,
)

__version__ = "0.1.0"
