# SPDX-FileCopyrightText: 2020-2023 tourproto Development Team
#
# SPDX-License-Identifier: BSD-3-Clause


class TourError(Exception):
    """Base class of all the errors raised by :mod:`tourproto`"""


class ConfigurationError(TourError, ValueError):
    """Raised when arguments describing a tour or a layer are invalid (e.g. a
    basis with a number of columns different from 1 or 2, or an unknown
    position)"""


class StateError(TourError, RuntimeError):
    """Raised when a layer builder or a backend runs without an active tour"""


class DimensionMismatch(TourError, ValueError):
    """Raised when a 2D layer builder is used on a 1D tour or vice versa"""


class ReplicationWarning(UserWarning):
    """Emitted when an aesthetic argument cannot be cleanly replicated over
    all the frames of a tour"""
