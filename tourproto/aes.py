# SPDX-FileCopyrightText: 2020-2023 tourproto Development Team
#
# SPDX-License-Identifier: BSD-3-Clause

""" Typed aesthetic arguments of the layer builders """
from __future__ import annotations

import warnings

import numpy as np

from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional, Union

from .exceptions import ConfigurationError, ReplicationWarning


class _Args:
    """Shared behaviour of :class:`AesArgs` and :class:`IdentityArgs`"""

    @classmethod
    def coerce(cls, value: Optional[Union[_Args, Mapping[str, Any]]]):
        """Build the arguments from ``None``, a mapping or an instance"""
        if value is None:
            return cls()

        if isinstance(value, cls):
            return value

        if not isinstance(value, Mapping):
            raise ConfigurationError(
                f"Expected a {cls.__name__} or a mapping, got "
                f"{type(value).__name__}"
            )

        known = {f.name for f in fields(cls)}
        unknown = set(value) - known
        if unknown:
            raise ConfigurationError(
                f"Unknown {cls.__name__} {sorted(unknown)}. "
                f"Expected some of {sorted(known)}"
            )

        return cls(**value)

    def items(self) -> Dict[str, Any]:
        """The arguments that were actually set"""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    def __bool__(self):
        return bool(self.items())

    def replicate(self, nrow_frames: int, nrow_data: int, strict=False):
        """A copy with each sequence replicated over all the frames, see
        :func:`rep_len_args`"""
        return replace(
            self, **rep_len_args(self.items(), nrow_frames, nrow_data, strict)
        )


@dataclass
class AesArgs(_Args):
    """Per-observation values mapped to an aesthetic. Categorical values are
    mapped to a palette by the backends, colours are used as given

    Attributes
    ----------
    color
        The source of the colour of points, lines and text
    shape
        The source of the marker of points
    fill
        The source of the fill colour of areas (e.g. densities)
    """

    color: Any = None
    shape: Any = None
    fill: Any = None


@dataclass
class IdentityArgs(_Args):
    """Static styling of a layer. Values can be scalars or, as for
    :class:`AesArgs`, one value per observation"""

    color: Any = None
    shape: Any = None
    size: Any = None
    alpha: Any = None
    linewidth: Any = None
    linestyle: Any = None

    def __post_init__(self):
        if self.alpha is not None:
            alpha = np.asarray(self.alpha, dtype=float)
            if np.any((alpha < 0) | (alpha > 1)):
                raise ConfigurationError("`alpha` needs to be within [0, 1]")

        for name in ("size", "linewidth"):
            value = getattr(self, name)
            if value is not None and np.any(np.asarray(value) < 0):
                raise ConfigurationError(f"`{name}` can't be negative")


def _is_sequence(value) -> bool:
    return not isinstance(value, (str, bytes)) and np.ndim(value) > 0


def rep_len_args(
    args: Mapping[str, Any],
    nrow_frames: int,
    nrow_data: int,
    strict: bool = False,
) -> Dict[str, Any]:
    """Replicate all the sequence arguments of `args` to the length of the
    long tables of a tour

    Parameters
    ----------
    args
        The arguments to replicate. Scalars are left untouched, sequences of
        length 1 are unpacked to scalars
    nrow_frames
        The number of rows of the long table (observations times frames)
    nrow_data
        The number of rows of the data (i.e. the length expected for the
        sequences)
    strict
        If ``True`` a sequence of the wrong length raises a
        :class:`ConfigurationError` instead of a
        :class:`ReplicationWarning`
    """

    ret = {}
    for name, value in args.items():
        if not _is_sequence(value):
            ret[name] = value
            continue

        value = np.asarray(value)
        if value.ndim != 1:
            raise ConfigurationError(f"`{name}` needs to be one-dimensional")

        if len(value) == 1:
            ret[name] = value[0]
            continue

        if len(value) != nrow_data:
            message = (
                f"`{name}` has length {len(value)}, expected 1 or "
                f"{nrow_data} (the number of rows of the data)"
            )
            if strict:
                raise ConfigurationError(message)

            warnings.warn(message, ReplicationWarning)

        ret[name] = np.resize(value, nrow_frames)

    return ret
