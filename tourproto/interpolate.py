# SPDX-FileCopyrightText: 2020-2023 tourproto Development Team
#
# SPDX-License-Identifier: BSD-3-Clause

""" Interpolators that refine a sparse sequence of bases into a path smooth
enough to be animated """
import abc
import logging

import numpy as np

from .exceptions import ConfigurationError
from .math import orthonormalise, orthonormalise_by

logger = logging.getLogger(__name__)


class Interpolator(metaclass=abc.ABCMeta):
    """An abstract interface representing a tour path interpolator"""

    @abc.abstractmethod
    def interpolate(self, path: np.ndarray, angle: float) -> np.ndarray:
        r"""Insert intermediate bases between each pair of consecutive
        bases of `path`

        Parameters
        ----------
        path
            A :math:`p \times d \times N_\text{frames}` array of bases
        angle
            The target angle (in radians) between two consecutive frames of
            the returned path

        Returns
        -------
        path
            A :math:`p \times d \times N'_\text{frames}` array with
            :math:`N'_\text{frames} \geq N_\text{frames}`
        """

        raise NotImplementedError


class GeodesicInfo:
    r"""The principal directions and angles that describe the geodesic
    between the planes spanned by the bases `Fa` and `Fz`

    Attributes
    ----------
    Va
        The rotation within the starting plane to its principal directions
    Ga
        The principal directions of the starting plane
    Gz
        The principal directions of the target plane, orthogonalized with
        respect to :attr:`Ga`
    tau
        The principal angles between the two planes
    """

    def __init__(self, Fa: np.ndarray, Fz: np.ndarray):
        Fa = orthonormalise(Fa)
        Fz = orthonormalise(Fz)

        u, lambdas, vh = np.linalg.svd(Fa.T @ Fz)

        self.Va = u
        self.Ga = orthonormalise(Fa @ u)
        Gz = orthonormalise(Fz @ vh.T)
        self.Gz = orthonormalise_by(Gz, self.Ga)
        self.tau = np.arccos(np.clip(lambdas, -1.0, 1.0))

    @property
    def dist(self) -> float:
        """The geodesic distance between the two planes"""
        return float(np.sqrt(np.sum(self.tau**2)))

    def step_fraction(self, fraction: float) -> np.ndarray:
        """The basis at `fraction` of the way along the geodesic, rotated
        within its plane to match the starting frame"""
        G = self.Ga * np.cos(fraction * self.tau) + self.Gz * np.sin(
            fraction * self.tau
        )

        return orthonormalise(G @ self.Va.T)


class GeodesicInterpolator(Interpolator):
    """Interpolates along the geodesics between consecutive planes, taking
    steps of (about) `angle` radians

    Each segment starts from the last frame of the previous one, so that the
    in-plane orientation changes smoothly along the whole path

    Parameters
    ----------
    tol
        Pairs of bases closer than `tol` are considered the same plane and
        are not interpolated
    """

    def __init__(self, tol: float = 1e-6):
        self.tol = tol

    def interpolate(self, path: np.ndarray, angle: float) -> np.ndarray:
        if angle <= 0:
            raise ConfigurationError(
                f"The interpolation angle needs to be positive, got {angle}"
            )

        path = np.asarray(path, dtype=float)
        current = orthonormalise(path[:, :, 0])
        frames = [current]

        for i in range(1, path.shape[2]):
            info = GeodesicInfo(current, path[:, :, i])

            if info.dist < self.tol:
                logger.debug(f"Bases {i} and {i + 1} span the same plane")
                continue

            num_steps = int(np.ceil(info.dist / angle))
            for fraction in np.linspace(0, 1, num_steps + 1)[1:]:
                frames.append(info.step_fraction(fraction))

            current = frames[-1]

        logger.info(
            f"Interpolated {path.shape[2]} bases into {len(frames)} frames"
        )

        return np.stack(frames, axis=2)
