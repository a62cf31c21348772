"""
geotides.tides.base - Common interface of all tide models

A tide model answers the same set of queries for an epoch (GPS MJD), a
position in the terrestrial frame and the rotation/ephemerides providers:

    potential, radial_gradient, gravity, gravity_gradient,
    deformation, deformation_series, spherical_harmonics

Models with a spherical harmonic expansion only implement _harmonics; every
direct query then evaluates that expansion. Models that compute some
quantities in closed form override the corresponding methods.

Copyright (c) 2024-2026 tkykszk

This software is licensed under the MIT License.
See LICENSE file for details.
"""

from __future__ import annotations

from contextlib import nullcontext
from typing import ClassVar

import numpy as np

from ..errors import CapabilityError
from ..harmonics import (
    DeformationEngine,
    SphericalHarmonics,
    apply_deformation_matrix,
    as_points,
)

__all__ = [
    'TideModel',
    'accumulate',
    'as_rotations',
    'as_series_output',
]


def as_rotations(rot_earth, n_epochs: int) -> np.ndarray:
    """Rotation matrices as an array of shape (T, 3, 3)."""
    rot_earth = np.asarray(rot_earth, dtype=np.float64).reshape(-1, 3, 3)
    if rot_earth.shape[0] != n_epochs:
        raise ValueError(f"{rot_earth.shape[0]} rotation matrices for {n_epochs} epochs")
    return rot_earth


def as_series_output(out, n_points: int, n_epochs: int) -> np.ndarray:
    """Allocate or check the (K, T, 3) displacement accumulator."""
    if out is None:
        return np.zeros((n_points, n_epochs, 3))
    if out.shape != (n_points, n_epochs, 3):
        raise ValueError(f"Output shape {out.shape} does not match "
                         f"({n_points}, {n_epochs}, 3)")
    return out


def accumulate(out: np.ndarray, values: np.ndarray, lock=None) -> None:
    """Add values into out, holding lock while writing."""
    with lock if lock is not None else nullcontext():
        out += values


class TideModel:
    """
    Base class of all tide models

    Attributes
    ----------
    tag : str
        Type tag used in configurations
    direct_deformation : bool
        True if deformation is computed in closed form instead of via
        the harmonic expansion
    """

    tag: ClassVar[str] = ''
    direct_deformation: ClassVar[bool] = False

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

    # ------------------------------------------------------------------
    # Spherical harmonic expansion
    # ------------------------------------------------------------------

    def _harmonics(self, mjd, rot_earth, earth_rotation, ephemerides,
                   max_degree: int | None) -> SphericalHarmonics:
        raise CapabilityError(f"{self.tag}: no spherical harmonic representation")

    def spherical_harmonics(self, mjd, rot_earth, earth_rotation, ephemerides,
                            max_degree: int | None = None, min_degree: int | None = None,
                            GM: float | None = None, R: float | None = None) -> SphericalHarmonics:
        """
        Potential of the model as spherical harmonic expansion

        Parameters
        ----------
        mjd : float
            Epoch (MJD, GPS)
        rot_earth : np.ndarray
            Celestial to terrestrial rotation at mjd, shape (3, 3)
        earth_rotation : EarthRotation
            Rotation provider
        ephemerides : Ephemerides
            Ephemerides provider
        max_degree, min_degree : int, optional
            Degree range, default the natural range of the model
        GM, R : float, optional
            Constants the coefficients refer to

        Raises
        ------
        CapabilityError
            If the model has no harmonic representation
        """
        field = self._harmonics(mjd, np.asarray(rot_earth, dtype=np.float64),
                                earth_rotation, ephemerides, max_degree)
        if max_degree is not None or min_degree is not None:
            field = field.truncated(max_degree, min_degree)
        if GM is not None or R is not None:
            field = field.rescaled(GM, R)
        return field

    # ------------------------------------------------------------------
    # Direct queries
    # ------------------------------------------------------------------

    def potential(self, mjd, point, rot_earth, earth_rotation, ephemerides):
        """Tidal potential (m^2/s^2)."""
        return self.spherical_harmonics(mjd, rot_earth, earth_rotation, ephemerides).potential(point)

    def radial_gradient(self, mjd, point, rot_earth, earth_rotation, ephemerides):
        """Radial derivative of the potential (1/s^2)."""
        return self.spherical_harmonics(mjd, rot_earth, earth_rotation,
                                        ephemerides).radial_gradient(point)

    def gravity(self, mjd, point, rot_earth, earth_rotation, ephemerides):
        """Tidal acceleration (m/s^2)."""
        return self.spherical_harmonics(mjd, rot_earth, earth_rotation, ephemerides).gravity(point)

    def gravity_gradient(self, mjd, point, rot_earth, earth_rotation, ephemerides):
        """Tidal gravity gradient tensor (1/s^2)."""
        return self.spherical_harmonics(mjd, rot_earth, earth_rotation,
                                        ephemerides).gravity_gradient(point)

    def deformation(self, mjd, point, rot_earth, earth_rotation, ephemerides,
                    gravity, hn, ln):
        """Station displacement (m), shape (3,) or (K, 3)."""
        return self.spherical_harmonics(mjd, rot_earth, earth_rotation,
                                        ephemerides).deformation(point, gravity, hn, ln)

    # ------------------------------------------------------------------
    # Time series
    # ------------------------------------------------------------------

    def deformation_series(self, mjd, points, rot_earth, earth_rotation, ephemerides,
                           gravity, hn, ln, out=None, lock=None,
                           engine: DeformationEngine | None = None) -> np.ndarray:
        """
        Displacements of K stations at T epochs, added into out

        Parameters
        ----------
        mjd : array_like
            Epochs (MJD, GPS), shape (T,)
        points : array_like
            Station positions (m), shape (K, 3)
        rot_earth : array_like
            Rotation matrix per epoch, shape (T, 3, 3)
        earth_rotation, ephemerides
            Providers
        gravity : float or array_like
            Local gravity per station (m/s^2)
        hn, ln : array_like
            Love and Shida numbers per degree
        out : np.ndarray, optional
            Accumulator of shape (K, T, 3), allocated if omitted
        lock : context manager, optional
            Held while adding into out
        engine : DeformationEngine, optional
            Shared matrix cache for the station set

        Returns
        -------
        np.ndarray
            out
        """
        mjd = np.atleast_1d(np.asarray(mjd, dtype=np.float64))
        points, _ = as_points(points)
        n_epochs = mjd.size
        out = as_series_output(out, points.shape[0], n_epochs)
        if n_epochs == 0 or points.shape[0] == 0:
            return out
        rot_earth = as_rotations(rot_earth, n_epochs)

        if self.direct_deformation:
            disp = np.stack([
                np.atleast_2d(self.deformation(t, points, rot, earth_rotation, ephemerides,
                                               gravity, hn, ln))
                for t, rot in zip(mjd, rot_earth)
            ], axis=1)
            accumulate(out, disp, lock)
            return out

        fields = [self.spherical_harmonics(t, rot, earth_rotation, ephemerides)
                  for t, rot in zip(mjd, rot_earth)]
        first = fields[0]
        if engine is None:
            engine = DeformationEngine(points, gravity, hn, ln)
        A = engine.matrix(first.GM, first.R, first.max_degree)
        x = np.stack([field.truncated(first.max_degree).rescaled(first.GM, first.R).x
                      for field in fields])
        accumulate(out, apply_deformation_matrix(A, x), lock)
        return out
