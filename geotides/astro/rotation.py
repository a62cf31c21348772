"""
Earth rotation providers

An EarthRotation provider supplies, for an epoch given as GPS MJD:

- rotary_matrix: 3x3 rotation from the celestial to the terrestrial frame
- rotation_axis: angular velocity vector in the terrestrial frame (rad/s)
- polar_motion: pole coordinates (xp, yp) in radians

GMSTRotation spins the celestial frame with Greenwich sidereal time and,
when an EarthOrientationSeries is supplied, applies UT1-UTC, polar motion
and length of day from it.

Copyright (c) 2024-2026 tkykszk

This software is licensed under the MIT License.
See LICENSE file for details.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import numpy as np

from ..constants import ARCSEC_TO_RAD, OMEGA_EARTH
from ..interpolate import TimeSeriesInterpolator
from .ephemeris import greenwich_hour_angle, rotate_x, rotate_y, rotate_z

__all__ = [
    'EarthRotation',
    'EarthOrientationSeries',
    'GMSTRotation',
]

_DAY_SECONDS = 86400.0


@runtime_checkable
class EarthRotation(Protocol):
    """Orientation of the terrestrial frame."""

    def rotary_matrix(self, mjd: float) -> np.ndarray:
        ...

    def rotation_axis(self, mjd: float) -> np.ndarray:
        ...

    def polar_motion(self, mjd: float) -> tuple[float, float]:
        ...


class EarthOrientationSeries:
    """
    Tabulated Earth orientation parameters

    Parameters
    ----------
    mjd : array_like
        Epochs (MJD, UTC), strictly increasing
    xp, yp : array_like
        Pole coordinates (arcsec)
    ut1_utc : array_like
        UT1 - UTC (seconds)
    lod : array_like, optional
        Excess length of day (seconds), default zero
    gps_utc : float, default 18.0
        GPS - UTC (seconds) over the span of the series
    """

    def __init__(self, mjd, xp, yp, ut1_utc, lod=None, gps_utc: float = 18.0):
        mjd = np.asarray(mjd, dtype=np.float64)
        if lod is None:
            lod = np.zeros_like(mjd)
        values = np.stack([np.asarray(v, dtype=np.float64) for v in (xp, yp, ut1_utc, lod)],
                          axis=-1)
        self.gps_utc = float(gps_utc)
        self._interpolator = TimeSeriesInterpolator(mjd, values, name='EOPs')

    @property
    def start(self) -> float:
        return self._interpolator.start

    @property
    def end(self) -> float:
        return self._interpolator.end

    def __call__(self, mjd) -> np.ndarray:
        """
        (xp [arcsec], yp [arcsec], UT1-UTC [s], LOD [s]) at GPS epoch mjd

        Raises
        ------
        CoverageError
            Outside the tabulated interval
        """
        mjd_utc = np.asarray(mjd, dtype=np.float64) - self.gps_utc / _DAY_SECONDS
        return self._interpolator(mjd_utc, message="No EOPs available")


class GMSTRotation:
    """
    Earth rotation by Greenwich sidereal time

    Parameters
    ----------
    eop : EarthOrientationSeries, optional
        Orientation parameters; without them UT1 is taken equal to the
        input time and the pole is fixed at the z-axis.
    """

    def __init__(self, eop: EarthOrientationSeries | None = None):
        self.eop = eop

    def _parameters(self, mjd: float) -> tuple[float, float, float, float]:
        """(xp [rad], yp [rad], UT1 [MJD], LOD [s])."""
        if self.eop is None:
            return 0.0, 0.0, float(mjd), 0.0
        xp, yp, ut1_utc, lod = self.eop(mjd)
        ut1 = float(mjd) + (ut1_utc - self.eop.gps_utc) / _DAY_SECONDS
        return xp * ARCSEC_TO_RAD, yp * ARCSEC_TO_RAD, ut1, float(lod)

    def rotary_matrix(self, mjd: float) -> np.ndarray:
        """Celestial to terrestrial rotation W^T R^T."""
        xp, yp, ut1, _ = self._parameters(mjd)
        spin = rotate_z(greenwich_hour_angle(ut1))
        return rotate_x(-yp) @ rotate_y(-xp) @ spin

    def rotation_axis(self, mjd: float) -> np.ndarray:
        """Angular velocity in the terrestrial frame (rad/s)."""
        xp, yp, _, lod = self._parameters(mjd)
        omega = OMEGA_EARTH * (1.0 - lod / _DAY_SECONDS)
        pole = rotate_x(-yp) @ rotate_y(-xp) @ np.array([0.0, 0.0, 1.0])
        return omega * pole

    def polar_motion(self, mjd: float) -> tuple[float, float]:
        xp, yp, _, _ = self._parameters(mjd)
        return xp, yp
