"""
Ephemerides providers

An Ephemerides provider returns the geocentric position of a body in the
celestial frame for an epoch given as GPS MJD. Body names are lower case
('sun', 'moon', 'earth', planets by name).

Copyright (c) 2024-2026 tkykszk

This software is licensed under the MIT License.
See LICENSE file for details.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import numpy as np

from ..errors import CoverageError
from ..interpolate import TimeSeriesInterpolator
from .ephemeris import lunar_position, solar_position

__all__ = [
    'Ephemerides',
    'AnalyticalEphemerides',
    'TabulatedEphemerides',
]


@runtime_checkable
class Ephemerides(Protocol):
    """Geocentric positions of celestial bodies."""

    def position(self, mjd: float, body: str) -> np.ndarray:
        ...


class AnalyticalEphemerides:
    """
    Low-precision solar and lunar series

    Parameters
    ----------
    start, end : float, optional
        Validity window (MJD); epochs outside raise CoverageError
    """

    _SERIES = {
        'sun': solar_position,
        'moon': lunar_position,
    }

    def __init__(self, start: float | None = None, end: float | None = None):
        self.start = start
        self.end = end

    @property
    def bodies(self) -> tuple[str, ...]:
        return ('earth',) + tuple(self._SERIES)

    def position(self, mjd: float, body: str) -> np.ndarray:
        """
        Geocentric celestial position (m)

        Raises
        ------
        CoverageError
            Unknown body or epoch outside the validity window
        """
        if (self.start is not None and mjd < self.start) or \
                (self.end is not None and mjd > self.end):
            raise CoverageError(f"No ephemerides available: {mjd}", mjd=mjd)
        if body == 'earth':
            return np.zeros(3)
        if body not in self._SERIES:
            raise CoverageError(f"No ephemerides available for body '{body}': {mjd}", mjd=mjd)
        return self._SERIES[body](mjd)


class TabulatedEphemerides:
    """
    Positions interpolated from tables

    Parameters
    ----------
    mjd : array_like
        Epochs (MJD, GPS), strictly increasing
    positions : dict
        Body name -> geocentric celestial positions (m), shape (T, 3)

    Examples
    --------
    >>> ephemerides = TabulatedEphemerides(mjd, {'sun': sun_xyz, 'moon': moon_xyz})
    >>> ephemerides.position(mjd[0] + 0.25, 'moon')
    """

    def __init__(self, mjd, positions: dict):
        self._interpolators = {
            body.lower(): TimeSeriesInterpolator(mjd, values, name=f"ephemerides[{body}]")
            for body, values in positions.items()
        }

    @property
    def bodies(self) -> tuple[str, ...]:
        return ('earth',) + tuple(self._interpolators)

    def position(self, mjd: float, body: str) -> np.ndarray:
        """
        Geocentric celestial position (m)

        Raises
        ------
        CoverageError
            Unknown body or epoch outside the table
        """
        if body == 'earth':
            return np.zeros(3)
        interpolator = self._interpolators.get(body)
        if interpolator is None:
            raise CoverageError(f"No ephemerides available for body '{body}': {mjd}", mjd=mjd)
        return interpolator(mjd, message="No ephemerides available")
