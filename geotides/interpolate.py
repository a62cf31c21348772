"""
geotides.interpolate - Temporal interpolation of tabulated series

Used by the tabulated ephemerides and the Earth orientation series.
Requests outside the tabulated interval raise CoverageError instead of
extrapolating.

Copyright (c) 2024-2026 tkykszk

This software is licensed under the MIT License.
See LICENSE file for details.
"""

from __future__ import annotations

import warnings

import numpy as np
from scipy.interpolate import make_interp_spline

from .errors import ConfigurationError, CoverageError

__all__ = [
    'TimeSeriesInterpolator',
]


class TimeSeriesInterpolator:
    """
    Spline through samples of a time series

    Cubic splines are used for four or more samples, linear interpolation
    for two or three.

    Parameters
    ----------
    mjd : array_like
        Strictly increasing epochs (MJD), shape (T,)
    values : array_like
        Samples, shape (T,) or (T, ...)
    name : str
        Name used in error messages
    """

    def __init__(self, mjd, values, name: str = 'series'):
        mjd = np.asarray(mjd, dtype=np.float64)
        values = np.asarray(values, dtype=np.float64)
        if mjd.ndim != 1 or values.shape[0] != mjd.size:
            raise ConfigurationError(
                name, f"{values.shape[0]} samples for {mjd.size} epochs"
            )
        if mjd.size < 2:
            raise ConfigurationError(name, "at least two samples are required")
        if np.any(np.diff(mjd) <= 0.0):
            raise ConfigurationError(name, "epochs must be strictly increasing")

        degree = 3
        if mjd.size < 4:
            warnings.warn(
                f"{name}: only {mjd.size} samples, using linear interpolation",
                RuntimeWarning,
                stacklevel=2,
            )
            degree = 1

        self.name = name
        self.start = float(mjd[0])
        self.end = float(mjd[-1])
        self._spline = make_interp_spline(mjd, values, k=degree, axis=0)

    def covers(self, mjd) -> bool:
        mjd = np.asarray(mjd, dtype=np.float64)
        return bool(np.all((mjd >= self.start) & (mjd <= self.end)))

    def __call__(self, mjd, message: str | None = None) -> np.ndarray:
        """
        Interpolated values at mjd

        Raises
        ------
        CoverageError
            If any epoch lies outside the tabulated interval
        """
        mjd = np.asarray(mjd, dtype=np.float64)
        outside = (mjd < self.start) | (mjd > self.end)
        if np.any(outside):
            first = float(np.atleast_1d(mjd)[np.atleast_1d(outside)][0])
            if message is None:
                message = f"No {self.name} available"
            raise CoverageError(f"{message}: {first}", mjd=first)
        return self._spline(mjd)
