"""
geotides.tides.aggregator - Sum of several tide models

TidesAggregator is the entry point for tidal computations. It owns an
ordered, immutable sequence of tide models and adds up their results.
Each model computes its own contribution, including its own deformation,
so closed-form and harmonic models can be mixed freely.

An error raised by a model aborts the query and is re-raised unchanged
with a note naming the model.

Usage:
    import numpy as np
    from geotides import TidesAggregator, GMSTRotation, AnalyticalEphemerides

    tides = TidesAggregator.from_config([
        {'type': 'astronomicalTide'},
        {'type': 'earthTide'},
        {'type': 'poleTide'},
    ])
    rotation = GMSTRotation()
    ephemerides = AnalyticalEphemerides()

    mjd = 60310.0 + np.arange(24) / 24.0
    rot = np.stack([rotation.rotary_matrix(t) for t in mjd])
    disp = tides.deformation_series(mjd, stations, rot, rotation, ephemerides,
                                    gravity=9.81, hn=hn, ln=ln)

Copyright (c) 2024-2026 tkykszk

This software is licensed under the MIT License.
See LICENSE file for details.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager

import numpy as np
import xarray as xr

from ..constants import GM_EARTH, R_EARTH
from ..harmonics import DeformationEngine, SphericalHarmonics, as_points
from ..settings import settings
from .base import TideModel, as_rotations, as_series_output

__all__ = [
    'TidesAggregator',
]


class TidesAggregator:
    """
    Ordered collection of tide models

    Parameters
    ----------
    models : iterable of TideModel
        Tide models; the aggregator keeps its own tuple of them
    """

    def __init__(self, models=()):
        models = tuple(models)
        for model in models:
            if not isinstance(model, TideModel):
                raise TypeError(f"Expected a TideModel, got {type(model).__name__}")
        self._models = models

    @classmethod
    def from_config(cls, entries) -> TidesAggregator:
        """Build from configuration entries, see geotides.config.tides_from_config."""
        from ..config import tides_from_config
        return cls(tides_from_config(entries))

    @property
    def models(self) -> tuple[TideModel, ...]:
        return self._models

    def __len__(self) -> int:
        return len(self._models)

    def __iter__(self):
        return iter(self._models)

    def __repr__(self) -> str:
        return f"TidesAggregator({list(self._models)!r})"

    @staticmethod
    @contextmanager
    def _attributed(index: int, model: TideModel):
        try:
            yield
        except Exception as exc:
            exc.add_note(f"raised by tide model {index} ({model.tag or type(model).__name__})")
            raise

    def _sum(self, method: str, zero, *args):
        total = zero
        for index, model in enumerate(self._models):
            with self._attributed(index, model):
                total = total + getattr(model, method)(*args)
        return total

    # ------------------------------------------------------------------
    # Point queries
    # ------------------------------------------------------------------

    def potential(self, mjd, point, rot_earth, earth_rotation, ephemerides):
        """
        Tidal potential (m^2/s^2)

        Parameters
        ----------
        mjd : float
            Epoch (MJD, GPS)
        point : array_like
            Terrestrial position(s) (m), shape (3,) or (K, 3)
        rot_earth : np.ndarray
            Celestial to terrestrial rotation, shape (3, 3)
        earth_rotation : EarthRotation
        ephemerides : Ephemerides

        Returns
        -------
        float or np.ndarray
        """
        points, single = as_points(point)
        zero = 0.0 if single else np.zeros(points.shape[0])
        return self._sum('potential', zero, mjd, point, rot_earth, earth_rotation, ephemerides)

    def radial_gradient(self, mjd, point, rot_earth, earth_rotation, ephemerides):
        """Radial derivative of the tidal potential (1/s^2)."""
        points, single = as_points(point)
        zero = 0.0 if single else np.zeros(points.shape[0])
        return self._sum('radial_gradient', zero, mjd, point, rot_earth, earth_rotation,
                         ephemerides)

    def acceleration(self, mjd, point, rot_earth, earth_rotation, ephemerides):
        """Tidal acceleration (m/s^2), shape (3,) or (K, 3)."""
        points, single = as_points(point)
        zero = np.zeros(3) if single else np.zeros(points.shape)
        return self._sum('gravity', zero, mjd, point, rot_earth, earth_rotation, ephemerides)

    def gradient(self, mjd, point, rot_earth, earth_rotation, ephemerides):
        """Tidal gravity gradient (1/s^2), shape (3, 3) or (K, 3, 3)."""
        points, single = as_points(point)
        zero = np.zeros((3, 3)) if single else np.zeros((points.shape[0], 3, 3))
        return self._sum('gravity_gradient', zero, mjd, point, rot_earth, earth_rotation,
                         ephemerides)

    def deformation(self, mjd, point, rot_earth, earth_rotation, ephemerides,
                    gravity, hn, ln):
        """
        Station displacement (m)

        Parameters
        ----------
        gravity : float or array_like
            Local gravity per station (m/s^2)
        hn, ln : array_like
            Love and Shida numbers per degree

        Returns
        -------
        np.ndarray
            Shape (3,) or (K, 3)
        """
        points, single = as_points(point)
        zero = np.zeros(3) if single else np.zeros(points.shape)
        return self._sum('deformation', zero, mjd, point, rot_earth, earth_rotation,
                         ephemerides, gravity, hn, ln)

    def spherical_harmonics(self, mjd, rot_earth, earth_rotation, ephemerides,
                            max_degree: int | None = None, min_degree: int | None = None,
                            GM: float | None = None, R: float | None = None) -> SphericalHarmonics:
        """
        Sum of the harmonic expansions of all models

        The result refers to the GM and R of the first model unless given.
        Without models a zero field of degree 0 is returned.
        """
        if not self._models:
            field = SphericalHarmonics.zeros(0, GM or GM_EARTH, R or R_EARTH)
            return field if max_degree is None else field.truncated(max_degree)
        total = None
        for index, model in enumerate(self._models):
            with self._attributed(index, model):
                field = model.spherical_harmonics(mjd, rot_earth, earth_rotation, ephemerides,
                                                  max_degree, min_degree, GM, R)
            total = field if total is None else total + field
        return total

    # ------------------------------------------------------------------
    # Time series
    # ------------------------------------------------------------------

    def deformation_series(self, mjd, points, rot_earth, earth_rotation, ephemerides,
                           gravity, hn, ln, out=None, lock=None,
                           n_workers: int | None = None) -> np.ndarray:
        """
        Displacements of K stations at T epochs

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
            Accumulator of shape (K, T, 3); contributions are added
        lock : context manager, optional
            Held while adding into out, for accumulators shared between
            callers
        n_workers : int, optional
            Threads over contiguous epoch chunks, default from settings

        Returns
        -------
        np.ndarray
            out, shape (K, T, 3)
        """
        mjd = np.atleast_1d(np.asarray(mjd, dtype=np.float64))
        points, _ = as_points(points)
        n_epochs = mjd.size
        out = as_series_output(out, points.shape[0], n_epochs)
        if n_epochs == 0 or points.shape[0] == 0 or not self._models:
            return out
        rot_earth = as_rotations(rot_earth, n_epochs)
        engine = DeformationEngine(points, gravity, hn, ln)

        def run(chunk: slice):
            view = out[:, chunk, :]
            for index, model in enumerate(self._models):
                with self._attributed(index, model):
                    model.deformation_series(mjd[chunk], points, rot_earth[chunk],
                                             earth_rotation, ephemerides, gravity, hn, ln,
                                             out=view, lock=lock, engine=engine)

        n_workers = settings.workers if n_workers is None else n_workers
        n_workers = max(1, min(int(n_workers), n_epochs))
        bounds = np.linspace(0, n_epochs, n_workers + 1).astype(int)
        chunks = [slice(start, stop) for start, stop in zip(bounds[:-1], bounds[1:])]

        if n_workers == 1:
            run(chunks[0])
        else:
            with ThreadPoolExecutor(max_workers=n_workers) as executor:
                futures = [executor.submit(run, chunk) for chunk in chunks]
                for future in futures:
                    future.result()
        return out

    def deformation_dataset(self, mjd, points, rot_earth, earth_rotation, ephemerides,
                            gravity, hn, ln, stations=None,
                            n_workers: int | None = None) -> xr.DataArray:
        """
        Batched displacements as labelled array

        Returns
        -------
        xr.DataArray
            Dims ('station', 'time', 'axis'), coords mjd and axis x/y/z
        """
        mjd = np.atleast_1d(np.asarray(mjd, dtype=np.float64))
        points, _ = as_points(points)
        if stations is None:
            stations = np.arange(points.shape[0])
        disp = self.deformation_series(mjd, points, rot_earth, earth_rotation, ephemerides,
                                       gravity, hn, ln, n_workers=n_workers)
        return xr.DataArray(
            disp,
            dims=['station', 'time', 'axis'],
            coords={
                'station': list(stations),
                'time': mjd,
                'axis': ['x', 'y', 'z'],
            },
            name='displacement',
            attrs={'units': 'm', 'time_standard': 'GPS', 'time_units': 'MJD'},
        )
