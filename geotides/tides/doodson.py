"""
geotides.tides.doodson - Tides given by harmonic constituents

Each constituent has a Doodson number and two spherical harmonic fields,
the in-phase (cosine) and quadrature (sine) part. The field at time t is

    V(t) = factor * sum_c cos(theta_c(t)) A_c + sin(theta_c(t)) B_c

with theta_c the sum of the Doodson multipliers times the fundamental
arguments (tau, s, h, p, N', ps). Ocean tide models are the usual example.

Catalogs are exchanged as xarray Datasets with dimensions
('constituent', 'coefficient'):

    cos, sin   packed coefficient vectors per constituent
    doodson    Doodson number per constituent, e.g. '255.555'
    attrs      GM, R

Copyright (c) 2024-2026 tkykszk

This software is licensed under the MIT License.
See LICENSE file for details.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import xarray as xr

from ..astro.ephemeris import doodson_arguments
from ..constants import GM_EARTH, R_EARTH
from ..errors import ConfigurationError
from ..harmonics import SphericalHarmonics
from .base import TideModel

__all__ = [
    'Constituent',
    'DoodsonHarmonicTide',
    'doodson_multipliers',
    'doodson_number',
]


def doodson_multipliers(doodson) -> np.ndarray:
    """
    Multipliers of (tau, s, h, p, N', ps) from a Doodson number

    Parameters
    ----------
    doodson : str or sequence of int
        Doodson number such as '255.555' (all digits but the first are
        offset by 5) or six integer multipliers

    Returns
    -------
    np.ndarray
        Six integers
    """
    if isinstance(doodson, str):
        digits = doodson.replace('.', '').strip()
        if len(digits) != 6 or not digits.isdigit():
            raise ConfigurationError('doodson', f"invalid Doodson number '{doodson}'")
        values = [int(d) for d in digits]
        return np.array([values[0]] + [v - 5 for v in values[1:]], dtype=int)
    multipliers = np.asarray(doodson, dtype=int)
    if multipliers.shape != (6,):
        raise ConfigurationError('doodson', f"expected 6 multipliers, got {multipliers.shape}")
    return multipliers


def doodson_number(multipliers) -> str:
    """Doodson number string of six multipliers, inverse of doodson_multipliers."""
    multipliers = np.asarray(multipliers, dtype=int)
    digits = [multipliers[0]] + [m + 5 for m in multipliers[1:]]
    if any(d < 0 or d > 9 for d in digits):
        raise ConfigurationError('doodson', f"multipliers {multipliers.tolist()} "
                                            "have no Doodson number")
    text = ''.join(str(d) for d in digits)
    return f"{text[:3]}.{text[3:]}"


@dataclass(frozen=True, eq=False)
class Constituent:
    """
    One tidal constituent

    Attributes
    ----------
    name : str
        Constituent name, e.g. 'M2'
    doodson : np.ndarray
        Six integer multipliers
    cos, sin : SphericalHarmonics
        In-phase and quadrature fields
    """

    name: str
    doodson: np.ndarray
    cos: SphericalHarmonics
    sin: SphericalHarmonics

    @classmethod
    def from_doodson(cls, name: str, doodson, cos: SphericalHarmonics,
                     sin: SphericalHarmonics | None = None) -> Constituent:
        if sin is None:
            sin = SphericalHarmonics.zeros(cos.max_degree, cos.GM, cos.R)
        return cls(name, doodson_multipliers(doodson), cos, sin)

    def argument(self, mjd) -> np.ndarray:
        """Astronomical argument theta(t) (radians)."""
        return doodson_arguments(mjd) @ self.doodson


class DoodsonHarmonicTide(TideModel):
    """
    Tides synthesized from harmonic constituents

    Parameters
    ----------
    constituents : sequence of Constituent
        Catalog of constituents
    factor : float, default 1.0
        Scale applied to the synthesized field
    GM, R : float
        Constants of the synthesized field
    """

    tag = 'doodsonHarmonicTide'

    def __init__(self, constituents, factor: float = 1.0,
                 GM: float = GM_EARTH, R: float = R_EARTH):
        self.constituents = tuple(constituents)
        names = [c.name for c in self.constituents]
        if len(set(names)) != len(names):
            raise ConfigurationError('constituents', "duplicate constituent names")
        self.factor = float(factor)
        self.GM = float(GM)
        self.R = float(R)
        self.max_degree = max((max(c.cos.max_degree, c.sin.max_degree)
                               for c in self.constituents), default=0)

        # coefficients referred to GM, R as (constituent, coefficient) arrays
        self._cos = np.stack([self._packed(c.cos) for c in self.constituents]) \
            if self.constituents else np.zeros((0, (self.max_degree + 1)**2))
        self._sin = np.stack([self._packed(c.sin) for c in self.constituents]) \
            if self.constituents else np.zeros((0, (self.max_degree + 1)**2))
        self._doodson = np.array([c.doodson for c in self.constituents],
                                 dtype=int).reshape(-1, 6)

    def _packed(self, field: SphericalHarmonics) -> np.ndarray:
        return field.truncated(self.max_degree).rescaled(self.GM, self.R).x

    def __repr__(self) -> str:
        names = ', '.join(c.name for c in self.constituents)
        return f"DoodsonHarmonicTide([{names}], max_degree={self.max_degree})"

    @property
    def names(self) -> list[str]:
        return [c.name for c in self.constituents]

    def _harmonics(self, mjd, rot_earth, earth_rotation, ephemerides, max_degree):
        theta = doodson_arguments(mjd) @ self._doodson.T
        x = self.factor * (np.cos(theta) @ self._cos + np.sin(theta) @ self._sin)
        return SphericalHarmonics.from_coefficients(x, self.GM, self.R)

    # ------------------------------------------------------------------
    # xarray exchange
    # ------------------------------------------------------------------

    @classmethod
    def from_dataset(cls, ds: xr.Dataset, factor: float = 1.0,
                     GM: float | None = None, R: float | None = None) -> DoodsonHarmonicTide:
        """
        Build a model from a catalog Dataset

        Parameters
        ----------
        ds : xr.Dataset
            Catalog with 'cos', 'sin' and 'doodson' variables; attributes
            GM and R give the constants of the coefficients
        factor : float, default 1.0
            Scale applied to the synthesized field
        GM, R : float, optional
            Constants of the synthesized field, default those of the catalog

        Raises
        ------
        ConfigurationError
            If a variable is missing or the coefficient count is not (N+1)^2
        """
        for name in ('cos', 'sin', 'doodson'):
            if name not in ds:
                raise ConfigurationError(name, "missing from harmonic catalog")
        catalog_GM = float(ds.attrs.get('GM', GM_EARTH))
        catalog_R = float(ds.attrs.get('R', R_EARTH))
        constituents = []
        for i, name in enumerate(ds['constituent'].values):
            cos = SphericalHarmonics.from_coefficients(ds['cos'].values[i], catalog_GM, catalog_R)
            sin = SphericalHarmonics.from_coefficients(ds['sin'].values[i], catalog_GM, catalog_R)
            constituents.append(
                Constituent.from_doodson(str(name), str(ds['doodson'].values[i]), cos, sin)
            )
        return cls(constituents, factor=factor,
                   GM=catalog_GM if GM is None else GM,
                   R=catalog_R if R is None else R)

    def to_dataset(self) -> xr.Dataset:
        """Catalog Dataset of the model (coefficients referred to GM, R)."""
        return xr.Dataset(
            {
                'cos': (['constituent', 'coefficient'], self._cos.copy()),
                'sin': (['constituent', 'coefficient'], self._sin.copy()),
                'doodson': (['constituent'],
                            [doodson_number(d) for d in self._doodson]),
            },
            coords={'constituent': self.names},
            attrs={'GM': self.GM, 'R': self.R},
        )
