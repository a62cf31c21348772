"""
geotides.tides.astronomical - Direct tides of sun, moon and planets

The tidal potential of a body with gravitational constant GM_b at the
geocentric position b is the potential of the body minus its value and
gradient at the geocentre:

    V(p) = GM_b (1/|b - p| - 1/|b| - p.b/|b|^3)

Potential, gravity and gradient are evaluated in closed form. The harmonic
expansion follows from the addition theorem,

    c_nm + i s_nm = GM_b/GM * (C_nm + i S_nm)(b/R) / (2n+1),

and is exact on the sphere of radius R for the degrees it contains.

Copyright (c) 2024-2026 tkykszk

This software is licensed under the MIT License.
See LICENSE file for details.
"""

from __future__ import annotations

import numpy as np

from ..constants import GM_EARTH, GM_MOON, GM_PLANETS, GM_SUN, R_EARTH
from ..errors import ConfigurationError
from ..harmonics import SphericalHarmonics, as_points, solid_harmonics
from .base import TideModel

__all__ = [
    'AstronomicalTide',
    'BODY_GM',
]

BODY_GM = {
    'sun': GM_SUN,
    'moon': GM_MOON,
    **GM_PLANETS,
}


class AstronomicalTide(TideModel):
    """
    Tides caused by the direct attraction of celestial bodies

    Parameters
    ----------
    bodies : sequence of str, default ('sun', 'moon')
        Tide generating bodies
    GM_bodies : dict, optional
        Gravitational constants overriding the built-in table
    min_degree : int, default 2
        Lowest degree of the harmonic expansion
    max_degree : int, default 3
        Highest degree of the harmonic expansion
    factor : float, default 1.0
        Scale applied to all results
    GM, R : float
        Constants of the harmonic expansion
    """

    tag = 'astronomicalTide'

    def __init__(self, bodies=('sun', 'moon'), GM_bodies: dict | None = None,
                 min_degree: int = 2, max_degree: int = 3, factor: float = 1.0,
                 GM: float = GM_EARTH, R: float = R_EARTH):
        table = dict(BODY_GM)
        if GM_bodies:
            table.update({name.lower(): float(value) for name, value in GM_bodies.items()})
        self.bodies = tuple(name.lower() for name in bodies)
        unknown = [name for name in self.bodies if name not in table]
        if unknown:
            raise ConfigurationError('bodies', f"no GM for {', '.join(unknown)}")
        if min_degree < 0 or max_degree < min_degree:
            raise ConfigurationError('max_degree', f"invalid degree range {min_degree}..{max_degree}")
        self.GM_bodies = {name: table[name] for name in self.bodies}
        self.min_degree = int(min_degree)
        self.max_degree = int(max_degree)
        self.factor = float(factor)
        self.GM = float(GM)
        self.R = float(R)

    def __repr__(self) -> str:
        return (f"AstronomicalTide(bodies={self.bodies!r}, min_degree={self.min_degree}, "
                f"max_degree={self.max_degree}, factor={self.factor})")

    def _positions(self, mjd, rot_earth, ephemerides):
        """(GM_b, terrestrial position) for every body."""
        rot_earth = np.asarray(rot_earth, dtype=np.float64)
        return [(self.GM_bodies[name], rot_earth @ ephemerides.position(mjd, name))
                for name in self.bodies]

    def _harmonics(self, mjd, rot_earth, earth_rotation, ephemerides, max_degree):
        max_degree = self.max_degree if max_degree is None else max_degree
        degrees = np.arange(max_degree + 1)[:, None]
        cnm = np.zeros((max_degree + 1, max_degree + 1))
        snm = np.zeros((max_degree + 1, max_degree + 1))
        for GM_body, b in self._positions(mjd, rot_earth, ephemerides):
            Cnm, Snm = solid_harmonics(b / self.R, max_degree)
            cnm += GM_body / self.GM * Cnm[0] / (2.0 * degrees + 1.0)
            snm += GM_body / self.GM * Snm[0] / (2.0 * degrees + 1.0)
        cnm[:self.min_degree, :] = 0.0
        snm[:self.min_degree, :] = 0.0
        return SphericalHarmonics(self.GM, self.R, self.factor * cnm, self.factor * snm)

    def potential(self, mjd, point, rot_earth, earth_rotation, ephemerides):
        points, single = as_points(point)
        V = np.zeros(points.shape[0])
        for GM_body, b in self._positions(mjd, rot_earth, ephemerides):
            d = b - points
            rb = np.linalg.norm(b)
            V += GM_body * (1.0 / np.linalg.norm(d, axis=1) - 1.0 / rb - points @ b / rb**3)
        V *= self.factor
        return float(V[0]) if single else V

    def gravity(self, mjd, point, rot_earth, earth_rotation, ephemerides):
        points, single = as_points(point)
        g = np.zeros_like(points)
        for GM_body, b in self._positions(mjd, rot_earth, ephemerides):
            d = b - points
            rd = np.linalg.norm(d, axis=1, keepdims=True)
            g += GM_body * (d / rd**3 - b / np.linalg.norm(b)**3)
        g *= self.factor
        return g[0] if single else g

    def radial_gradient(self, mjd, point, rot_earth, earth_rotation, ephemerides):
        points, single = as_points(point)
        up = points / np.linalg.norm(points, axis=1, keepdims=True)
        g = self.gravity(mjd, points, rot_earth, earth_rotation, ephemerides)
        dVdr = np.sum(g * up, axis=1)
        return float(dVdr[0]) if single else dVdr

    def gravity_gradient(self, mjd, point, rot_earth, earth_rotation, ephemerides):
        points, single = as_points(point)
        T = np.zeros((points.shape[0], 3, 3))
        for GM_body, b in self._positions(mjd, rot_earth, ephemerides):
            d = b - points
            rd = np.linalg.norm(d, axis=1)
            T += GM_body * (3.0 * np.einsum('ki,kj->kij', d, d) / rd[:, None, None]**5
                            - np.eye(3) / rd[:, None, None]**3)
        T *= self.factor
        return T[0] if single else T
