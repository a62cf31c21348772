"""
geotides.tides.centrifugal - Centrifugal potential of the Earth rotation

    V(p) = 1/2 (|w|^2 |p|^2 - (w.p)^2)

with w the instantaneous rotation vector in the terrestrial frame. The
potential grows with |p|^2 and has no convergent exterior expansion, so
this model has no spherical harmonic representation.

Copyright (c) 2024-2026 tkykszk

This software is licensed under the MIT License.
See LICENSE file for details.
"""

from __future__ import annotations

import numpy as np

from ..harmonics import as_points, check_gravity, check_love_numbers
from .base import TideModel

__all__ = [
    'CentrifugalTide',
]


class CentrifugalTide(TideModel):
    """
    Current centrifugal force of the Earth rotation

    Parameters
    ----------
    factor : float, default 1.0
        Scale applied to all results
    """

    tag = 'centrifugal'
    direct_deformation = True

    def __init__(self, factor: float = 1.0):
        self.factor = float(factor)

    def __repr__(self) -> str:
        return f"CentrifugalTide(factor={self.factor})"

    def _omega(self, mjd, earth_rotation) -> np.ndarray:
        return np.asarray(earth_rotation.rotation_axis(mjd), dtype=np.float64)

    def potential(self, mjd, point, rot_earth, earth_rotation, ephemerides):
        points, single = as_points(point)
        w = self._omega(mjd, earth_rotation)
        V = 0.5 * self.factor * (w @ w * np.sum(points**2, axis=1) - (points @ w)**2)
        return float(V[0]) if single else V

    def gravity(self, mjd, point, rot_earth, earth_rotation, ephemerides):
        points, single = as_points(point)
        w = self._omega(mjd, earth_rotation)
        g = self.factor * (w @ w * points - (points @ w)[:, None] * w)
        return g[0] if single else g

    def radial_gradient(self, mjd, point, rot_earth, earth_rotation, ephemerides):
        points, single = as_points(point)
        up = points / np.linalg.norm(points, axis=1, keepdims=True)
        dVdr = np.sum(self.gravity(mjd, points, rot_earth, earth_rotation, ephemerides) * up,
                      axis=1)
        return float(dVdr[0]) if single else dVdr

    def gravity_gradient(self, mjd, point, rot_earth, earth_rotation, ephemerides):
        points, single = as_points(point)
        w = self._omega(mjd, earth_rotation)
        T = self.factor * (w @ w * np.eye(3) - np.outer(w, w))
        T = np.broadcast_to(T, (points.shape[0], 3, 3)).copy()
        return T[0] if single else T

    def deformation(self, mjd, point, rot_earth, earth_rotation, ephemerides,
                    gravity, hn, ln):
        """
        Station displacement (m)

        The potential splits into a degree 0 part w^2 r^2/3 and a degree 2
        part -(w^2 r^2/3) P2(cos psi); hn[0], hn[2] and ln[2] apply.
        """
        points, single = as_points(point)
        gravity = check_gravity(gravity, points.shape[0])
        hn, ln = check_love_numbers(hn, ln, 2)
        w = self._omega(mjd, earth_rotation)

        r = np.linalg.norm(points, axis=1, keepdims=True)
        up = points / r
        V0 = self.factor * (w @ w) * r**2 / 3.0
        V = self.factor * 0.5 * ((w @ w) * r**2 - ((points @ w)[:, None])**2)
        V2 = V - V0

        # only the degree 2 part has a horizontal gradient
        g = self.gravity(mjd, points, rot_earth, earth_rotation, ephemerides)
        horizontal = g - np.sum(g * up, axis=1, keepdims=True) * up

        disp = ((hn[0] * V0 + hn[2] * V2) * up + ln[2] * r * horizontal) / gravity[:, None]
        return disp[0] if single else disp
