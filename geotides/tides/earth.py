"""
geotides.tides.earth - Solid Earth tides

The potential change caused by the elastic response of the Earth to the
tide generating potential of sun and moon, expressed by frequency
independent Love numbers k20, k21, k22 and k3 (IERS Conventions 2010,
step 1 of section 6.2.1).

Station displacements use the in-phase IERS 2010 formula (section 7.1.1)
with latitude dependent h2 and l2, degree 2 and 3.

Copyright (c) 2024-2026 tkykszk

This software is licensed under the MIT License.
See LICENSE file for details.
"""

from __future__ import annotations

import numpy as np

from ..constants import GM_EARTH, R_EARTH
from ..harmonics import SphericalHarmonics, as_points, solid_harmonics
from .astronomical import BODY_GM
from .base import TideModel

__all__ = [
    'SolidEarthTide',
    'latitude_dependence',
]

# Love numbers (IERS Conventions 2010, Table 6.3 and section 7.1.1)
_K20 = 0.30190
_K21 = 0.29830
_K22 = 0.30102
_K3 = 0.093
_H2 = 0.6078
_L2 = 0.0847
_H3 = 0.292
_L3 = 0.015


def latitude_dependence(points: np.ndarray, h2: float, l2: float):
    """
    Latitude dependent degree 2 Love and Shida numbers

    h2(phi) = h2 - 0.0006 (3 sin^2 phi - 1)/2
    l2(phi) = l2 + 0.0002 (3 sin^2 phi - 1)/2

    Returns
    -------
    h2, l2 : np.ndarray
        One value per point
    """
    sin_phi = points[:, 2] / np.linalg.norm(points, axis=1)
    p2 = 0.5 * (3.0 * sin_phi**2 - 1.0)
    return h2 - 0.0006 * p2, l2 + 0.0002 * p2


class SolidEarthTide(TideModel):
    """
    Solid Earth tides of sun and moon

    Parameters
    ----------
    k20, k21, k22 : float
        Degree 2 potential Love numbers per order
    k3 : float
        Degree 3 potential Love number
    h2, l2, h3, l3 : float
        Displacement Love and Shida numbers
    latitude_dependent : bool, default True
        Apply the latitude dependence of h2 and l2
    bodies : sequence of str, default ('sun', 'moon')
        Tide generating bodies
    GM, R : float
        Constants of the harmonic expansion
    """

    tag = 'earthTide'
    direct_deformation = True

    def __init__(self, k20: float = _K20, k21: float = _K21, k22: float = _K22,
                 k3: float = _K3, h2: float = _H2, l2: float = _L2,
                 h3: float = _H3, l3: float = _L3, latitude_dependent: bool = True,
                 bodies=('sun', 'moon'), GM: float = GM_EARTH, R: float = R_EARTH):
        self.k2m = np.array([k20, k21, k22], dtype=np.float64)
        self.k3 = float(k3)
        self.h2 = float(h2)
        self.l2 = float(l2)
        self.h3 = float(h3)
        self.l3 = float(l3)
        self.latitude_dependent = bool(latitude_dependent)
        self.bodies = tuple(name.lower() for name in bodies)
        self.GM = float(GM)
        self.R = float(R)

    def __repr__(self) -> str:
        return f"SolidEarthTide(k2m={self.k2m.tolist()}, k3={self.k3}, bodies={self.bodies!r})"

    def _positions(self, mjd, rot_earth, ephemerides):
        rot_earth = np.asarray(rot_earth, dtype=np.float64)
        return [(BODY_GM[name], rot_earth @ ephemerides.position(mjd, name))
                for name in self.bodies]

    def _harmonics(self, mjd, rot_earth, earth_rotation, ephemerides, max_degree):
        n1 = 4 if max_degree is None else max(max_degree, 0) + 1
        cnm = np.zeros((max(n1, 4), max(n1, 4)))
        snm = np.zeros_like(cnm)
        for GM_body, b in self._positions(mjd, rot_earth, ephemerides):
            Cnm, Snm = solid_harmonics(b / self.R, 3)
            ratio = GM_body / self.GM
            cnm[2, :3] += self.k2m * ratio * Cnm[0, 2, :3] / 5.0
            snm[2, :3] += self.k2m * ratio * Snm[0, 2, :3] / 5.0
            cnm[3, :4] += self.k3 * ratio * Cnm[0, 3, :4] / 7.0
            snm[3, :4] += self.k3 * ratio * Snm[0, 3, :4] / 7.0
        return SphericalHarmonics(self.GM, self.R, cnm[:n1, :n1], snm[:n1, :n1])

    def deformation(self, mjd, point, rot_earth, earth_rotation, ephemerides,
                    gravity, hn, ln):
        """
        Station displacement (m) from the IERS 2010 in-phase formula

        The Love numbers of the model are used; gravity, hn and ln are
        accepted for interface compatibility.
        """
        points, single = as_points(point)
        radius = np.linalg.norm(points, axis=1, keepdims=True)
        up = points / radius

        if self.latitude_dependent:
            h2, l2 = latitude_dependence(points, self.h2, self.l2)
        else:
            h2 = np.full(points.shape[0], self.h2)
            l2 = np.full(points.shape[0], self.l2)
        h2 = h2[:, None]
        l2 = l2[:, None]
        h3, l3 = self.h3, self.l3

        disp = np.zeros_like(points)
        for GM_body, b in self._positions(mjd, rot_earth, ephemerides):
            body_radius = np.linalg.norm(b)
            direction = b / body_radius
            scalar = (up @ direction)[:, None]

            # degree 2 and 3 terms
            P2 = 3.0 * (h2 / 2.0 - l2) * scalar**2 - h2 / 2.0
            X2 = 3.0 * l2 * scalar
            P3 = 5.0 / 2.0 * (h3 - 3.0 * l3) * scalar**3 + 3.0 / 2.0 * (l3 - h3) * scalar
            X3 = 3.0 * l3 / 2.0 * (5.0 * scalar**2 - 1.0)

            ratio = GM_body / self.GM
            F2 = ratio * self.R * (self.R / body_radius)**3
            F3 = ratio * self.R * (self.R / body_radius)**4
            disp += F2 * (X2 * direction + P2 * up)
            disp += F3 * (X3 * direction + P3 * up)

        return disp[0] if single else disp
