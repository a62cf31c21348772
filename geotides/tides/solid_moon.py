"""
geotides.tides.solid_moon - Solid tides of the Moon

The elastic response of the Moon to the tide generating potential of the
Earth and the Sun, for computations in a lunar body-fixed frame (e.g.
lunar orbiters). Positions of the tide generating bodies relative to the
Moon are rotated with rot_earth, which here is the rotation from the
celestial frame to the lunar body-fixed frame.

Copyright (c) 2024-2026 tkykszk

This software is licensed under the MIT License.
See LICENSE file for details.
"""

from __future__ import annotations

import numpy as np

from ..constants import GM_EARTH, GM_MOON, R_MOON
from ..errors import ConfigurationError
from ..harmonics import SphericalHarmonics, solid_harmonics
from .astronomical import BODY_GM
from .base import TideModel

__all__ = [
    'SolidMoonTide',
]

_BODY_GM = {
    'earth': GM_EARTH,
    **BODY_GM,
}


class SolidMoonTide(TideModel):
    """
    Solid Moon tides raised by Earth and Sun

    Parameters
    ----------
    k2, k3 : float
        Lunar potential Love numbers
    bodies : sequence of str, default ('earth', 'sun')
        Tide generating bodies
    GM, R : float
        Lunar constants the coefficients refer to
    """

    tag = 'solidMoonTide'

    def __init__(self, k2: float = 0.02416, k3: float = 0.0089,
                 bodies=('earth', 'sun'), GM: float = GM_MOON, R: float = R_MOON):
        self.k2 = float(k2)
        self.k3 = float(k3)
        self.bodies = tuple(name.lower() for name in bodies)
        unknown = [name for name in self.bodies if name not in _BODY_GM or name == 'moon']
        if unknown:
            raise ConfigurationError('bodies', f"cannot raise lunar tides: {', '.join(unknown)}")
        self.GM = float(GM)
        self.R = float(R)

    def __repr__(self) -> str:
        return f"SolidMoonTide(k2={self.k2}, k3={self.k3}, bodies={self.bodies!r})"

    def _harmonics(self, mjd, rot_earth, earth_rotation, ephemerides, max_degree):
        rot_moon = np.asarray(rot_earth, dtype=np.float64)
        moon = ephemerides.position(mjd, 'moon')
        n1 = 4 if max_degree is None else max(max_degree + 1, 4)
        cnm = np.zeros((n1, n1))
        snm = np.zeros((n1, n1))
        love = {2: self.k2, 3: self.k3}
        for name in self.bodies:
            b = rot_moon @ (ephemerides.position(mjd, name) - moon)
            Cnm, Snm = solid_harmonics(b / self.R, 3)
            ratio = _BODY_GM[name] / self.GM
            for n, k in love.items():
                cnm[n, :n + 1] += k * ratio * Cnm[0, n, :n + 1] / (2.0 * n + 1.0)
                snm[n, :n + 1] += k * ratio * Snm[0, n, :n + 1] / (2.0 * n + 1.0)
        return SphericalHarmonics(self.GM, self.R, cnm, snm)
