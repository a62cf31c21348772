"""
geotides.tides.pole - Pole tides

The centrifugal potential perturbation caused by polar motion, for the
solid Earth (IERS Conventions 2010, section 6.4 and 7.1.4) and for the
oceans (section 6.5, Desai 2002).

The wobble variables are the pole coordinates relative to the mean pole,

    m1 = xp - xp_mean,   m2 = -(yp - yp_mean).

Copyright (c) 2024-2026 tkykszk

This software is licensed under the MIT License.
See LICENSE file for details.
"""

from __future__ import annotations

import numpy as np

from ..constants import (
    ARCSEC_TO_RAD,
    GM_EARTH,
    GRAVITATIONAL_CONSTANT,
    GRAVITY_EQUATOR,
    MJD_J2000,
    OMEGA_EARTH,
    R_EARTH,
    RHO_SEAWATER,
)
from ..errors import ConfigurationError
from ..harmonics import SphericalHarmonics, as_points
from .base import TideModel

__all__ = [
    'MEAN_POLE_MODELS',
    'OceanPoleTide',
    'PoleTide',
    'mean_pole',
    'wobble',
]

MEAN_POLE_MODELS = ('iers2010', 'iers2018', 'none')

# Load Love numbers k'_n (IERS Conventions 2010, section 6.5)
_LOAD_LOVE_NUMBERS = np.array([0.0, 0.0, -0.3075, -0.195, -0.132, -0.1032, -0.0892])


def mean_pole(mjd, model: str = 'iers2010') -> tuple[float, float]:
    """
    Conventional mean pole (arcsec)

    Parameters
    ----------
    mjd : float
        Epoch (MJD)
    model : str, default 'iers2010'
        'iers2010' (cubic until 2010, linear after), 'iers2018' (secular
        linear) or 'none' (zero)

    Returns
    -------
    xp_mean, yp_mean : float
        Mean pole coordinates (arcsec)
    """
    t = (float(mjd) - MJD_J2000) / 365.25
    if model == 'iers2010':
        if t < 10.0:
            xp = 55.974 + t * (1.8243 + t * (0.18413 + t * 0.007024))
            yp = 346.346 + t * (1.7896 + t * (-0.10729 - t * 0.000908))
        else:
            xp = 23.513 + 7.6141 * t
            yp = 358.891 - 0.6287 * t
    elif model == 'iers2018':
        xp = 55.0 + 1.677 * t
        yp = 320.5 + 3.460 * t
    elif model == 'none':
        return 0.0, 0.0
    else:
        raise ConfigurationError('mean_pole', f"unknown mean pole model '{model}'")
    return xp * 1e-3, yp * 1e-3


def wobble(mjd, earth_rotation, model: str = 'iers2010') -> tuple[float, float]:
    """Wobble variables (m1, m2) in arcsec."""
    xp, yp = earth_rotation.polar_motion(mjd)
    xp_mean, yp_mean = mean_pole(mjd, model)
    m1 = xp / ARCSEC_TO_RAD - xp_mean
    m2 = -(yp / ARCSEC_TO_RAD - yp_mean)
    return m1, m2


def _check_mean_pole(model: str) -> str:
    model = model.lower()
    if model not in MEAN_POLE_MODELS:
        raise ConfigurationError('mean_pole', f"unknown mean pole model '{model}', "
                                              f"expected one of {MEAN_POLE_MODELS}")
    return model


class PoleTide(TideModel):
    """
    Solid Earth pole tide

    Parameters
    ----------
    mean_pole : str, default 'iers2010'
        Mean pole model, see mean_pole
    coefficient : float, default -1.333e-9
        Scale of Delta C21 and Delta S21 per arcsec
    ratio : float, default 0.0115
        Imaginary part ratio of the Love number k2
    GM, R : float
        Constants of the harmonic expansion
    """

    tag = 'poleTide'
    direct_deformation = True

    def __init__(self, mean_pole: str = 'iers2010', coefficient: float = -1.333e-9,
                 ratio: float = 0.0115, GM: float = GM_EARTH, R: float = R_EARTH):
        self.mean_pole = _check_mean_pole(mean_pole)
        self.coefficient = float(coefficient)
        self.ratio = float(ratio)
        self.GM = float(GM)
        self.R = float(R)

    def __repr__(self) -> str:
        return f"PoleTide(mean_pole={self.mean_pole!r})"

    def _harmonics(self, mjd, rot_earth, earth_rotation, ephemerides, max_degree):
        m1, m2 = wobble(mjd, earth_rotation, self.mean_pole)
        n1 = 3 if max_degree is None else max(max_degree + 1, 3)
        cnm = np.zeros((n1, n1))
        snm = np.zeros((n1, n1))
        cnm[2, 1] = self.coefficient * (m1 + self.ratio * m2)
        snm[2, 1] = self.coefficient * (m2 - self.ratio * m1)
        return SphericalHarmonics(self.GM, self.R, cnm, snm)

    def deformation(self, mjd, point, rot_earth, earth_rotation, ephemerides,
                    gravity, hn, ln):
        """
        Station displacement (m), IERS 2010 eq. 7.26

        The model's own Love numbers (h2 = 0.6207, l2 = 0.0836) are built
        into the coefficients; gravity, hn and ln are not used.
        """
        points, single = as_points(point)
        m1, m2 = wobble(mjd, earth_rotation, self.mean_pole)

        r = np.linalg.norm(points, axis=1)
        theta = np.arccos(np.clip(points[:, 2] / r, -1.0, 1.0))
        lam = np.arctan2(points[:, 1], points[:, 0])
        cos_t, sin_t = np.cos(theta), np.sin(theta)
        cos_l, sin_l = np.cos(lam), np.sin(lam)

        # millimetres
        S_r = -33.0 * np.sin(2.0 * theta) * (m1 * cos_l + m2 * sin_l)
        S_theta = -9.0 * np.cos(2.0 * theta) * (m1 * cos_l + m2 * sin_l)
        S_lambda = 9.0 * cos_t * (m1 * sin_l - m2 * cos_l)

        up = np.stack([sin_t * cos_l, sin_t * sin_l, cos_t], axis=1)
        south = np.stack([cos_t * cos_l, cos_t * sin_l, -sin_t], axis=1)
        east = np.stack([-sin_l, cos_l, np.zeros_like(lam)], axis=1)
        disp = 1e-3 * (S_r[:, None] * up + S_theta[:, None] * south + S_lambda[:, None] * east)
        return disp[0] if single else disp


class OceanPoleTide(TideModel):
    """
    Ocean pole tide (Desai 2002)

    Parameters
    ----------
    real, imaginary : SphericalHarmonics
        Real and imaginary parts of the Desai coefficients (A^R + i B^R,
        A^I + i B^I) as cosine/sine coefficients
    load_love_numbers : array_like, optional
        Load Love numbers k'_n per degree, default IERS 2010 values up to
        degree 6
    gamma : complex, default 0.6870 + 0.0036j
        gamma_2 = (1 + k2 - h2) of the ocean pole tide
    mean_pole : str, default 'iers2010'
        Mean pole model
    max_degree : int, optional
        Truncation of the Desai coefficients
    GM, R : float
        Constants of the harmonic expansion
    """

    tag = 'oceanPoleTide'

    def __init__(self, real: SphericalHarmonics, imaginary: SphericalHarmonics,
                 load_love_numbers=None, gamma: complex = 0.6870 + 0.0036j,
                 mean_pole: str = 'iers2010', max_degree: int | None = None,
                 GM: float = GM_EARTH, R: float = R_EARTH,
                 density: float = RHO_SEAWATER, gravity: float = GRAVITY_EQUATOR,
                 omega: float = OMEGA_EARTH):
        self.GM = float(GM)
        self.R = float(R)
        if max_degree is None:
            max_degree = max(real.max_degree, imaginary.max_degree)
        self.max_degree = int(max_degree)
        self.real = real.truncated(self.max_degree).rescaled(self.GM, self.R)
        self.imaginary = imaginary.truncated(self.max_degree).rescaled(self.GM, self.R)
        if load_love_numbers is None:
            load_love_numbers = _LOAD_LOVE_NUMBERS
        self.load_love_numbers = np.asarray(load_love_numbers, dtype=np.float64)
        if self.load_love_numbers.ndim != 1 or self.load_love_numbers.size < self.max_degree + 1:
            raise ConfigurationError(
                'load_love_numbers',
                f"{self.load_love_numbers.size} values given, degree {self.max_degree} "
                f"needs {self.max_degree + 1}"
            )
        self.gamma = complex(gamma)
        self.mean_pole = _check_mean_pole(mean_pole)

        n = np.arange(self.max_degree + 1)
        self._Rn = (omega**2 * self.R**4 / self.GM
                    * 4.0 * np.pi * GRAVITATIONAL_CONSTANT * density / gravity
                    * (1.0 + self.load_love_numbers[:n.size]) / (2.0 * n + 1.0))

    def __repr__(self) -> str:
        return f"OceanPoleTide(max_degree={self.max_degree}, mean_pole={self.mean_pole!r})"

    def _harmonics(self, mjd, rot_earth, earth_rotation, ephemerides, max_degree):
        m1, m2 = wobble(mjd, earth_rotation, self.mean_pole)
        m1 *= ARCSEC_TO_RAD
        m2 *= ARCSEC_TO_RAD
        a = m1 * self.gamma.real + m2 * self.gamma.imag
        b = m2 * self.gamma.real - m1 * self.gamma.imag
        Rn = self._Rn[:, None]
        cnm = Rn * (a * self.real.cnm + b * self.imaginary.cnm)
        snm = Rn * (a * self.real.snm + b * self.imaginary.snm)
        return SphericalHarmonics(self.GM, self.R, cnm, snm)
