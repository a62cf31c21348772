"""
Low-precision astronomical series

Solar and lunar positions in the celestial (equatorial) frame, Greenwich
sidereal time and the Doodson fundamental arguments. Time arguments are
Modified Julian Days in GPS time.

Copyright (c) 2024-2026 tkykszk

This software is licensed under the MIT License.
See LICENSE file for details.
"""

from __future__ import annotations

import numpy as np

__all__ = [
    'polynomial_sum',
    'normalize_angle',
    'julian_centuries',
    'greenwich_mean_sidereal_time',
    'greenwich_hour_angle',
    'rotate_x',
    'rotate_y',
    'rotate_z',
    'solar_position',
    'lunar_position',
    'doodson_arguments',
]

# Constants
_MJD_J2000 = 51544.5  # MJD of J2000.0
_JULIAN_CENTURY = 36525.0  # Julian century (days)
_DAY_SECONDS = 86400.0  # Seconds per day
_ARCSEC_TO_RAD = np.pi / (180.0 * 3600.0)  # Arcseconds to radians
_DEG_TO_RAD = np.pi / 180.0  # Degrees to radians
_TT_GPS = 51.184  # TT - GPS (seconds)

_EPSILON_J2000 = 23.43929111 * _DEG_TO_RAD  # Obliquity of ecliptic (radians)
_COS_EPSILON = np.cos(_EPSILON_J2000)
_SIN_EPSILON = np.sin(_EPSILON_J2000)

_GMST_COEF = np.array([24110.54841, 8640184.812866, 9.3104e-2, -6.2e-6])


def polynomial_sum(coefficients, t: np.ndarray) -> np.ndarray:
    """
    Polynomial c0 + c1*t + c2*t^2 + ... by Horner's method

    Parameters
    ----------
    coefficients : array_like
        Coefficient array [c0, c1, c2, ...]
    t : np.ndarray
        Time variable
    """
    result = np.zeros_like(np.asarray(t, dtype=np.float64))
    for c in reversed(coefficients):
        result = result * t + c
    return result


def normalize_angle(theta: np.ndarray, circle: float = 360.0) -> np.ndarray:
    """Angle reduced to [0, circle)."""
    return np.mod(theta, circle)


def julian_centuries(mjd: np.ndarray) -> np.ndarray:
    """Julian centuries of TT since J2000.0 for GPS MJD."""
    return (np.asarray(mjd, dtype=np.float64) + _TT_GPS / _DAY_SECONDS
            - _MJD_J2000) / _JULIAN_CENTURY


def greenwich_mean_sidereal_time(mjd_ut1: np.ndarray) -> np.ndarray:
    """
    Greenwich Mean Sidereal Time (fraction of day)

    Parameters
    ----------
    mjd_ut1 : np.ndarray
        Modified Julian Day in UT1
    """
    ut1_jc = (np.asarray(mjd_ut1, dtype=np.float64) - _MJD_J2000) / _JULIAN_CENTURY
    gmst_sec = polynomial_sum(_GMST_COEF, ut1_jc)
    return np.mod(gmst_sec / _DAY_SECONDS, 1.0)


def greenwich_hour_angle(mjd_ut1: np.ndarray) -> np.ndarray:
    """
    Greenwich hour angle of the equinox (radians)

    Sidereal time at 0h plus the rotation accumulated over the day.

    Parameters
    ----------
    mjd_ut1 : np.ndarray
        Modified Julian Day in UT1
    """
    mjd_ut1 = np.asarray(mjd_ut1, dtype=np.float64)
    gmst = greenwich_mean_sidereal_time(mjd_ut1)
    days = mjd_ut1 - _MJD_J2000
    gha = np.mod(gmst * 360.0 + 360.0 * days + 180.0, 360.0)
    return gha * _DEG_TO_RAD


def rotate_z(angle: np.ndarray) -> np.ndarray:
    """
    Rotation matrix about the z-axis

    Returns
    -------
    np.ndarray
        Shape (3, 3) for a scalar angle, (N, 3, 3) otherwise
    """
    angle = np.asarray(angle, dtype=np.float64)
    cos_a = np.cos(angle)
    sin_a = np.sin(angle)
    rot = np.zeros(angle.shape + (3, 3))
    rot[..., 0, 0] = cos_a
    rot[..., 0, 1] = sin_a
    rot[..., 1, 0] = -sin_a
    rot[..., 1, 1] = cos_a
    rot[..., 2, 2] = 1.0
    return rot


def rotate_x(angle: np.ndarray) -> np.ndarray:
    """Rotation matrix about the x-axis, shape (..., 3, 3)."""
    angle = np.asarray(angle, dtype=np.float64)
    cos_a = np.cos(angle)
    sin_a = np.sin(angle)
    rot = np.zeros(angle.shape + (3, 3))
    rot[..., 0, 0] = 1.0
    rot[..., 1, 1] = cos_a
    rot[..., 1, 2] = sin_a
    rot[..., 2, 1] = -sin_a
    rot[..., 2, 2] = cos_a
    return rot


def rotate_y(angle: np.ndarray) -> np.ndarray:
    """Rotation matrix about the y-axis, shape (..., 3, 3)."""
    angle = np.asarray(angle, dtype=np.float64)
    cos_a = np.cos(angle)
    sin_a = np.sin(angle)
    rot = np.zeros(angle.shape + (3, 3))
    rot[..., 0, 0] = cos_a
    rot[..., 0, 2] = -sin_a
    rot[..., 1, 1] = 1.0
    rot[..., 2, 0] = sin_a
    rot[..., 2, 2] = cos_a
    return rot


def solar_position(mjd: np.ndarray) -> np.ndarray:
    """
    Geocentric solar position in the celestial frame

    Parameters
    ----------
    mjd : np.ndarray
        Modified Julian Day (GPS)

    Returns
    -------
    np.ndarray
        Position (m), shape (..., 3)
    """
    T = julian_centuries(mjd)

    # Solar longitude of perihelion (radians)
    Ps = (282.94 + 1.7192 * T) * _DEG_TO_RAD

    # Solar mean anomaly
    M = (357.5256 + T * (35999.049 + T * (-1.559e-4 - 4.8e-7 * T))) * _DEG_TO_RAD
    cos_M = np.cos(M)
    sin_M = np.sin(M)
    cos_2M = 2.0 * cos_M * cos_M - 1.0
    sin_2M = 2.0 * sin_M * cos_M

    # Solar distance (metres)
    r_sun = 1e9 * (149.619 - 2.499 * cos_M - 0.021 * cos_2M)

    # Ecliptic longitude (radians)
    lambda_sun = Ps + M + _ARCSEC_TO_RAD * (6892.0 * sin_M + 72.0 * sin_2M)

    # Ecliptic to equatorial
    x = r_sun * np.cos(lambda_sun)
    y_ecl = r_sun * np.sin(lambda_sun)
    return np.stack([x, y_ecl * _COS_EPSILON, y_ecl * _SIN_EPSILON], axis=-1)


def lunar_position(mjd: np.ndarray) -> np.ndarray:
    """
    Geocentric lunar position in the celestial frame

    Parameters
    ----------
    mjd : np.ndarray
        Modified Julian Day (GPS)

    Returns
    -------
    np.ndarray
        Position (m), shape (..., 3)
    """
    T = julian_centuries(mjd)

    # Lunar mean longitude
    s = (218.3164477 + T * (481267.88123421 + T * (-1.5786e-3 +
         T * (1.855835e-6 - 1.53388e-8 * T)))) * _DEG_TO_RAD

    # Lunar mean elongation
    D = (297.8501921 + T * (445267.1114034 + T * (-1.8819e-3 +
         T * (1.83195e-6 - 8.8445e-9 * T)))) * _DEG_TO_RAD

    # Lunar ascending node longitude
    N = (125.04452 + T * (-1934.136261 + T * (2.0708e-3 + 2.22222e-6 * T))) * _DEG_TO_RAD
    F = s - N

    # Solar and lunar mean anomaly
    M = (357.5256 + 35999.049 * T) * _DEG_TO_RAD
    l = (134.96292 + 477198.86753 * T) * _DEG_TO_RAD

    D2 = 2.0 * D
    l2 = 2.0 * l
    F2 = 2.0 * F
    sin_M = np.sin(M)
    sin_F2 = np.sin(F2)

    # Lunar distance (metres)
    r_moon = 1e3 * (
        385000.0
        - 20905.0 * np.cos(l)
        - 3699.0 * np.cos(D2 - l)
        - 2956.0 * np.cos(D2)
        - 570.0 * np.cos(l2)
        + 246.0 * np.cos(l2 - D2)
        - 205.0 * np.cos(M - D2)
        - 171.0 * np.cos(l + D2)
        - 152.0 * np.cos(l + M - D2)
    )

    # Lunar ecliptic longitude (radians)
    lambda_moon = s + _ARCSEC_TO_RAD * (
        22640.0 * np.sin(l)
        + 769.0 * np.sin(l2)
        - 4586.0 * np.sin(l - D2)
        + 2370.0 * np.sin(D2)
        - 668.0 * sin_M
        - 412.0 * sin_F2
        - 212.0 * np.sin(l2 - D2)
        - 206.0 * np.sin(l + M - D2)
        + 192.0 * np.sin(l + D2)
        - 165.0 * np.sin(M - D2)
        - 148.0 * np.sin(l - M)
        - 125.0 * np.sin(D)
        - 110.0 * np.sin(l + M)
        - 55.0 * np.sin(F2 - D2)
    )

    # Lunar ecliptic latitude (radians)
    q = _ARCSEC_TO_RAD * (412.0 * sin_F2 + 541.0 * sin_M)
    F_minus_D2 = F - D2
    beta_moon = _ARCSEC_TO_RAD * (
        18520.0 * np.sin(F + lambda_moon - s + q)
        - 526.0 * np.sin(F_minus_D2)
        + 44.0 * np.sin(l + F_minus_D2)
        - 31.0 * np.sin(-l + F_minus_D2)
        - 25.0 * np.sin(-l2 + F)
        - 23.0 * np.sin(M + F_minus_D2)
        + 21.0 * np.sin(-l + F)
        + 11.0 * np.sin(-M + F_minus_D2)
    )

    x = r_moon * np.cos(lambda_moon) * np.cos(beta_moon)
    y = r_moon * np.sin(lambda_moon) * np.cos(beta_moon)
    z = r_moon * np.sin(beta_moon)

    # Ecliptic to equatorial
    return np.stack([x,
                     _COS_EPSILON * y - _SIN_EPSILON * z,
                     _SIN_EPSILON * y + _COS_EPSILON * z], axis=-1)


def doodson_arguments(mjd: np.ndarray) -> np.ndarray:
    """
    The six Doodson fundamental arguments

    Parameters
    ----------
    mjd : np.ndarray
        Modified Julian Day (GPS)

    Returns
    -------
    np.ndarray
        (tau, s, h, p, N', ps) in radians, shape (..., 6)

        tau: mean lunar time, s: mean longitude of the moon,
        h: mean longitude of the sun, p: lunar perigee,
        N': negative lunar node, ps: solar perigee
    """
    mjd = np.asarray(mjd, dtype=np.float64)
    T = julian_centuries(mjd)

    # Hour of the day
    hour = np.mod(mjd, 1.0) * 24.0

    S = 218.3164477 + T * (481267.88123421 + T * (-1.5786e-3 +
        T * (1.855835e-6 - 1.53388e-8 * T)))

    # Mean solar longitude for TAU
    LAMBDA = 280.4606184 + T * (36000.7700536 + T * (3.8793e-4 - 2.58e-8 * T))
    TAU = hour * 15.0 - S + LAMBDA

    # Precession correction of the lunar longitude
    PR = T * (1.396971278 + T * (3.08889e-4 + T * (2.1e-8 + 7.0e-9 * T)))
    S = S + PR

    H = 280.46645 + T * (36000.7697489 + T * (3.0322222e-4 +
        T * (2.0e-8 - 6.54e-9 * T)))
    P = 83.3532465 + T * (4069.0137287 + T * (-1.032172222e-2 +
        T * (-1.24991e-5 + 5.263e-8 * T)))
    Np = 234.95544499 + T * (1934.13626197 + T * (-2.07561111e-3 +
         T * (-2.13944e-6 + 1.65e-8 * T)))
    Ps = 282.93734098 + T * (1.71945766667 + T * (4.5688889e-4 +
         T * (-1.778e-8 - 3.34e-9 * T)))

    arguments = np.stack([TAU, S, H, P, Np, Ps], axis=-1)
    return np.radians(normalize_angle(arguments))
