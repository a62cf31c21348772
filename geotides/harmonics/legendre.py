"""
Numba-accelerated solid spherical harmonics

Computes the fully normalized solid harmonics

    C_nm(p) = (1/r)^(n+1) * Pnm(cos theta) * cos(m lambda)
    S_nm(p) = (1/r)^(n+1) * Pnm(cos theta) * sin(m lambda)

of points p given in units of the reference radius. The longitude terms are
built by complex multiplication from x/rho and y/rho, so points on the
rotation axis need no special treatment.

Copyright (c) 2024-2026 tkykszk

This software is licensed under the MIT License.
See LICENSE file for details.
"""

import math

import numpy as np
from numba import jit

__all__ = [
    'solid_harmonics',
    'legendre_functions',
]


@jit(nopython=True, cache=True)
def _legendre_kernel(t: float, u: float, max_degree: int, pnm: np.ndarray) -> None:
    """
    Fully normalized associated Legendre functions (in-place)

    Parameters
    ----------
    t : float
        cos(theta)
    u : float
        sin(theta)
    max_degree : int
        Maximum degree
    pnm : np.ndarray
        Output, shape (max_degree+1, max_degree+1)
    """
    n1 = max_degree + 1
    pnm[:, :] = 0.0
    pnm[0, 0] = 1.0

    # Sectorial terms
    for m in range(1, n1):
        if m == 1:
            pnm[1, 1] = math.sqrt(3.0) * u
        else:
            pnm[m, m] = math.sqrt((2.0 * m + 1.0) / (2.0 * m)) * u * pnm[m - 1, m - 1]

    # Recursion in degree
    for m in range(n1):
        if m + 1 < n1:
            pnm[m + 1, m] = math.sqrt(2.0 * m + 3.0) * t * pnm[m, m]
        for n in range(m + 2, n1):
            a = math.sqrt((2.0 * n - 1.0) * (2.0 * n + 1.0) / ((n - m) * (n + m)))
            b = math.sqrt((2.0 * n + 1.0) * (n + m - 1.0) * (n - m - 1.0)
                          / ((n - m) * (n + m) * (2.0 * n - 3.0)))
            pnm[n, m] = a * t * pnm[n - 1, m] - b * pnm[n - 2, m]


@jit(nopython=True, cache=True)
def _solid_harmonics_kernel(points: np.ndarray, max_degree: int):
    """
    Solid harmonics for many points

    Parameters
    ----------
    points : np.ndarray
        Positions in units of the reference radius, shape (n_points, 3)
    max_degree : int
        Maximum degree

    Returns
    -------
    cnm, snm : np.ndarray
        Shape (n_points, max_degree+1, max_degree+1)
    """
    n_points = points.shape[0]
    n1 = max_degree + 1

    cnm = np.zeros((n_points, n1, n1))
    snm = np.zeros((n_points, n1, n1))
    pnm = np.zeros((n1, n1))

    for k in range(n_points):
        x = points[k, 0]
        y = points[k, 1]
        z = points[k, 2]
        rho = math.sqrt(x * x + y * y)
        r = math.sqrt(rho * rho + z * z)

        # longitude direction, arbitrary on the rotation axis
        if rho > 0.0:
            cl = x / rho
            sl = y / rho
        else:
            cl = 1.0
            sl = 0.0

        _legendre_kernel(z / r, rho / r, max_degree, pnm)

        inv_r = 1.0 / r
        cos_m = 1.0
        sin_m = 0.0
        for m in range(n1):
            if m > 0:
                cos_next = cos_m * cl - sin_m * sl
                sin_m = sin_m * cl + cos_m * sl
                cos_m = cos_next
            factor = inv_r ** (m + 1)
            for n in range(m, n1):
                cnm[k, n, m] = factor * pnm[n, m] * cos_m
                snm[k, n, m] = factor * pnm[n, m] * sin_m
                factor *= inv_r

    return cnm, snm


def legendre_functions(colatitude: float, max_degree: int) -> np.ndarray:
    """
    Fully normalized associated Legendre functions at one colatitude

    Parameters
    ----------
    colatitude : float
        Colatitude (radians)
    max_degree : int
        Maximum degree

    Returns
    -------
    np.ndarray
        Pnm, shape (max_degree+1, max_degree+1), entry [n, m]
    """
    pnm = np.zeros((max_degree + 1, max_degree + 1))
    _legendre_kernel(float(np.cos(colatitude)), float(np.sin(colatitude)),
                     int(max_degree), pnm)
    return pnm


def solid_harmonics(points: np.ndarray, max_degree: int) -> tuple[np.ndarray, np.ndarray]:
    """
    Fully normalized solid harmonics C_nm, S_nm

    Parameters
    ----------
    points : np.ndarray
        Positions divided by the reference radius, shape (3,) or (n_points, 3)
    max_degree : int
        Maximum degree

    Returns
    -------
    cnm, snm : np.ndarray
        Shape (n_points, max_degree+1, max_degree+1), entry [k, n, m]
    """
    points = np.ascontiguousarray(np.atleast_2d(np.asarray(points, dtype=np.float64)))
    if points.ndim != 2 or points.shape[1] != 3:
        raise ValueError(f"Points must have shape (n_points, 3), got {points.shape}")
    if max_degree < 0:
        raise ValueError(f"Invalid maximum degree {max_degree}")
    return _solid_harmonics_kernel(points, int(max_degree))
