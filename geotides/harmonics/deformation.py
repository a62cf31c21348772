"""
geotides.harmonics.deformation - Station deformation from harmonic coefficients

Builds the linear operator A of shape (3K, (N+1)^2) that maps a packed
coefficient vector to the displacement of K stations:

    disp_k = hn/g * V_n * up + ln/g * (grad V_n - (grad V_n . up) up)

Rows 3k, 3k+1, 3k+2 hold the x, y, z displacement of station k; column
pack(n, m, is_sine) holds the response to a unit coefficient. The same
operator is applied to every epoch of a time series, so its cost is paid
once per station set.

Copyright (c) 2024-2026 tkykszk

This software is licensed under the MIT License.
See LICENSE file for details.
"""

from __future__ import annotations

import threading

import numpy as np

from ..constants import GM_EARTH, R_EARTH
from ..errors import ConfigurationError
from .legendre import solid_harmonics
from .packing import coefficient_count, pack

__all__ = [
    'DeformationEngine',
    'apply_deformation_matrix',
    'check_gravity',
    'check_love_numbers',
    'deformation_matrix',
]


def check_love_numbers(hn, ln, max_degree: int) -> tuple[np.ndarray, np.ndarray]:
    """
    Validate Love and Shida numbers for a field of degree max_degree

    Raises
    ------
    ConfigurationError
        If hn or ln has fewer than max_degree+1 entries
    """
    checked = []
    for name, values in (('hn', hn), ('ln', ln)):
        values = np.asarray(values, dtype=np.float64)
        if values.ndim != 1:
            raise ConfigurationError(name, f"must be a 1-D sequence, got shape {values.shape}")
        if values.size < max_degree + 1:
            raise ConfigurationError(
                name, f"{values.size} values given, degree {max_degree} needs {max_degree + 1}"
            )
        checked.append(values)
    return checked[0], checked[1]


def check_gravity(gravity, n_points: int) -> np.ndarray:
    """Broadcast local gravity to one positive value per station."""
    try:
        gravity = np.broadcast_to(np.asarray(gravity, dtype=np.float64), (n_points,))
    except ValueError as exc:
        raise ConfigurationError('gravity', f"expected one value per station ({n_points})") from exc
    if np.any(~np.isfinite(gravity)) or np.any(gravity <= 0.0):
        raise ConfigurationError('gravity', "local gravity must be positive and finite")
    return gravity


def _column(Vn, grad, up, h, l, gravity):
    """Displacement for one coefficient at every station, shape (K, 3)."""
    radial = np.sum(grad * up, axis=1, keepdims=True)
    return (h * Vn[:, None] * up + l * (grad - radial * up)) / gravity[:, None]


def deformation_matrix(
    points: np.ndarray,
    gravity,
    hn,
    ln,
    GM: float = GM_EARTH,
    R: float = R_EARTH,
    max_degree: int | None = None,
) -> np.ndarray:
    """
    Linear operator from coefficients to station displacements

    Parameters
    ----------
    points : np.ndarray
        Station positions in the terrestrial frame (m), shape (K, 3)
    gravity : float or np.ndarray
        Local gravity per station (m/s^2)
    hn, ln : array_like
        Love and Shida numbers, indexed by degree
    GM : float
        Gravitational constant of the coefficients (m^3/s^2)
    R : float
        Reference radius of the coefficients (m)
    max_degree : int, optional
        Maximum degree, default len(hn)-1

    Returns
    -------
    np.ndarray
        Shape (3K, (max_degree+1)^2)
    """
    points = np.atleast_2d(np.asarray(points, dtype=np.float64))
    if points.ndim != 2 or points.shape[1] != 3:
        raise ValueError(f"Station positions must have shape (K, 3), got {points.shape}")
    n_points = points.shape[0]
    if max_degree is None:
        max_degree = np.asarray(hn).size - 1
    if max_degree < 0:
        raise ValueError(f"Invalid maximum degree {max_degree}")
    gravity = check_gravity(gravity, n_points)
    hn, ln = check_love_numbers(hn, ln, max_degree)

    A = np.zeros((n_points, 3, coefficient_count(max_degree)))
    if n_points == 0:
        return A.reshape(0, coefficient_count(max_degree))

    up = points / np.linalg.norm(points, axis=1, keepdims=True)
    Cnm, Snm = solid_harmonics(points / R, max_degree + 1)

    for n in range(max_degree + 1):
        f = GM / (2.0 * R) * np.sqrt((2.0 * n + 1.0) / (2.0 * n + 3.0))

        # order 0
        wm0 = n + 1.0
        wp1 = np.sqrt((n + 1.0) * (n + 2.0) / 2.0)
        Vn = GM / R * Cnm[:, n, 0]
        grad = f * np.stack([-2.0 * wp1 * Cnm[:, n + 1, 1],
                             -2.0 * wp1 * Snm[:, n + 1, 1],
                             -2.0 * wm0 * Cnm[:, n + 1, 0]], axis=1)
        A[:, :, pack(n, 0)] = _column(Vn, grad, up, hn[n], ln[n], gravity)

        for m in range(1, n + 1):
            wm1 = np.sqrt((n - m + 1.0) * (n - m + 2.0))
            if m == 1:
                wm1 *= np.sqrt(2.0)
            wm0 = np.sqrt((n - m + 1.0) * (n + m + 1.0))
            wp1 = np.sqrt((n + m + 1.0) * (n + m + 2.0))

            Cm1 = wm1 * Cnm[:, n + 1, m - 1]
            Sm1 = wm1 * Snm[:, n + 1, m - 1]
            Cm0 = wm0 * Cnm[:, n + 1, m]
            Sm0 = wm0 * Snm[:, n + 1, m]
            Cp1 = wp1 * Cnm[:, n + 1, m + 1]
            Sp1 = wp1 * Snm[:, n + 1, m + 1]

            # cosine coefficient
            Vn = GM / R * Cnm[:, n, m]
            grad = f * np.stack([Cm1 - Cp1, -Sm1 - Sp1, -2.0 * Cm0], axis=1)
            A[:, :, pack(n, m)] = _column(Vn, grad, up, hn[n], ln[n], gravity)

            # sine coefficient
            Vn = GM / R * Snm[:, n, m]
            grad = f * np.stack([Sm1 - Sp1, Cm1 + Cp1, -2.0 * Sm0], axis=1)
            A[:, :, pack(n, m, True)] = _column(Vn, grad, up, hn[n], ln[n], gravity)

    return A.reshape(3 * n_points, -1)


def apply_deformation_matrix(A: np.ndarray, x: np.ndarray) -> np.ndarray:
    """
    Displacements from packed coefficients

    Parameters
    ----------
    A : np.ndarray
        Deformation matrix, shape (3K, M)
    x : np.ndarray
        Coefficient vector (M,) or one vector per epoch (T, M)

    Returns
    -------
    np.ndarray
        Shape (K, 3) for a single vector, (K, T, 3) for a series
    """
    x = np.asarray(x, dtype=np.float64)
    if x.shape[-1] != A.shape[1]:
        raise ConfigurationError(
            'coefficients', f"{x.shape[-1]} coefficients given, matrix expects {A.shape[1]}"
        )
    if x.ndim == 1:
        return (A @ x).reshape(-1, 3)
    disp = A @ x.T
    return disp.reshape(-1, 3, x.shape[0]).transpose(0, 2, 1)


class DeformationEngine:
    """
    Deformation matrices for a fixed station set

    Matrices are built on first use for each (GM, R, max_degree) and kept,
    so models sharing the same constants share one matrix.

    Parameters
    ----------
    points : np.ndarray
        Station positions (m), shape (K, 3)
    gravity : float or np.ndarray
        Local gravity per station (m/s^2)
    hn, ln : array_like
        Love and Shida numbers, indexed by degree
    """

    def __init__(self, points, gravity, hn, ln):
        self.points = np.atleast_2d(np.asarray(points, dtype=np.float64))
        self.gravity = check_gravity(gravity, self.points.shape[0])
        self.hn = np.asarray(hn, dtype=np.float64)
        self.ln = np.asarray(ln, dtype=np.float64)
        self._lock = threading.Lock()
        self._matrices: dict[tuple[float, float, int], np.ndarray] = {}

    @property
    def n_points(self) -> int:
        return self.points.shape[0]

    def matrix(self, GM: float, R: float, max_degree: int) -> np.ndarray:
        """Deformation matrix for coefficients referred to GM and R."""
        key = (float(GM), float(R), int(max_degree))
        with self._lock:
            A = self._matrices.get(key)
        if A is None:
            A = deformation_matrix(self.points, self.gravity, self.hn, self.ln,
                                   GM=GM, R=R, max_degree=max_degree)
            with self._lock:
                A = self._matrices.setdefault(key, A)
        return A

    def displacement(self, field) -> np.ndarray:
        """Displacement (K, 3) of a SphericalHarmonics field."""
        A = self.matrix(field.GM, field.R, field.max_degree)
        return apply_deformation_matrix(A, field.x)

    def clear(self):
        with self._lock:
            self._matrices.clear()
