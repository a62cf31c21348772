"""
geotides.harmonics.spherical - Spherical harmonic representation of a potential

A SphericalHarmonics instance holds fully normalized cosine and sine
coefficients together with the constants GM and R they refer to:

    V(p) = GM/R * sum_n sum_m c_nm C_nm(p/R) + s_nm S_nm(p/R)

Gravity and gravity gradients are computed in the coefficient domain: the
derivative of a degree n solid harmonic along x, y or z is a combination of
degree n+1 solid harmonics, so the derivative of a field of degree N is a
field of degree N+1 and can be evaluated with the same kernel.

Copyright (c) 2024-2026 tkykszk

This software is licensed under the MIT License.
See LICENSE file for details.
"""

from __future__ import annotations

import numbers

import numpy as np

from ..constants import GM_EARTH, R_EARTH
from ..errors import ConfigurationError
from .deformation import check_gravity, check_love_numbers
from .legendre import solid_harmonics
from .packing import ravel_coefficients, unravel_coefficients

__all__ = [
    'SphericalHarmonics',
    'as_points',
]

_SQRT2 = np.sqrt(2.0)


def as_points(points) -> tuple[np.ndarray, bool]:
    """
    Normalize one point (3,) or many points (K, 3)

    Returns
    -------
    points : np.ndarray
        Shape (K, 3), float64
    single : bool
        True if a single point was given
    """
    points = np.asarray(points, dtype=np.float64)
    single = points.ndim == 1
    points = np.atleast_2d(points)
    if points.ndim != 2 or points.shape[1] != 3:
        raise ValueError(f"Points must have shape (3,) or (K, 3), got {points.shape}")
    return points, single


def _derivative(cnm: np.ndarray, snm: np.ndarray) -> list[tuple[np.ndarray, np.ndarray]]:
    """
    Coefficients of the x, y and z derivatives of a field

    The derivative of sum c_nm C_nm(xi) + s_nm S_nm(xi) with respect to the
    components of xi = p/R. The result has one degree more than the input.

    Returns
    -------
    list of (cnm, snm)
        One pair per axis, shape (N+2, N+2)
    """
    n1 = cnm.shape[0]
    (cx, sx), (cy, sy), (cz, sz) = [
        (np.zeros((n1 + 1, n1 + 1)), np.zeros((n1 + 1, n1 + 1))) for _ in range(3)
    ]
    for n in range(n1):
        f = 0.5 * np.sqrt((2.0 * n + 1.0) / (2.0 * n + 3.0))

        # order 0
        wm0 = n + 1.0
        wp1 = np.sqrt((n + 1.0) * (n + 2.0) / 2.0)
        c = cnm[n, 0]
        cx[n + 1, 1] -= 2.0 * f * wp1 * c
        sy[n + 1, 1] -= 2.0 * f * wp1 * c
        cz[n + 1, 0] -= 2.0 * f * wm0 * c

        for m in range(1, n + 1):
            wm1 = np.sqrt((n - m + 1.0) * (n - m + 2.0))
            if m == 1:
                wm1 *= _SQRT2
            wm0 = np.sqrt((n - m + 1.0) * (n + m + 1.0))
            wp1 = np.sqrt((n + m + 1.0) * (n + m + 2.0))
            c = cnm[n, m]
            s = snm[n, m]

            # cosine term: (Cm1 - Cp1, -Sm1 - Sp1, -2 Cm0)
            cx[n + 1, m - 1] += f * wm1 * c
            cx[n + 1, m + 1] -= f * wp1 * c
            sy[n + 1, m - 1] -= f * wm1 * c
            sy[n + 1, m + 1] -= f * wp1 * c
            cz[n + 1, m] -= 2.0 * f * wm0 * c

            # sine term: (Sm1 - Sp1, Cm1 + Cp1, -2 Sm0)
            sx[n + 1, m - 1] += f * wm1 * s
            sx[n + 1, m + 1] -= f * wp1 * s
            cy[n + 1, m - 1] += f * wm1 * s
            cy[n + 1, m + 1] += f * wp1 * s
            sz[n + 1, m] -= 2.0 * f * wm0 * s

    # S_n0 vanishes identically
    for snm_axis in (sx, sy, sz):
        snm_axis[:, 0] = 0.0
    return [(cx, sx), (cy, sy), (cz, sz)]


def _synthesis(cnm: np.ndarray, snm: np.ndarray,
               basis_c: np.ndarray, basis_s: np.ndarray) -> np.ndarray:
    """Sum of coefficients times solid harmonics for every point, shape (K,)."""
    n1 = cnm.shape[0]
    return (np.einsum('knm,nm->k', basis_c[:, :n1, :n1], cnm)
            + np.einsum('knm,nm->k', basis_s[:, :n1, :n1], snm))


class SphericalHarmonics:
    """
    Potential given by fully normalized spherical harmonic coefficients

    Instances are immutable: every operator returns a new instance.

    Parameters
    ----------
    GM : float
        Geocentric gravitational constant (m^3/s^2)
    R : float
        Reference radius (m)
    cnm : array_like, optional
        Cosine coefficients, shape (N+1, N+1), entry [n, m]
    snm : array_like, optional
        Sine coefficients, same shape as cnm

    Examples
    --------
    >>> field = SphericalHarmonics(cnm=[[1.0]])
    >>> field.potential([R_EARTH, 0.0, 0.0])
    """

    def __init__(self, GM: float = GM_EARTH, R: float = R_EARTH, cnm=None, snm=None):
        if cnm is None:
            cnm = np.zeros((1, 1))
        cnm = np.array(cnm, dtype=np.float64)
        snm = np.zeros_like(cnm) if snm is None else np.array(snm, dtype=np.float64)
        if cnm.ndim != 2 or cnm.shape[0] != cnm.shape[1]:
            raise ValueError(f"Coefficients must be square (N+1, N+1), got {cnm.shape}")
        if snm.shape != cnm.shape:
            raise ValueError(f"Sine coefficients {snm.shape} do not match cosine {cnm.shape}")
        if GM <= 0.0 or R <= 0.0:
            raise ValueError(f"GM and R must be positive, got GM={GM}, R={R}")

        # keep the lower triangle only, no sine terms of order 0
        cnm = np.tril(cnm)
        snm = np.tril(snm)
        snm[:, 0] = 0.0
        cnm.flags.writeable = False
        snm.flags.writeable = False

        self._GM = float(GM)
        self._R = float(R)
        self._cnm = cnm
        self._snm = snm

    @classmethod
    def zeros(cls, max_degree: int = 0, GM: float = GM_EARTH,
              R: float = R_EARTH) -> SphericalHarmonics:
        """Field with all coefficients zero."""
        return cls(GM, R, np.zeros((max_degree + 1, max_degree + 1)))

    @classmethod
    def from_coefficients(cls, x, GM: float = GM_EARTH,
                          R: float = R_EARTH) -> SphericalHarmonics:
        """
        Build a field from a packed coefficient vector

        Raises
        ------
        ConfigurationError
            If the length of x is not (N+1)^2
        """
        try:
            cnm, snm = unravel_coefficients(x)
        except ValueError as exc:
            raise ConfigurationError('coefficients', str(exc)) from exc
        return cls(GM, R, cnm, snm)

    @property
    def GM(self) -> float:
        return self._GM

    @property
    def R(self) -> float:
        return self._R

    @property
    def cnm(self) -> np.ndarray:
        return self._cnm

    @property
    def snm(self) -> np.ndarray:
        return self._snm

    @property
    def max_degree(self) -> int:
        return self._cnm.shape[0] - 1

    @property
    def x(self) -> np.ndarray:
        """Packed coefficient vector of length (max_degree+1)^2."""
        return ravel_coefficients(self._cnm, self._snm)

    def __repr__(self) -> str:
        return (f"SphericalHarmonics(GM={self._GM!r}, R={self._R!r}, "
                f"max_degree={self.max_degree})")

    # ------------------------------------------------------------------
    # Coefficient manipulation
    # ------------------------------------------------------------------

    def _scaled_coefficients(self, GM: float, R: float,
                             max_degree: int) -> tuple[np.ndarray, np.ndarray]:
        """Coefficients referred to GM, R and padded or cut to max_degree."""
        n1 = max_degree + 1
        keep = min(n1, self._cnm.shape[0])
        degrees = np.arange(keep)[:, None]
        factor = (self._GM / GM) * (self._R / R) ** degrees
        cnm = np.zeros((n1, n1))
        snm = np.zeros((n1, n1))
        cnm[:keep, :keep] = factor * self._cnm[:keep, :keep]
        snm[:keep, :keep] = factor * self._snm[:keep, :keep]
        return cnm, snm

    def rescaled(self, GM: float | None = None, R: float | None = None) -> SphericalHarmonics:
        """
        Same potential expressed with other constants

        c'_nm = c_nm * (GM_old/GM_new) * (R_old/R_new)^n
        """
        GM = self._GM if GM is None else GM
        R = self._R if R is None else R
        return SphericalHarmonics(GM, R, *self._scaled_coefficients(GM, R, self.max_degree))

    def truncated(self, max_degree: int | None = None,
                  min_degree: int | None = None) -> SphericalHarmonics:
        """
        Restrict the field to min_degree <= n <= max_degree

        Degrees above the current maximum are zero padded.
        """
        max_degree = self.max_degree if max_degree is None else int(max_degree)
        if max_degree < 0:
            raise ValueError(f"Invalid maximum degree {max_degree}")
        cnm, snm = self._scaled_coefficients(self._GM, self._R, max_degree)
        if min_degree is not None and min_degree > 0:
            cnm[:min_degree, :] = 0.0
            snm[:min_degree, :] = 0.0
        return SphericalHarmonics(self._GM, self._R, cnm, snm)

    def __add__(self, other):
        if not isinstance(other, SphericalHarmonics):
            return NotImplemented
        max_degree = max(self.max_degree, other.max_degree)
        cnm_a, snm_a = self._scaled_coefficients(self._GM, self._R, max_degree)
        cnm_b, snm_b = other._scaled_coefficients(self._GM, self._R, max_degree)
        return SphericalHarmonics(self._GM, self._R, cnm_a + cnm_b, snm_a + snm_b)

    def __radd__(self, other):
        # allows sum() over a list of fields
        if isinstance(other, numbers.Number) and other == 0:
            return self
        return NotImplemented

    def __sub__(self, other):
        if not isinstance(other, SphericalHarmonics):
            return NotImplemented
        return self + (-other)

    def __neg__(self):
        return SphericalHarmonics(self._GM, self._R, -self._cnm, -self._snm)

    def __mul__(self, factor):
        if not isinstance(factor, numbers.Real):
            return NotImplemented
        return SphericalHarmonics(self._GM, self._R, factor * self._cnm, factor * self._snm)

    __rmul__ = __mul__

    def __truediv__(self, factor):
        if not isinstance(factor, numbers.Real):
            return NotImplemented
        return SphericalHarmonics(self._GM, self._R, self._cnm / factor, self._snm / factor)

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def _basis(self, points: np.ndarray, max_degree: int):
        return solid_harmonics(points / self._R, max_degree)

    def potential(self, points):
        """
        Potential V(p) (m^2/s^2)

        Parameters
        ----------
        points : array_like
            Terrestrial position(s) (m), shape (3,) or (K, 3)

        Returns
        -------
        float or np.ndarray
            Shape () or (K,)
        """
        points, single = as_points(points)
        basis_c, basis_s = self._basis(points, self.max_degree)
        V = self._GM / self._R * _synthesis(self._cnm, self._snm, basis_c, basis_s)
        return float(V[0]) if single else V

    def radial_gradient(self, points):
        """Radial derivative -sum (n+1)/r V_n (1/s^2)."""
        points, single = as_points(points)
        basis_c, basis_s = self._basis(points, self.max_degree)
        Vn = (np.einsum('knm,nm->kn', basis_c, self._cnm)
              + np.einsum('knm,nm->kn', basis_s, self._snm))
        r = np.linalg.norm(points, axis=1)
        degrees = np.arange(self.max_degree + 1)
        dV = -self._GM / self._R * np.sum((degrees + 1.0) * Vn, axis=1) / r
        return float(dV[0]) if single else dV

    def _reduced_gradient(self, points: np.ndarray, cnm: np.ndarray,
                          snm: np.ndarray) -> np.ndarray:
        """sum over derived coefficients without the GM/R^2 factor, shape (K, 3)."""
        derived = _derivative(cnm, snm)
        basis_c, basis_s = self._basis(points, cnm.shape[0])
        return np.stack([_synthesis(c, s, basis_c, basis_s) for c, s in derived], axis=-1)

    def gravity(self, points):
        """
        Gravity vector, gradient of the potential (m/s^2)

        Returns
        -------
        np.ndarray
            Shape (3,) or (K, 3)
        """
        points, single = as_points(points)
        g = self._GM / self._R**2 * self._reduced_gradient(points, self._cnm, self._snm)
        return g[0] if single else g

    def gravity_gradient(self, points):
        """
        Gravity gradient tensor (1/s^2)

        Returns
        -------
        np.ndarray
            Shape (3, 3) or (K, 3, 3)
        """
        points, single = as_points(points)
        basis_c, basis_s = self._basis(points, self.max_degree + 2)
        tensor = np.zeros((points.shape[0], 3, 3))
        for i, (ci, si) in enumerate(_derivative(self._cnm, self._snm)):
            for j, (cij, sij) in enumerate(_derivative(ci, si)):
                tensor[:, i, j] = _synthesis(cij, sij, basis_c, basis_s)
        tensor *= self._GM / self._R**3
        return tensor[0] if single else tensor

    def deformation(self, points, gravity, hn, ln):
        """
        Surface displacement caused by the potential

        disp = (hn V up + ln (grad V - (grad V . up) up)) / g per degree,
        with the horizontal part scaled by R.

        Parameters
        ----------
        points : array_like
            Station position(s) (m), shape (3,) or (K, 3)
        gravity : float or array_like
            Local gravity per station (m/s^2)
        hn, ln : array_like
            Love and Shida numbers per degree, at least max_degree+1 values

        Returns
        -------
        np.ndarray
            Displacement (m), shape (3,) or (K, 3)
        """
        points, single = as_points(points)
        gravity = check_gravity(gravity, points.shape[0])
        hn, ln = check_love_numbers(hn, ln, self.max_degree)

        n1 = self.max_degree + 1
        h_field = SphericalHarmonics(self._GM, self._R, self._cnm * hn[:n1, None],
                                     self._snm * hn[:n1, None])
        l_cnm = self._cnm * ln[:n1, None]
        l_snm = self._snm * ln[:n1, None]

        up = points / np.linalg.norm(points, axis=1, keepdims=True)
        Vh = np.atleast_1d(h_field.potential(points))
        Gl = self._GM / self._R * self._reduced_gradient(points, l_cnm, l_snm)
        radial = np.sum(Gl * up, axis=1, keepdims=True)
        disp = (Vh[:, None] * up + Gl - radial * up) / gravity[:, None]
        return disp[0] if single else disp
