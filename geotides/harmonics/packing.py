"""
geotides.harmonics.packing - Degree/order packing of harmonic coefficients

Coefficients of a spherical harmonic expansion up to degree N are stored
in a vector of length (N+1)^2, degree by degree:

    c00 | c10 c11 s11 | c20 c21 s21 c22 s22 | ...

The same layout is used by SphericalHarmonics.x and by the columns of the
deformation matrix.

Copyright (c) 2024-2026 tkykszk

This software is licensed under the MIT License.
See LICENSE file for details.
"""

from __future__ import annotations

import numpy as np

__all__ = [
    'pack',
    'unpack',
    'coefficient_count',
    'degree_order',
    'ravel_coefficients',
    'unravel_coefficients',
]


def pack(n: int, m: int, is_sine: bool = False) -> int:
    """
    Index of coefficient (n, m, cos/sin) in the packed vector

    Parameters
    ----------
    n : int
        Degree
    m : int
        Order, 0 <= m <= n
    is_sine : bool, default False
        Sine coefficient (only valid for m >= 1)

    Returns
    -------
    int
        Position in the packed coefficient vector
    """
    if n < 0 or m < 0 or m > n:
        raise ValueError(f"Invalid degree/order ({n}, {m})")
    if m == 0:
        if is_sine:
            raise ValueError(f"No sine coefficient for order 0 (degree {n})")
        return n * n
    return n * n + 2 * m - 1 + int(bool(is_sine))


def unpack(index: int) -> tuple[int, int, bool]:
    """Inverse of pack: (n, m, is_sine) of a packed index."""
    if index < 0:
        raise ValueError(f"Invalid coefficient index {index}")
    n = int(np.floor(np.sqrt(index)))
    # guard against floating point rounding of the square root
    while n * n > index:
        n -= 1
    while (n + 1) * (n + 1) <= index:
        n += 1
    k = index - n * n
    if k == 0:
        return n, 0, False
    return n, (k + 1) // 2, (k % 2) == 0


def coefficient_count(max_degree: int) -> int:
    """Number of coefficients up to and including max_degree."""
    return (max_degree + 1) * (max_degree + 1)


def degree_order(max_degree: int) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Degree, order and sine flag of every packed position

    Returns
    -------
    degree, order : numpy.ndarray
        Integer arrays of length (max_degree+1)^2
    is_sine : numpy.ndarray
        Boolean array of length (max_degree+1)^2
    """
    count = coefficient_count(max_degree)
    degree = np.zeros(count, dtype=int)
    order = np.zeros(count, dtype=int)
    is_sine = np.zeros(count, dtype=bool)
    for n in range(max_degree + 1):
        degree[n * n:(n + 1) * (n + 1)] = n
        for m in range(1, n + 1):
            order[pack(n, m)] = m
            order[pack(n, m, True)] = m
            is_sine[pack(n, m, True)] = True
    return degree, order, is_sine


def ravel_coefficients(cnm: np.ndarray, snm: np.ndarray) -> np.ndarray:
    """
    Pack triangular cosine/sine arrays into a coefficient vector

    Parameters
    ----------
    cnm, snm : numpy.ndarray
        Arrays of shape (N+1, N+1), entry [n, m]

    Returns
    -------
    numpy.ndarray
        Packed vector of length (N+1)^2
    """
    max_degree = cnm.shape[0] - 1
    degree, order, is_sine = degree_order(max_degree)
    return np.where(is_sine, snm[degree, order], cnm[degree, order])


def unravel_coefficients(x: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """
    Unpack a coefficient vector into triangular cosine/sine arrays

    Raises
    ------
    ValueError
        If the vector length is not a perfect square
    """
    x = np.asarray(x, dtype=np.float64)
    if x.ndim != 1:
        raise ValueError(f"Coefficient vector must be 1-D, got shape {x.shape}")
    max_degree = int(round(np.sqrt(x.size))) - 1
    if coefficient_count(max_degree) != x.size or x.size == 0:
        raise ValueError(
            f"Coefficient count {x.size} is not (max_degree+1)^2 for any degree"
        )
    degree, order, is_sine = degree_order(max_degree)
    cnm = np.zeros((max_degree + 1, max_degree + 1))
    snm = np.zeros((max_degree + 1, max_degree + 1))
    cnm[degree[~is_sine], order[~is_sine]] = x[~is_sine]
    snm[degree[is_sine], order[is_sine]] = x[is_sine]
    return cnm, snm
