"""
geotides.harmonics - Spherical harmonic fields and station deformation

Provides:
- Fully normalized solid harmonics (numba kernel)
- Degree/order packing of coefficient vectors
- SphericalHarmonics potential fields
- Deformation matrices for station sets

Copyright (c) 2024-2026 tkykszk

This software is licensed under the MIT License.
See LICENSE file for details.
"""

from .legendre import (
    legendre_functions,
    solid_harmonics,
)
from .packing import (
    coefficient_count,
    degree_order,
    pack,
    ravel_coefficients,
    unpack,
    unravel_coefficients,
)
from .deformation import (
    DeformationEngine,
    apply_deformation_matrix,
    check_gravity,
    check_love_numbers,
    deformation_matrix,
)
from .spherical import (
    SphericalHarmonics,
    as_points,
)

__all__ = [
    # Kernels
    'legendre_functions',
    'solid_harmonics',
    # Packing
    'coefficient_count',
    'degree_order',
    'pack',
    'ravel_coefficients',
    'unpack',
    'unravel_coefficients',
    # Deformation
    'DeformationEngine',
    'apply_deformation_matrix',
    'check_gravity',
    'check_love_numbers',
    'deformation_matrix',
    # Fields
    'SphericalHarmonics',
    'as_points',
]
