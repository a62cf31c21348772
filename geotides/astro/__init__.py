"""
geotides.astro - Astronomical providers

Provides:
- Solar and lunar series, sidereal time and Doodson arguments
- Earth rotation providers (sidereal spin, orientation parameters)
- Ephemerides providers (analytical series, tabulated positions)

Copyright (c) 2024-2026 tkykszk

This software is licensed under the MIT License.
See LICENSE file for details.
"""

from .ephemeris import (
    doodson_arguments,
    greenwich_hour_angle,
    greenwich_mean_sidereal_time,
    julian_centuries,
    lunar_position,
    normalize_angle,
    polynomial_sum,
    rotate_x,
    rotate_y,
    rotate_z,
    solar_position,
)
from .rotation import (
    EarthOrientationSeries,
    EarthRotation,
    GMSTRotation,
)
from .ephemerides import (
    AnalyticalEphemerides,
    Ephemerides,
    TabulatedEphemerides,
)

__all__ = [
    'doodson_arguments',
    'greenwich_hour_angle',
    'greenwich_mean_sidereal_time',
    'julian_centuries',
    'lunar_position',
    'normalize_angle',
    'polynomial_sum',
    'rotate_x',
    'rotate_y',
    'rotate_z',
    'solar_position',
    # Providers
    'EarthOrientationSeries',
    'EarthRotation',
    'GMSTRotation',
    'AnalyticalEphemerides',
    'Ephemerides',
    'TabulatedEphemerides',
]
