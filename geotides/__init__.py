"""
geotides - Tidal forces and station deformation

Tidal potential, acceleration, gravity gradient and station displacement of
astronomical, solid Earth, ocean, pole and centrifugal tides. Time series of
displacements for many stations are computed with one precomputed
deformation matrix per station set.

Copyright (c) 2024-2026 tkykszk

This software is licensed under the MIT License.
See LICENSE file for details.

Usage:
    import numpy as np
    import geotides

    tides = geotides.TidesAggregator.from_config([
        {'type': 'astronomicalTide'},
        {'type': 'earthTide'},
    ])
    rotation = geotides.GMSTRotation()
    ephemerides = geotides.AnalyticalEphemerides()

    mjd = 60310.0
    rot = rotation.rotary_matrix(mjd)
    point = np.array([4075580.0, 931854.0, 4801568.0])

    V = tides.potential(mjd, point, rot, rotation, ephemerides)
    g = tides.acceleration(mjd, point, rot, rotation, ephemerides)
    u = tides.deformation(mjd, point, rot, rotation, ephemerides,
                          gravity=9.81, hn=[0, 0, 0.6078, 0.292], ln=[0, 0, 0.0847, 0.015])
"""

from . import astro
from . import harmonics
from . import tides
from .errors import (
    CapabilityError,
    ConfigurationError,
    CoverageError,
    TidesError,
)
from .harmonics import (
    DeformationEngine,
    SphericalHarmonics,
    apply_deformation_matrix,
    deformation_matrix,
    pack,
    unpack,
)
from .astro import (
    AnalyticalEphemerides,
    EarthOrientationSeries,
    EarthRotation,
    Ephemerides,
    GMSTRotation,
    TabulatedEphemerides,
)
from .tides import (
    AstronomicalTide,
    CentrifugalTide,
    Constituent,
    DoodsonHarmonicTide,
    OceanPoleTide,
    PoleTide,
    SolidEarthTide,
    SolidMoonTide,
    TideModel,
    TidesAggregator,
)
from .config import (
    TIDE_TYPES,
    tides_from_config,
)
from .settings import settings

__version__ = '0.1.0'

__all__ = [
    # Errors
    'CapabilityError',
    'ConfigurationError',
    'CoverageError',
    'TidesError',
    # Harmonics
    'DeformationEngine',
    'SphericalHarmonics',
    'apply_deformation_matrix',
    'deformation_matrix',
    'pack',
    'unpack',
    # Providers
    'AnalyticalEphemerides',
    'EarthOrientationSeries',
    'EarthRotation',
    'Ephemerides',
    'GMSTRotation',
    'TabulatedEphemerides',
    # Tides
    'AstronomicalTide',
    'CentrifugalTide',
    'Constituent',
    'DoodsonHarmonicTide',
    'OceanPoleTide',
    'PoleTide',
    'SolidEarthTide',
    'SolidMoonTide',
    'TideModel',
    'TidesAggregator',
    # Configuration
    'TIDE_TYPES',
    'settings',
    'tides_from_config',
]
