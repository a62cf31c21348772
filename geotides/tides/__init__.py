"""
geotides.tides - Tide models and their aggregation

Provides:
- TideModel interface and the closed set of tide models
- TidesAggregator summing several models

Copyright (c) 2024-2026 tkykszk

This software is licensed under the MIT License.
See LICENSE file for details.
"""

from .base import TideModel
from .astronomical import AstronomicalTide
from .earth import SolidEarthTide
from .doodson import (
    Constituent,
    DoodsonHarmonicTide,
    doodson_multipliers,
    doodson_number,
)
from .pole import (
    OceanPoleTide,
    PoleTide,
    mean_pole,
)
from .centrifugal import CentrifugalTide
from .solid_moon import SolidMoonTide
from .aggregator import TidesAggregator

__all__ = [
    'TideModel',
    'TidesAggregator',
    # Models
    'AstronomicalTide',
    'CentrifugalTide',
    'DoodsonHarmonicTide',
    'OceanPoleTide',
    'PoleTide',
    'SolidEarthTide',
    'SolidMoonTide',
    # Helpers
    'Constituent',
    'doodson_multipliers',
    'doodson_number',
    'mean_pole',
]
