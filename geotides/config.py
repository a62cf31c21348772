"""
geotides.config - Tide models from configuration entries

Each entry is a mapping with a 'type' tag and the keyword arguments of the
model, e.g.

    [
        {'type': 'astronomicalTide', 'bodies': ['sun', 'moon'], 'max_degree': 4},
        {'type': 'earthTide'},
        {'type': 'poleTide', 'mean_pole': 'iers2018'},
    ]

Tags form a closed registry. Tags renamed in the past are still accepted
with a DeprecationWarning.

Copyright (c) 2024-2026 tkykszk

This software is licensed under the MIT License.
See LICENSE file for details.
"""

from __future__ import annotations

import inspect
import warnings
from collections.abc import Mapping

from .constants import GM_EARTH, R_EARTH
from .errors import ConfigurationError
from .harmonics import SphericalHarmonics
from .settings import settings
from .tides import (
    AstronomicalTide,
    CentrifugalTide,
    DoodsonHarmonicTide,
    OceanPoleTide,
    PoleTide,
    SolidEarthTide,
    SolidMoonTide,
    TideModel,
)

__all__ = [
    'DEPRECATED_TAGS',
    'TIDE_TYPES',
    'tide_from_config',
    'tides_from_config',
]

TIDE_TYPES: dict[str, type[TideModel]] = {
    cls.tag: cls
    for cls in (
        AstronomicalTide,
        SolidEarthTide,
        DoodsonHarmonicTide,
        PoleTide,
        OceanPoleTide,
        CentrifugalTide,
        SolidMoonTide,
    )
}

DEPRECATED_TAGS = {
    'poleTide2010': 'poleTide',
    'poleOceanTide2010': 'oceanPoleTide',
    'moonTide': 'solidMoonTide',
}


def _check_parameters(tag: str, parameters: dict, accepted) -> None:
    for name in parameters:
        if name not in accepted:
            raise ConfigurationError(name, f"unknown parameter for '{tag}'")


def _as_field(name: str, value, GM: float, R: float) -> SphericalHarmonics:
    if isinstance(value, SphericalHarmonics):
        return value
    try:
        return SphericalHarmonics.from_coefficients(value, GM, R)
    except ConfigurationError as exc:
        raise ConfigurationError(name, str(exc)) from exc


def _build_doodson(parameters: dict) -> DoodsonHarmonicTide:
    _check_parameters('doodsonHarmonicTide', parameters,
                      ('dataset', 'constituents', 'factor', 'GM', 'R'))
    if 'dataset' in parameters:
        if 'constituents' in parameters:
            raise ConfigurationError('dataset', "give either 'dataset' or 'constituents'")
        return DoodsonHarmonicTide.from_dataset(parameters['dataset'],
                                                factor=parameters.get('factor', 1.0),
                                                GM=parameters.get('GM'), R=parameters.get('R'))
    if 'constituents' not in parameters:
        raise ConfigurationError('constituents', "required for 'doodsonHarmonicTide'")
    return DoodsonHarmonicTide(**parameters)


def _build_ocean_pole(parameters: dict) -> OceanPoleTide:
    accepted = inspect.signature(OceanPoleTide).parameters
    _check_parameters('oceanPoleTide', parameters, accepted)
    for name in ('real', 'imaginary'):
        if name not in parameters:
            raise ConfigurationError(name, "required for 'oceanPoleTide'")
    GM = parameters.get('GM', GM_EARTH)
    R = parameters.get('R', R_EARTH)
    parameters = dict(parameters)
    parameters['real'] = _as_field('real', parameters['real'], GM, R)
    parameters['imaginary'] = _as_field('imaginary', parameters['imaginary'], GM, R)
    return OceanPoleTide(**parameters)


def tide_from_config(entry: Mapping) -> TideModel:
    """
    One tide model from a configuration entry

    Raises
    ------
    ConfigurationError
        Unknown 'type' tag or unknown parameter
    """
    if isinstance(entry, TideModel):
        return entry
    if not isinstance(entry, Mapping):
        raise ConfigurationError('type', f"entry must be a mapping, got {type(entry).__name__}")
    if 'type' not in entry:
        raise ConfigurationError('type', "missing tide type")

    tag = entry['type']
    if tag in DEPRECATED_TAGS:
        warnings.warn(
            f"tide type '{tag}' is deprecated, use '{DEPRECATED_TAGS[tag]}'",
            DeprecationWarning,
            stacklevel=3,
        )
        tag = DEPRECATED_TAGS[tag]
    if tag not in TIDE_TYPES:
        raise ConfigurationError('type', f"unknown tide type '{tag}', expected one of "
                                         f"{sorted(TIDE_TYPES)}")

    parameters = {key: value for key, value in entry.items() if key != 'type'}
    if tag == 'doodsonHarmonicTide':
        return _build_doodson(parameters)
    if tag == 'oceanPoleTide':
        return _build_ocean_pole(parameters)

    cls = TIDE_TYPES[tag]
    accepted = inspect.signature(cls).parameters
    _check_parameters(tag, parameters, accepted)
    if 'max_degree' in accepted and 'max_degree' not in parameters:
        parameters['max_degree'] = settings.max_degree
    return cls(**parameters)


def tides_from_config(entries) -> list[TideModel]:
    """Tide models from a sequence of configuration entries, in order."""
    if isinstance(entries, Mapping):
        entries = [entries]
    return [tide_from_config(entry) for entry in entries]
