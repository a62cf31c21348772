"""
geotides.errors - Exceptions raised by the tide computation core

Configuration errors are detected when models are built, coverage errors
when an epoch lies outside the data of a provider, capability errors when a
model is asked for a representation it cannot produce.

Copyright (c) 2024-2026 tkykszk

This software is licensed under the MIT License.
See LICENSE file for details.
"""

__all__ = [
    'TidesError',
    'ConfigurationError',
    'CoverageError',
    'CapabilityError',
]


class TidesError(Exception):
    """Base class of all errors raised by geotides."""


class ConfigurationError(TidesError, ValueError):
    """Invalid setup: unknown type tag, malformed Love numbers, size mismatch."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"{field}: {message}")


class CoverageError(TidesError, LookupError):
    """Provider data is not available for the requested epoch."""

    def __init__(self, message: str, mjd: float | None = None):
        self.mjd = mjd
        super().__init__(message)


class CapabilityError(TidesError, NotImplementedError):
    """A tide model cannot express itself as a spherical harmonic expansion."""
