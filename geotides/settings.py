"""
geotides.settings - Defaults read from the environment

Environment variables (read once at import):

    GEOTIDES_MAX_DEGREE   default max_degree of harmonic tides built from
                          configuration entries (default 3)
    GEOTIDES_WORKERS      default number of threads for batched
                          deformation (default 1)

Copyright (c) 2024-2026 tkykszk

This software is licensed under the MIT License.
See LICENSE file for details.
"""

from __future__ import annotations

import os
import threading
import warnings

__all__ = [
    'Settings',
    'settings',
]


def _int_from_env(name: str, default: int, minimum: int) -> int:
    value = os.environ.get(name, '').strip()
    if not value:
        return default
    try:
        number = int(value)
    except ValueError:
        warnings.warn(f"Ignoring {name}={value!r}, expected an integer", RuntimeWarning,
                      stacklevel=3)
        return default
    if number < minimum:
        warnings.warn(f"Ignoring {name}={value!r}, must be >= {minimum}", RuntimeWarning,
                      stacklevel=3)
        return default
    return number


class Settings:
    """Thread-safe process wide defaults."""

    def __init__(self):
        self._lock = threading.Lock()
        self._max_degree = 3
        self._workers = 1
        self._init_from_env()

    def _init_from_env(self):
        """Initialize from environment variables."""
        self._max_degree = _int_from_env('GEOTIDES_MAX_DEGREE', 3, 0)
        self._workers = _int_from_env('GEOTIDES_WORKERS', 1, 1)

    def reload(self):
        """Re-read the environment variables."""
        with self._lock:
            self._init_from_env()

    @property
    def max_degree(self) -> int:
        with self._lock:
            return self._max_degree

    @max_degree.setter
    def max_degree(self, value: int):
        if value < 0:
            raise ValueError(f"Invalid maximum degree {value}")
        with self._lock:
            self._max_degree = int(value)

    @property
    def workers(self) -> int:
        with self._lock:
            return self._workers

    @workers.setter
    def workers(self, value: int):
        if value < 1:
            raise ValueError(f"Invalid number of workers {value}")
        with self._lock:
            self._workers = int(value)

    def __repr__(self) -> str:
        return f"Settings(max_degree={self.max_degree}, workers={self.workers})"


settings = Settings()
