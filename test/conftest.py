import numpy as np
import pytest

from geotides.constants import OMEGA_EARTH, R_EARTH
from geotides.errors import CoverageError


class FixedRotation:
    """Earth rotation provider with constant values."""

    def __init__(self, matrix=None, omega=(0.0, 0.0, OMEGA_EARTH), pole=(0.0, 0.0)):
        self.matrix = np.eye(3) if matrix is None else np.asarray(matrix, dtype=float)
        self.omega = np.asarray(omega, dtype=float)
        self.pole = tuple(pole)

    def rotary_matrix(self, mjd):
        return self.matrix

    def rotation_axis(self, mjd):
        return self.omega

    def polar_motion(self, mjd):
        return self.pole


class FixedEphemerides:
    """Ephemerides provider with constant positions."""

    def __init__(self, positions):
        self.positions = {name: np.asarray(value, dtype=float)
                          for name, value in positions.items()}

    def position(self, mjd, body):
        if body == 'earth':
            return np.zeros(3)
        if body not in self.positions:
            raise CoverageError(f"No ephemerides available for body '{body}': {mjd}", mjd=mjd)
        return self.positions[body]


@pytest.fixture
def fixed_rotation():
    """Factory of constant rotation providers"""
    return FixedRotation


@pytest.fixture
def fixed_ephemerides():
    """Factory of constant ephemerides providers"""
    return FixedEphemerides


@pytest.fixture
def rotation():
    """Identity rotation, Earth rotation about z"""
    return FixedRotation()


@pytest.fixture
def ephemerides():
    """Sun and moon at fixed, realistic positions"""
    return FixedEphemerides({
        'sun': [1.2e11, -8.0e10, 3.5e10],
        'moon': [2.1e8, 3.0e8, -1.1e8],
    })


@pytest.fixture
def stations():
    """Stations on the reference sphere, one of them at the north pole"""
    directions = np.array([
        [1.0, 0.0, 0.0],
        [0.3, -0.5, 0.8],
        [-0.6, 0.2, -0.4],
        [0.0, 0.0, 1.0],
    ])
    return R_EARTH * directions / np.linalg.norm(directions, axis=1, keepdims=True)


@pytest.fixture
def love_numbers():
    """Displacement Love and Shida numbers up to degree 4"""
    hn = np.array([0.0, 0.0, 0.6078, 0.292, 0.175])
    ln = np.array([0.0, 0.0, 0.0847, 0.015, 0.010])
    return hn, ln
