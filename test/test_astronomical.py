"""
Tests for geotides.tides.astronomical

Tests the direct tides of sun and moon:
- closed-form potential, acceleration and gradient
- spherical harmonic expansion from the addition theorem
- configuration errors
"""

import numpy as np
import pytest


def _finite_difference(func, point, h):
    columns = []
    for e in np.eye(3):
        columns.append((np.asarray(func(point + h * e)) - np.asarray(func(point - h * e))) / (2 * h))
    return np.stack(columns, axis=-1)


class TestAstronomicalTideDirect:
    """Tests for the closed-form queries"""

    def test_potential_zero_at_geocentre(self, rotation, ephemerides):
        """Test that degree 0 and 1 are removed"""
        from geotides.tides import AstronomicalTide

        tide = AstronomicalTide()
        assert tide.potential(60000.0, np.zeros(3), np.eye(3), rotation, ephemerides) == 0.0

    def test_potential_magnitude(self, rotation, ephemerides, stations):
        """Test lunisolar potential of a few m^2/s^2 on the surface"""
        from geotides.tides import AstronomicalTide

        V = AstronomicalTide().potential(60000.0, stations, np.eye(3), rotation, ephemerides)
        assert V.shape == (4,)
        assert np.all(np.abs(V) < 10.0)
        assert np.any(np.abs(V) > 0.1)

    def test_gravity_finite_difference(self, rotation, ephemerides, stations):
        """Test moon acceleration against differences of the potential"""
        from geotides.tides import AstronomicalTide

        tide = AstronomicalTide(bodies=['moon'])
        for point in stations:
            potential = lambda p: tide.potential(60000.0, p, np.eye(3), rotation, ephemerides)
            g = tide.gravity(60000.0, point, np.eye(3), rotation, ephemerides)
            assert np.allclose(g, _finite_difference(potential, point, 100.0), rtol=1e-5, atol=1e-12)

    def test_gradient_finite_difference(self, rotation, ephemerides, stations):
        """Test moon gravity gradient against differences of the acceleration"""
        from geotides.tides import AstronomicalTide

        tide = AstronomicalTide(bodies=['moon'])
        T = tide.gravity_gradient(60000.0, stations, np.eye(3), rotation, ephemerides)
        assert T.shape == (4, 3, 3)
        assert np.allclose(np.trace(T, axis1=1, axis2=2), 0.0, atol=1e-20)
        for k, point in enumerate(stations):
            gravity = lambda p: tide.gravity(60000.0, p, np.eye(3), rotation, ephemerides)
            assert np.allclose(T[k], _finite_difference(gravity, point, 100.0),
                               rtol=1e-5, atol=1e-19)

    def test_radial_gradient(self, rotation, ephemerides, stations):
        """Test radial derivative equals the radial acceleration"""
        from geotides.tides import AstronomicalTide

        tide = AstronomicalTide()
        g = tide.gravity(60000.0, stations, np.eye(3), rotation, ephemerides)
        up = stations / np.linalg.norm(stations, axis=1, keepdims=True)
        dVdr = tide.radial_gradient(60000.0, stations, np.eye(3), rotation, ephemerides)
        assert np.allclose(dVdr, np.sum(g * up, axis=1))

    def test_factor(self, rotation, ephemerides, stations):
        """Test scaling of all results"""
        from geotides.tides import AstronomicalTide

        V1 = AstronomicalTide().potential(60000.0, stations, np.eye(3), rotation, ephemerides)
        V2 = AstronomicalTide(factor=2.0).potential(60000.0, stations, np.eye(3), rotation,
                                                    ephemerides)
        assert np.allclose(V2, 2.0 * V1)

    def test_rotation(self, fixed_ephemerides, rotation):
        """Test that body positions are rotated into the terrestrial frame"""
        from geotides.constants import R_EARTH
        from geotides.tides import AstronomicalTide

        ephemerides = fixed_ephemerides({'moon': [3.8e8, 0.0, 0.0]})
        rot = np.array([[0.0, 1.0, 0.0], [-1.0, 0.0, 0.0], [0.0, 0.0, 1.0]])
        tide = AstronomicalTide(bodies=['moon'])
        # the moon appears on the -y axis
        below = tide.potential(0.0, [0.0, -R_EARTH, 0.0], rot, rotation, ephemerides)
        beside = tide.potential(0.0, [R_EARTH, 0.0, 0.0], rot, rotation, ephemerides)
        assert below > 0.0 > beside


class TestAstronomicalTideHarmonics:
    """Tests for the spherical harmonic expansion"""

    def test_degree_range(self, rotation, ephemerides):
        """Test degrees below min_degree are zero"""
        from geotides.tides import AstronomicalTide

        field = AstronomicalTide().spherical_harmonics(60000.0, np.eye(3), rotation, ephemerides)
        assert field.max_degree == 3
        assert np.allclose(field.cnm[:2], 0.0)
        assert np.any(field.cnm[2] != 0.0)

    def test_potential_on_sphere(self, rotation, ephemerides, stations):
        """Test expansion to degree 8 against the closed form on r = R"""
        from geotides.tides import AstronomicalTide

        tide = AstronomicalTide(max_degree=8)
        field = tide.spherical_harmonics(60000.0, np.eye(3), rotation, ephemerides)
        direct = tide.potential(60000.0, stations, np.eye(3), rotation, ephemerides)
        assert np.allclose(field.potential(stations), direct, rtol=1e-6, atol=1e-6)

    def test_requested_degree(self, rotation, ephemerides):
        """Test max_degree and min_degree arguments"""
        from geotides.tides import AstronomicalTide

        tide = AstronomicalTide()
        field = tide.spherical_harmonics(60000.0, np.eye(3), rotation, ephemerides,
                                         max_degree=6, min_degree=3)
        assert field.max_degree == 6
        assert np.allclose(field.cnm[:3], 0.0)
        assert np.any(field.cnm[6] != 0.0)

    def test_rescaled(self, rotation, ephemerides, stations):
        """Test coefficients referred to other constants"""
        from geotides.tides import AstronomicalTide

        tide = AstronomicalTide()
        a = tide.spherical_harmonics(60000.0, np.eye(3), rotation, ephemerides)
        b = tide.spherical_harmonics(60000.0, np.eye(3), rotation, ephemerides,
                                     GM=4.0e14, R=6.4e6)
        assert b.GM == 4.0e14 and b.R == 6.4e6
        assert np.allclose(a.potential(stations), b.potential(stations), rtol=1e-12)


class TestAstronomicalTideConfiguration:
    """Tests for invalid parameters"""

    def test_unknown_body(self):
        """Test configuration error for bodies without GM"""
        from geotides.errors import ConfigurationError
        from geotides.tides import AstronomicalTide

        with pytest.raises(ConfigurationError) as excinfo:
            AstronomicalTide(bodies=['sun', 'pluto'])
        assert excinfo.value.field == 'bodies'
        assert 'pluto' in str(excinfo.value)

    def test_custom_body(self, rotation, fixed_ephemerides, stations):
        """Test GM given for an additional body"""
        from geotides.tides import AstronomicalTide

        ephemerides = fixed_ephemerides({'pluto': [5.0e12, 0.0, 0.0]})
        tide = AstronomicalTide(bodies=['Pluto'], GM_bodies={'pluto': 8.7e11})
        assert tide.bodies == ('pluto',)
        V = tide.potential(0.0, stations, np.eye(3), rotation, ephemerides)
        assert np.all(np.isfinite(V))

    def test_degree_range(self):
        """Test configuration error for an empty degree range"""
        from geotides.errors import ConfigurationError
        from geotides.tides import AstronomicalTide

        with pytest.raises(ConfigurationError) as excinfo:
            AstronomicalTide(min_degree=4, max_degree=3)
        assert excinfo.value.field == 'max_degree'

    def test_missing_ephemerides(self, rotation, fixed_ephemerides, stations):
        """Test coverage error for a body the provider does not know"""
        from geotides.errors import CoverageError
        from geotides.tides import AstronomicalTide

        ephemerides = fixed_ephemerides({'sun': [1.5e11, 0.0, 0.0]})
        with pytest.raises(CoverageError):
            AstronomicalTide().potential(0.0, stations, np.eye(3), rotation, ephemerides)
