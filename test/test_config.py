"""
Tests for geotides.config and geotides.settings

Tests building tide models from configuration entries and the defaults
read from environment variables:
- GEOTIDES_MAX_DEGREE: default max_degree of harmonic tides
- GEOTIDES_WORKERS: default threads for batched deformation
"""

import os
import warnings
from unittest.mock import patch

import numpy as np
import pytest


class TestTideFromConfig:
    """Tests for tide_from_config()"""

    @pytest.mark.parametrize("tag, cls_name", [
        ('astronomicalTide', 'AstronomicalTide'),
        ('earthTide', 'SolidEarthTide'),
        ('poleTide', 'PoleTide'),
        ('centrifugal', 'CentrifugalTide'),
        ('solidMoonTide', 'SolidMoonTide'),
    ])
    def test_tags(self, tag, cls_name):
        """Test models built from a bare type tag"""
        from geotides.config import tide_from_config

        model = tide_from_config({'type': tag})
        assert type(model).__name__ == cls_name
        assert model.tag == tag

    def test_parameters(self):
        """Test keyword arguments passed to the model"""
        from geotides.config import tide_from_config

        model = tide_from_config({'type': 'astronomicalTide', 'bodies': ['sun'],
                                  'max_degree': 5, 'factor': 0.5})
        assert model.bodies == ('sun',)
        assert model.max_degree == 5
        assert model.factor == 0.5

    def test_default_max_degree(self):
        """Test max_degree taken from the settings"""
        from geotides.config import tide_from_config
        from geotides.settings import settings

        model = tide_from_config({'type': 'astronomicalTide'})
        assert model.max_degree == settings.max_degree

    def test_doodson_constituents(self):
        """Test a harmonic tide from a list of constituents"""
        from geotides.config import tide_from_config
        from geotides.harmonics import SphericalHarmonics
        from geotides.tides import Constituent

        m2 = Constituent.from_doodson('M2', '255.555', SphericalHarmonics.zeros(4))
        model = tide_from_config({'type': 'doodsonHarmonicTide', 'constituents': [m2]})
        assert model.names == ['M2']
        assert model.max_degree == 4

    def test_doodson_dataset(self):
        """Test a harmonic tide from an xarray catalog"""
        from geotides.config import tide_from_config
        from geotides.harmonics import SphericalHarmonics
        from geotides.tides import Constituent, DoodsonHarmonicTide

        m2 = Constituent.from_doodson('M2', '255.555', SphericalHarmonics.zeros(2))
        ds = DoodsonHarmonicTide([m2]).to_dataset()
        model = tide_from_config({'type': 'doodsonHarmonicTide', 'dataset': ds, 'factor': 2.0})
        assert model.names == ['M2']
        assert model.factor == 2.0

    def test_doodson_dataset_constants(self, rotation, ephemerides, stations):
        """Test GM and R of a harmonic tide read from a catalog"""
        from geotides.config import tide_from_config
        from geotides.constants import GM_EARTH, R_EARTH
        from geotides.harmonics import SphericalHarmonics
        from geotides.tides import Constituent, DoodsonHarmonicTide

        rng = np.random.default_rng(11)
        cos = SphericalHarmonics.from_coefficients(1e-9 * rng.normal(size=9), GM_EARTH, R_EARTH)
        ds = DoodsonHarmonicTide([Constituent.from_doodson('Z0', '055.555', cos)]).to_dataset()

        default = tide_from_config({'type': 'doodsonHarmonicTide', 'dataset': ds})
        assert default.GM == GM_EARTH and default.R == R_EARTH

        model = tide_from_config({'type': 'doodsonHarmonicTide', 'dataset': ds,
                                  'GM': 4.0e14, 'R': 6.4e6})
        assert model.GM == 4.0e14 and model.R == 6.4e6
        field = model.spherical_harmonics(60000.0, np.eye(3), rotation, ephemerides)
        assert field.GM == 4.0e14 and field.R == 6.4e6
        assert np.allclose(field.potential(stations), cos.potential(stations), rtol=1e-10)

    def test_doodson_missing(self):
        """Test configuration error without constituents"""
        from geotides.config import tide_from_config
        from geotides.errors import ConfigurationError

        with pytest.raises(ConfigurationError) as excinfo:
            tide_from_config({'type': 'doodsonHarmonicTide'})
        assert excinfo.value.field == 'constituents'

    def test_ocean_pole_tide(self):
        """Test the ocean pole tide from packed coefficient vectors"""
        from geotides.config import tide_from_config

        real = np.zeros(9)
        real[5] = 1.0
        model = tide_from_config({'type': 'oceanPoleTide', 'real': real,
                                  'imaginary': np.zeros(9), 'mean_pole': 'iers2018'})
        assert type(model).__name__ == 'OceanPoleTide'
        assert model.max_degree == 2
        assert model.real.cnm[2, 1] == 1.0
        assert model.mean_pole == 'iers2018'

    def test_ocean_pole_tide_invalid(self):
        """Test configuration errors naming the coefficient field"""
        from geotides.config import tide_from_config
        from geotides.errors import ConfigurationError

        with pytest.raises(ConfigurationError) as excinfo:
            tide_from_config({'type': 'oceanPoleTide', 'real': np.zeros(9)})
        assert excinfo.value.field == 'imaginary'
        with pytest.raises(ConfigurationError) as excinfo:
            tide_from_config({'type': 'oceanPoleTide', 'real': np.zeros(8),
                              'imaginary': np.zeros(9)})
        assert excinfo.value.field == 'real'

    def test_model_instance(self):
        """Test that ready models pass through"""
        from geotides.config import tide_from_config
        from geotides.tides import CentrifugalTide

        model = CentrifugalTide()
        assert tide_from_config(model) is model

    @pytest.mark.parametrize("old, cls_name", [
        ('poleTide2010', 'PoleTide'),
        ('moonTide', 'SolidMoonTide'),
    ])
    def test_deprecated_tags(self, old, cls_name):
        """Test renamed tags with a deprecation warning"""
        from geotides.config import tide_from_config

        with pytest.warns(DeprecationWarning, match=old):
            model = tide_from_config({'type': old})
        assert type(model).__name__ == cls_name

    def test_current_tags_do_not_warn(self):
        """Test that current tags build without warnings"""
        from geotides.config import tide_from_config

        with warnings.catch_warnings():
            warnings.simplefilter('error')
            tide_from_config({'type': 'poleTide'})

    def test_unknown_tag(self):
        """Test configuration error for an unknown tag"""
        from geotides.config import tide_from_config
        from geotides.errors import ConfigurationError

        with pytest.raises(ConfigurationError) as excinfo:
            tide_from_config({'type': 'oceanTide'})
        assert excinfo.value.field == 'type'
        assert 'oceanTide' in str(excinfo.value)

    @pytest.mark.parametrize("entry", [{}, {'bodies': ['sun']}, 'earthTide', None])
    def test_missing_type(self, entry):
        """Test configuration error for entries without a tag"""
        from geotides.config import tide_from_config
        from geotides.errors import ConfigurationError

        with pytest.raises(ConfigurationError) as excinfo:
            tide_from_config(entry)
        assert excinfo.value.field == 'type'

    def test_unknown_parameter(self):
        """Test configuration error naming the unknown parameter"""
        from geotides.config import tide_from_config
        from geotides.errors import ConfigurationError

        with pytest.raises(ConfigurationError) as excinfo:
            tide_from_config({'type': 'earthTide', 'k2': 0.3})
        assert excinfo.value.field == 'k2'

    def test_invalid_value(self):
        """Test configuration errors raised by the model"""
        from geotides.config import tide_from_config
        from geotides.errors import ConfigurationError

        with pytest.raises(ConfigurationError) as excinfo:
            tide_from_config({'type': 'poleTide', 'mean_pole': 'iers1996'})
        assert excinfo.value.field == 'mean_pole'


class TestTidesFromConfig:
    """Tests for tides_from_config() and TidesAggregator.from_config()"""

    def test_order(self):
        """Test that models keep the order of the entries"""
        from geotides.config import tides_from_config

        models = tides_from_config([{'type': 'earthTide'}, {'type': 'astronomicalTide'},
                                    {'type': 'centrifugal'}])
        assert [m.tag for m in models] == ['earthTide', 'astronomicalTide', 'centrifugal']

    def test_single_entry(self):
        """Test a single mapping"""
        from geotides.config import tides_from_config

        models = tides_from_config({'type': 'earthTide'})
        assert len(models) == 1

    def test_aggregator(self):
        """Test TidesAggregator.from_config()"""
        from geotides import TidesAggregator

        tides = TidesAggregator.from_config([{'type': 'astronomicalTide'}, {'type': 'poleTide'}])
        assert len(tides) == 2

    def test_registry(self):
        """Test the closed set of tags"""
        from geotides import TIDE_TYPES

        assert sorted(TIDE_TYPES) == sorted([
            'astronomicalTide', 'earthTide', 'doodsonHarmonicTide', 'poleTide',
            'oceanPoleTide', 'centrifugal', 'solidMoonTide',
        ])


class TestSettings:
    """Tests for Settings and its environment variables"""

    def test_defaults(self):
        """Test defaults without environment variables"""
        env = {k: v for k, v in os.environ.items() if not k.startswith('GEOTIDES_')}
        with patch.dict(os.environ, env, clear=True):
            from geotides.settings import Settings
            settings = Settings()
            assert settings.max_degree == 3
            assert settings.workers == 1

    def test_from_env(self):
        """Test values read from the environment"""
        with patch.dict(os.environ, {'GEOTIDES_MAX_DEGREE': '6', 'GEOTIDES_WORKERS': '4'}):
            from geotides.settings import Settings
            settings = Settings()
            assert settings.max_degree == 6
            assert settings.workers == 4

    @pytest.mark.parametrize("name, value", [
        ('GEOTIDES_MAX_DEGREE', 'high'),
        ('GEOTIDES_MAX_DEGREE', '-1'),
        ('GEOTIDES_WORKERS', '0'),
    ])
    def test_invalid_env(self, name, value):
        """Test that invalid values are ignored with a warning"""
        with patch.dict(os.environ, {name: value}):
            from geotides.settings import Settings
            with pytest.warns(RuntimeWarning, match=name):
                settings = Settings()
            assert settings.max_degree == 3
            assert settings.workers == 1

    def test_reload(self):
        """Test re-reading the environment"""
        from geotides.settings import Settings

        settings = Settings()
        with patch.dict(os.environ, {'GEOTIDES_WORKERS': '3'}):
            settings.reload()
            assert settings.workers == 3

    def test_setters(self):
        """Test assignment with validation"""
        from geotides.settings import Settings

        settings = Settings()
        settings.max_degree = 8
        settings.workers = 2
        assert settings.max_degree == 8
        assert settings.workers == 2
        with pytest.raises(ValueError):
            settings.max_degree = -1
        with pytest.raises(ValueError):
            settings.workers = 0

    def test_workers_used_by_default(self, rotation, ephemerides, stations, love_numbers):
        """Test that batched deformation uses the configured thread count"""
        from geotides.settings import settings
        from geotides.tides import AstronomicalTide, TidesAggregator

        hn, ln = love_numbers
        tides = TidesAggregator([AstronomicalTide()])
        mjd = np.arange(5.0)
        rot = np.stack([np.eye(3)] * 5)
        serial = tides.deformation_series(mjd, stations, rot, rotation, ephemerides,
                                          9.81, hn, ln, n_workers=1)
        previous = settings.workers
        settings.workers = 3
        try:
            threaded = tides.deformation_series(mjd, stations, rot, rotation, ephemerides,
                                                9.81, hn, ln)
        finally:
            settings.workers = previous
        assert np.allclose(serial, threaded)
