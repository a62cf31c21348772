"""
Tests for geotides.tides.aggregator

Tests the sum over tide models:
- order independence and the empty aggregator
- error attribution and abort on the first failure
- batched deformation against per-epoch deformation, threads, accumulation
- labelled output as xarray.DataArray
"""

import itertools
import threading

import numpy as np
import pytest

from geotides.errors import CoverageError
from geotides.tides import TideModel


class FailingTide(TideModel):
    """Tide model whose queries fail with a coverage error."""

    tag = 'failing'

    def potential(self, mjd, point, rot_earth, earth_rotation, ephemerides):
        raise CoverageError(f"No ephemerides available: {mjd}", mjd=mjd)


class CountingTide(TideModel):
    """Tide model counting its potential queries."""

    tag = 'counting'

    def __init__(self):
        self.calls = 0

    def potential(self, mjd, point, rot_earth, earth_rotation, ephemerides):
        self.calls += 1
        return 1.0


def _models():
    from geotides.tides import (
        AstronomicalTide,
        CentrifugalTide,
        PoleTide,
        SolidEarthTide,
        SolidMoonTide,
    )

    return [AstronomicalTide(), SolidEarthTide(), PoleTide(), CentrifugalTide(), SolidMoonTide()]


class TestAggregatorQueries:
    """Tests for point queries"""

    def test_models_tuple(self):
        """Test the immutable model sequence"""
        from geotides.tides import TidesAggregator

        models = _models()
        tides = TidesAggregator(models)
        models.pop()
        assert len(tides) == 5
        assert isinstance(tides.models, tuple)
        assert [type(m).__name__ for m in tides][0] == 'AstronomicalTide'

    def test_not_a_model(self):
        """Test type error for entries that are no tide models"""
        from geotides.tides import TidesAggregator

        with pytest.raises(TypeError):
            TidesAggregator(['astronomicalTide'])

    def test_sum_of_models(self, rotation, ephemerides, stations):
        """Test that each query is the sum of the model results"""
        from geotides.tides import TidesAggregator

        models = _models()[:3]
        tides = TidesAggregator(models)
        args = (60000.0, stations, np.eye(3), rotation, ephemerides)
        assert np.allclose(tides.potential(*args), sum(m.potential(*args) for m in models))
        assert np.allclose(tides.acceleration(*args), sum(m.gravity(*args) for m in models))
        assert np.allclose(tides.gradient(*args), sum(m.gravity_gradient(*args) for m in models))
        assert np.allclose(tides.radial_gradient(*args),
                           sum(m.radial_gradient(*args) for m in models))

    def test_order_independence(self, rotation, ephemerides, stations, love_numbers):
        """Test that every permutation of the models gives the same results"""
        from geotides.tides import TidesAggregator

        hn, ln = love_numbers
        models = _models()
        args = (60000.0, stations, np.eye(3), rotation, ephemerides)
        queries = {
            'potential': args,
            'radial_gradient': args,
            'acceleration': args,
            'gradient': args,
            'deformation': args + (9.81, hn, ln),
        }
        reference = TidesAggregator(models)
        expected = {name: getattr(reference, name)(*query) for name, query in queries.items()}
        for order in itertools.permutations(models):
            tides = TidesAggregator(order)
            for name, query in queries.items():
                scale = np.abs(expected[name]).max()
                assert np.allclose(getattr(tides, name)(*query), expected[name],
                                   rtol=1e-12, atol=1e-12 * scale), name

    def test_empty(self, rotation, ephemerides, stations, love_numbers):
        """Test zero results without models"""
        from geotides.tides import TidesAggregator

        hn, ln = love_numbers
        tides = TidesAggregator()
        assert tides.potential(60000.0, stations[0], np.eye(3), rotation, ephemerides) == 0.0
        assert tides.potential(60000.0, stations, np.eye(3), rotation, ephemerides).shape == (4,)
        assert np.all(tides.acceleration(60000.0, stations[0], np.eye(3), rotation,
                                         ephemerides) == 0.0)
        assert tides.gradient(60000.0, stations, np.eye(3), rotation,
                              ephemerides).shape == (4, 3, 3)
        disp = tides.deformation(60000.0, stations, np.eye(3), rotation, ephemerides,
                                 9.81, hn, ln)
        assert disp.shape == (4, 3) and np.all(disp == 0.0)
        field = tides.spherical_harmonics(60000.0, np.eye(3), rotation, ephemerides)
        assert field.max_degree == 0 and field.x.tolist() == [0.0]

    def test_single_station_types(self, rotation, ephemerides, stations, love_numbers):
        """Test scalar and (3,) outputs for one station"""
        from geotides.tides import TidesAggregator

        hn, ln = love_numbers
        tides = TidesAggregator(_models())
        args = (60000.0, stations[1], np.eye(3), rotation, ephemerides)
        assert isinstance(tides.potential(*args), float)
        assert tides.acceleration(*args).shape == (3,)
        assert tides.gradient(*args).shape == (3, 3)
        assert tides.deformation(*args, 9.81, hn, ln).shape == (3,)


class TestAggregatorHarmonics:
    """Tests for the summed spherical harmonic expansion"""

    def test_sum(self, rotation, ephemerides, stations):
        """Test that the summed field gives the summed potential"""
        from geotides.tides import AstronomicalTide, SolidEarthTide, TidesAggregator

        models = [AstronomicalTide(), SolidEarthTide()]
        tides = TidesAggregator(models)
        field = tides.spherical_harmonics(60000.0, np.eye(3), rotation, ephemerides)
        expected = sum(m.spherical_harmonics(60000.0, np.eye(3), rotation, ephemerides)
                       .potential(stations) for m in models)
        assert np.allclose(field.potential(stations), expected, rtol=1e-12)

    def test_capability_error(self, rotation, ephemerides):
        """Test that a model without expansion fails the whole query"""
        from geotides.errors import CapabilityError
        from geotides.tides import AstronomicalTide, CentrifugalTide, TidesAggregator

        tides = TidesAggregator([AstronomicalTide(), CentrifugalTide()])
        with pytest.raises(CapabilityError) as excinfo:
            tides.spherical_harmonics(60000.0, np.eye(3), rotation, ephemerides)
        assert "raised by tide model 1 (centrifugal)" in excinfo.value.__notes__


class TestAggregatorErrors:
    """Tests for error propagation"""

    def test_note(self, rotation, ephemerides, stations):
        """Test that the error is re-raised with the failing model named"""
        from geotides.tides import AstronomicalTide, TidesAggregator

        tides = TidesAggregator([AstronomicalTide(), FailingTide()])
        with pytest.raises(CoverageError) as excinfo:
            tides.potential(60000.0, stations, np.eye(3), rotation, ephemerides)
        assert excinfo.value.mjd == 60000.0
        assert str(excinfo.value).startswith("No ephemerides available")
        assert excinfo.value.__notes__ == ["raised by tide model 1 (failing)"]

    def test_first_failure_aborts(self, rotation, ephemerides, stations):
        """Test that models after the failing one are not queried"""
        from geotides.tides import TidesAggregator

        counting = CountingTide()
        tides = TidesAggregator([counting, FailingTide(), counting])
        with pytest.raises(CoverageError):
            tides.potential(60000.0, stations, np.eye(3), rotation, ephemerides)
        assert counting.calls == 1

    def test_provider_error(self, rotation, fixed_ephemerides, stations):
        """Test coverage errors of the ephemerides provider"""
        from geotides.tides import AstronomicalTide, TidesAggregator

        tides = TidesAggregator([AstronomicalTide(bodies=['sun', 'moon'])])
        with pytest.raises(CoverageError) as excinfo:
            tides.acceleration(60000.0, stations, np.eye(3), rotation,
                               fixed_ephemerides({'sun': [1.5e11, 0.0, 0.0]}))
        assert "raised by tide model 0 (astronomicalTide)" in excinfo.value.__notes__


class TestDeformationSeries:
    """Tests for batched deformation"""

    @pytest.fixture
    def epochs(self):
        """Epochs with rotation matrices of the sidereal rotation"""
        from geotides.astro import GMSTRotation

        rotation = GMSTRotation()
        mjd = 60310.0 + np.arange(7) / 24.0
        rot = np.stack([rotation.rotary_matrix(t) for t in mjd])
        return mjd, rot, rotation

    def test_matches_single_epochs(self, epochs, stations, love_numbers):
        """Test batched displacements against deformation() at every epoch"""
        from geotides.astro import AnalyticalEphemerides
        from geotides.tides import TidesAggregator

        hn, ln = love_numbers
        mjd, rot, rotation = epochs
        ephemerides = AnalyticalEphemerides()
        tides = TidesAggregator(_models())
        series = tides.deformation_series(mjd, stations, rot, rotation, ephemerides,
                                          9.81, hn, ln)
        assert series.shape == (4, 7, 3)
        for t in range(mjd.size):
            disp = tides.deformation(mjd[t], stations, rot[t], rotation, ephemerides,
                                     9.81, hn, ln)
            assert np.allclose(series[:, t, :], disp, rtol=1e-9, atol=1e-12)
        assert np.abs(series).max() > 0.01

    @pytest.mark.parametrize("n_workers", [2, 3, 16])
    def test_workers(self, epochs, stations, love_numbers, n_workers):
        """Test that threads over epoch chunks give the same result"""
        from geotides.astro import AnalyticalEphemerides
        from geotides.tides import TidesAggregator

        hn, ln = love_numbers
        mjd, rot, rotation = epochs
        ephemerides = AnalyticalEphemerides()
        tides = TidesAggregator(_models())
        serial = tides.deformation_series(mjd, stations, rot, rotation, ephemerides,
                                          9.81, hn, ln, n_workers=1)
        threaded = tides.deformation_series(mjd, stations, rot, rotation, ephemerides,
                                            9.81, hn, ln, n_workers=n_workers)
        assert np.allclose(serial, threaded, rtol=1e-12, atol=1e-15)

    def test_accumulation(self, epochs, stations, love_numbers):
        """Test that results are added into a given accumulator under a lock"""
        from geotides.astro import AnalyticalEphemerides
        from geotides.tides import TidesAggregator

        hn, ln = love_numbers
        mjd, rot, rotation = epochs
        ephemerides = AnalyticalEphemerides()
        tides = TidesAggregator(_models()[:2])
        expected = tides.deformation_series(mjd, stations, rot, rotation, ephemerides,
                                            9.81, hn, ln)
        out = np.ones((4, 7, 3))
        result = tides.deformation_series(mjd, stations, rot, rotation, ephemerides,
                                          9.81, hn, ln, out=out, lock=threading.Lock(),
                                          n_workers=2)
        assert result is out
        assert np.allclose(out, 1.0 + expected, rtol=1e-12)

    def test_output_shape_mismatch(self, epochs, stations, love_numbers):
        """Test value error for an accumulator of the wrong shape"""
        from geotides.astro import AnalyticalEphemerides
        from geotides.tides import TidesAggregator

        hn, ln = love_numbers
        mjd, rot, rotation = epochs
        tides = TidesAggregator(_models()[:1])
        with pytest.raises(ValueError):
            tides.deformation_series(mjd, stations, rot, rotation, AnalyticalEphemerides(),
                                     9.81, hn, ln, out=np.zeros((4, 6, 3)))

    def test_empty(self, epochs, stations, love_numbers):
        """Test zero displacements without models or epochs"""
        from geotides.astro import AnalyticalEphemerides
        from geotides.tides import TidesAggregator

        hn, ln = love_numbers
        mjd, rot, rotation = epochs
        series = TidesAggregator().deformation_series(mjd, stations, rot, rotation,
                                                      AnalyticalEphemerides(), 9.81, hn, ln)
        assert series.shape == (4, 7, 3) and np.all(series == 0.0)
        series = TidesAggregator(_models()).deformation_series(
            [], stations, np.zeros((0, 3, 3)), rotation, AnalyticalEphemerides(), 9.81, hn, ln)
        assert series.shape == (4, 0, 3)

    def test_error_in_worker(self, epochs, stations, love_numbers):
        """Test that errors raised in worker threads reach the caller"""
        from geotides.astro import AnalyticalEphemerides
        from geotides.tides import AstronomicalTide, TidesAggregator

        hn, ln = love_numbers
        mjd, rot, rotation = epochs
        ephemerides = AnalyticalEphemerides(end=mjd[4])
        tides = TidesAggregator([AstronomicalTide()])
        with pytest.raises(CoverageError) as excinfo:
            tides.deformation_series(mjd, stations, rot, rotation, ephemerides,
                                     9.81, hn, ln, n_workers=2)
        assert excinfo.value.mjd > mjd[4]

    def test_dataset(self, epochs, stations, love_numbers):
        """Test the labelled displacement array"""
        from geotides.astro import AnalyticalEphemerides
        from geotides.tides import TidesAggregator

        hn, ln = love_numbers
        mjd, rot, rotation = epochs
        tides = TidesAggregator(_models()[:2])
        da = tides.deformation_dataset(mjd, stations, rot, rotation, AnalyticalEphemerides(),
                                       9.81, hn, ln, stations=['A', 'B', 'C', 'D'])
        assert da.name == 'displacement'
        assert da.dims == ('station', 'time', 'axis')
        assert list(da['axis'].values) == ['x', 'y', 'z']
        assert np.allclose(da['time'].values, mjd)
        assert da.attrs['units'] == 'm'
        series = tides.deformation_series(mjd, stations, rot, rotation, AnalyticalEphemerides(),
                                          9.81, hn, ln)
        assert np.allclose(da.sel(station='C').values, series[2])
