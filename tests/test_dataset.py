import numpy as np
import pytest
import xarray as xr

from adcppype.dataset import Dimension, Variable, SampleDataSet, StorageType
from adcppype.errors import ConfigurationInvariantError

PROFILE = ('TIME', 'HEIGHT_ABOVE_SENSOR', 'LATITUDE', 'LONGITUDE')
TIMESERIES = ('TIME', 'LATITUDE', 'LONGITUDE')


def _sample_data(n_time=3, n_cells=2):
    sample_data = SampleDataSet(meta={'instrument_make': 'Nortek', 'head': {'frequency': 190}})
    sample_data.add_dimension(Dimension('TIME', np.arange(n_time, dtype=float)))
    sample_data.add_dimension(Dimension('HEIGHT_ABOVE_SENSOR', np.arange(1, n_cells + 1) * 0.5))
    sample_data.add_dimension(Dimension('LATITUDE', np.nan))
    sample_data.add_dimension(Dimension('LONGITUDE', np.nan))
    return sample_data


def test_storage_types():
    assert StorageType('int16').dtype == np.dtype('int16')
    assert StorageType.for_parameter('TIME') is StorageType.FLOAT64
    assert StorageType.for_parameter('VCUR') is StorageType.FLOAT32
    assert StorageType.for_parameter('NOT_A_PARAMETER') is StorageType.FLOAT64
    with pytest.raises(ValueError):
        StorageType('complex64')


def test_dimension():
    dim = Dimension('LATITUDE', np.nan)
    assert len(dim) == 1
    assert np.isnan(dim.data[0])
    assert dim.attrs['units'] == 'degrees_north'
    assert not dim.data.flags.writeable


def test_dimension_must_be_1d():
    with pytest.raises(ConfigurationInvariantError):
        Dimension('TIME', np.zeros((2, 2)))


def test_variable_storage_type_cast():
    var = Variable('COUNTS', [1.7, 2.2], ('TIME',), storage_type='int32')
    assert var.data.dtype == np.int32
    assert Variable('VCUR', [1.0], ('TIME',)).data.dtype == np.float32


def test_add_profile_variable():
    sample_data = _sample_data()
    var = sample_data.add_variable(Variable('VCUR', np.ones((3, 2)), PROFILE))
    assert var.shape == (3, 2, 1, 1)
    assert sample_data.get_var('VCUR') is var
    assert sample_data.has_var('VCUR')
    assert not var.data.flags.writeable


def test_add_timeseries_variable():
    sample_data = _sample_data()
    var = sample_data.add_variable(Variable('TEMP', np.ones(3), TIMESERIES))
    assert var.shape == (3, 1, 1)


def test_shape_mismatch():
    sample_data = _sample_data()
    with pytest.raises(ConfigurationInvariantError, match='shape'):
        sample_data.add_variable(Variable('VCUR', np.ones((3, 3)), PROFILE))
    with pytest.raises(ConfigurationInvariantError, match='shape'):
        sample_data.add_variable(Variable('TEMP', np.ones(4), TIMESERIES))
    assert not sample_data.has_var('VCUR')


def test_missing_dimension():
    sample_data = SampleDataSet()
    sample_data.add_dimension(Dimension('TIME', [0.0, 1.0]))
    with pytest.raises(ConfigurationInvariantError, match='LATITUDE'):
        sample_data.add_variable(Variable('TEMP', np.ones(2), TIMESERIES))


def test_dimension_fixed_once_referenced():
    sample_data = _sample_data()
    sample_data.add_variable(Variable('TEMP', np.ones(3), TIMESERIES))
    with pytest.raises(ConfigurationInvariantError):
        sample_data.add_dimension(Dimension('TIME', np.arange(5.0)))


def test_lookup_by_name():
    sample_data = _sample_data()
    assert len(sample_data.get_dim('HEIGHT_ABOVE_SENSOR')) == 2
    with pytest.raises(KeyError):
        sample_data.get_var('PSAL')


def test_derived_variable():
    sample_data = _sample_data()
    sample_data.add_variable(Variable('TEMP', np.full(3, 12.5), TIMESERIES))
    temp = sample_data.get_var('TEMP')
    sample_data.add_variable(Variable('TEMP_F', temp.data * 1.8 + 32, TIMESERIES, comment='derived from TEMP'))
    assert np.allclose(sample_data.get_var('TEMP_F').data, 54.5)


def test_to_xarray():
    sample_data = _sample_data()
    sample_data.add_variable(Variable('VCUR', np.ones((3, 2)), PROFILE, comment='test'))
    ds = sample_data.to_xarray()
    assert isinstance(ds, xr.Dataset)
    assert ds.VCUR.dims == PROFILE
    assert ds.VCUR.attrs['comment'] == 'test'
    assert ds.VCUR.attrs['units'] == 'm s-1'
    assert ds.attrs['instrument_make'] == 'Nortek'
    assert 'head' not in ds.attrs
