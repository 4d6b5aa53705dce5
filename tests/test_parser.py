from datetime import datetime, timedelta
import numpy as np
import pytest
import xarray as xr

from adcppype import parse_continental, ContinentalFile, FormatError, UnsupportedFrequencyError
from adcppype import parser
from _synthetic import continental_file

START = datetime(2009, 6, 1, 12, 0, 0)
TIMES = [START + timedelta(minutes=10 * i) for i in range(3)]


def test_end_to_end(tmp_path):
    filepath = continental_file(tmp_path / 'test.cpr', TIMES, n_bins=2, frequency=190,
                                pressure_msb=1, pressure_lsw=500)
    sample_data = parse_continental(str(filepath))
    assert len(sample_data.get_dim('TIME')) == 3
    assert len(sample_data.get_dim('HEIGHT_ABOVE_SENSOR')) == 2
    assert len(sample_data.variables) == 12
    assert sample_data.get_var('VCUR').shape == (3, 2, 1, 1)
    assert sample_data.get_var('TEMP').shape == (3, 1, 1)
    assert np.all(sample_data.get_var('VCUR').data == 2.0)
    assert np.all(sample_data.get_var('UCUR').data == 1.0)
    assert np.all(sample_data.get_var('WCUR').data == 3.0)
    assert np.allclose(sample_data.get_var('PRES_REL').data, 66.036)
    assert np.allclose(sample_data.get_var('TEMP').data, 12.5)
    assert np.allclose(sample_data.get_var('VOLT').data, 12.0)
    assert np.allclose(sample_data.get_var('HEADING').data, 90.0)
    assert np.allclose(sample_data.get_var('PITCH').data, -1.5)
    assert np.allclose(sample_data.get_var('ABSI1').data, 45.0)
    assert sample_data.meta['instrument_sample_interval'] == 600
    assert sample_data.meta['binSize'] > 0
    assert sample_data.toolbox_input_file == str(filepath)


def test_single_file_list(tmp_path):
    filepath = continental_file(tmp_path / 'test.cpr', TIMES)
    sample_data = parse_continental([filepath], mode='profile')
    assert sample_data.meta['mode'] == 'profile'
    with pytest.raises(ValueError, match='one file'):
        parse_continental([filepath, filepath])


def test_invalid_mode(tmp_path):
    filepath = continental_file(tmp_path / 'test.cpr', TIMES)
    with pytest.raises(ValueError, match='mode'):
        parse_continental(filepath, mode='mooring')


def test_odd_cell_count(tmp_path):
    filepath = continental_file(tmp_path / 'test.cpr', TIMES, n_bins=3,
                                vel=([10, 20, 30], [40, 50, 60], [70, 80, 90]))
    sample_data = parse_continental(filepath)
    assert np.allclose(sample_data.get_var('UCUR').data[0, :, 0, 0], [0.01, 0.02, 0.03])
    assert np.allclose(sample_data.get_var('VCUR').data[0, :, 0, 0], [0.04, 0.05, 0.06])


def test_no_samples(tmp_path):
    filepath = continental_file(tmp_path / 'test.cpr', [])
    sample_data = parse_continental(filepath)
    assert len(sample_data.get_dim('TIME')) == 0
    assert sample_data.get_var('VCUR').shape == (0, 2, 1, 1)
    assert np.isnan(sample_data.meta['instrument_sample_interval'])


def test_unsupported_frequency(tmp_path):
    filepath = continental_file(tmp_path / 'test.cpr', TIMES, frequency=600)
    with pytest.raises(UnsupportedFrequencyError):
        parse_continental(filepath)


def test_truncated_file(tmp_path):
    filepath = continental_file(tmp_path / 'test.cpr', TIMES)
    filepath.write_bytes(filepath.read_bytes()[:-5])
    with pytest.raises(FormatError):
        parse_continental(filepath)


def test_pipeline_normalizes_once(tmp_path, monkeypatch):
    calls = []
    normalize_arrays = parser.normalize_arrays

    def counting_normalize(raw):
        calls.append(raw)
        return normalize_arrays(raw)

    monkeypatch.setattr(parser, 'normalize_arrays', counting_normalize)
    filepath = continental_file(tmp_path / 'test.cpr', TIMES)
    sample_data = parse_continental(filepath)
    assert len(calls) == 1
    assert np.all(sample_data.get_var('UCUR').data == 1.0)


def test_continental_file(tmp_path):
    filepath = continental_file(tmp_path / 'test.cpr', TIMES)
    cpr = ContinentalFile(filepath)
    assert len(cpr.records) == 6
    assert cpr.config.frequency == 190
    assert cpr.geometry.factor == 0.2221
    assert np.all(cpr.raw.velocity1 == 1000)
    assert np.all(cpr.normalized.velocity1 == 1.0)
    ds = cpr.to_xarray()
    assert isinstance(ds, xr.Dataset)
    assert ds.VCUR.dims == ('TIME', 'HEIGHT_ABOVE_SENSOR', 'LATITUDE', 'LONGITUDE')
    assert ds.attrs['instrument_model'] == 'Continental'


def test_logs_one_line_per_file(tmp_path, caplog):
    filepath = continental_file(tmp_path / 'test.cpr', TIMES)
    with caplog.at_level('INFO', logger='adcppype'):
        parse_continental(filepath)
    messages = [r.getMessage() for r in caplog.records if r.levelname == 'INFO']
    assert len(messages) == 1
    assert '3 samples, 2 cells, 190 kHz' in messages[0]
