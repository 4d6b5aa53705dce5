from datetime import datetime
import numpy as np
import xarray as xr

from adcppype.calibration import resolve_calibration
from adcppype.extraction import extract_samples, stack_samples
from adcppype.reader import split_records
from _synthetic import hardware_record, head_record, user_record, profile_record

TIMES = [datetime(2009, 6, 1, 12, 0, 0), datetime(2009, 6, 1, 12, 10, 0)]
RECORDS = split_records(hardware_record() + head_record() + user_record(n_bins=2) +
                        b''.join(profile_record(t, [1, 2], [3, 4], [5, 6], pressure_msb=1, pressure_lsw=500)
                                 for t in TIMES))


def test_sample_record():
    samples = extract_samples(RECORDS[3:], 2)
    assert len(samples) == 2
    sample = samples[0]
    assert sample.to_dict()['vel2'] == (3, 4)
    ds = sample.to_xarray()
    assert isinstance(ds, xr.Dataset)
    assert ds.vel1.dims == ('time', 'cell')
    assert int(ds.pressure) == 66036


def test_stack_samples():
    arrays = stack_samples(extract_samples(RECORDS[3:], 2), 2)
    assert arrays.velocity1.shape == (2, 2)
    assert arrays.temperature.shape == (2,)
    assert np.all(arrays.pressure == 66036)
    assert arrays.time[1] - arrays.time[0] == np.timedelta64(600, 's')
    ds = arrays.to_xarray()
    assert ds.velocity3.dims == ('time', 'cell')
    assert ds.battery.dims == ('time',)


def test_cell_geometry():
    ds = resolve_calibration(470, 1024, 200, 4).to_xarray()
    assert len(ds.distance) == 4
    assert ds.attrs['factor'] == 0.0945


def test_raw_record():
    assert RECORDS[2].kind == 'user'
    assert RECORDS[2].to_dict()['record_id'] == 0x00
