import math
import numpy as np
import pytest

from adcppype.calibration import lookup_factor, resolve_calibration, compute_cell_distance
from adcppype.errors import UnsupportedFrequencyError, ConfigurationInvariantError

COS_25 = math.cos(25 * math.pi / 180)


def test_lookup_factor():
    assert lookup_factor(190) == 0.2221
    assert lookup_factor(470) == 0.0945


@pytest.mark.parametrize('frequency', [0, 189, 400, 1000])
def test_unsupported_frequency(frequency):
    with pytest.raises(UnsupportedFrequencyError) as e:
        lookup_factor(frequency)
    assert e.value.frequency == frequency
    with pytest.raises(UnsupportedFrequencyError):
        resolve_calibration(frequency, 1024, 200, 10)


def test_resolve_calibration():
    geometry = resolve_calibration(190, 1024, 200, 5)
    cell_length = (1024 / 256) * 0.2221 * COS_25
    cell_start = 200 * 0.0229 * COS_25 - cell_length
    assert geometry.factor == 0.2221
    assert geometry.beam_angle == 25.0
    assert geometry.cell_length == pytest.approx(cell_length)
    assert geometry.cell_start == pytest.approx(cell_start)
    assert geometry.distance[0] == pytest.approx(cell_start + cell_length)  # Middle of the first cell.
    assert geometry.distance[-1] == pytest.approx(cell_start + 5 * cell_length)


@pytest.mark.parametrize('frequency, cell_count', [(190, 1), (190, 2), (470, 30), (470, 128)])
def test_distance_is_monotonic_arithmetic(frequency, cell_count):
    geometry = resolve_calibration(frequency, 512, 150, cell_count)
    assert geometry.cell_length > 0
    assert len(geometry.distance) == cell_count
    steps = np.diff(geometry.distance)
    assert np.all(steps > 0)
    assert np.allclose(steps, geometry.cell_length)


def test_compute_cell_distance():
    assert np.allclose(compute_cell_distance(1.0, 0.5, 3), [1.5, 2.0, 2.5])


def test_invalid_geometry():
    with pytest.raises(ConfigurationInvariantError):
        resolve_calibration(190, 1024, 200, 0)
    with pytest.raises(ConfigurationInvariantError):
        resolve_calibration(190, 0, 200, 10)
