"""This module walks the profile records of a file and stacks their fields into per-sample arrays."""

import logging
import numpy as np

from adcppype.errors import ConfigurationInvariantError
from adcppype.packet import unpack_profile, compose_pressure
from adcppype.structures import RawRecord, SampleRecord, SampleArrays

logger = logging.getLogger(__name__)


def extract_samples(data_records: list[RawRecord], cell_count: int) -> list[SampleRecord]:
    """
    Unpack every profile record into a SampleRecord, in file order.

    :param data_records: The profile records of a file, i.e. every record after the three configuration records.
    :param cell_count: The number of depth cells, fixed for the whole file.
    :return: A list of SampleRecords.
    """

    if cell_count <= 0:
        raise ConfigurationInvariantError(f"Cell count must be positive, found {cell_count}")
    samples = [unpack_profile(record, cell_count) for record in data_records]
    logger.debug("Extracted %d samples of %d cells.", len(samples), cell_count)
    return samples


def stack_samples(samples: list[SampleRecord], cell_count: int) -> SampleArrays:
    """
    Stack SampleRecords into arrays. Values stay in instrument units, except that the pressure is composed from
    its MSB and LSW fields.

    :param samples: A list of SampleRecords.
    :param cell_count: The number of depth cells.
    :return: A SampleArrays object. Scalar fields have the shape (n_samples,) and cell fields (n_samples, cell_count).
    """

    n_samples = len(samples)
    for sample in samples:
        for name in ('vel1', 'vel2', 'vel3', 'amp1', 'amp2', 'amp3'):
            if len(getattr(sample, name)) != cell_count:
                raise ConfigurationInvariantError(f"{name} has {len(getattr(sample, name))} cells, "
                                                  f"expected {cell_count}")

    def _scalar(name):
        return np.array([getattr(s, name) for s in samples], dtype=float)

    def _cells(name):
        return np.array([getattr(s, name) for s in samples], dtype=float).reshape(n_samples, cell_count)

    arrays = SampleArrays(
        time=np.array([s.time for s in samples], dtype='datetime64[ms]'),
        analn1=_scalar('analn1'),
        battery=_scalar('battery'),
        analn2=_scalar('analn2'),
        heading=_scalar('heading'),
        pitch=_scalar('pitch'),
        roll=_scalar('roll'),
        pressure=np.array([compose_pressure(s.pressure_msb, s.pressure_lsw) for s in samples], dtype=float),
        temperature=_scalar('temperature'),
        velocity1=_cells('vel1'),
        velocity2=_cells('vel2'),
        velocity3=_cells('vel3'),
        backscatter1=_cells('amp1'),
        backscatter2=_cells('amp2'),
        backscatter3=_cells('amp3'),
    )
    return arrays
