"""
This module packages the normalized arrays of a Continental file into a SampleDataSet.

This is the single point where the instrument specific result becomes generic. The dimension, variable and
channel names come from adcppype.core so that the velocity axis swap and the variable set can be audited in one place.
"""

import logging
import numpy as np
from numpy.typing import NDArray
import pandas as pd

from adcppype.core import (TIME, HEIGHT_ABOVE_SENSOR, LATITUDE, LONGITUDE, PROFILE_DIMENSIONS, TIMESERIES_DIMENSIONS,
                           VELOCITY_CHANNELS, BACKSCATTER_CHANNELS, SCALAR_CHANNELS, INSTRUMENT_MAKE,
                           INSTRUMENT_MODEL, TIME_EPOCH, FILL_LATITUDE, FILL_LONGITUDE, MODES)
from adcppype.dataset import Dimension, Variable, SampleDataSet
from adcppype.structures import SampleArrays, InstrumentConfig, CellGeometry

logger = logging.getLogger(__name__)


def compute_sample_interval(time: NDArray[np.datetime64]) -> float:
    """
    Compute the sample interval as the median of the differences between consecutive timestamps.
    The median is robust to the occasional dropped or duplicated ensemble, unlike the mean.

    :param time: The ensemble times, in file order.
    :return: The sample interval in seconds, NaN if there are fewer than two timestamps.
    """

    if len(time) < 2:
        return np.nan
    differences = pd.Series(pd.to_datetime(time)).diff().dropna()
    return float(differences.median().total_seconds())


def convert_time(time: NDArray[np.datetime64]) -> NDArray[float]:
    """
    Convert datetime64 times to days since 1950-01-01, the storage convention of the TIME dimension.

    :param time: The ensemble times.
    :return: Float days since 1950-01-01.
    """
    return (np.asarray(time, dtype='datetime64[ms]') - TIME_EPOCH) / np.timedelta64(1, 'D')


def assemble_dataset(arrays: SampleArrays,
                     config: InstrumentConfig,
                     geometry: CellGeometry,
                     filepath: str | None = None,
                     mode: str = 'timeSeries') -> SampleDataSet:
    """
    Assemble normalized arrays into a SampleDataSet with TIME, HEIGHT_ABOVE_SENSOR, LATITUDE and LONGITUDE
    dimensions and the twelve Continental variables.

    :param arrays: A SampleArrays object in physical units, typically from processing.normalize_arrays.
    :param config: The InstrumentConfig of the file.
    :param geometry: The CellGeometry of the file, typically from calibration.resolve_calibration.
    :param filepath: The file the data was decoded from.
    :param mode: The toolbox data type mode, 'profile' or 'timeSeries'. Recorded in the metadata.
    :return: A SampleDataSet.
    """

    if mode not in MODES:
        raise ValueError(f"mode must be one of {MODES}, found {mode!r}.")

    meta = {'instrument_make': INSTRUMENT_MAKE,
            'instrument_model': INSTRUMENT_MODEL,
            'instrument_serial_no': config.serial_number,
            'instrument_sample_interval': compute_sample_interval(arrays.time),
            'instrument_firmware': config.firmware_version,
            'beam_angle': geometry.beam_angle,
            'binSize': geometry.cell_length,
            'coordinate_system': config.coord_system,
            'mode': mode,
            'hardware': config.hardware.to_dict(),
            'head': config.head.to_dict(),
            'user': config.user.to_dict()}
    sample_data = SampleDataSet(meta=meta, toolbox_input_file=filepath)

    sample_data.add_dimension(Dimension(TIME, convert_time(arrays.time)))
    sample_data.add_dimension(Dimension(HEIGHT_ABOVE_SENSOR, geometry.distance,
                                        attrs={'comment': 'Distance from the transducers to the middle of each cell.'}))
    sample_data.add_dimension(Dimension(LATITUDE, FILL_LATITUDE))
    sample_data.add_dimension(Dimension(LONGITUDE, FILL_LONGITUDE))

    for name, channel in VELOCITY_CHANNELS.items():
        sample_data.add_variable(Variable(name, getattr(arrays, channel), PROFILE_DIMENSIONS,
                                          comment=f"{INSTRUMENT_MODEL} {channel}, assuming earth coordinates."))
    for name, channel in BACKSCATTER_CHANNELS.items():
        sample_data.add_variable(Variable(name, getattr(arrays, channel), PROFILE_DIMENSIONS,
                                          comment=f"{INSTRUMENT_MODEL} {channel} amplitude."))
    for name, channel in SCALAR_CHANNELS.items():
        comment = 'Pressure in m, assumed equivalent to dbar.' if name == 'PRES_REL' else ''
        sample_data.add_variable(Variable(name, getattr(arrays, channel), TIMESERIES_DIMENSIONS, comment=comment))

    logger.debug("Assembled %d samples, %d cells, %d variables.", len(sample_data.get_dim(TIME)),
                 len(sample_data.get_dim(HEIGHT_ABOVE_SENSOR)), len(sample_data.variables))
    return sample_data
