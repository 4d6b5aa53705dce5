"""
This module contains functions that convert ADCP data from instrument units to physical units.

Every function is a pure, element-wise transform that works on scalar values, numpy arrays or xarray DataArrays.
Scalar/ndarray inputs are intended for a single file decoded through the extraction module.
xr.DataArray inputs are intended for data already in an xr.Dataset, in which case the ancillary_variables
attribute of the output is set to the name of the input. No values are clamped or rounded, NaN stays NaN.

Each conversion is applied exactly once per field by normalize_arrays. Applying a conversion to data that is
already in physical units is not supported.
"""

import logging
from numpy.typing import NDArray
import xarray as xr

from adcppype.core import (TENTHS_SCALE, PRESSURE_SCALE, TEMPERATURE_SCALE, VELOCITY_SCALE,
                           BACKSCATTER_DB_PER_COUNT)
from adcppype.structures import SampleArrays

logger = logging.getLogger(__name__)

Numeric = float | NDArray[float] | xr.DataArray


def _assign_attrs(converted: Numeric, counts: Numeric, units: str) -> Numeric:
    # Assign attributes if output is an xr.DataArray.
    if isinstance(converted, xr.DataArray):
        converted.attrs['ancillary_variables'] = counts.name
        converted.attrs['units'] = units
    return converted


def compute_battery_voltage(counts: Numeric) -> Numeric:
    """
    Compute the battery voltage.

    :param counts: Battery voltage in 0.1 V.
    :return: Battery voltage in V.
    """

    volts = counts / TENTHS_SCALE
    return _assign_attrs(volts, counts, 'V')


def compute_heading(counts: Numeric) -> Numeric:
    """
    Compute the compass heading.

    :param counts: Heading in 0.1 deg.
    :return: Heading in degrees.
    """

    heading = counts / TENTHS_SCALE
    return _assign_attrs(heading, counts, 'degrees')


def compute_pitch(counts: Numeric) -> Numeric:
    """
    Compute the pitch.

    :param counts: Pitch in 0.1 deg.
    :return: Pitch in degrees.
    """

    pitch = counts / TENTHS_SCALE
    return _assign_attrs(pitch, counts, 'degrees')


def compute_roll(counts: Numeric) -> Numeric:
    """
    Compute the roll.

    :param counts: Roll in 0.1 deg.
    :return: Roll in degrees.
    """

    roll = counts / TENTHS_SCALE
    return _assign_attrs(roll, counts, 'degrees')


def compute_pressure(pressure_mm: Numeric) -> Numeric:
    """
    Compute the pressure in meters of water.

    :param pressure_mm: Pressure in mm, already composed from the MSB and LSW fields.
    :return: Pressure in m. This is treated as equivalent to dbar, which is an assumption and not a verified
        physical identity. It is kept as is for consistency with the instrument software.
    """

    pressure = pressure_mm / PRESSURE_SCALE
    return _assign_attrs(pressure, pressure_mm, 'dbar')


def compute_temperature(counts: Numeric) -> Numeric:
    """
    Compute the water temperature.

    :param counts: Temperature in 0.01 degC.
    :return: Temperature in degC.
    """

    temperature = counts / TEMPERATURE_SCALE
    return _assign_attrs(temperature, counts, 'degrees_Celsius')


def compute_velocity(velocity_mm_s: Numeric) -> Numeric:
    """
    Compute a velocity component.

    :param velocity_mm_s: Velocity in mm/s. Assumed to be in earth coordinates.
    :return: Velocity in m/s.
    """

    velocity = velocity_mm_s / VELOCITY_SCALE
    return _assign_attrs(velocity, velocity_mm_s, 'm s-1')


def compute_backscatter(counts: Numeric) -> Numeric:
    """
    Compute the backscatter intensity of a beam.

    :param counts: Amplitude in counts.
    :return: Backscatter in dB.
    """

    backscatter = counts * BACKSCATTER_DB_PER_COUNT
    return _assign_attrs(backscatter, counts, 'dB')


def normalize_arrays(raw: SampleArrays) -> SampleArrays:
    """
    Convert every array of a SampleArrays from instrument units to physical units.
    The analog inputs have no documented conversion and are passed through unchanged.

    :param raw: A SampleArrays object in instrument units, typically from extraction.stack_samples.
    :return: A new SampleArrays object in physical units.
    """

    normalized = raw._replace(
        battery=compute_battery_voltage(raw.battery),
        heading=compute_heading(raw.heading),
        pitch=compute_pitch(raw.pitch),
        roll=compute_roll(raw.roll),
        pressure=compute_pressure(raw.pressure),
        temperature=compute_temperature(raw.temperature),
        velocity1=compute_velocity(raw.velocity1),
        velocity2=compute_velocity(raw.velocity2),
        velocity3=compute_velocity(raw.velocity3),
        backscatter1=compute_backscatter(raw.backscatter1),
        backscatter2=compute_backscatter(raw.backscatter2),
        backscatter3=compute_backscatter(raw.backscatter3),
    )
    logger.debug("Normalized %d samples to physical units.", len(normalized.time))
    return normalized
