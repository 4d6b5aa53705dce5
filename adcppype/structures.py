"""
This module contains NamedTuple structures that decoded ADCP records are dumped into for easy tracking and exporting.
Each NamedTuple is assigned methods that allow for the export of data to a dictionary or to a formatted
xarray.Dataset.
"""

import numpy as np
from numpy.typing import NDArray
from typing import NamedTuple
import xarray as xr

from adcppype.core import PRESSURE_MSB_WEIGHT, RECORD_KINDS


class RawRecord(NamedTuple):
    """
    A class for representing one framed record of a Paradopp binary file.

    :param record_id: The record id byte that follows the sync byte.
    :param offset: The byte offset of the sync byte within the file.
    :param payload: The full record, including the sync byte, id, size and checksum.
    """
    record_id: int
    offset: int
    payload: bytes

    @property
    def kind(self) -> str:
        """The record type: 'hardware', 'head', 'user' or 'data'."""
        return RECORD_KINDS.get(self.record_id, 'unknown')

    def to_dict(self) -> dict:
        """
        Export the RawRecord as a dictionary.

        :return: A dict representation of the RawRecord, where keys are attributes and values are attribute values.
        """
        return self._asdict()


class HardwareConfig(NamedTuple):
    """
    A class for representing the hardware configuration record.

    :param serial_number: The instrument serial number.
    :param config: The hardware configuration bit field.
    :param frequency: The board frequency, in kHz.
    :param pic_version: The PIC code version.
    :param hw_revision: The hardware revision.
    :param rec_size: The recorder size, in multiples of 65536 bytes.
    :param status: The status bit field.
    :param fw_version: The firmware version string.
    """
    serial_number: str
    config: int
    frequency: int
    pic_version: int
    hw_revision: int
    rec_size: int
    status: int
    fw_version: str

    def to_dict(self) -> dict:
        """
        Export the HardwareConfig as a dictionary.

        :return: A dict representation of the HardwareConfig.
        """
        return self._asdict()


class HeadConfig(NamedTuple):
    """
    A class for representing the head configuration record.

    :param config: The head configuration bit field.
    :param frequency: The acoustic frequency of the head, in kHz. This is the calibration table key.
    :param head_type: The head type.
    :param serial_number: The head serial number.
    :param n_beams: The number of beams.
    """
    config: int
    frequency: int
    head_type: int
    serial_number: str
    n_beams: int

    def to_dict(self) -> dict:
        """
        Export the HeadConfig as a dictionary.

        :return: A dict representation of the HeadConfig.
        """
        return self._asdict()


class UserConfig(NamedTuple):
    """
    A class for representing the used portion of the user configuration record.

    :param t1: Transmit pulse length, in counts.
    :param t2: Blanking distance, in counts.
    :param t3: Receive length, in counts.
    :param t4: Time between pings, in counts.
    :param t5: Time between burst sequences, in counts.
    :param n_pings: The number of beam sequences per burst.
    :param avg_interval: The averaging interval, in seconds.
    :param n_beams: The number of beams.
    :param coord_system: The coordinate system the velocities were recorded in: 'ENU', 'XYZ' or 'BEAM'.
    :param n_bins: The number of depth cells.
    :param bin_length: The cell length, in counts.
    :param measurement_interval: The measurement interval, in seconds.
    :param deployment_name: The deployment name entered at setup.
    :param wrap_mode: The recorder wrap mode.
    :param clock_deploy: The deployment start time.
    :param diag_interval: The number of seconds between diagnostics measurements.
    :param mode: The mode bit field.
    :param adjusted_sound_speed: The user input sound speed adjustment factor.
    :param sw_version: The compiled firmware version.
    """
    t1: int
    t2: int
    t3: int
    t4: int
    t5: int
    n_pings: int
    avg_interval: int
    n_beams: int
    coord_system: str
    n_bins: int
    bin_length: int
    measurement_interval: int
    deployment_name: str
    wrap_mode: int
    clock_deploy: np.datetime64 | None
    diag_interval: int
    mode: int
    adjusted_sound_speed: int
    sw_version: int

    def to_dict(self) -> dict:
        """
        Export the UserConfig as a dictionary.

        :return: A dict representation of the UserConfig.
        """
        return self._asdict()


class InstrumentConfig(NamedTuple):
    """
    A class for representing the configuration of the instrument for one file.

    :param serial_number: The instrument serial number, from the hardware configuration.
    :param firmware_version: The firmware version, from the hardware configuration.
    :param frequency: The head frequency in kHz.
    :param cell_count: The number of depth cells, fixed for the whole file.
    :param bin_length: The cell length, in counts.
    :param blanking_distance: The blanking distance, in counts.
    :param sample_interval: The configured measurement interval in seconds.
    :param coord_system: The coordinate system of the velocities.
    :param hardware: The decoded hardware configuration.
    :param head: The decoded head configuration.
    :param user: The decoded user configuration.
    """
    serial_number: str
    firmware_version: str
    frequency: int
    cell_count: int
    bin_length: int
    blanking_distance: int
    sample_interval: int
    coord_system: str
    hardware: HardwareConfig
    head: HeadConfig
    user: UserConfig

    def to_dict(self) -> dict:
        """
        Export the InstrumentConfig as a dictionary. Nested configuration records are also exported as dicts.

        :return: A dict representation of the InstrumentConfig.
        """
        d = self._asdict()
        d['hardware'] = self.hardware.to_dict()
        d['head'] = self.head.to_dict()
        d['user'] = self.user.to_dict()
        return d


class SampleRecord(NamedTuple):
    """
    A class for representing one decoded ensemble, still in instrument units.

    :param time: The ensemble time from the instrument clock.
    :param error: The error code.
    :param analn1: Analog input 1, in counts.
    :param battery: The battery voltage, in 0.1 V.
    :param analn2: Analog input 2 or sound speed, in counts.
    :param heading: The compass heading, in 0.1 deg.
    :param pitch: The pitch, in 0.1 deg.
    :param roll: The roll, in 0.1 deg.
    :param pressure_msb: The most significant byte of the pressure, in mm.
    :param status: The status bit field.
    :param pressure_lsw: The least significant word of the pressure, in mm.
    :param temperature: The temperature, in 0.01 degC.
    :param vel1: Velocity of the first component per cell, in mm/s.
    :param vel2: Velocity of the second component per cell, in mm/s.
    :param vel3: Velocity of the third component per cell, in mm/s.
    :param amp1: Amplitude of beam 1 per cell, in counts.
    :param amp2: Amplitude of beam 2 per cell, in counts.
    :param amp3: Amplitude of beam 3 per cell, in counts.
    """
    time: np.datetime64
    error: int
    analn1: int
    battery: int
    analn2: int
    heading: int
    pitch: int
    roll: int
    pressure_msb: int
    status: int
    pressure_lsw: int
    temperature: int
    vel1: tuple[int, ...]
    vel2: tuple[int, ...]
    vel3: tuple[int, ...]
    amp1: tuple[int, ...]
    amp2: tuple[int, ...]
    amp3: tuple[int, ...]

    @property
    def pressure(self) -> int:
        """The pressure in mm, composed from the two pressure fields."""
        return int(self.pressure_msb) * PRESSURE_MSB_WEIGHT + int(self.pressure_lsw)

    def to_dict(self) -> dict:
        """
        Export the SampleRecord as a dictionary.

        :return: A dict representation of the SampleRecord.
        """
        return self._asdict()

    def to_xarray(self) -> xr.Dataset:
        """
        Export the SampleRecord as an xarray.Dataset.

        :return: An xarray.Dataset representation of the SampleRecord, with a time dimension of length one
            and a cell dimension.
        """
        ds = xr.Dataset()
        ds = ds.assign_coords({'time': [self.time],
                               'cell': list(range(len(self.vel1)))})
        ds['error'] = self.error
        ds['analn1'] = self.analn1
        ds['battery'] = self.battery
        ds['analn2'] = self.analn2
        ds['heading'] = self.heading
        ds['pitch'] = self.pitch
        ds['roll'] = self.roll
        ds['pressure'] = self.pressure
        ds['status'] = self.status
        ds['temperature'] = self.temperature
        ds['vel1'] = (['time', 'cell'], [self.vel1])
        ds['vel2'] = (['time', 'cell'], [self.vel2])
        ds['vel3'] = (['time', 'cell'], [self.vel3])
        ds['amp1'] = (['time', 'cell'], [self.amp1])
        ds['amp2'] = (['time', 'cell'], [self.amp2])
        ds['amp3'] = (['time', 'cell'], [self.amp3])
        return ds


class CellGeometry(NamedTuple):
    """
    A class for representing the calibrated cell geometry of a profiler.

    :param factor: The frequency dependent counts to meters factor used for the cell length.
    :param cell_length: The cell length, in meters.
    :param cell_start: The distance to the near edge of the first cell, in meters.
    :param beam_angle: The beam angle from vertical, in degrees.
    :param distance: The distance from the transducers to the middle of each cell, in meters.
    """
    factor: float
    cell_length: float
    cell_start: float
    beam_angle: float
    distance: NDArray[float]

    def to_dict(self) -> dict:
        """
        Export the CellGeometry as a dictionary.

        :return: A dict representation of the CellGeometry.
        """
        return self._asdict()

    def to_xarray(self) -> xr.Dataset:
        """
        Export the CellGeometry as an xarray.Dataset.

        :return: An xarray.Dataset with the cell distance as the coordinate and the constants as attributes.
        """
        ds = xr.Dataset()
        ds = ds.assign_coords({'distance': np.array(self.distance)})
        ds.attrs['factor'] = self.factor
        ds.attrs['cell_length'] = self.cell_length
        ds.attrs['cell_start'] = self.cell_start
        ds.attrs['beam_angle'] = self.beam_angle
        return ds


class SampleArrays(NamedTuple):
    """
    A class for representing every ensemble of a file stacked into arrays.
    Scalar quantities have the shape (n_samples,), cell quantities have the shape (n_samples, n_cells).

    :param time: Ensemble times.
    :param analn1: Analog input 1.
    :param battery: Battery voltage.
    :param analn2: Analog input 2.
    :param heading: Compass heading.
    :param pitch: Pitch.
    :param roll: Roll.
    :param pressure: Pressure, already composed from its two fields.
    :param temperature: Temperature.
    :param velocity1: Velocity of the first component.
    :param velocity2: Velocity of the second component.
    :param velocity3: Velocity of the third component.
    :param backscatter1: Amplitude of beam 1.
    :param backscatter2: Amplitude of beam 2.
    :param backscatter3: Amplitude of beam 3.
    """
    time: NDArray[np.datetime64]
    analn1: NDArray[float]
    battery: NDArray[float]
    analn2: NDArray[float]
    heading: NDArray[float]
    pitch: NDArray[float]
    roll: NDArray[float]
    pressure: NDArray[float]
    temperature: NDArray[float]
    velocity1: NDArray[float]
    velocity2: NDArray[float]
    velocity3: NDArray[float]
    backscatter1: NDArray[float]
    backscatter2: NDArray[float]
    backscatter3: NDArray[float]

    def to_dict(self) -> dict:
        """
        Export the SampleArrays as a dictionary.

        :return: A dict representation of the SampleArrays.
        """
        return self._asdict()

    def to_xarray(self) -> xr.Dataset:
        """
        Export the SampleArrays as an xarray.Dataset.

        :return: An xarray.Dataset with time and cell index coordinates.
        """
        ds = xr.Dataset()
        ds = ds.assign_coords({'time': self.time,
                               'cell': list(range(self.velocity1.shape[1]))})
        for name, values in self._asdict().items():
            if name == 'time':
                continue
            elif values.ndim == 2:
                ds[name] = (['time', 'cell'], values)
            else:
                ds[name] = (['time'], values)
        return ds
