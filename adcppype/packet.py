import logging
import numpy as np
from datetime import datetime
from struct import unpack_from

from adcppype.core import (HARDWARE_CONFIG, HARDWARE_CONFIG_SIZE, HEAD_CONFIG, HEAD_CONFIG_SIZE, USER_CONFIG_HEAD,
                           USER_CONFIG_SIZE, COORDINATE_SYSTEMS, PROFILE_HEAD, PROFILE_HEAD_SIZE,
                           PROFILE_BYTES_PER_CELL, PRESSURE_MSB_WEIGHT, BCD_CENTURY_PIVOT, NUM_CHECKSUM_BYTES)
from adcppype.errors import FormatError, ConfigurationInvariantError
from adcppype.structures import RawRecord, HardwareConfig, HeadConfig, UserConfig, InstrumentConfig, SampleRecord

logger = logging.getLogger(__name__)


def _decode_string(raw: bytes) -> str:
    """Decode a null padded ascii field."""
    return raw.split(b'\x00')[0].decode('ascii', errors='replace').strip()


def _check_size(record: RawRecord, expected_size: int, name: str) -> None:
    if len(record.payload) != expected_size:
        raise FormatError(f"{name} record is {len(record.payload)} bytes, expected {expected_size}", record.offset)


def _bcd_to_int(value: int) -> int:
    high, low = value >> 4, value & 0x0F
    if high > 9 or low > 9:
        raise FormatError(f"Invalid BCD byte {value:#04x}")
    return high * 10 + low


def decode_clock(clock: bytes) -> np.datetime64:
    """
    Decode the six byte BCD clock of a Paradopp record.
    The bytes are ordered minute, second, day, hour, year, month. Two digit years below 90 are in the 2000s.

    :param clock: The six clock bytes.
    :return: The time as a numpy datetime64 with millisecond precision.
    """

    minute, second, day, hour, year, month = (_bcd_to_int(b) for b in clock)
    year += 2000 if year < BCD_CENTURY_PIVOT else 1900
    try:
        dt = datetime(year, month, day, hour, minute, second)
    except ValueError as e:
        raise FormatError(f"Invalid instrument clock {clock.hex()}: {e}") from e
    return np.datetime64(dt, 'ms')


def compose_pressure(pressure_msb: int, pressure_lsw: int) -> int:
    """
    Compose the pressure from its two fields. The MSB is an unsigned byte and the LSW an unsigned word,
    so the result is always non-negative.

    :param pressure_msb: The most significant byte of the pressure.
    :param pressure_lsw: The least significant word of the pressure.
    :return: The pressure in mm.
    """
    return int(pressure_msb) * PRESSURE_MSB_WEIGHT + int(pressure_lsw)


def unpack_hardware_config(record: RawRecord) -> HardwareConfig:
    """
    Unpack the hardware configuration record.

    :param record: The first record of the file.
    :return: A HardwareConfig.
    """

    _check_size(record, HARDWARE_CONFIG_SIZE, 'Hardware configuration')
    raw = unpack_from(HARDWARE_CONFIG, record.payload)
    hardware = HardwareConfig(
        serial_number=_decode_string(raw[3]),
        config=raw[4],
        frequency=raw[5],
        pic_version=raw[6],
        hw_revision=raw[7],
        rec_size=raw[8],
        status=raw[9],
        # spare = raw[10],
        fw_version=_decode_string(raw[11]),
    )
    return hardware


def unpack_head_config(record: RawRecord) -> HeadConfig:
    """
    Unpack the head configuration record, which carries the acoustic frequency.

    :param record: The second record of the file.
    :return: A HeadConfig.
    """

    _check_size(record, HEAD_CONFIG_SIZE, 'Head configuration')
    raw = unpack_from(HEAD_CONFIG, record.payload)
    head = HeadConfig(
        config=raw[3],
        frequency=raw[4],
        head_type=raw[5],
        serial_number=_decode_string(raw[6]),
        # system = raw[7], spare = raw[8]
        n_beams=raw[9],
    )
    return head


def unpack_user_config(record: RawRecord) -> UserConfig:
    """
    Unpack the used portion of the user configuration record.

    :param record: The third record of the file.
    :return: A UserConfig.
    """

    _check_size(record, USER_CONFIG_SIZE, 'User configuration')
    raw = unpack_from(USER_CONFIG_HEAD, record.payload)
    clock_deploy = raw[23]
    user = UserConfig(
        t1=raw[3],
        t2=raw[4],
        t3=raw[5],
        t4=raw[6],
        t5=raw[7],
        n_pings=raw[8],
        avg_interval=raw[9],
        n_beams=raw[10],
        # tim_ctrl_reg = raw[11], pwr_ctrl_reg = raw[12], a1 = raw[13], b0 = raw[14], b1 = raw[15],
        # compass_upd_rate = raw[16]
        coord_system=COORDINATE_SYSTEMS.get(raw[17], 'UNKNOWN'),
        n_bins=raw[18],
        bin_length=raw[19],
        measurement_interval=raw[20],
        deployment_name=_decode_string(raw[21]),
        wrap_mode=raw[22],
        clock_deploy=decode_clock(clock_deploy) if any(clock_deploy) else None,  # Unset clocks are all zero.
        diag_interval=raw[24],
        mode=raw[25],
        adjusted_sound_speed=raw[26],
        # n_samp_diag = raw[27], n_beams_cell_diag = raw[28], n_pings_diag = raw[29], mode_test = raw[30],
        # ana_in_addr = raw[31]
        sw_version=raw[32],
    )
    return user


def build_instrument_config(records: list[RawRecord]) -> InstrumentConfig:
    """
    Build the InstrumentConfig from the three configuration records at the start of a file.

    :param records: The records of a file, in file order.
    :return: An InstrumentConfig.
    """

    hardware = unpack_hardware_config(records[0])
    head = unpack_head_config(records[1])
    user = unpack_user_config(records[2])
    if user.n_bins <= 0:
        raise ConfigurationInvariantError(f"Cell count must be positive, found {user.n_bins}")
    config = InstrumentConfig(
        serial_number=hardware.serial_number,
        firmware_version=hardware.fw_version,
        frequency=head.frequency,
        cell_count=user.n_bins,
        bin_length=user.bin_length,
        blanking_distance=user.t2,
        sample_interval=user.measurement_interval,
        coord_system=user.coord_system,
        hardware=hardware,
        head=head,
        user=user,
    )
    logger.debug("Instrument %s, firmware %s, %d kHz, %d cells.", config.serial_number, config.firmware_version,
                 config.frequency, config.cell_count)
    return config


def profile_record_size(n_cells: int) -> int:
    """
    Compute the size of a profile record in bytes.

    :param n_cells: The number of depth cells.
    :return: The record size, including the fill byte when the cell count is odd and the checksum.
    """
    return PROFILE_HEAD_SIZE + n_cells * PROFILE_BYTES_PER_CELL + n_cells % 2 + NUM_CHECKSUM_BYTES


def unpack_profile(record: RawRecord, n_cells: int) -> SampleRecord:
    """
    Unpack a velocity profile record into a SampleRecord. Values stay in instrument units.

    :param record: A profile data record.
    :param n_cells: The number of depth cells, from the user configuration.
    :return: A SampleRecord.
    """

    expected_size = profile_record_size(n_cells)
    if len(record.payload) < expected_size:
        raise FormatError(f"Profile record is {len(record.payload)} bytes, "
                          f"expected {expected_size} for {n_cells} cells", record.offset)
    raw = unpack_from(PROFILE_HEAD, record.payload)
    cells = unpack_from(f'<{3 * n_cells}h{3 * n_cells}B', record.payload, offset=PROFILE_HEAD_SIZE)
    try:
        time = decode_clock(raw[3])
    except FormatError as e:
        raise FormatError(str(e), record.offset) from e
    sample = SampleRecord(
        time=time,
        error=raw[4],
        analn1=raw[5],
        battery=raw[6],
        analn2=raw[7],
        heading=raw[8],
        pitch=raw[9],
        roll=raw[10],
        pressure_msb=raw[11],
        status=raw[12],
        pressure_lsw=raw[13],
        temperature=raw[14],
        # spare = raw[15]
        vel1=cells[0:n_cells],
        vel2=cells[n_cells:2 * n_cells],
        vel3=cells[2 * n_cells:3 * n_cells],
        amp1=cells[3 * n_cells:4 * n_cells],
        amp2=cells[4 * n_cells:5 * n_cells],
        amp3=cells[5 * n_cells:6 * n_cells],
    )
    return sample
