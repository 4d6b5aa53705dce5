"""This module contains core constants used across adcppype."""

import numpy as np

# ---------- Record Framing ---------- #
SYNC_BYTE = 0xA5  # Start of every Paradopp structure.
CHECKSUM_SEED = 0xB58C  # Checksum = seed + sum of all little-endian words before the checksum, modulo 2**16.
RECORD_PREFIX = '<BBH'  # sync byte, record id, record size in 16-bit words.
RECORD_PREFIX_SIZE = 4
NUM_CHECKSUM_BYTES = 2

HARDWARE_CONFIG_ID = 0x05
HEAD_CONFIG_ID = 0x04
USER_CONFIG_ID = 0x00
AWAC_PROFILE_ID = 0x20
CONTINENTAL_PROFILE_ID = 0x24  # Same layout as the AWAC velocity profile structure.

HEADER_RECORD_IDS = (HARDWARE_CONFIG_ID, HEAD_CONFIG_ID, USER_CONFIG_ID)  # Required order at the start of a file.
PROFILE_RECORD_IDS = (CONTINENTAL_PROFILE_ID, AWAC_PROFILE_ID)
RECORD_KINDS = {HARDWARE_CONFIG_ID: 'hardware',
                HEAD_CONFIG_ID: 'head',
                USER_CONFIG_ID: 'user',
                AWAC_PROFILE_ID: 'data',
                CONTINENTAL_PROFILE_ID: 'data'}

# ---------- Header Structures ---------- #
HARDWARE_CONFIG_SIZE = 48  # bytes
HARDWARE_CONFIG = '<BBH14sHHHHHH12s4sH'  # See the System Integrator Manual, Hardware Configuration.
HEAD_CONFIG_SIZE = 224
HEAD_CONFIG = '<BBHHHH12s176s22sHH'
USER_CONFIG_SIZE = 512
USER_CONFIG_HEAD = '<BBH17HH6sH6sIHHHHHHHHH'  # First 76 bytes of the user configuration, the rest is not used.

COORDINATE_SYSTEMS = {0: 'ENU', 1: 'XYZ', 2: 'BEAM'}

# ---------- Profile Data Structure ---------- #
PROFILE_HEAD = '<BBH6shHHHhhhBBHh88s'  # struct descriptor for the first 118 bytes of a profile record.
PROFILE_HEAD_SIZE = 118
PROFILE_BYTES_PER_CELL = 3 * 2 + 3 * 1  # three int16 velocities, three uint8 amplitudes.
PRESSURE_MSB_WEIGHT = 65536  # pressure = MSB * 65536 + LSW, an unsigned 24-bit value split over two fields.
BCD_CENTURY_PIVOT = 90  # Two digit years below this are 20xx, otherwise 19xx.

# ---------- Calibration ---------- #
# Frequency (kHz) -> counts to meters factor for BinLength, from the Nortek HR profiler forum recommendation.
# The factor is approximately 47.8 / frequency, but not exactly for all frequencies, so a table is used.
FREQUENCY_FACTORS = {190: 0.2221,
                     470: 0.0945}
BIN_LENGTH_DIVISOR = 256
BLANKING_FACTOR = 0.0229  # T2 counts to meters, the same for every non-HR profiler.
CONTINENTAL_BEAM_ANGLE = 25.0  # degrees from vertical.

# ---------- Unit Scaling ---------- #
TENTHS_SCALE = 10.0  # 0.1 V -> V, 0.1 deg -> deg. Battery, heading, pitch and roll.
PRESSURE_SCALE = 1000.0  # mm -> m, assumed equivalent to dbar. Not a verified physical identity.
TEMPERATURE_SCALE = 100.0  # 0.01 degC -> degC
VELOCITY_SCALE = 1000.0  # mm/s -> m/s, assuming earth coordinates.
BACKSCATTER_DB_PER_COUNT = 0.45  # counts -> dB, Nortek technical note on sediments.

# ---------- Data Model ---------- #
INSTRUMENT_MAKE = 'Nortek'
INSTRUMENT_MODEL = 'Continental'
MODES = ('profile', 'timeSeries')
TIME_EPOCH = np.datetime64('1950-01-01T00:00:00', 'ms')
FILL_LATITUDE = np.nan  # The Continental does not report a position.
FILL_LONGITUDE = np.nan

TIME = 'TIME'
HEIGHT_ABOVE_SENSOR = 'HEIGHT_ABOVE_SENSOR'
LATITUDE = 'LATITUDE'
LONGITUDE = 'LONGITUDE'
PROFILE_DIMENSIONS = (TIME, HEIGHT_ABOVE_SENSOR, LATITUDE, LONGITUDE)
TIMESERIES_DIMENSIONS = (TIME, LATITUDE, LONGITUDE)

# The instrument reports its second velocity channel along the first output axis and vice versa.
VELOCITY_CHANNELS = {'VCUR': 'velocity2',
                     'UCUR': 'velocity1',
                     'WCUR': 'velocity3'}
BACKSCATTER_CHANNELS = {'ABSI1': 'backscatter1',
                        'ABSI2': 'backscatter2',
                        'ABSI3': 'backscatter3'}
SCALAR_CHANNELS = {'TEMP': 'temperature',
                   'PRES_REL': 'pressure',
                   'VOLT': 'battery',
                   'PITCH': 'pitch',
                   'ROLL': 'roll',
                   'HEADING': 'heading'}
VARIABLE_NAMES = tuple(VELOCITY_CHANNELS) + tuple(BACKSCATTER_CHANNELS) + tuple(SCALAR_CHANNELS)

# name -> (storage type, units, long name)
PARAMETERS = {TIME: ('float64', 'days since 1950-01-01 00:00:00 UTC', 'time'),
              HEIGHT_ABOVE_SENSOR: ('float32', 'm', 'height_above_sensor'),
              LATITUDE: ('float64', 'degrees_north', 'latitude'),
              LONGITUDE: ('float64', 'degrees_east', 'longitude'),
              'VCUR': ('float32', 'm s-1', 'northward_sea_water_velocity'),
              'UCUR': ('float32', 'm s-1', 'eastward_sea_water_velocity'),
              'WCUR': ('float32', 'm s-1', 'upward_sea_water_velocity'),
              'ABSI1': ('float32', 'dB', 'backscatter_intensity_from_acoustic_beam_1'),
              'ABSI2': ('float32', 'dB', 'backscatter_intensity_from_acoustic_beam_2'),
              'ABSI3': ('float32', 'dB', 'backscatter_intensity_from_acoustic_beam_3'),
              'TEMP': ('float32', 'degrees_Celsius', 'sea_water_temperature'),
              'PRES_REL': ('float32', 'dbar', 'sea_water_pressure_due_to_sea_water'),
              'VOLT': ('float32', 'V', 'voltage'),
              'PITCH': ('float32', 'degrees', 'platform_pitch_angle'),
              'ROLL': ('float32', 'degrees', 'platform_roll_angle'),
              'HEADING': ('float32', 'degrees_north', 'platform_orientation')}
