"""
This module contains functions for converting the cell geometry of a profiler from counts to meters.

The relationship between frequency and the BinLength conversion factor is approximately 47.8 / frequency,
but not exactly for all frequencies, so the factor is looked up from FREQUENCY_FACTORS in adcppype.core.
The blanking distance (T2) always uses 0.0229, except for HR profilers which are not supported.
"""

import logging
import numpy as np
from numpy.typing import NDArray

from adcppype.core import FREQUENCY_FACTORS, BIN_LENGTH_DIVISOR, BLANKING_FACTOR, CONTINENTAL_BEAM_ANGLE
from adcppype.errors import UnsupportedFrequencyError, ConfigurationInvariantError
from adcppype.structures import CellGeometry, InstrumentConfig

logger = logging.getLogger(__name__)


def lookup_factor(frequency: int, factors: dict[int, float] = FREQUENCY_FACTORS) -> float:
    """
    Look up the counts to meters factor for an instrument frequency.

    :param frequency: The head frequency in kHz.
    :param factors: A frequency -> factor table. Default is FREQUENCY_FACTORS.
    :return: The factor.
    """

    try:
        return factors[int(frequency)]
    except KeyError:
        raise UnsupportedFrequencyError(frequency) from None


def compute_cell_distance(cell_start: float, cell_length: float, cell_count: int) -> NDArray[float]:
    """
    Compute the distance from the transducers to the middle of each cell.

    :param cell_start: The distance to the near edge of the first cell, in meters.
    :param cell_length: The cell length, in meters.
    :param cell_count: The number of cells.
    :return: An array of cell_count distances in meters.
    """

    distance = cell_start + np.arange(cell_count) * cell_length
    return distance + cell_length  # Shift from the near edge to the middle of the cell.


def resolve_calibration(frequency: int,
                        bin_length: int,
                        blanking_distance: int,
                        cell_count: int,
                        beam_angle: float = CONTINENTAL_BEAM_ANGLE) -> CellGeometry:
    """
    Compute the cell length, cell start and cell distances of a profiler.

    :param frequency: The head frequency in kHz.
    :param bin_length: The cell length from the user configuration, in counts.
    :param blanking_distance: The blanking distance (T2) from the user configuration, in counts.
    :param cell_count: The number of cells.
    :param beam_angle: The beam angle from vertical in degrees. Default is 25 degrees for the Continental.
    :return: A CellGeometry.
    """

    if cell_count <= 0:
        raise ConfigurationInvariantError(f"Cell count must be positive, found {cell_count}")
    factor = lookup_factor(frequency)
    cos_beam = np.cos(np.deg2rad(beam_angle))
    cell_length = float((bin_length / BIN_LENGTH_DIVISOR) * factor * cos_beam)
    if cell_length <= 0:
        raise ConfigurationInvariantError(f"Cell length must be positive, found {cell_length} m "
                                          f"from a bin length of {bin_length} counts")
    cell_start = float(blanking_distance * BLANKING_FACTOR * cos_beam - cell_length)
    distance = compute_cell_distance(cell_start, cell_length, cell_count)
    logger.debug("%d kHz: factor %s, cell length %.4f m, cell start %.4f m.", frequency, factor, cell_length,
                 cell_start)
    geometry = CellGeometry(factor=factor,
                            cell_length=cell_length,
                            cell_start=cell_start,
                            beam_angle=beam_angle,
                            distance=distance)
    return geometry


def calibrate_config(config: InstrumentConfig, beam_angle: float = CONTINENTAL_BEAM_ANGLE) -> CellGeometry:
    """Wrapper for resolve_calibration that takes its inputs from an InstrumentConfig."""
    return resolve_calibration(config.frequency, config.bin_length, config.blanking_distance, config.cell_count,
                               beam_angle)
