import logging
import os

from adcppype.assembler import assemble_dataset
from adcppype.calibration import calibrate_config
from adcppype.core import CONTINENTAL_BEAM_ANGLE, HEADER_RECORD_IDS, MODES
from adcppype.dataset import SampleDataSet
from adcppype.extraction import extract_samples, stack_samples
from adcppype.packet import build_instrument_config
from adcppype.processing import normalize_arrays
from adcppype.reader import read_records

logger = logging.getLogger(__name__)


def _single_filepath(filepath: str | os.PathLike | list | tuple) -> str:
    """Accept a filepath or a sequence holding exactly one filepath."""
    if isinstance(filepath, (list, tuple)):
        if len(filepath) != 1:
            raise ValueError(f"Only one file is supported, found {len(filepath)}.")
        filepath = filepath[0]
    return os.path.normpath(filepath)


class ContinentalFile:
    """
    A class for decoding a raw Nortek Continental (.cpr) binary file.

    Each stage of the pipeline is available as a method so that intermediate results can be inspected.
    Instantiating the class runs every stage. A stage that fails raises and the remaining stages are not run.
    """

    def __init__(self, filepath: str | os.PathLike,
                 mode: str = 'timeSeries',
                 beam_angle: float = CONTINENTAL_BEAM_ANGLE) -> None:
        """
        Decode the file and assign each stage's output as an attribute.

        :param filepath: The filepath of the .cpr file.
        :param mode: The toolbox data type mode, 'profile' or 'timeSeries'.
        :param beam_angle: The beam angle from vertical in degrees. Default is 25 degrees.
        """

        if mode not in MODES:
            raise ValueError(f"mode must be one of {MODES}, found {mode!r}.")
        self.filepath = _single_filepath(filepath)
        self.mode = mode
        self.beam_angle = beam_angle

        self.records = self.read()
        self.config = self.configure()
        self.geometry = self.calibrate()
        self.raw = self.extract()
        self.normalized = self.normalize()
        self.sample_data = self.assemble()
        logger.info("Parsed %s: %d samples, %d cells, %d kHz.", self.filepath, len(self.raw.time),
                    self.config.cell_count, self.config.frequency)

    def read(self):
        """Read the file into RawRecords. The file is closed before this returns."""
        return read_records(self.filepath)

    def configure(self):
        """Decode the hardware, head and user configuration records."""
        return build_instrument_config(self.records)

    def calibrate(self):
        """Resolve the cell geometry from the frequency and the configuration."""
        return calibrate_config(self.config, self.beam_angle)

    def extract(self):
        """Unpack and stack the profile records, still in instrument units."""
        data_records = self.records[len(HEADER_RECORD_IDS):]
        samples = extract_samples(data_records, self.config.cell_count)
        return stack_samples(samples, self.config.cell_count)

    def normalize(self):
        """Convert the stacked arrays to physical units."""
        return normalize_arrays(self.raw)

    def assemble(self) -> SampleDataSet:
        """Package the normalized arrays into a SampleDataSet."""
        return assemble_dataset(self.normalized, self.config, self.geometry, self.filepath, self.mode)

    def to_xarray(self):
        """ContinentalFile wrapper for SampleDataSet.to_xarray."""
        return self.sample_data.to_xarray()


def parse_continental(filepath: str | os.PathLike | list | tuple, mode: str = 'timeSeries') -> SampleDataSet:
    """
    Parse a raw Nortek Continental binary file into a SampleDataSet. Decoding is all-or-nothing: the first
    FormatError, UnsupportedFrequencyError or ConfigurationInvariantError is raised unchanged.

    :param filepath: The filepath of the .cpr file, or a list holding exactly one filepath.
    :param mode: The toolbox data type mode, 'profile' or 'timeSeries'.
    :return: A SampleDataSet.
    """
    return ContinentalFile(filepath, mode=mode).sample_data
