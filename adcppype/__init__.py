import logging

from adcppype.dataset import Dimension, Variable, SampleDataSet, StorageType
from adcppype.errors import AdcpError, FormatError, UnsupportedFrequencyError, ConfigurationInvariantError
from adcppype.parser import ContinentalFile, parse_continental

logging.getLogger(__name__).addHandler(logging.NullHandler())
