"""Exceptions raised while decoding an ADCP file. Every stage fails fast and none of these are recovered from."""


class AdcpError(Exception):
    """Base class for adcppype decode errors."""


class FormatError(AdcpError, ValueError):
    """The file is structurally invalid: bad framing, a bad checksum, a short record or a wrong record count."""

    def __init__(self, message: str, offset: int | None = None) -> None:
        self.offset = offset
        if offset is not None:
            message = f"{message} (byte offset {offset})"
        super().__init__(message)


class UnsupportedFrequencyError(AdcpError, ValueError):
    """The instrument frequency has no entry in the calibration table."""

    def __init__(self, frequency: int) -> None:
        self.frequency = frequency
        super().__init__(f"No calibration factor for a {frequency} kHz instrument.")


class ConfigurationInvariantError(AdcpError, ValueError):
    """A decoded configuration or assembled structure breaks an invariant, e.g. a non-positive cell count."""
