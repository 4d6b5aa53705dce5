"""This module contains functions for performing checks on the structures of a SampleDataSet."""

import numpy as np

from adcppype.errors import ConfigurationInvariantError


def _check_dimensions(name: str, dimensions: tuple[str, ...], available: dict) -> None:
    """
    Check that every dimension a variable references is present in the data set.

    :param name: The name of the variable.
    :param dimensions: The dimension names the variable references, in order.
    :param available: The dimensions of the data set, keyed by name.
    :return: No errors if the dimension checks pass, otherwise raises a ConfigurationInvariantError.
    """

    missing = [dim for dim in dimensions if dim not in available]
    if missing:
        raise ConfigurationInvariantError(f"{name} references dimensions not in the data set: {missing}")
    if len(set(dimensions)) != len(dimensions):
        raise ConfigurationInvariantError(f"{name} references a dimension more than once: {dimensions}")


def _conform_shape(name: str, data: np.ndarray, expected_shape: tuple[int, ...]) -> np.ndarray:
    """
    Check the shape of variable data against the product of its dimension lengths.
    Data that is only missing trailing length-one dimensions is reshaped, e.g. (n,) for (TIME, LATITUDE, LONGITUDE).

    :param name: The name of the variable.
    :param data: The variable data.
    :param expected_shape: The lengths of the referenced dimensions, in order.
    :return: The data with the expected shape, otherwise raises a ConfigurationInvariantError.
    """

    if data.shape == expected_shape:
        return data
    leading = expected_shape[:data.ndim]
    trailing = expected_shape[data.ndim:]
    if data.shape == leading and all(length == 1 for length in trailing):
        return data.reshape(expected_shape)
    raise ConfigurationInvariantError(f"{name} has shape {data.shape}, expected {expected_shape}")
