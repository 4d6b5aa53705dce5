"""
This module contains the generic dimension/variable container that every decoded file is assembled into.

A SampleDataSet holds named Dimensions and named Variables. Every Variable references Dimensions of the same
data set by name and its data must have the shape of the referenced dimension lengths, in order. Both are checked
when the Variable is added, so a SampleDataSet can never hold a mis-shaped Variable.

Collaborators such as QC routines or derived-variable post-processors locate their inputs by name with
get_var/get_dim and add their outputs with add_variable.
"""

from enum import Enum
import numpy as np
from numpy.typing import ArrayLike, NDArray
import xarray as xr

from adcppype._checks import _check_dimensions, _conform_shape
from adcppype.core import PARAMETERS
from adcppype.errors import ConfigurationInvariantError


class StorageType(str, Enum):
    """The storage types a Dimension or Variable may declare."""
    INT8 = 'int8'
    INT16 = 'int16'
    INT32 = 'int32'
    INT64 = 'int64'
    FLOAT32 = 'float32'
    FLOAT64 = 'float64'

    @property
    def dtype(self) -> np.dtype:
        return np.dtype(self.value)

    @classmethod
    def for_parameter(cls, name: str) -> 'StorageType':
        """Look up the storage type of a canonical parameter, float64 for anything not in PARAMETERS."""
        if name in PARAMETERS:
            return cls(PARAMETERS[name][0])
        return cls.FLOAT64


def _parameter_attrs(name: str) -> dict:
    if name not in PARAMETERS:
        return {}
    _, units, long_name = PARAMETERS[name]
    return {'units': units, 'long_name': long_name}


def _freeze(data: ArrayLike, storage_type: StorageType) -> NDArray:
    frozen = np.array(data, dtype=storage_type.dtype)
    frozen.setflags(write=False)
    return frozen


class Dimension:
    """
    A named coordinate axis.

    :param name: The dimension name, e.g. TIME.
    :param data: The coordinate values. A scalar becomes a length-one axis.
    :param storage_type: The declared storage type. Defaults to the type of the canonical parameter.
    :param attrs: Optional attributes. Units and long_name of canonical parameters are added by default.
    """

    def __init__(self, name: str,
                 data: ArrayLike,
                 storage_type: StorageType | str | None = None,
                 attrs: dict | None = None) -> None:
        self.name = name
        self.storage_type = StorageType(storage_type) if storage_type else StorageType.for_parameter(name)
        self.data = _freeze(np.atleast_1d(data), self.storage_type)
        if self.data.ndim != 1:
            raise ConfigurationInvariantError(f"Dimension {name} must be one dimensional, found {self.data.shape}")
        self.attrs = {**_parameter_attrs(name), **(attrs or {})}

    def __len__(self) -> int:
        return len(self.data)

    def __repr__(self) -> str:
        return f"Dimension({self.name!r}, length={len(self)}, storage_type={self.storage_type.value!r})"

    def to_xarray(self) -> xr.DataArray:
        """
        Export the Dimension as an xarray.DataArray.

        :return: A one dimensional xarray.DataArray indexed by itself.
        """
        return xr.DataArray(self.data, dims=[self.name], name=self.name, attrs=dict(self.attrs))


class Variable:
    """
    A named physical quantity.

    :param name: The variable name, e.g. VCUR.
    :param data: The variable data, with the shape of the referenced dimension lengths.
    :param dimensions: The names of the referenced dimensions, in order.
    :param storage_type: The declared storage type. Defaults to the type of the canonical parameter.
    :param comment: Free-text provenance of the data.
    :param attrs: Optional attributes. Units and long_name of canonical parameters are added by default.
    """

    def __init__(self, name: str,
                 data: ArrayLike,
                 dimensions: tuple[str, ...] | list[str],
                 storage_type: StorageType | str | None = None,
                 comment: str = '',
                 attrs: dict | None = None) -> None:
        self.name = name
        self.dimensions = tuple(dimensions)
        self.storage_type = StorageType(storage_type) if storage_type else StorageType.for_parameter(name)
        self.data = _freeze(data, self.storage_type)
        self.comment = comment
        self.attrs = {**_parameter_attrs(name), **(attrs or {})}

    @property
    def shape(self) -> tuple[int, ...]:
        return self.data.shape

    def __repr__(self) -> str:
        return f"Variable({self.name!r}, dimensions={self.dimensions}, shape={self.shape})"

    def to_xarray(self) -> xr.DataArray:
        """
        Export the Variable as an xarray.DataArray.

        :return: An xarray.DataArray with the referenced dimensions.
        """
        attrs = dict(self.attrs)
        if self.comment:
            attrs['comment'] = self.comment
        return xr.DataArray(self.data, dims=list(self.dimensions), name=self.name, attrs=attrs)


class SampleDataSet:
    """
    The container for one decoded file.

    :param meta: Instrument and file metadata.
    :param toolbox_input_file: The file the data was decoded from.
    """

    def __init__(self, meta: dict | None = None, toolbox_input_file: str | None = None) -> None:
        self.dimensions: dict[str, Dimension] = {}
        self.variables: dict[str, Variable] = {}
        self.meta = dict(meta or {})
        self.toolbox_input_file = toolbox_input_file

    def __repr__(self) -> str:
        dims = ', '.join(f"{name}: {len(dim)}" for name, dim in self.dimensions.items())
        return f"SampleDataSet({{{dims}}}, variables={list(self.variables)})"

    def add_dimension(self, dimension: Dimension) -> Dimension:
        """
        Add a Dimension. A dimension cannot be replaced once variables reference it.

        :param dimension: The Dimension to add.
        :return: The added Dimension.
        """

        referenced = [v.name for v in self.variables.values() if dimension.name in v.dimensions]
        if referenced:
            raise ConfigurationInvariantError(f"Dimension {dimension.name} is already referenced by {referenced}")
        self.dimensions[dimension.name] = dimension
        return dimension

    def add_variable(self, variable: Variable) -> Variable:
        """
        Add a Variable after checking its dimensions and shape against the data set.

        :param variable: The Variable to add.
        :return: The added Variable. Its data may have been reshaped to add trailing length-one dimensions.
        """

        _check_dimensions(variable.name, variable.dimensions, self.dimensions)
        expected_shape = tuple(len(self.dimensions[dim]) for dim in variable.dimensions)
        conformed = _conform_shape(variable.name, variable.data, expected_shape)
        if conformed is not variable.data:
            variable.data = conformed
            variable.data.setflags(write=False)
        self.variables[variable.name] = variable
        return variable

    def get_var(self, name: str) -> Variable:
        """
        Get a Variable by name.

        :param name: The variable name.
        :return: The Variable, raises a KeyError if the data set does not contain it.
        """
        return self.variables[name]

    def get_dim(self, name: str) -> Dimension:
        """
        Get a Dimension by name.

        :param name: The dimension name.
        :return: The Dimension, raises a KeyError if the data set does not contain it.
        """
        return self.dimensions[name]

    def has_var(self, name: str) -> bool:
        return name in self.variables

    def to_dict(self) -> dict:
        """
        Export the SampleDataSet as a dictionary of plain arrays.

        :return: A dict with dimensions, variables and meta keys.
        """
        return {'dimensions': {name: dim.data for name, dim in self.dimensions.items()},
                'variables': {name: var.data for name, var in self.variables.items()},
                'meta': dict(self.meta),
                'toolbox_input_file': self.toolbox_input_file}

    def to_xarray(self) -> xr.Dataset:
        """
        Export the SampleDataSet as an xarray.Dataset.
        Dimensions become coordinates and scalar metadata becomes global attributes.
        Nested metadata such as the decoded configuration records is not exported.

        :return: An xarray.Dataset representation of the SampleDataSet.
        """
        ds = xr.Dataset()
        ds = ds.assign_coords({name: dim.to_xarray() for name, dim in self.dimensions.items()})
        for name, var in self.variables.items():
            ds[name] = var.to_xarray()
        for key, value in self.meta.items():
            if isinstance(value, (str, int, float, np.integer, np.floating)):
                ds.attrs[key] = value
        if self.toolbox_input_file is not None:
            ds.attrs['toolbox_input_file'] = self.toolbox_input_file
        return ds
