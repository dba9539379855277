# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
PortableNet Core Types

Data types, shapes and execution status values shared by the workspace,
the operator handlers and the program executor.
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Iterable, Optional

import numpy as np


class DataType(Enum):
    """Supported tensor element types."""

    Float32 = auto()
    Float64 = auto()
    Char = auto()


_NUMPY_DTYPES = {
    DataType.Float32: np.dtype(np.float32),
    DataType.Float64: np.dtype(np.float64),
    DataType.Char: np.dtype(np.uint8),
}

# Manifest spelling of data types
_MANIFEST_NAMES = {
    "single": DataType.Float32,
    "double": DataType.Float64,
}


def dtype_size(dtype: DataType) -> int:
    """Get the size in bytes for a data type."""
    return _NUMPY_DTYPES[dtype].itemsize


def dtype_to_numpy(dtype: DataType) -> np.dtype:
    """Get the numpy dtype backing a data type."""
    return _NUMPY_DTYPES[dtype]


def dtype_from_numpy(dtype) -> Optional[DataType]:
    """Reverse lookup of `dtype_to_numpy`; None for unsupported dtypes."""
    dtype = np.dtype(dtype)
    for key, value in _NUMPY_DTYPES.items():
        if value == dtype:
            return key
    return None


def dtype_to_string(dtype: DataType) -> str:
    """Get string representation of data type."""
    return dtype.name.lower()


def parse_data_type(name: str) -> Optional[DataType]:
    """
    Translate a manifest `dataType` value.

    Returns:
        The data type, or None when the name is not recognized.
    """
    return _MANIFEST_NAMES.get(name)


Shape = tuple[int, ...]


def as_shape(dims: Iterable[int]) -> Shape:
    return tuple(int(d) for d in dims)


def numel(shape: Shape) -> int:
    """Number of elements for a shape; 1 for the scalar shape ()."""
    n = 1
    for d in shape:
        n *= d
    return n


class StatusCode(Enum):
    """Result status codes for operations."""

    Ok = auto()
    InvalidArgument = auto()
    NotFound = auto()
    OutOfMemory = auto()
    NotImplemented = auto()
    InternalError = auto()


@dataclass
class Status:
    """
    Status returned by handlers and by `Program.execute`.

    A failed status produced by the executor also records the index and type
    of the operation that failed.
    """

    code: StatusCode = StatusCode.Ok
    message: str = ""
    operation_index: Optional[int] = None
    operation_type: Optional[str] = None

    def ok(self) -> bool:
        return self.code == StatusCode.Ok

    @classmethod
    def Ok(cls) -> "Status":
        return cls()

    @classmethod
    def Error(cls, code: StatusCode, message: str) -> "Status":
        return cls(code=code, message=message)

    def at(self, index: int, op_type: str) -> "Status":
        """Copy of this status tagged with the failing operation."""
        return Status(self.code, self.message, index, op_type)

    def __bool__(self) -> bool:
        return self.ok()

    def __str__(self) -> str:
        if self.ok():
            return "Ok"
        where = ""
        if self.operation_index is not None:
            where = f" at operation {self.operation_index} ({self.operation_type})"
        return f"{self.code.name}{where}: {self.message}"
