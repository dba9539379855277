# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""PortableNet Core Module"""

from .types import (
    DataType,
    StatusCode,
    Status,
    Shape,
    as_shape,
    numel,
    dtype_size,
    dtype_to_numpy,
    dtype_from_numpy,
    dtype_to_string,
    parse_data_type,
)
from .tensor import TensorHandle

__all__ = [
    "DataType",
    "StatusCode",
    "Status",
    "Shape",
    "as_shape",
    "numel",
    "dtype_size",
    "dtype_to_numpy",
    "dtype_from_numpy",
    "dtype_to_string",
    "parse_data_type",
    "TensorHandle",
]
