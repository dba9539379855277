# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
PortableNet: a minimal interpreter for serialized tensor programs.

A bundle directory holds a `net.json` manifest listing operations plus the
resource files they read. A Program executes the operations in order
against a Workspace that owns every named tensor.

Example:
    import portablenet as pn

    program = pn.Program()
    program.load("bundles/alexnet")

    with pn.Workspace("bundles/alexnet") as ws:
        status = program.execute(ws)
        print(ws.get("x").data)
"""

__version__ = "0.1.0"

from .core.types import DataType, StatusCode, Status, dtype_size, dtype_to_string
from .core.tensor import TensorHandle
from .config import ExecutionConfig
from .execution import Workspace, OperationDescriptor, OperatorRegistry, Program

# Errors
from .errors import (
    PortableNetError,
    ConfigurationError,
    ValidationError,
    ResourceError,
    PortableNetMemoryError,
    UnsupportedOperationError,
)

__all__ = [
    "__version__",
    "DataType",
    "StatusCode",
    "Status",
    "dtype_size",
    "dtype_to_string",
    "TensorHandle",
    "ExecutionConfig",
    "Workspace",
    "OperationDescriptor",
    "OperatorRegistry",
    "Program",
    "PortableNetError",
    "ConfigurationError",
    "ValidationError",
    "ResourceError",
    "PortableNetMemoryError",
    "UnsupportedOperationError",
]
