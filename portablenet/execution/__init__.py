# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
PortableNet Execution Engine

Components:
- Workspace: Named tensor store owning every buffer
- OperationDescriptor: One manifest operation with typed field access
- OperatorRegistry: Maps operation type tags to handlers
- Program: Loads a manifest and executes it in order
"""

from .workspace import Workspace
from .descriptor import OperationDescriptor
from .registry import OperatorRegistry
from .program import Program

__all__ = [
    "Workspace",
    "OperationDescriptor",
    "OperatorRegistry",
    "Program",
]
