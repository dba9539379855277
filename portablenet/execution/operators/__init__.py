# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Operation Handlers

Importing this package registers the built-in handlers:
- load_ops: Load, LoadImage
- conv_ops: Conv
"""

# Import all operator modules to register them
from . import load_ops
from . import conv_ops

__all__ = [
    "load_ops",
    "conv_ops",
]
