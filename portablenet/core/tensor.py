# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Tensor Handle

A typed, shaped view over a numpy buffer owned by a Workspace entry.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from .types import DataType, Shape, dtype_size, dtype_to_string, numel


class TensorHandle:
    """
    Reference to a tensor buffer stored in a Workspace.

    A handle is either materialized (it holds a C-contiguous numpy array of
    its dtype and shape) or empty. Empty handles stand for "not found" and
    for handles whose buffer has been released by the workspace.
    """

    __slots__ = ("_dtype", "_shape", "_data")

    def __init__(
        self,
        dtype: Optional[DataType] = None,
        shape: Optional[Shape] = None,
        data: Optional[np.ndarray] = None,
    ):
        self._dtype = dtype
        self._shape = tuple(shape) if shape is not None else None
        self._data = data

    @classmethod
    def empty(cls) -> "TensorHandle":
        """A handle with no buffer."""
        return cls()

    @property
    def dtype(self) -> Optional[DataType]:
        return self._dtype

    @property
    def shape(self) -> Optional[Shape]:
        return self._shape

    @property
    def data(self) -> Optional[np.ndarray]:
        """The owned buffer, or None for an empty handle."""
        return self._data

    @property
    def is_empty(self) -> bool:
        return self._data is None

    @property
    def numel(self) -> int:
        if self._shape is None:
            return 0
        return numel(self._shape)

    @property
    def nbytes(self) -> int:
        if self.is_empty:
            return 0
        return self.numel * dtype_size(self._dtype)

    def same_shape(self, shape: Shape) -> bool:
        """Same rank and same sizes in order."""
        if self._shape is None:
            return False
        return self._shape == tuple(shape)

    def matches(self, dtype: DataType, shape: Shape) -> bool:
        return not self.is_empty and self._dtype == dtype and self.same_shape(shape)

    def raw(self) -> memoryview:
        """Writable byte view of the buffer."""
        if self.is_empty:
            raise ValueError("Cannot take a byte view of an empty tensor handle")
        return memoryview(self._data).cast("B")

    def numpy(self) -> np.ndarray:
        """Copy of the buffer contents."""
        if self.is_empty:
            raise ValueError("Empty tensor handle has no data")
        return self._data.copy()

    def release(self) -> None:
        """Drop the buffer; the handle becomes empty."""
        self._data = None
        self._dtype = None
        self._shape = None

    def __bool__(self) -> bool:
        return not self.is_empty

    def __repr__(self) -> str:
        if self.is_empty:
            return "TensorHandle(<empty>)"
        return (
            f"TensorHandle(shape={list(self._shape)}, "
            f"dtype={dtype_to_string(self._dtype)})"
        )
