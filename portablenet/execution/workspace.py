# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Workspace

Named tensor store for one execution context. The workspace owns every
tensor buffer: handles are created through it, reused when a request
matches an entry's dtype and shape exactly, and released when removed or
when the workspace is torn down.
"""

from __future__ import annotations

import logging
import os
from typing import Iterator, Optional

import numpy as np

from ..config import ExecutionConfig
from ..core.tensor import TensorHandle
from ..core.types import (
    DataType,
    Shape,
    as_shape,
    dtype_from_numpy,
    dtype_size,
    dtype_to_numpy,
    dtype_to_string,
    numel,
)
from ..errors import PortableNetMemoryError, ValidationError

logger = logging.getLogger("portablenet.execution.workspace")


class Workspace:
    """
    Owns a collection of named tensors.

    Example:
        with Workspace("bundles/alexnet") as ws:
            x = ws.get("x", DataType.Float32, (2, 3))
            assert ws.get("x", DataType.Float32, (2, 3)) is x  # cache hit

            ws.get("missing")  # empty handle, not an error
    """

    def __init__(
        self,
        base_name: str = "",
        config: Optional[ExecutionConfig] = None,
    ):
        """
        Initialize a workspace.

        Args:
            base_name: Root path used to resolve resource file names.
            config: Policies consulted by operator handlers.
        """
        self._base_name = base_name
        self.config = config or ExecutionConfig()
        self._tensors: dict[str, TensorHandle] = {}

    # -------------------------------------------------------------------------
    # Base name
    # -------------------------------------------------------------------------

    @property
    def base_name(self) -> str:
        return self._base_name

    @base_name.setter
    def base_name(self, name: str) -> None:
        self._base_name = name

    def resolve(self, file_name: str) -> str:
        """Path of a resource file relative to the base name."""
        return os.path.join(self._base_name, file_name)

    # -------------------------------------------------------------------------
    # Lookup and creation
    # -------------------------------------------------------------------------

    def exists(self, name: str) -> bool:
        return name in self._tensors

    def get(
        self,
        name: str,
        dtype: Optional[DataType] = None,
        shape: Optional[Shape] = None,
    ) -> TensorHandle:
        """
        Look up a tensor, or get-or-create it when dtype and shape are given.

        With only a name, returns the stored handle or an empty handle when
        absent. With a dtype and a shape, returns the stored handle unchanged
        if it matches both; otherwise any entry under that name is released
        and a zero-filled buffer of the requested type and shape replaces it.

        Raises:
            ValidationError: If only one of dtype/shape is given, or the
                             shape has negative dimensions.
            PortableNetMemoryError: If the buffer cannot be allocated.
        """
        if dtype is None and shape is None:
            return self._tensors.get(name) or TensorHandle.empty()
        if dtype is None or shape is None:
            raise ValidationError(
                "get-or-create needs both a data type and a shape",
                parameter=name,
            )

        shape = as_shape(shape)
        if any(d < 0 for d in shape):
            raise ValidationError(
                "tensor dimensions must be non-negative",
                parameter=name,
                received=str(list(shape)),
            )

        found = self._tensors.get(name)
        if found is not None and found.matches(dtype, shape):
            logger.debug(f"Reusing tensor '{name}' {list(shape)}")
            return found

        self.remove(name)
        tensor = TensorHandle(dtype, shape, self._allocate(name, dtype, shape))
        self._tensors[name] = tensor
        logger.debug(
            f"Allocated tensor '{name}' {list(shape)} {dtype_to_string(dtype)} "
            f"({tensor.nbytes} bytes)"
        )
        return tensor

    def _allocate(self, name: str, dtype: DataType, shape: Shape) -> np.ndarray:
        try:
            return np.zeros(shape, dtype=dtype_to_numpy(dtype))
        except (MemoryError, ValueError) as e:
            raise PortableNetMemoryError(
                f"cannot allocate tensor '{name}' of shape {list(shape)}",
                requested_bytes=numel(shape) * dtype_size(dtype),
                tensor_name=name,
            ) from e

    def set(self, name: str, value: np.ndarray) -> TensorHandle:
        """
        Store a copy of an array under `name`, reusing a matching buffer.

        Raises:
            ValidationError: If the array dtype is not a supported data type.
        """
        value = np.asarray(value)
        dtype = dtype_from_numpy(value.dtype)
        if dtype is None:
            raise ValidationError(
                "unsupported array dtype",
                parameter=name,
                expected="float32, float64 or uint8",
                received=str(value.dtype),
            )
        tensor = self.get(name, dtype, value.shape)
        tensor.data[...] = value
        return tensor

    # -------------------------------------------------------------------------
    # Destruction
    # -------------------------------------------------------------------------

    def remove(self, name: str) -> None:
        """Release and forget a tensor; no-op when absent."""
        tensor = self._tensors.pop(name, None)
        if tensor is not None:
            tensor.release()

    def clear(self) -> None:
        """Release every tensor exactly once."""
        while self._tensors:
            self.remove(next(iter(self._tensors)))

    def close(self) -> None:
        self.clear()

    def __enter__(self) -> "Workspace":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    def names(self) -> list[str]:
        return sorted(self._tensors)

    @property
    def nbytes(self) -> int:
        """Bytes held by all live buffers."""
        return sum(t.nbytes for t in self._tensors.values())

    def __len__(self) -> int:
        return len(self._tensors)

    def __contains__(self, name: str) -> bool:
        return self.exists(name)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def summary(self) -> str:
        """One line per tensor: dimensions and first element."""
        lines = ["Workspace:"]
        for name in self.names():
            tensor = self._tensors[name]
            dims = " ".join(str(d) for d in tensor.shape)
            if tensor.is_empty or tensor.numel == 0:
                value = "<No Data>"
            else:
                value = f"{tensor.data.flat[0]} ..."
            lines.append(f"\t{name}: [{dims}] {value}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"Workspace(base_name='{self._base_name}', "
            f"tensors={len(self._tensors)}, "
            f"nbytes={self.nbytes})"
        )
