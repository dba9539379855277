# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Loading Operators

- Load: raw tensor dump read from a file next to the manifest
- LoadImage: RGB image decoded with Pillow into a (1, 3, H, W) tensor

Both skip outputs that already exist in the workspace unless the workspace
config sets `force_reload`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np
from PIL import Image

from ...core.types import Status, dtype_to_numpy
from ...errors import ResourceError, ValidationError
from ..registry import OperatorRegistry

if TYPE_CHECKING:
    from ..descriptor import OperationDescriptor
    from ..workspace import Workspace

logger = logging.getLogger("portablenet.execution.operators.load")


def _is_cached(name: str, ws: "Workspace") -> bool:
    if ws.exists(name) and not ws.config.force_reload:
        logger.debug(f"Tensor '{name}' already in workspace; not reloading")
        return True
    return False


def _resource_failure(error: ResourceError, ws: "Workspace") -> Status:
    """Raise under the strict policy, otherwise warn and carry on."""
    if ws.config.strict_resources:
        raise error
    logger.warning(error.message + (f" ({error.path})" if error.path else ""))
    return Status.Ok()


@OperatorRegistry.register("Load")
def execute_load(op: "OperationDescriptor", ws: "Workspace") -> Status:
    """
    Read a raw tensor dump into the workspace.

    Fields: outputs[0], fileName, dataType ("single" | "double"), shape.
    The file holds exactly numel(shape) * sizeof(dataType) bytes in native
    byte order, no header.
    """
    name = op.output(0)
    file_name = op.get_str("fileName")
    dtype = op.get_data_type()
    shape = op.get_shape()

    if _is_cached(name, ws):
        return Status.Ok()

    path = ws.resolve(file_name)
    try:
        f = open(path, "rb")
    except OSError as e:
        status = _resource_failure(
            ResourceError(f"cannot open tensor file ({e.strerror})", path=path), ws
        )
        ws.get(name, dtype, shape)
        return status

    with f:
        tensor = ws.get(name, dtype, shape)
        read = f.readinto(tensor.raw()) or 0

    expected = tensor.nbytes
    if read < expected:
        if ws.config.strict_resources:
            ws.remove(name)
        return _resource_failure(
            ResourceError(
                f"tensor file too short for '{name}'",
                path=path,
                expected_bytes=expected,
                read_bytes=read,
            ),
            ws,
        )

    logger.debug(f"Loaded '{name}' from {path} ({read} bytes)")
    return Status.Ok()


@OperatorRegistry.register("LoadImage")
def execute_load_image(op: "OperationDescriptor", ws: "Workspace") -> Status:
    """
    Decode an image into an NCHW tensor of shape (1, 3, H, W).

    Fields: outputs[0], fileName, optional dataType (default "single") and
    averageColor (three values subtracted from the R, G, B planes).
    Pixel values are kept in the 0-255 range.
    """
    name = op.output(0)
    file_name = op.get_str("fileName")
    dtype = op.get_data_type(default="single")
    average = op.get_floats("averageColor") if op.has("averageColor") else None
    if average is not None and len(average) != 3:
        raise ValidationError(
            "averageColor needs one value per RGB channel",
            parameter="averageColor",
            expected="3 values",
            received=str(len(average)),
        )

    if _is_cached(name, ws):
        return Status.Ok()

    path = ws.resolve(file_name)
    try:
        with Image.open(path) as img:
            pixels = np.asarray(img.convert("RGB"), dtype=dtype_to_numpy(dtype))
    except (OSError, Image.DecompressionBombError) as e:
        return _resource_failure(ResourceError(f"cannot read image ({e})", path=path), ws)

    # HWC -> CHW
    planes = pixels.transpose(2, 0, 1)
    if average is not None:
        planes = planes - np.asarray(average, dtype=planes.dtype).reshape(3, 1, 1)

    height, width = pixels.shape[:2]
    tensor = ws.get(name, dtype, (1, 3, height, width))
    tensor.data[0] = planes

    logger.debug(f"Loaded image '{name}' from {path} ({width}x{height})")
    return Status.Ok()

