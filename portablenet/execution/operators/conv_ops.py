# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Convolution Operator

Conv: Y = Conv(X, W[, B]) on NCHW inputs with OIHW filters.
"""

from __future__ import annotations

from typing import List, Optional, TYPE_CHECKING
import numpy as np

from ...core.types import Status
from ...errors import ConfigurationError, ValidationError
from ..registry import OperatorRegistry

if TYPE_CHECKING:
    from ..descriptor import OperationDescriptor
    from ..workspace import Workspace


def _ensure_nchw(X: np.ndarray) -> np.ndarray:
    """Ensure array is in NCHW format (4D)."""
    if X.ndim == 3:
        return X.reshape(1, *X.shape)
    elif X.ndim == 4:
        return X
    else:
        raise ValidationError(
            "Conv input must be 3D or 4D", expected="CHW or NCHW", received=f"{X.ndim}D"
        )


def _input_array(op: "OperationDescriptor", ws: "Workspace", index: int) -> np.ndarray:
    name = op.input(index)
    tensor = ws.get(name)
    if tensor.is_empty:
        raise ConfigurationError(
            f"input tensor '{name}' not found in workspace",
            config_key="inputs",
            operation=op.type,
        )
    return tensor.data


def _pair(values: List[int], key: str) -> tuple[int, int]:
    if len(values) == 1:
        return values[0], values[0]
    if len(values) == 2:
        return values[0], values[1]
    raise ConfigurationError(f"'{key}' takes one or two values", config_key=key, config_value=values)


def _pads(values: List[int]) -> tuple[int, int, int, int]:
    """[all] | [h, w] | [top, left, bottom, right]"""
    if len(values) == 1:
        return (values[0],) * 4
    if len(values) == 2:
        return values[0], values[1], values[0], values[1]
    if len(values) == 4:
        return values[0], values[1], values[2], values[3]
    raise ConfigurationError("'pad' takes one, two or four values", config_key="pad", config_value=values)


@OperatorRegistry.register("Conv")
def execute_conv(op: "OperationDescriptor", ws: "Workspace") -> Status:
    """
    2D Convolution operator.

    Fields: inputs [x, w] or [x, w, b], outputs[0], optional stride and pad.
    The output takes the data type of the input tensor.
    """
    X = _ensure_nchw(_input_array(op, ws, 0))
    W = _input_array(op, ws, 1)
    B = _input_array(op, ws, 2) if len(op.inputs) > 2 else None

    strides = _pair(op.get_ints("stride", default=[1]), "stride")
    pads = _pads(op.get_ints("pad", default=[0]))
    if min(strides) <= 0 or min(pads) < 0:
        raise ConfigurationError(
            "stride must be positive and pad non-negative",
            config_key="stride/pad",
            config_value={"stride": list(strides), "pad": list(pads)},
            operation=op.type,
        )

    if W.ndim != 4 or W.shape[1] != X.shape[1]:
        raise ValidationError(
            "filters do not match input channels",
            parameter=op.input(1),
            expected=f"[O, {X.shape[1]}, Kh, Kw]",
            received=str(list(W.shape)),
        )
    if B is not None and B.size != W.shape[0]:
        raise ValidationError(
            "bias needs one value per filter",
            parameter=op.input(2),
            expected=str(W.shape[0]),
            received=str(B.size),
        )

    result = _conv2d_numpy(X, W, B, strides, pads)
    if result is None:
        raise ValidationError(
            "filters larger than padded input",
            parameter=op.input(0),
            received=str(list(X.shape)),
        )

    src = ws.get(op.input(0))
    out = ws.get(op.output(0), src.dtype, result.shape)
    out.data[...] = result
    return Status.Ok()


def _conv2d_numpy(
    X: np.ndarray,
    W: np.ndarray,
    B: Optional[np.ndarray],
    strides: tuple[int, int],
    pads: tuple[int, int, int, int],
) -> Optional[np.ndarray]:
    """Direct 2D convolution; None when the output would be empty."""
    N, C_in, H, W_in = X.shape
    C_out, _, Kh, Kw = W.shape

    stride_h, stride_w = strides
    pad_top, pad_left, pad_bottom, pad_right = pads

    X_padded = np.pad(
        X,
        ((0, 0), (0, 0), (pad_top, pad_bottom), (pad_left, pad_right)),
        mode="constant",
    )

    H_out = (H + pad_top + pad_bottom - Kh) // stride_h + 1
    W_out = (W_in + pad_left + pad_right - Kw) // stride_w + 1
    if H_out <= 0 or W_out <= 0:
        return None

    Y = np.zeros((N, C_out, H_out, W_out), dtype=X.dtype)

    for h in range(H_out):
        for w in range(W_out):
            h_start = h * stride_h
            w_start = w * stride_w
            patch = X_padded[:, :, h_start : h_start + Kh, w_start : w_start + Kw]
            # [N, C, Kh, Kw] x [O, C, Kh, Kw] -> [N, O]
            Y[:, :, h, w] = np.tensordot(patch, W, axes=([1, 2, 3], [1, 2, 3]))

    if B is not None:
        Y += B.reshape(1, -1, 1, 1).astype(X.dtype)

    return Y
