# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Operation Descriptor

One entry of a manifest's `operations` list, with typed accessors that
raise ConfigurationError on missing or mistyped fields.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from ..core.types import DataType, Shape, parse_data_type
from ..errors import ConfigurationError

_MISSING = object()


@dataclass
class OperationDescriptor:
    """
    A single step of a program.

    Tensors are referenced by name only; handlers resolve them through the
    workspace at execution time.
    """

    type: str
    inputs: list[str] = field(default_factory=list)
    outputs: list[str] = field(default_factory=list)
    fields: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, entry: Any) -> "OperationDescriptor":
        """
        Build a descriptor from a parsed JSON object.

        Raises:
            ConfigurationError: If `type` is not a string or `inputs` /
                                `outputs` are not lists of strings.
        """
        if not isinstance(entry, dict):
            raise ConfigurationError(
                "operation descriptor must be an object", config_value=entry
            )
        op_type = entry.get("type")
        if not isinstance(op_type, str):
            raise ConfigurationError(
                "operation descriptor needs a string 'type'",
                config_key="type",
                config_value=op_type,
            )
        fields = {k: v for k, v in entry.items() if k not in ("type", "inputs", "outputs")}
        return cls(
            type=op_type,
            inputs=_name_list(entry, "inputs", op_type),
            outputs=_name_list(entry, "outputs", op_type),
            fields=fields,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "inputs": list(self.inputs),
            "outputs": list(self.outputs),
            **self.fields,
        }

    # -------------------------------------------------------------------------
    # Typed accessors
    # -------------------------------------------------------------------------

    def has(self, key: str) -> bool:
        return key in self.fields

    def get(self, key: str, default: Any = None) -> Any:
        return self.fields.get(key, default)

    def get_str(self, key: str, default: Any = _MISSING) -> str:
        value = self._lookup(key, default)
        if not isinstance(value, str):
            raise self._bad(key, value, "must be a string")
        return value

    def get_int(self, key: str, default: Any = _MISSING) -> int:
        value = self._lookup(key, default)
        if isinstance(value, bool) or not isinstance(value, int):
            raise self._bad(key, value, "must be an integer")
        return value

    def get_ints(self, key: str, default: Any = _MISSING) -> list[int]:
        """An integer or a list of integers, returned as a list."""
        value = self._lookup(key, default)
        if isinstance(value, int) and not isinstance(value, bool):
            return [value]
        if not isinstance(value, list) or not all(
            isinstance(v, int) and not isinstance(v, bool) for v in value
        ):
            raise self._bad(key, value, "must be an integer or a list of integers")
        return list(value)

    def get_floats(self, key: str, default: Any = _MISSING) -> list[float]:
        value = self._lookup(key, default)
        if not isinstance(value, list) or not all(
            isinstance(v, (int, float)) and not isinstance(v, bool) for v in value
        ):
            raise self._bad(key, value, "must be a list of numbers")
        return [float(v) for v in value]

    def get_shape(self, key: str = "shape") -> Shape:
        dims = self.get_ints(key)
        if any(d < 0 for d in dims):
            raise self._bad(key, dims, "dimensions must be non-negative")
        return tuple(dims)

    def get_data_type(self, key: str = "dataType", default: Any = _MISSING) -> DataType:
        """The `dataType` field: "single" or "double"."""
        name = self.get_str(key, default)
        dtype = parse_data_type(name)
        if dtype is None:
            raise self._bad(key, name, "unsupported data type (expected 'single' or 'double')")
        return dtype

    def input(self, index: int) -> str:
        if index >= len(self.inputs):
            raise ConfigurationError(
                f"expected at least {index + 1} input(s), got {len(self.inputs)}",
                config_key="inputs",
                operation=self.type,
            )
        return self.inputs[index]

    def output(self, index: int = 0) -> str:
        if index >= len(self.outputs):
            raise ConfigurationError(
                f"expected at least {index + 1} output(s), got {len(self.outputs)}",
                config_key="outputs",
                operation=self.type,
            )
        return self.outputs[index]

    def _lookup(self, key: str, default: Any) -> Any:
        if key in self.fields:
            return self.fields[key]
        if default is _MISSING:
            raise ConfigurationError(
                f"missing required field '{key}'",
                config_key=key,
                operation=self.type,
            )
        return default

    def _bad(self, key: str, value: Any, reason: str) -> ConfigurationError:
        return ConfigurationError(
            f"field '{key}' {reason}",
            config_key=key,
            config_value=value,
            operation=self.type,
        )

    def __repr__(self) -> str:
        ins = ", ".join(self.inputs)
        outs = ", ".join(self.outputs)
        return f"{self.type}({ins}) -> ({outs})"


def _name_list(entry: dict, key: str, op_type: Optional[str]) -> list[str]:
    value = entry.get(key, [])
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigurationError(
            f"'{key}' must be a list of tensor names",
            config_key=key,
            config_value=value,
            operation=op_type,
        )
    return list(value)
