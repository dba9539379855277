# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Tests for operation descriptors and the operator registry.
"""

import pytest

from portablenet.core import DataType, Status
from portablenet.errors import ConfigurationError, UnsupportedOperationError
from portablenet.execution import OperationDescriptor, OperatorRegistry, Program

# Import operators to register them
from portablenet.execution.operators import load_ops, conv_ops  # noqa: F401


class TestOperationDescriptor:
    """Tests for parsing and typed field access."""

    def test_from_dict(self):
        op = OperationDescriptor.from_dict(
            {
                "type": "Load",
                "inputs": [],
                "outputs": ["x"],
                "fileName": "x.bin",
                "dataType": "single",
                "shape": [2, 3],
            }
        )
        assert op.type == "Load"
        assert op.outputs == ["x"]
        assert op.output(0) == "x"
        assert op.get_str("fileName") == "x.bin"
        assert op.get_data_type() == DataType.Float32
        assert op.get_shape() == (2, 3)
        assert op.to_dict()["shape"] == [2, 3]

    def test_double_data_type(self):
        op = OperationDescriptor("Load", fields={"dataType": "double"})
        assert op.get_data_type() == DataType.Float64

    @pytest.mark.parametrize("value", ["int16", "float", "", 4])
    def test_unknown_data_type(self, value):
        op = OperationDescriptor("Load", fields={"dataType": value})
        with pytest.raises(ConfigurationError):
            op.get_data_type()

    def test_missing_field(self):
        op = OperationDescriptor("Load")
        with pytest.raises(ConfigurationError, match="fileName"):
            op.get_str("fileName")

    def test_defaults(self):
        op = OperationDescriptor("Conv")
        assert op.get_ints("stride", default=[1]) == [1]
        assert op.get_data_type(default="single") == DataType.Float32

    def test_scalar_promoted_to_list(self):
        op = OperationDescriptor("Conv", fields={"pad": 2})
        assert op.get_ints("pad") == [2]

    @pytest.mark.parametrize("shape", [[2, -1], "2x3", [2.5], [True]])
    def test_bad_shape(self, shape):
        op = OperationDescriptor("Load", fields={"shape": shape})
        with pytest.raises(ConfigurationError):
            op.get_shape()

    def test_missing_output(self):
        op = OperationDescriptor("Load")
        with pytest.raises(ConfigurationError):
            op.output(0)

    @pytest.mark.parametrize(
        "entry",
        [
            [],
            {"inputs": []},
            {"type": 3},
            {"type": "Load", "outputs": "x"},
            {"type": "Load", "inputs": [1]},
        ],
    )
    def test_malformed_entries(self, entry):
        with pytest.raises(ConfigurationError):
            OperationDescriptor.from_dict(entry)


class TestOperatorRegistry:
    """Tests for handler registration and lookup."""

    def test_builtin_handlers_registered(self):
        Program()
        for op_type in ("Load", "LoadImage", "Conv"):
            assert OperatorRegistry.is_supported(op_type)

    def test_unknown_type(self):
        assert not OperatorRegistry.is_supported("Softmax")
        with pytest.raises(UnsupportedOperationError) as info:
            OperatorRegistry.get_handler("Softmax")
        assert info.value.op_type == "Softmax"
        assert "Load" in str(info.value)

    def test_register_with_aliases(self):
        @OperatorRegistry.register("TestNoop", aliases=["TestNop"])
        def execute_noop(op, ws):
            return Status.Ok()

        try:
            assert OperatorRegistry.get_handler("TestNoop") is execute_noop
            assert OperatorRegistry.get_handler("TestNop") is execute_noop
            assert "TestNoop" in OperatorRegistry.list_operators()
        finally:
            OperatorRegistry.unregister("TestNoop")
            OperatorRegistry.unregister("TestNop")

        assert not OperatorRegistry.is_supported("TestNoop")

    def test_get_unsupported_ops(self):
        assert OperatorRegistry.get_unsupported_ops(["Load", "Relu", "Conv", "Pool"]) == [
            "Relu",
            "Pool",
        ]
