# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Integration tests for Program loading and execution.

Tests full bundle execution:
- Load of a raw float32 dump
- Stale cache on re-execution
- Fail-fast on configuration errors and unknown operations
- Manifest loading policies
"""

import json

import numpy as np
import pytest

from portablenet.config import ExecutionConfig
from portablenet.core import DataType, Status, StatusCode
from portablenet.errors import ConfigurationError, ResourceError
from portablenet.execution import OperatorRegistry, Program, Workspace


def load_op(name, file_name, shape, data_type="single"):
    return {
        "type": "Load",
        "inputs": [],
        "outputs": [name],
        "fileName": file_name,
        "dataType": data_type,
        "shape": list(shape),
    }


class TestLoadEndToEnd:
    """Test a bundle with a single Load operation."""

    def test_load_float32(self, write_bundle):
        """After execute, x holds the six floats from x.bin in order."""
        values = np.array([1.0, -2.5, 3.25, 0.0, 1e6, -7.0], dtype=np.float32)
        path = write_bundle([load_op("x", "x.bin", [2, 3])], {"x.bin": values})

        program = Program()
        assert program.load(path)
        assert program.is_loaded
        assert len(program) == 1

        ws = Workspace(path)
        status = program.execute(ws)

        assert status.ok()
        x = ws.get("x")
        assert x.dtype == DataType.Float32
        assert x.shape == (2, 3)
        np.testing.assert_array_equal(x.data.ravel(), values)

    def test_load_float64(self, write_bundle):
        values = np.linspace(0, 1, 12).astype(np.float64)
        path = write_bundle([load_op("w", "w.bin", [3, 4], "double")], {"w.bin": values})

        program = Program()
        program.load(path)
        ws = Workspace(path)

        assert program.execute(ws)
        np.testing.assert_array_equal(ws.get("w").data, values.reshape(3, 4))

    def test_reexecute_keeps_cached_tensor(self, write_bundle, tmp_path):
        """A changed resource file is ignored when the output already exists."""
        original = np.arange(6, dtype=np.float32)
        path = write_bundle([load_op("x", "x.bin", [2, 3])], {"x.bin": original})

        program = Program()
        program.load(path)
        ws = Workspace(path)
        assert program.execute(ws)

        (tmp_path / "x.bin").write_bytes(np.full(6, 9.0, dtype=np.float32).tobytes())
        assert program.execute(ws)

        np.testing.assert_array_equal(ws.get("x").data.ravel(), original)

    def test_force_reload_reads_new_contents(self, write_bundle, tmp_path):
        path = write_bundle(
            [load_op("x", "x.bin", [6])], {"x.bin": np.zeros(6, dtype=np.float32)}
        )
        program = Program()
        program.load(path)
        ws = Workspace(path, config=ExecutionConfig(force_reload=True))
        assert program.execute(ws)
        first = ws.get("x")

        (tmp_path / "x.bin").write_bytes(np.full(6, 9.0, dtype=np.float32).tobytes())
        assert program.execute(ws)

        assert ws.get("x") is first
        assert np.all(ws.get("x").data == 9.0)

    def test_unsupported_data_type(self, write_bundle):
        """An int16 Load is a configuration error and allocates nothing."""
        path = write_bundle(
            [load_op("x", "x.bin", [2], "int16")],
            {"x.bin": np.zeros(2, dtype=np.int16)},
        )
        program = Program()
        program.load(path)
        ws = Workspace(path)

        status = program.execute(ws)

        assert not status
        assert status.code == StatusCode.InvalidArgument
        assert status.operation_index == 0
        assert status.operation_type == "Load"
        assert "dataType" in status.message
        assert not ws.exists("x")
        assert len(ws) == 0


class TestFailFast:
    """Test that execution stops at the first failing operation."""

    def test_halts_after_failing_operation(self, write_bundle):
        """Operations before the failure keep their effects; later ones never run."""
        ops = [
            load_op("a", "a.bin", [2]),
            load_op("b", "b.bin", [2]),
            load_op("c", "c.bin", [2], "int16"),
            load_op("d", "d.bin", [2]),
        ]
        resources = {
            f"{n}.bin": np.full(2, i, dtype=np.float32) for i, n in enumerate("abcd")
        }
        path = write_bundle(ops, resources)

        program = Program()
        program.load(path)
        ws = Workspace(path)
        status = program.execute(ws)

        assert not status
        assert status.operation_index == 2
        assert ws.exists("a") and ws.exists("b")
        assert not ws.exists("c")
        assert not ws.exists("d")
        np.testing.assert_array_equal(ws.get("b").data, [1.0, 1.0])

    def test_unknown_operation_type(self, write_bundle):
        """Unknown types are reported, never skipped."""
        path = write_bundle(
            [{"type": "Softmax", "inputs": ["x"], "outputs": ["y"]}, load_op("x", "x.bin", [1])],
            {"x.bin": np.ones(1, dtype=np.float32)},
        )
        program = Program()
        program.load(path)
        assert program.get_unsupported_ops() == ["Softmax"]

        ws = Workspace(path)
        status = program.execute(ws)

        assert status.code == StatusCode.NotImplemented
        assert status.operation_index == 0
        assert "Softmax" in str(status)
        assert not ws.exists("x")

    def test_handler_status_is_propagated(self, write_bundle):
        """A handler may fail by returning a status instead of raising."""

        @OperatorRegistry.register("TestFail")
        def execute_fail(op, ws):
            return Status.Error(StatusCode.InternalError, "boom")

        try:
            path = write_bundle([{"type": "TestFail"}, load_op("x", "x.bin", [1])])
            program = Program()
            program.load(path)
            ws = Workspace(path)
            status = program.execute(ws)
        finally:
            OperatorRegistry.unregister("TestFail")

        assert status.code == StatusCode.InternalError
        assert status.message == "boom"
        assert str(status) == "InternalError at operation 0 (TestFail): boom"
        assert not ws.exists("x")

    def test_empty_program_succeeds(self):
        program = Program()
        assert not program.is_loaded
        assert program.execute(Workspace()) == Status.Ok()


class TestProgramLoading:
    """Test manifest loading policies."""

    def test_missing_manifest_keeps_program(self, write_bundle, tmp_path):
        path = write_bundle([load_op("x", "x.bin", [1])])
        program = Program()
        program.load(path)

        status = program.load(str(tmp_path / "missing"))

        assert status.code == StatusCode.NotFound
        assert len(program) == 1
        assert program.operations[0].outputs == ["x"]

    def test_missing_manifest_strict(self, tmp_path):
        program = Program(ExecutionConfig(strict_manifest=True))
        with pytest.raises(ResourceError):
            program.load(str(tmp_path))
        assert not program.is_loaded

    def test_reload_replaces_program(self, write_bundle, tmp_path):
        path = write_bundle([load_op("x", "x.bin", [1]), load_op("y", "y.bin", [1])])
        program = Program()
        program.load(path)
        assert len(program) == 2

        write_bundle([load_op("z", "z.bin", [1])])
        program.load(path)
        assert [op.outputs for op in program.operations] == [["z"]]

    def test_custom_manifest_name(self, write_bundle):
        path = write_bundle([load_op("x", "x.bin", [1])], manifest_name="model.json")
        program = Program(ExecutionConfig(manifest_name="model.json"))
        assert program.load(path)
        assert len(program) == 1

    def test_invalid_json(self, tmp_path):
        (tmp_path / "net.json").write_text("{not json", encoding="utf-8")
        program = Program()
        with pytest.raises(ConfigurationError):
            program.load(str(tmp_path))
        assert not program.is_loaded

    def test_invalid_utf8(self, write_bundle, tmp_path):
        """Undecodable bytes are a configuration error and keep the program."""
        path = write_bundle([load_op("x", "x.bin", [1])])
        program = Program()
        program.load(path)

        (tmp_path / "net.json").write_bytes(b'{"operations": [\xff]}')
        with pytest.raises(ConfigurationError, match="UTF-8"):
            program.load(path)
        assert len(program) == 1

    @pytest.mark.parametrize("document", [[], {}, {"operations": {}}])
    def test_missing_operations(self, document):
        program = Program()
        with pytest.raises(ConfigurationError):
            program.load_document(document)

    def test_summary(self, write_bundle):
        values = np.array([4.0], dtype=np.float32)
        path = write_bundle([load_op("x", "x.bin", [1])], {"x.bin": values})
        program = Program()
        program.load(path)
        ws = Workspace(path)
        program.execute(ws)

        text = program.summary(ws)
        assert json.loads(program.dump())["operations"][0]["outputs"] == ["x"]
        assert '"fileName": "x.bin"' in text
        assert "\tx: [1] 4.0 ..." in text
