# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Pytest configuration for PortableNet Python tests.
"""

import json
import sys
from pathlib import Path

import pytest

# Add the project root to sys.path so we can import portablenet
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

# Skip test modules that require optional dependencies not installed
collect_ignore = []

try:
    import hypothesis  # noqa: F401
except ImportError:
    collect_ignore.append("test_property_based.py")


@pytest.fixture
def write_bundle(tmp_path):
    """
    Write a bundle directory: a net.json manifest plus raw resource files.

    Usage:
        path = write_bundle([{"type": "Load", ...}], {"x.bin": array})
    """

    def _write(operations, resources=None, manifest_name="net.json"):
        (tmp_path / manifest_name).write_text(
            json.dumps({"operations": operations}), encoding="utf-8"
        )
        for file_name, data in (resources or {}).items():
            payload = data if isinstance(data, bytes) else data.tobytes()
            (tmp_path / file_name).write_bytes(payload)
        return str(tmp_path)

    return _write

