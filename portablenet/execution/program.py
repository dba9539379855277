# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Program

Loads a manifest describing an ordered list of operations and executes it
against a caller-owned Workspace, one operation at a time, in list order.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, List, Optional

from ..config import ExecutionConfig
from ..core.types import Status, StatusCode
from ..errors import ConfigurationError, PortableNetError, ResourceError
from .descriptor import OperationDescriptor
from .registry import OperatorRegistry
from .workspace import Workspace

logger = logging.getLogger("portablenet.execution.program")


class Program:
    """
    An ordered sequence of operation descriptors.

    Execution is fail-fast: the first operation that fails stops the run and
    its status is returned, tagged with the operation index. Workspace
    changes made by earlier operations are kept.

    Example:
        program = Program()
        program.load("bundles/alexnet")

        with Workspace("bundles/alexnet") as ws:
            status = program.execute(ws)
            if not status:
                print(status)
    """

    def __init__(self, config: Optional[ExecutionConfig] = None):
        """
        Initialize an empty (unloaded) program.

        Args:
            config: Manifest loading policy. Handler policies come from the
                    workspace passed to `execute`.
        """
        # Import operators to populate registry
        from . import operators  # noqa: F401

        self.config = config or ExecutionConfig()
        self._source: Dict[str, Any] = {}
        self._operations: List[OperationDescriptor] = []
        self._loaded = False

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def load(self, path: str) -> Status:
        """
        Load the manifest of a bundle directory.

        The manifest is `<path>/<config.manifest_name>`. If it cannot be
        opened, the current program is kept.

        Returns:
            Status.Ok() on success, a NotFound status when the manifest
            cannot be opened and the manifest policy is lenient.

        Raises:
            ResourceError: If the manifest cannot be opened and
                           `config.strict_manifest` is set.
            ConfigurationError: If the manifest is not valid UTF-8 JSON or its
                                operations are malformed.
        """
        manifest_path = os.path.join(path, self.config.manifest_name)
        try:
            with open(manifest_path, "rb") as f:
                raw = f.read()
        except OSError as e:
            if self.config.strict_manifest:
                raise ResourceError(
                    f"cannot open manifest ({e.strerror})", path=manifest_path
                ) from e
            logger.warning(f"Cannot open manifest {manifest_path}; program unchanged")
            return Status.Error(StatusCode.NotFound, f"cannot open {manifest_path}")

        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ConfigurationError(
                f"manifest is not valid UTF-8 ({e.reason} at byte {e.start})",
                config_key=manifest_path,
            ) from e

        try:
            document = json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"manifest is not valid JSON ({e.msg} at line {e.lineno})",
                config_key=manifest_path,
            ) from e

        self.load_document(document)
        logger.info(f"Loaded {len(self._operations)} operation(s) from {manifest_path}")
        return Status.Ok()

    def load_document(self, document: Any) -> None:
        """
        Replace the program with the operations of a parsed manifest.

        Raises:
            ConfigurationError: If `operations` is missing or malformed. The
                                current program is kept in that case.
        """
        if not isinstance(document, dict) or not isinstance(
            document.get("operations"), list
        ):
            raise ConfigurationError(
                "manifest needs an 'operations' list", config_key="operations"
            )

        operations = [OperationDescriptor.from_dict(op) for op in document["operations"]]

        self._source = document
        self._operations = operations
        self._loaded = True

    # -------------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------------

    def execute(self, workspace: Workspace) -> Status:
        """
        Execute every operation in order against `workspace`.

        Returns:
            Status.Ok() when all operations completed, otherwise the status
            of the first failing operation with `operation_index` (0-based)
            and `operation_type` set.
        """
        for index, op in enumerate(self._operations):
            status = self._execute_operation(op, workspace)
            if not status:
                logger.error(f"Operation {index} ({op.type}) failed: {status.message}")
                return status.at(index, op.type)

        return Status.Ok()

    def _execute_operation(self, op: OperationDescriptor, workspace: Workspace) -> Status:
        logger.debug(f"Executing {op.type}")
        try:
            handler = OperatorRegistry.get_handler(op.type)
            status = handler(op, workspace)
        except PortableNetError as e:
            return Status.Error(e.status_code, str(e))

        if status is None:
            return Status.Ok()
        return status

    def get_unsupported_ops(self) -> List[str]:
        """Operation types in this program that have no handler."""
        return sorted(set(OperatorRegistry.get_unsupported_ops([op.type for op in self._operations])))

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def operations(self) -> List[OperationDescriptor]:
        return list(self._operations)

    @property
    def source(self) -> Dict[str, Any]:
        """The parsed manifest document."""
        return self._source

    def dump(self, indent: int = 4) -> str:
        return json.dumps(self._source, indent=indent)

    def summary(self, workspace: Optional[Workspace] = None) -> str:
        """The manifest and, if given, the workspace contents."""
        lines = [self.dump()]
        if workspace is not None:
            lines.append(workspace.summary())
        return "\n".join(lines)

    def __len__(self) -> int:
        return len(self._operations)

    def __repr__(self) -> str:
        return f"Program(operations={len(self._operations)}, loaded={self._loaded})"
