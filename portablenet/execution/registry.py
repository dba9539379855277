# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Operator Registry

Maps operation type tags to handler functions. Handlers are registered with
a decorator, so new operation kinds are added without touching the executor.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, TYPE_CHECKING

from ..errors import UnsupportedOperationError

if TYPE_CHECKING:
    from ..core.types import Status
    from .descriptor import OperationDescriptor
    from .workspace import Workspace

logger = logging.getLogger("portablenet.execution.registry")


# Signature: (op: OperationDescriptor, ws: Workspace) -> Status
OperatorFunc = Callable[["OperationDescriptor", "Workspace"], "Status"]


class OperatorRegistry:
    """
    Registry of operation handlers.

    Example:
        @OperatorRegistry.register("Scale")
        def execute_scale(op, ws):
            x = ws.get(op.input(0))
            y = ws.get(op.output(0), x.dtype, x.shape)
            y.data[...] = x.data * op.get("factor", 1.0)
            return Status.Ok()

        handler = OperatorRegistry.get_handler("Scale")
        status = handler(op, ws)
    """

    _registry: Dict[str, OperatorFunc] = {}

    @classmethod
    def register(
        cls,
        op_type: str,
        aliases: Optional[List[str]] = None,
    ) -> Callable[[OperatorFunc], OperatorFunc]:
        """
        Decorator to register an operation handler.

        Args:
            op_type: Operation type tag as written in the manifest.
            aliases: Alternative tags for the same handler.
        """

        def decorator(func: OperatorFunc) -> OperatorFunc:
            for tag in [op_type, *(aliases or [])]:
                if tag in cls._registry and cls._registry[tag] is not func:
                    logger.debug(f"Replacing handler for '{tag}'")
                cls._registry[tag] = func
            return func

        return decorator

    @classmethod
    def get_handler(cls, op_type: str) -> OperatorFunc:
        """
        Get the handler for an operation type.

        Raises:
            UnsupportedOperationError: If no handler is registered.
        """
        if op_type not in cls._registry:
            raise UnsupportedOperationError(op_type, cls.list_operators())
        return cls._registry[op_type]

    @classmethod
    def is_supported(cls, op_type: str) -> bool:
        return op_type in cls._registry

    @classmethod
    def list_operators(cls) -> List[str]:
        return sorted(cls._registry.keys())

    @classmethod
    def unregister(cls, op_type: str) -> None:
        cls._registry.pop(op_type, None)

    @classmethod
    def clear(cls) -> None:
        """Clear all registered handlers (for testing)."""
        cls._registry.clear()

    @classmethod
    def count(cls) -> int:
        return len(cls._registry)

    @classmethod
    def get_unsupported_ops(cls, op_types: List[str]) -> List[str]:
        """Operation types from `op_types` without a handler, in order."""
        return [op for op in op_types if not cls.is_supported(op)]
