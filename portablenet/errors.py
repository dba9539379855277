# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
PortableNet Error Hierarchy

Error types raised while loading and executing programs:
- PortableNetError: Base class for all PortableNet errors
- ConfigurationError: Malformed manifest or descriptor, unknown data type
- ValidationError: Shape/type inconsistencies between tensors
- ResourceError: Manifest or resource file missing or unreadable
- PortableNetMemoryError: Tensor buffer allocation failure
- UnsupportedOperationError: No handler registered for an operation type

The executor maps each category onto a StatusCode (see `status_code_for`).
"""

from typing import Optional

from .core.types import StatusCode


class PortableNetError(Exception):
    """
    Base class for all PortableNet errors.

    Attributes:
        message: Human-readable error message
        suggestions: List of suggestions to fix the error
        context: Optional context dictionary for debugging
    """

    status_code = StatusCode.InternalError

    def __init__(
        self,
        message: str,
        suggestions: Optional[list[str]] = None,
        context: Optional[dict] = None,
    ):
        self.message = message
        self.suggestions = suggestions or []
        self.context = context or {}

        super().__init__(self._format_message())

    def _format_message(self) -> str:
        lines = [self.message]

        if self.suggestions:
            lines.append("")
            lines.append("Suggestions:")
            for i, suggestion in enumerate(self.suggestions, 1):
                lines.append(f"  {i}. {suggestion}")

        if self.context:
            lines.append("")
            lines.append("Context:")
            for key, value in self.context.items():
                lines.append(f"  {key}: {value}")

        return "\n".join(lines)


class ConfigurationError(PortableNetError):
    """
    Malformed program configuration.

    Raised when:
    - A descriptor lacks a required field or has the wrong field type
    - A `dataType` value is not recognized
    - The manifest is not valid JSON or has no `operations` list
    """

    status_code = StatusCode.InvalidArgument

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[object] = None,
        operation: Optional[str] = None,
    ):
        context = {}
        if operation:
            context["operation"] = operation
        if config_key:
            context["config_key"] = config_key
        if config_value is not None:
            context["config_value"] = repr(config_value)

        super().__init__(
            message=f"Configuration error: {message}",
            suggestions=["Check the operation descriptor in the manifest"],
            context=context,
        )


class ValidationError(PortableNetError):
    """Tensor shapes or data types are inconsistent for an operation."""

    status_code = StatusCode.InvalidArgument

    def __init__(
        self,
        message: str,
        parameter: Optional[str] = None,
        expected: Optional[str] = None,
        received: Optional[str] = None,
    ):
        context = {}
        if parameter:
            context["parameter"] = parameter
        if expected:
            context["expected"] = expected
        if received:
            context["received"] = received

        super().__init__(
            message=f"Validation failed: {message}",
            context=context,
        )


class ResourceError(PortableNetError):
    """
    A file backing the program could not be read.

    Raised when:
    - The manifest cannot be opened (strict manifest policy)
    - A resource file is missing, unreadable or shorter than the tensor
    """

    status_code = StatusCode.NotFound

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        expected_bytes: Optional[int] = None,
        read_bytes: Optional[int] = None,
    ):
        self.path = path

        context = {}
        if path:
            context["path"] = path
        if expected_bytes is not None:
            context["expected_bytes"] = expected_bytes
        if read_bytes is not None:
            context["read_bytes"] = read_bytes

        super().__init__(
            message=f"Resource error: {message}",
            suggestions=[
                "Check that the file exists next to the manifest",
                "Check the workspace base name",
            ],
            context=context,
        )


class PortableNetMemoryError(PortableNetError):
    """Tensor buffer allocation failed."""

    status_code = StatusCode.OutOfMemory

    def __init__(
        self,
        message: str,
        requested_bytes: Optional[int] = None,
        tensor_name: Optional[str] = None,
    ):
        context = {}
        if tensor_name:
            context["tensor"] = tensor_name
        if requested_bytes is not None:
            context["requested_mb"] = f"{requested_bytes / (1024 * 1024):.2f}"

        super().__init__(
            message=f"Memory error: {message}",
            suggestions=["Reduce the declared tensor shape"],
            context=context,
        )


class UnsupportedOperationError(PortableNetError):
    """No handler is registered for an operation type."""

    status_code = StatusCode.NotImplemented

    def __init__(
        self,
        op_type: str,
        supported_ops: Optional[list[str]] = None,
    ):
        self.op_type = op_type
        self.supported_ops = supported_ops or []

        suggestions = []
        if supported_ops:
            suggestions.append(f"Supported operations: {', '.join(supported_ops)}")

        super().__init__(
            message=f"Operation '{op_type}' is not supported",
            suggestions=suggestions,
            context={"operation": op_type},
        )


def status_code_for(error: BaseException) -> StatusCode:
    """Map an exception onto the status code reported by the executor."""
    if isinstance(error, PortableNetError):
        return error.status_code
    return StatusCode.InternalError
