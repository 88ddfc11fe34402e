"""Tool registry and invocation handler."""

from collections.abc import Awaitable, Callable
from typing import Any

import jsonschema

from ..errors import DuplicateToolError, InvalidArgumentsError, InvalidResultError, UnknownToolError
from ..logger import get_logger, log_performance
from ..models import InvocationResult, ToolDescriptor

logger = get_logger(__name__)

ToolHandler = Callable[[dict[str, Any]], Awaitable[InvocationResult]]


class RegisteredTool:
    """A descriptor paired with its handler and compiled validators."""

    def __init__(self, descriptor: ToolDescriptor, handler: ToolHandler):
        self.descriptor = descriptor
        self.handler = handler
        self.input_validator = _validator_for(descriptor.input_schema)
        self.output_validator = (
            _validator_for(descriptor.output_schema) if descriptor.output_schema else None
        )


def _validator_for(schema: dict[str, Any]) -> jsonschema.protocols.Validator:
    cls = jsonschema.validators.validator_for(schema)
    cls.check_schema(schema)
    return cls(schema)


def _first_error(validator: jsonschema.protocols.Validator, instance: Any) -> str | None:
    error = jsonschema.exceptions.best_match(validator.iter_errors(instance))
    return error.message if error is not None else None


class ToolRegistry:
    """Registry of tools for one server instance."""

    def __init__(self) -> None:
        self._tools: dict[str, RegisteredTool] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def register(self, name: str, descriptor: ToolDescriptor, handler: ToolHandler) -> None:
        """Register a tool. Raises DuplicateToolError on a name collision."""
        if name in self._tools:
            raise DuplicateToolError(name)
        if descriptor.name != name:
            raise ValueError(f"Descriptor name {descriptor.name!r} does not match {name!r}")

        self._tools[name] = RegisteredTool(descriptor, handler)
        logger.debug(f"Registered tool {name}")

    def get(self, name: str) -> ToolDescriptor:
        try:
            return self._tools[name].descriptor
        except KeyError:
            raise UnknownToolError(name) from None

    def list_descriptors(self) -> list[ToolDescriptor]:
        """Descriptors in registration order."""
        return [tool.descriptor for tool in self._tools.values()]

    @log_performance
    async def invoke(self, name: str, arguments: dict[str, Any] | None = None) -> InvocationResult:
        """Validate arguments, run the handler and validate its result.

        The handler is never called when the arguments fail validation.
        """
        tool = self._tools.get(name)
        if tool is None:
            raise UnknownToolError(name)

        arguments = {} if arguments is None else arguments
        reason = _first_error(tool.input_validator, arguments)
        if reason is not None:
            raise InvalidArgumentsError(name, reason)

        result = await tool.handler(arguments)

        if tool.output_validator is not None:
            if result.structured_content is None:
                raise InvalidResultError(name, "output schema declared but no structured content returned")
            reason = _first_error(tool.output_validator, result.structured_content)
            if reason is not None:
                raise InvalidResultError(name, reason)

        return result
