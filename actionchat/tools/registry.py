"""Tool registry: closed mapping from ToolKind to a typed handler.

The registry refuses to build unless every catalogue entry has a handler,
so a tool the model is offered can always be dispatched.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from pydantic import ValidationError

from actionchat.conversation import ToolCallRef
from actionchat.exceptions import ArgumentParseError, ConfigurationError, UnknownToolError
from actionchat.settings import Settings, get_settings
from actionchat.tools.catalogue import DEFAULT_CATALOGUE, ToolArguments, ToolDefinition, ToolKind
from actionchat.tools.handlers import ActionExecutor, ActionHandlers

logger = logging.getLogger(__name__)

ToolHandler = Callable[[Any], Awaitable[dict[str, Any]]]


class ToolRegistry:
    """Read-only lookup of tool definitions and their handlers."""

    def __init__(
        self,
        handlers: Mapping[ToolKind, ToolHandler],
        catalogue: tuple[ToolDefinition, ...] = DEFAULT_CATALOGUE,
    ):
        missing = [d.name for d in catalogue if d.kind not in handlers]
        if missing:
            raise ConfigurationError(f"No handler registered for tool(s): {', '.join(missing)}")
        self._catalogue = catalogue
        self._definitions = {d.name: d for d in catalogue}
        self._handlers = dict(handlers)

    @property
    def catalogue(self) -> tuple[ToolDefinition, ...]:
        return self._catalogue

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def resolve(self, name: str) -> tuple[ToolDefinition, ToolHandler]:
        """Look up a tool by function name.

        Raises:
            UnknownToolError: If the name is not in the catalogue
        """
        definition = self._definitions.get(name)
        if definition is None:
            raise UnknownToolError(f"Tool '{name}' is not registered", tool=name)
        return definition, self._handlers[definition.kind]

    @staticmethod
    def validate(definition: ToolDefinition, arguments: dict[str, Any]) -> ToolArguments:
        try:
            return definition.parameters.model_validate(arguments)
        except ValidationError as e:
            raise ArgumentParseError(
                f"Invalid arguments for tool '{definition.name}': "
                f"{e.error_count()} validation error(s)",
                tool=definition.name,
            ) from e

    async def invoke(self, tool_call: ToolCallRef) -> dict[str, Any]:
        """Parse, resolve, validate and run one tool call.

        Raises:
            ArgumentParseError: If the arguments are malformed or invalid
            UnknownToolError: If the function name is not registered
        """
        arguments = tool_call.parse_arguments()
        definition, handler = self.resolve(tool_call.name)
        typed_args = self.validate(definition, arguments)
        return await handler(typed_args)


def build_tool_registry(
    executor: ActionExecutor | None = None,
    settings: Settings | None = None,
) -> ToolRegistry:
    """Build the default registry backed by the automation client."""
    if executor is None:
        from actionchat.automation import get_automation_client

        executor = get_automation_client()
    handlers = ActionHandlers(executor, settings or get_settings())
    return ToolRegistry(handlers.bindings())
