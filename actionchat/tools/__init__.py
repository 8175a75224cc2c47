"""Tool catalogue, typed argument models, and the handler registry."""

from actionchat.tools.catalogue import (
    DEFAULT_CATALOGUE,
    CreateTicketArgs,
    DeleteTicketArgs,
    SaveOutputArgs,
    SentMailArgs,
    ToolArguments,
    ToolDefinition,
    ToolKind,
    to_openai_tools,
)
from actionchat.tools.handlers import ActionExecutor, ActionHandlers
from actionchat.tools.registry import ToolHandler, ToolRegistry, build_tool_registry

__all__ = [
    "DEFAULT_CATALOGUE",
    "ActionExecutor",
    "ActionHandlers",
    "CreateTicketArgs",
    "DeleteTicketArgs",
    "SaveOutputArgs",
    "SentMailArgs",
    "ToolArguments",
    "ToolDefinition",
    "ToolHandler",
    "ToolKind",
    "ToolRegistry",
    "build_tool_registry",
    "to_openai_tools",
]
