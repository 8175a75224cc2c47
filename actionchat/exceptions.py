"""actionchat exception hierarchy.

Base exceptions for all layers with correlation ID support.

Usage:
    from actionchat.exceptions import ActionExecutorError, ToolCallError

    try:
        async for token in orchestrator.stream(messages):
            ...
    except ToolCallError as e:
        logger.error("Tool dispatch failed (%s): %s", e.correlation_id, e)
"""

import uuid
from typing import Any


class ActionChatError(Exception):
    """Base exception for all actionchat errors.

    Carries a correlation_id for tracing errors across layers.
    """

    def __init__(self, message: str, *, correlation_id: str | None = None):
        self.correlation_id = correlation_id or str(uuid.uuid4())
        super().__init__(message)


class LLMError(ActionChatError):
    """Errors from chat-completion provider operations."""

    def __init__(self, message: str, *, provider: str | None = None, **kwargs):
        self.provider = provider
        super().__init__(message, **kwargs)


class ActionExecutorError(ActionChatError):
    """Errors from automation backend operations.

    Raised when a submit or status poll fails at the transport level or
    returns a non-2xx response.
    """

    def __init__(
        self,
        message: str,
        action: str | None = None,
        details: dict[str, Any] | None = None,
        *,
        status_code: int | None = None,
        correlation_id: str | None = None,
    ):
        self.action = action
        self.details = details or {}
        self.status_code = status_code
        super().__init__(message, correlation_id=correlation_id)


class PollTimeoutError(ActionExecutorError):
    """An execution stayed in progress past the poll deadline or attempt limit."""

    def __init__(
        self,
        message: str,
        action: str | None = None,
        *,
        execution_id: str | None = None,
        attempts: int = 0,
        **kwargs,
    ):
        self.execution_id = execution_id
        self.attempts = attempts
        super().__init__(message, action, **kwargs)


class ToolCallError(ActionChatError):
    """Errors raised while dispatching a model-requested tool call."""

    def __init__(self, message: str, *, tool: str | None = None, **kwargs):
        self.tool = tool
        super().__init__(message, **kwargs)


class ArgumentParseError(ToolCallError):
    """Tool call arguments are not a valid JSON object for the tool."""

    def __init__(self, message: str, *, raw_arguments: str | None = None, **kwargs):
        self.raw_arguments = raw_arguments
        super().__init__(message, **kwargs)


class UnknownToolError(ToolCallError):
    """The model requested a tool that is not in the registry."""

    pass


class ConfigurationError(ActionChatError):
    """Errors from application configuration."""

    pass
