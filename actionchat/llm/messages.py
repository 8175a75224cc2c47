"""Conversion from conversation snapshots to LangChain messages."""

from __future__ import annotations

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage, ToolMessage

from actionchat.conversation import ChatMessage, Conversation


def _convert_message(msg: ChatMessage) -> BaseMessage:
    if msg.role == "system":
        return SystemMessage(content=msg.content)
    if msg.role == "user":
        return HumanMessage(content=msg.content)
    if msg.role == "assistant":
        if msg.tool_calls:
            return AIMessage(
                content=msg.content,
                tool_calls=[
                    {"name": tc.name, "args": tc.parse_arguments(), "id": tc.id}
                    for tc in msg.tool_calls
                ],
            )
        return AIMessage(content=msg.content)
    return ToolMessage(
        content=msg.content,
        tool_call_id=msg.tool_call_id or "",
        name=msg.name,
    )


def to_langchain_messages(conversation: Conversation) -> list[BaseMessage]:
    """Convert a snapshot to LangChain format."""
    return [_convert_message(msg) for msg in conversation]
