"""Fixed catalogue of automation actions offered to the model.

Each tool kind pairs a description with a pydantic argument model; the
JSON schema sent to the provider is derived from that model so the schema
and the validated arguments cannot drift apart.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ToolKind(str, Enum):
    """Closed set of tools the model may call."""

    SAVE_OUTPUT = "save_output"
    SENT_MAIL = "sent_mail"
    CREATE_TICKET = "create_ticket"
    DELETE_TICKET = "delete_ticket"


class ToolArguments(BaseModel):
    """Base for typed tool arguments."""

    model_config = ConfigDict(extra="ignore", frozen=True)


class SaveOutputArgs(ToolArguments):
    text: str = Field(..., description="The whole generated text")


class SentMailArgs(ToolArguments):
    text: str = Field(..., description="The whole generated content of the mail")
    mail_id: str = Field(..., description="The mail id of the respective receiver")
    subject: str = Field(..., description="The subject of the mail")


class CreateTicketArgs(ToolArguments):
    requester: str = Field(..., description="The person who raised the ticket")
    subject: str = Field(..., description="The subject of the raised ticket")
    description: str = Field(..., description="The description of the raised ticket")


class DeleteTicketArgs(ToolArguments):
    ticket_id: str = Field(..., description="The id of the ticket to be deleted")


@dataclass(frozen=True)
class ToolDefinition:
    """Static catalogue entry for one tool."""

    kind: ToolKind
    description: str
    parameters: type[ToolArguments]

    @property
    def name(self) -> str:
        return self.kind.value

    def parameters_schema(self) -> dict[str, Any]:
        """JSON schema of the arguments, without pydantic titles."""
        return _strip_titles(self.parameters.model_json_schema())

    def to_openai_tool(self) -> dict[str, Any]:
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters_schema(),
            },
        }


def _strip_titles(schema: Any) -> Any:
    if isinstance(schema, dict):
        return {key: _strip_titles(value) for key, value in schema.items() if key != "title"}
    if isinstance(schema, list):
        return [_strip_titles(item) for item in schema]
    return schema


DEFAULT_CATALOGUE: tuple[ToolDefinition, ...] = (
    ToolDefinition(
        kind=ToolKind.SAVE_OUTPUT,
        description="Save the generated text in my drive",
        parameters=SaveOutputArgs,
    ),
    ToolDefinition(
        kind=ToolKind.SENT_MAIL,
        description="Send a mail to the respective mail id",
        parameters=SentMailArgs,
    ),
    ToolDefinition(
        kind=ToolKind.CREATE_TICKET,
        description="create a new ticket in ServiceNow",
        parameters=CreateTicketArgs,
    ),
    ToolDefinition(
        kind=ToolKind.DELETE_TICKET,
        description="delete an existing ticket in ServiceNow",
        parameters=DeleteTicketArgs,
    ),
)


def to_openai_tools(catalogue: tuple[ToolDefinition, ...] = DEFAULT_CATALOGUE) -> list[dict[str, Any]]:
    """Render a catalogue in chat-completions ``tools`` format."""
    return [definition.to_openai_tool() for definition in catalogue]
