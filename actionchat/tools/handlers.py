"""Handlers that run each catalogue tool as an automation action."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol

from actionchat.tools.catalogue import (
    CreateTicketArgs,
    DeleteTicketArgs,
    SaveOutputArgs,
    SentMailArgs,
    ToolKind,
)

if TYPE_CHECKING:
    from actionchat.settings import Settings
    from actionchat.tools.registry import ToolHandler

logger = logging.getLogger(__name__)


class ActionExecutor(Protocol):
    """Anything that can run a named action and return its result."""

    async def execute(self, action: str, parameters: dict[str, Any]) -> dict[str, Any]: ...


class ActionHandlers:
    """Maps each tool to an action in the configured action pack."""

    def __init__(self, executor: ActionExecutor, settings: Settings):
        self._executor = executor
        self._settings = settings

    def _action(self, name: str) -> str:
        return f"{self._settings.automation_action_pack}.{name}"

    async def _run(self, name: str, parameters: dict[str, Any]) -> dict[str, Any]:
        action = self._action(name)
        logger.info("Executing action %s", action)
        return await self._executor.execute(action, parameters)

    async def save_output(self, args: SaveOutputArgs) -> dict[str, Any]:
        settings = self._settings
        return await self._run(
            "upload_onedrive",
            {
                "client_id": settings.onedrive_client_id,
                "client_secret": settings.onedrive_client_secret.get_secret_value(),
                "tenant_id": settings.onedrive_tenant_id,
                "text": args.text,
                "usr_id": settings.onedrive_user_id,
            },
        )

    async def sent_mail(self, args: SentMailArgs) -> dict[str, Any]:
        return await self._run(
            "send_mail",
            {"email": args.mail_id, "text": args.text, "subject": args.subject},
        )

    async def create_ticket(self, args: CreateTicketArgs) -> dict[str, Any]:
        return await self._run(
            "create_ticket",
            {
                "requester": args.requester,
                "subject": args.subject,
                "description": args.description,
            },
        )

    async def delete_ticket(self, args: DeleteTicketArgs) -> dict[str, Any]:
        return await self._run("delete_ticket", {"ticket_id": args.ticket_id})

    def bindings(self) -> dict[ToolKind, ToolHandler]:
        return {
            ToolKind.SAVE_OUTPUT: self.save_output,
            ToolKind.SENT_MAIL: self.sent_mail,
            ToolKind.CREATE_TICKET: self.create_ticket,
            ToolKind.DELETE_TICKET: self.delete_ticket,
        }
