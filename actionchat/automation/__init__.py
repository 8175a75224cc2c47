"""Automation backend client.

Submits named actions to the executions API and polls them to completion.
"""

from actionchat.automation.client import (
    IN_PROGRESS_STATUSES,
    AutomationClient,
    AutomationClientConfig,
    ExecutionPoll,
    PollState,
    get_automation_client,
    reset_automation_client,
    with_status,
)

__all__ = [
    "IN_PROGRESS_STATUSES",
    "AutomationClient",
    "AutomationClientConfig",
    "ExecutionPoll",
    "PollState",
    "get_automation_client",
    "reset_automation_client",
    "with_status",
]
