"""Automation backend client: submit an action, poll until it finishes.

Wraps the executions API of a StackStorm-style automation service:

    POST {base}/executions        {"action": ..., "parameters": {...}} -> {"id": ...}
    GET  {base}/executions?id=ID  -> [{"status": ..., "result": ...}]

Polling is an explicit state machine (PENDING -> POLLING -> DONE | TIMED_OUT
| FAILED) bounded by a monotonic deadline and an optional attempt limit.
The sleep between polls is an ``asyncio.sleep`` so cancelling the calling
task stops the loop.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any

import httpx
from pydantic import BaseModel, Field

from actionchat.exceptions import ActionExecutorError, PollTimeoutError
from actionchat.settings import get_settings

logger = logging.getLogger(__name__)

# Statuses reported while an execution has not reached a terminal state
IN_PROGRESS_STATUSES: frozenset[str] = frozenset({"requested", "scheduled", "running"})


class AutomationClientConfig(BaseModel):
    """Configuration for the automation client."""

    base_url: str = Field(..., description="Executions API base URL, e.g. https://host/api/v1")
    api_key: str = Field(..., description="API key sent as St2-Api-Key")
    timeout: int = Field(default=30, description="Request timeout in seconds")
    poll_interval: float = Field(default=1.0, ge=0.0, description="Seconds between status polls")
    poll_timeout: float = Field(default=300.0, gt=0, description="Overall polling deadline")
    poll_max_attempts: int | None = Field(default=None, ge=1)


class PollState(str, Enum):
    PENDING = "pending"
    POLLING = "polling"
    DONE = "done"
    TIMED_OUT = "timed_out"
    FAILED = "failed"


@dataclass
class ExecutionPoll:
    """Progress of one execution through the poll state machine."""

    execution_id: str
    action: str
    deadline: float
    state: PollState = PollState.PENDING
    attempts: int = 0
    status: str | None = None
    result: Any = None

    @property
    def in_progress(self) -> bool:
        return self.status is None or self.status in IN_PROGRESS_STATUSES

    def remaining(self) -> float:
        return self.deadline - time.monotonic()


def with_status(result: Any, status: str | None) -> dict[str, Any]:
    """Return the execution result with its final ``status`` injected."""
    if isinstance(result, dict):
        return {**result, "status": status}
    if result is None:
        return {"status": status}
    return {"result": result, "status": status}


class AutomationClient:
    """HTTP client for the automation executions API."""

    def __init__(self, config: AutomationClientConfig | None = None):
        """Initialize the client.

        Args:
            config: Optional configuration (uses settings if not provided)
        """
        self.config = config or self._resolve_config()
        self._http_client: httpx.AsyncClient | None = None

    @staticmethod
    def _resolve_config() -> AutomationClientConfig:
        settings = get_settings()
        return AutomationClientConfig(
            base_url=settings.automation_url,
            api_key=settings.automation_api_key.get_secret_value(),
            timeout=settings.automation_timeout,
            poll_interval=settings.poll_interval_seconds,
            poll_timeout=settings.poll_timeout_seconds,
            poll_max_attempts=settings.poll_max_attempts,
        )

    def _get_http_client(self) -> httpx.AsyncClient:
        """Get or create a shared httpx.AsyncClient with connection pooling."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=self.config.timeout,
                limits=httpx.Limits(
                    max_keepalive_connections=20,
                    max_connections=100,
                ),
            )
        return self._http_client

    async def close(self) -> None:
        """Close the shared HTTP client and release connections."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    def _headers(self) -> dict[str, str]:
        return {"St2-Api-Key": self.config.api_key}

    async def _request(
        self,
        method: str,
        path: str,
        *,
        action: str | None = None,
        json: dict | None = None,
        params: dict | None = None,
    ) -> Any:
        """Make a request to the executions API.

        Returns:
            Response JSON ({} for an empty body)

        Raises:
            ActionExecutorError: On transport failure or a non-2xx response
        """
        client = self._get_http_client()
        url = f"{self.config.base_url.rstrip('/')}{path}"
        try:
            response = await client.request(
                method,
                url,
                headers=self._headers(),
                json=json,
                params=params,
            )
        except httpx.TimeoutException as e:
            raise ActionExecutorError(f"{method} {url}: Timeout", action) from e
        except httpx.HTTPError as e:
            raise ActionExecutorError(f"{method} {url}: {type(e).__name__}", action) from e

        if not response.is_success:
            raise ActionExecutorError(
                f"{method} {url}: HTTP {response.status_code}",
                action,
                {"body": response.text[:500]},
                status_code=response.status_code,
            )
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise ActionExecutorError(
                f"{method} {url}: invalid JSON in response",
                action,
                {"body": response.text[:500]},
                status_code=response.status_code,
            ) from e

    async def submit(self, action: str, parameters: dict[str, Any]) -> str:
        """Submit an action for execution.

        Returns:
            The execution id
        """
        data = await self._request(
            "POST",
            "/executions",
            action=action,
            json={"action": action, "parameters": parameters},
        )
        execution_id = data.get("id") if isinstance(data, dict) else None
        if not execution_id:
            raise ActionExecutorError("Execution submit returned no id", action, {"response": data})
        logger.debug("Submitted %s as execution %s", action, execution_id)
        return str(execution_id)

    async def get_execution(self, execution_id: str, *, action: str | None = None) -> dict[str, Any]:
        """Fetch the current record of an execution."""
        data = await self._request("GET", "/executions", action=action, params={"id": execution_id})
        if isinstance(data, list):
            if not data:
                raise ActionExecutorError(
                    f"Execution {execution_id} not found", action, status_code=404
                )
            data = data[0]
        if not isinstance(data, dict):
            raise ActionExecutorError(
                f"Unexpected execution record for {execution_id}", action, {"response": data}
            )
        return data

    async def wait_for(self, execution_id: str, action: str) -> ExecutionPoll:
        """Poll an execution until its status leaves the in-progress set.

        Raises:
            PollTimeoutError: If the deadline or attempt limit is reached first
            ActionExecutorError: If a status request fails
        """
        poll = ExecutionPoll(
            execution_id=execution_id,
            action=action,
            deadline=time.monotonic() + self.config.poll_timeout,
        )
        poll.state = PollState.POLLING
        max_attempts = self.config.poll_max_attempts

        while True:
            poll.attempts += 1
            try:
                record = await self.get_execution(execution_id, action=action)
            except ActionExecutorError:
                poll.state = PollState.FAILED
                raise
            poll.status = record.get("status")
            poll.result = record.get("result")
            logger.debug(
                "Execution %s poll %d: status=%s", execution_id, poll.attempts, poll.status
            )

            if not poll.in_progress:
                poll.state = PollState.DONE
                return poll

            remaining = poll.remaining()
            if (max_attempts is not None and poll.attempts >= max_attempts) or remaining <= 0:
                poll.state = PollState.TIMED_OUT
                raise PollTimeoutError(
                    f"Execution {execution_id} still '{poll.status}' after "
                    f"{poll.attempts} poll(s)",
                    action,
                    execution_id=execution_id,
                    attempts=poll.attempts,
                )
            await asyncio.sleep(min(self.config.poll_interval, remaining))

    async def execute(self, action: str, parameters: dict[str, Any]) -> dict[str, Any]:
        """Submit an action and wait for its terminal result.

        Returns:
            The execution result with a ``status`` field injected
        """
        execution_id = await self.submit(action, parameters)
        poll = await self.wait_for(execution_id, action)
        if poll.status != "succeeded":
            logger.warning("Action %s finished with status '%s'", action, poll.status)
        return with_status(poll.result, poll.status)


_client: AutomationClient | None = None
_client_lock = threading.Lock()


def get_automation_client() -> AutomationClient:
    """Get or create the shared automation client.

    Thread-safe: Uses double-checked locking.
    """
    global _client
    if _client is None:
        with _client_lock:
            if _client is None:
                _client = AutomationClient()
    return _client


def reset_automation_client() -> None:
    """Drop the shared client so the next access re-reads settings."""
    global _client
    with _client_lock:
        _client = None
