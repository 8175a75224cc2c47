"""Unit tests for the completion orchestrator.

Tests the two-pass tool-call loop: a plain first pass is surfaced as-is, a
first pass with tool calls is dispatched and replaced by the second pass.
"""

from typing import Any

import pytest

from tests.unit.streaming.conftest import make_text_chunk, make_tool_call_chunk


class FakeProvider:
    """ChatProvider that replays one scripted chunk list per pass."""

    def __init__(self, *passes: list[Any], error: Exception | None = None):
        self.passes = list(passes)
        self.error = error
        self.requests: list[dict[str, Any]] = []

    async def stream(self, conversation, parameters, *, tools=(), tool_choice=None):
        self.requests.append(
            {
                "conversation": conversation,
                "parameters": parameters,
                "tools": tools,
                "tool_choice": tool_choice,
            }
        )
        if self.error is not None:
            raise self.error
        for chunk in self.passes.pop(0):
            yield chunk


class RecordingExecutor:
    def __init__(self, result: dict[str, Any] | None = None, error: Exception | None = None):
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.result = result or {"message": "done", "status": "succeeded"}
        self.error = error

    async def execute(self, action: str, parameters: dict[str, Any]) -> dict[str, Any]:
        self.calls.append((action, parameters))
        if self.error is not None:
            raise self.error
        return dict(self.result)


def _orchestrator(provider, settings, executor=None, **kwargs):
    from actionchat.orchestrator import CompletionOrchestrator
    from actionchat.tools.registry import build_tool_registry

    registry = build_tool_registry(executor or RecordingExecutor(), settings)
    return CompletionOrchestrator(provider, registry, **kwargs)


async def _collect(orchestrator, messages, **kwargs):
    return [token async for token in orchestrator.stream(messages, **kwargs)]


USER_DELETE = [{"from": "user", "content": "Please delete ticket T1"}]

DELETE_PASS = [
    make_tool_call_chunk("delete_ticket", "", "call-1"),
    make_tool_call_chunk(None, '{"ticket_id": "T1"}', None),
    make_text_chunk("", "tool_calls"),
]


class TestPlainCompletion:
    """First pass without tool calls."""

    @pytest.mark.asyncio
    async def test_tokens_pass_through(self, test_settings):
        provider = FakeProvider([make_text_chunk("Hi"), make_text_chunk(" there", "stop")])
        tokens = await _collect(_orchestrator(provider, test_settings), USER_DELETE)

        assert [t.text for t in tokens] == ["Hi", " there"]
        assert tokens[-1].is_final
        assert tokens[-1].generated_text == "Hi there"
        assert len(provider.requests) == 1

    @pytest.mark.asyncio
    async def test_tools_offered_on_every_request(self, test_settings):
        provider = FakeProvider([make_text_chunk("ok", "stop")])
        await _collect(_orchestrator(provider, test_settings), USER_DELETE)

        request = provider.requests[0]
        assert [t["function"]["name"] for t in request["tools"]] == [
            "save_output",
            "sent_mail",
            "create_ticket",
            "delete_ticket",
        ]
        assert request["tool_choice"] == "auto"


class TestToolRound:
    """First pass requests a tool, second pass is surfaced."""

    @pytest.mark.asyncio
    async def test_delete_ticket_end_to_end(self, test_settings):
        executor = RecordingExecutor({"message": "Ticket T1 deleted", "status": "succeeded"})
        provider = FakeProvider(
            DELETE_PASS,
            [make_text_chunk("Ticket T1 "), make_text_chunk("deleted.", "stop")],
        )
        tokens = await _collect(_orchestrator(provider, test_settings, executor), USER_DELETE)

        assert executor.calls == [("anaita_actions.delete_ticket", {"ticket_id": "T1"})]
        assert [t.id for t in tokens] == [0, 1]
        assert tokens[-1].generated_text == "Ticket T1 deleted."

        second = provider.requests[1]["conversation"]
        assert [m.role for m in second] == ["system", "user", "assistant", "tool"]
        assert second[2].tool_calls[0].name == "delete_ticket"
        assert second[3].tool_call_id == "call-1"
        assert '"status": "succeeded"' in second[3].content

    @pytest.mark.asyncio
    async def test_first_pass_text_not_surfaced(self, test_settings):
        """Text streamed alongside tool calls in the first pass is discarded."""
        provider = FakeProvider(
            [make_text_chunk("Let me do that. "), *DELETE_PASS],
            [make_text_chunk("Done.", "stop")],
        )
        tokens = await _collect(_orchestrator(provider, test_settings), USER_DELETE)

        assert "".join(t.text for t in tokens) == "Done."

    @pytest.mark.asyncio
    async def test_second_pass_tool_calls_not_serviced(self, test_settings):
        executor = RecordingExecutor()
        provider = FakeProvider(
            DELETE_PASS,
            [make_tool_call_chunk("delete_ticket", '{"ticket_id": "T2"}', "call-2")],
        )
        await _collect(_orchestrator(provider, test_settings, executor), USER_DELETE)

        assert len(executor.calls) == 1
        assert len(provider.requests) == 2

    @pytest.mark.asyncio
    async def test_first_snapshot_not_mutated(self, test_settings):
        provider = FakeProvider(DELETE_PASS, [make_text_chunk("ok", "stop")])
        await _collect(_orchestrator(provider, test_settings), USER_DELETE)

        assert len(provider.requests[0]["conversation"]) == 2


class TestFailures:
    """Failures abort the request before any token is yielded."""

    @pytest.mark.asyncio
    async def test_executor_error_propagates(self, test_settings):
        from actionchat.exceptions import ActionExecutorError

        executor = RecordingExecutor(error=ActionExecutorError("HTTP 500", "x", status_code=500))
        provider = FakeProvider(DELETE_PASS, [make_text_chunk("never", "stop")])
        orchestrator = _orchestrator(provider, test_settings, executor)

        tokens = []
        with pytest.raises(ActionExecutorError):
            async for token in orchestrator.stream(USER_DELETE):
                tokens.append(token)

        assert tokens == []
        assert len(provider.requests) == 1

    @pytest.mark.asyncio
    async def test_malformed_arguments_abort(self, test_settings):
        from actionchat.exceptions import ArgumentParseError

        provider = FakeProvider([make_tool_call_chunk("delete_ticket", '{"ticket', "call-1")])
        with pytest.raises(ArgumentParseError):
            await _collect(_orchestrator(provider, test_settings), USER_DELETE)

    @pytest.mark.asyncio
    async def test_provider_error_propagates(self, test_settings):
        from actionchat.exceptions import LLMError

        provider = FakeProvider(error=LLMError("boom", provider="openai"))
        with pytest.raises(LLMError):
            await _collect(_orchestrator(provider, test_settings), USER_DELETE)


class TestPrepare:
    """System prompt policy and parameter merging."""

    def test_replace_mode_overwrites_system_prompt(self, test_settings):
        from actionchat.settings import DEFAULT_CONFIRMATION_INSTRUCTION

        orchestrator = _orchestrator(FakeProvider(), test_settings)
        run = orchestrator.prepare(
            [{"from": "system", "content": "Be terse."}, *USER_DELETE],
            preprompt="Custom prompt",
        )

        assert run.conversation[0].content == DEFAULT_CONFIRMATION_INSTRUCTION
        assert len(run.conversation) == 2

    def test_system_message_inserted_when_missing(self, test_settings):
        orchestrator = _orchestrator(FakeProvider(), test_settings)
        run = orchestrator.prepare(USER_DELETE)

        assert [m.role for m in run.conversation] == ["system", "user"]

    def test_prepend_mode_keeps_caller_prompt(self, test_settings):
        from actionchat.orchestrator import ToolingConfig

        tooling = ToolingConfig(instruction="Confirm first.", instruction_mode="prepend")
        orchestrator = _orchestrator(FakeProvider(), test_settings, tooling=tooling)
        run = orchestrator.prepare(USER_DELETE, preprompt="You are a helpdesk bot.")

        assert run.conversation[0].content == "Confirm first.\n\nYou are a helpdesk bot."

    def test_off_mode_uses_existing_system_content(self, test_settings):
        from actionchat.orchestrator import ToolingConfig

        tooling = ToolingConfig(instruction_mode="off")
        orchestrator = _orchestrator(FakeProvider(), test_settings, tooling=tooling)
        run = orchestrator.prepare([{"from": "system", "content": "Be terse."}, *USER_DELETE])

        assert run.conversation[0].content == "Be terse."

    def test_generate_settings_override_model_defaults(self, test_settings):
        from actionchat.llm.config import GenerationParameters, ModelConfig

        model = ModelConfig(
            name="gpt-4o-mini",
            parameters=GenerationParameters(max_new_tokens=256, temperature=0.2),
        )
        orchestrator = _orchestrator(FakeProvider(), test_settings, model=model)
        run = orchestrator.prepare(USER_DELETE, generate_settings={"temperature": 0.9})

        assert run.parameters.max_new_tokens == 256
        assert run.parameters.temperature == 0.9

    def test_tooling_from_settings(self, test_settings):
        from actionchat.orchestrator import ToolingConfig

        settings = test_settings.model_copy(update={"instruction_mode": "off"})
        assert ToolingConfig.from_settings(settings).instruction_mode == "off"


class TestCompletionStages:
    @pytest.mark.asyncio
    async def test_run_ends_done_with_tool_calls_recorded(self, test_settings):
        from actionchat.orchestrator import CompletionStage

        provider = FakeProvider(DELETE_PASS, [make_text_chunk("ok", "stop")])
        orchestrator = _orchestrator(provider, test_settings)
        run = orchestrator.prepare(USER_DELETE)

        chunks = await orchestrator.complete(run)

        assert run.stage is CompletionStage.DONE
        assert [tc.name for tc in run.tool_calls] == ["delete_ticket"]
        assert len(chunks) == 1
