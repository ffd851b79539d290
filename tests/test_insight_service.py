"""Tests for InsightService and ChatSession"""

import asyncio

import pytest

from chronos.models.chat import ChatMessage, ChatRole
from chronos.models.session import SessionRecord
from chronos.models.timer import TimerMode
from chronos.services.insights import (
    APOLOGY_MESSAGE,
    CLEARED_MESSAGE,
    EMPTY_RESPONSE_MESSAGE,
    NOT_CONFIGURED_MESSAGE,
    UNAVAILABLE_MESSAGE,
    AIServiceNotConfigured,
    ChatRejected,
    ChatSession,
    ChatStreamFailed,
    InsightService,
)
from chronos.services.insights.service import summarise_history
from chronos.services.session_log import SessionLogStore
from tests.conftest import FakeLLM, run


def record(i, mode=TimerMode.FOCUS, topic="Kubernetes"):
    return SessionRecord(
        id=str(i),
        timestamp=1_715_947_200_000 + i * 60_000,
        duration_seconds=1500,
        mode=mode,
        topic=topic,
        tags=("DevOps",),
    )


def unconfigured():
    return InsightService(api_key="")


# ── Insights ──────────────────────────────────────────────────


class TestGenerateInsights:
    def test_returns_model_text(self):
        llm = FakeLLM(text="  Keep going!  ")
        service = InsightService(llm=llm)

        text = run(service.generate_insights([record(1)], "Kubernetes"))

        assert text == "Keep going!"
        prompt = llm.calls[0][1][1].content
        assert "Current Focus Topic: Kubernetes" in prompt
        assert '"duration": "25 mins"' in prompt

    def test_failure_returns_fixed_message_and_leaves_log_alone(self):
        log = SessionLogStore()
        log.load([record(1), record(2)])
        service = InsightService(llm=FakeLLM(error=ConnectionError("quota exceeded")))

        text = run(service.generate_insights(log.read_all(), "Kubernetes"))

        assert text == UNAVAILABLE_MESSAGE
        assert [r.id for r in log.read_all()] == ["1", "2"]

    def test_empty_answer(self):
        service = InsightService(llm=FakeLLM(text="   "))

        assert run(service.generate_insights([], "Helm")) == EMPTY_RESPONSE_MESSAGE

    def test_not_configured(self):
        assert run(unconfigured().generate_insights([record(1)], "Helm")) == NOT_CONFIGURED_MESSAGE

    def test_history_window_keeps_latest_twenty(self):
        rows = summarise_history([record(i) for i in range(30)])

        assert rows.count('"mode": "FOCUS"') == 20
        assert '"date": "2024-05-17"' in rows


class TestSuggestTopics:
    def test_capped_at_five(self):
        topics = run(InsightService(llm=FakeLLM()).suggest_topics("Kubernetes"))

        assert topics == ["Helm", "Operators", "Service Mesh", "GitOps", "eBPF"]

    def test_blank_items_dropped(self):
        service = InsightService(llm=FakeLLM(topics=[" Helm ", "", "  "]))

        assert run(service.suggest_topics("Kubernetes")) == ["Helm"]

    @pytest.mark.parametrize("seed", ["", "   "])
    def test_blank_seed(self, seed):
        llm = FakeLLM()

        assert run(InsightService(llm=llm).suggest_topics(seed)) == []
        assert llm.calls == []

    def test_failure_returns_empty(self):
        service = InsightService(llm=FakeLLM(error=TimeoutError()))

        assert run(service.suggest_topics("Kubernetes")) == []

    def test_not_configured(self):
        assert run(unconfigured().suggest_topics("Kubernetes")) == []


class TestStreamChat:
    def test_history_and_topic_reach_the_model(self):
        llm = FakeLLM()
        service = InsightService(llm=llm)
        history = [
            ChatMessage(id="1", role=ChatRole.USER, text="What is a pod?", timestamp=1),
            ChatMessage(id="2", role=ChatRole.MODEL, text="The smallest unit.", timestamp=2),
        ]

        async def collect():
            return [chunk async for chunk in service.stream_chat("And a node?", history, "Kubernetes")]

        assert run(collect()) == ["Pods ", "are ", "cattle."]
        messages = llm.calls[0][1]
        assert [m.type for m in messages] == ["system", "human", "ai", "human"]
        assert "Kubernetes" in messages[0].content
        assert messages[-1].content == "And a node?"

    def test_not_configured_raises(self):
        async def collect():
            return [chunk async for chunk in unconfigured().stream_chat("hi")]

        with pytest.raises(AIServiceNotConfigured):
            run(collect())


# ── Chat session ──────────────────────────────────────────────


class TestChatSession:
    def test_starts_with_welcome(self):
        chat = ChatSession(InsightService(llm=FakeLLM()), "Terraform")

        assert len(chat.messages) == 1
        assert chat.messages[0].id == "welcome"
        assert "**Terraform**" in chat.messages[0].text

    def test_unconfigured_shows_error_and_rejects_sends(self):
        chat = ChatSession(unconfigured())

        assert chat.messages[0].id == "error-init"
        assert chat.messages[0].text == NOT_CONFIGURED_MESSAGE
        assert run(chat.send("hello")) is None
        assert len(chat.messages) == 1

    def test_streamed_reply(self):
        chat = ChatSession(InsightService(llm=FakeLLM()))
        chunks = []

        reply = run(chat.send("Explain pods", on_chunk=chunks.append))

        assert reply.text == "Pods are cattle."
        assert chunks == ["Pods ", "are ", "cattle."]
        assert [m.role for m in chat.messages] == [ChatRole.MODEL, ChatRole.USER, ChatRole.MODEL]
        assert chat.is_streaming is False

    def test_context_carries_completed_exchanges(self):
        llm = FakeLLM()
        chat = ChatSession(InsightService(llm=llm))

        run(chat.send("first"))
        run(chat.send("second"))

        second_call = llm.calls[1][1]
        assert [m.content for m in second_call[1:]] == ["first", "Pods are cattle.", "second"]

    def test_mid_stream_failure_replaced_by_apology(self):
        llm = FakeLLM(fail_after=2)
        chat = ChatSession(InsightService(llm=llm))

        reply = run(chat.send("Explain pods"))

        assert reply.text == APOLOGY_MESSAGE
        texts = [m.text for m in chat.messages]
        assert "Pods are " not in texts
        assert texts[-2:] == ["Explain pods", APOLOGY_MESSAGE]

    def test_failed_exchange_not_in_context(self):
        llm = FakeLLM(fail_after=0)
        chat = ChatSession(InsightService(llm=llm))
        run(chat.send("broken"))

        llm.fail_after = None
        run(chat.send("again"))

        assert [m.content for m in llm.calls[1][1][1:]] == ["again"]

    def test_blank_input_ignored(self):
        chat = ChatSession(InsightService(llm=FakeLLM()))

        assert run(chat.send("   ")) is None
        assert len(chat.messages) == 1

    def test_send_and_clear_rejected_while_streaming(self):
        gate = asyncio.Event()

        class GatedLLM(FakeLLM):
            async def stream_invoke(self, messages, **kwargs):
                yield "partial "
                await gate.wait()
                yield "done"

        chat = ChatSession(InsightService(llm=GatedLLM()))

        async def scenario():
            first = asyncio.ensure_future(chat.send("one"))
            await asyncio.sleep(0.01)
            assert chat.is_streaming
            rejected = await chat.send("two")
            with pytest.raises(RuntimeError):
                chat.clear()
            gate.set()
            return rejected, await first

        rejected, reply = run(scenario())

        assert rejected is None
        assert reply.text == "partial done"
        assert [m.text for m in chat.messages if m.role == ChatRole.USER] == ["one"]

    def test_cancelled_stream_discards_partial_reply(self):
        class HangingLLM(FakeLLM):
            async def stream_invoke(self, messages, **kwargs):
                yield "partial"
                await asyncio.sleep(10)

        chat = ChatSession(InsightService(llm=HangingLLM()))

        async def scenario():
            task = asyncio.ensure_future(chat.send("one"))
            await asyncio.sleep(0.01)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        run(scenario())

        assert chat.is_streaming is False
        assert [m.text for m in chat.messages][-1] == "one"

    def test_clear_resets_transcript_and_context(self):
        llm = FakeLLM()
        chat = ChatSession(InsightService(llm=llm))
        run(chat.send("first"))

        chat.clear()
        run(chat.send("second"))

        assert chat.messages[0].id == "welcome-reset"
        assert chat.messages[0].text == CLEARED_MESSAGE
        assert [m.content for m in llm.calls[1][1][1:]] == ["second"]


class TestChatStream:
    @staticmethod
    def collect(chat, text):
        async def scenario():
            return [chunk async for chunk in chat.stream(text)]

        return run(scenario())

    def test_yields_chunks_and_updates_transcript(self):
        chat = ChatSession(InsightService(llm=FakeLLM()))

        chunks = self.collect(chat, "Explain pods")

        assert chunks == ["Pods ", "are ", "cattle."]
        assert chat.messages[-1].text == "Pods are cattle."
        assert chat.is_streaming is False

    def test_rejections(self):
        chat = ChatSession(InsightService(llm=FakeLLM()))

        with pytest.raises(ChatRejected):
            self.collect(chat, "  ")
        with pytest.raises(AIServiceNotConfigured):
            self.collect(ChatSession(unconfigured()), "hello")
        assert len(chat.messages) == 1

    def test_failure_raises_after_apology(self):
        chat = ChatSession(InsightService(llm=FakeLLM(fail_after=1)))

        with pytest.raises(ChatStreamFailed) as excinfo:
            self.collect(chat, "Explain pods")

        assert str(excinfo.value) == APOLOGY_MESSAGE
        assert [m.text for m in chat.messages[-2:]] == ["Explain pods", APOLOGY_MESSAGE]
        assert chat.is_streaming is False

    def test_closing_early_drops_partial_reply(self):
        llm = FakeLLM()
        chat = ChatSession(InsightService(llm=llm))

        async def scenario():
            stream = chat.stream("first")
            await stream.__anext__()
            await stream.aclose()

        run(scenario())
        run(chat.send("second"))

        assert "Pods " not in [m.text for m in chat.messages]
        assert chat.is_streaming is False
        # The abandoned exchange never reaches the conversation context
        assert [m.content for m in llm.calls[1][1][1:]] == ["second"]
