"""Tests for the chat session flow (routing, snapshots, pending slot)."""

import asyncio
import itertools
from datetime import UTC, datetime

from medassist.application.ports.clock_port import ClockPort
from medassist.application.use_cases.answer_medical_query import APOLOGY_TEXT
from medassist.application.use_cases.chat_session import ChatSession
from medassist.domain.models import Citation, ConversationTurn, GeneratedAnswer
from medassist.domain.services.dosage import DOSAGE_HELP


class FixedClock(ClockPort):
    def now(self) -> datetime:
        return datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


class FakeAnswerer:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.calls: list[tuple[str, tuple[ConversationTurn, ...]]] = []

    async def answer(self, query, history=()):
        self.calls.append((query, tuple(history)))
        if self.fail:
            raise RuntimeError("boom")
        return GeneratedAnswer(
            response=f"answer to {query}",
            citations=(Citation(source="Nelson Textbook of Pediatrics, Ch 1", relevance=0.8),),
        )


def make_session(answerer: FakeAnswerer | None = None, snapshot_turns: int = 10) -> ChatSession:
    counter = itertools.count(1)
    return ChatSession(
        answerer=answerer or FakeAnswerer(),
        clock=FixedClock(),
        snapshot_turns=snapshot_turns,
        id_factory=lambda: f"id-{next(counter)}",
    )


def run(coro):
    return asyncio.run(coro)


class TestChatSession:
    def test_blank_input_is_ignored(self) -> None:
        session = make_session()
        assert run(session.send(None, "   ")) is None

    def test_first_message_creates_labelled_thread(self) -> None:
        thread = run(make_session().send(None, "Urgent: febrile seizure management"))

        assert thread is not None
        assert thread.title == "Emergency Medical Consultation"
        assert thread.urgency == "emergency"
        assert thread.pending is None
        assert [t.role for t in thread.turns] == ["user", "assistant"]
        assert thread.turns[1].content == "answer to Urgent: febrile seizure management"
        assert len(thread.turns[1].citations) == 1

    def test_assistant_turn_reuses_pending_id(self) -> None:
        thread = run(make_session().send(None, "Croup"))
        # id-1 thread, id-2 user turn, id-3 placeholder
        assert thread.turns[1].id == "id-3"

    def test_history_snapshot_excludes_current_question(self) -> None:
        answerer = FakeAnswerer()
        session = make_session(answerer)

        thread = run(session.send(None, "first"))
        run(session.send(thread, "second"))

        assert answerer.calls[0] == ("first", ())
        query, history = answerer.calls[1]
        assert query == "second"
        assert [(h.role, h.content) for h in history] == [
            ("user", "first"),
            ("assistant", "answer to first"),
        ]

    def test_history_snapshot_capped(self) -> None:
        answerer = FakeAnswerer()
        session = make_session(answerer, snapshot_turns=10)
        thread = None
        for i in range(8):
            thread = run(session.send(thread, f"q{i}"))

        _, history = answerer.calls[-1]
        assert len(history) == 10
        assert history[-1].content == "answer to q6"

    def test_dosage_keyword_bypasses_orchestrator(self) -> None:
        answerer = FakeAnswerer()
        thread = run(
            make_session(answerer).send(
                None, "Calculate dosage of amoxicillin 20 mg/kg for 15 kg, max 500 mg, twice daily"
            )
        )

        assert answerer.calls == []
        reply = thread.turns[-1]
        assert "300.0 mg twice daily" in reply.content
        assert reply.citations == ()
        assert thread.title == "Drug Dosage Consultation"

    def test_unparseable_dosage_request_gets_help(self) -> None:
        answerer = FakeAnswerer()
        thread = run(make_session(answerer).send(None, "what dosage should I use?"))

        assert answerer.calls == []
        assert thread.turns[-1].content == DOSAGE_HELP

    def test_invalid_dosage_values_get_help(self) -> None:
        thread = run(make_session().send(None, "dosage of amoxicillin 0 mg/kg for 15 kg"))
        assert DOSAGE_HELP in thread.turns[-1].content
        assert "dose per kg must be > 0" in thread.turns[-1].content

    def test_answerer_exception_becomes_apology_turn(self) -> None:
        thread = run(make_session(FakeAnswerer(fail=True)).send(None, "Croup"))

        assert thread.pending is None
        assert thread.turns[-1].content == APOLOGY_TEXT

    def test_drug_named_before_dosage_keyword_is_calculated(self) -> None:
        answerer = FakeAnswerer()
        thread = run(
            make_session(answerer).send(
                None, "calculate amoxicillin dosage 20 mg/kg for a 15 kg child twice daily"
            )
        )

        assert answerer.calls == []
        assert "**Amoxicillin Dosage Calculation:**" in thread.turns[-1].content
