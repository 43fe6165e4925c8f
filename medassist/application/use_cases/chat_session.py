# medassist/application/use_cases/chat_session.py
from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol
from uuid import uuid4

from medassist.application.ports.clock_port import ClockPort
from medassist.application.use_cases.answer_medical_query import APOLOGY_TEXT
from medassist.domain.entities import ChatThread, ChatTurn
from medassist.domain.errors import ValidationError
from medassist.domain.models import ConversationTurn, GeneratedAnswer
from medassist.domain.services.dosage import DOSAGE_HELP, calculate_dosage, parse_dosage_request
from medassist.domain.services.routing import chat_title, classify_urgency, is_dosage_request

logger = logging.getLogger(__name__)


class Answerer(Protocol):
    async def answer(
        self, query: str, history: tuple[ConversationTurn, ...] = ()
    ) -> GeneratedAnswer: ...


def _new_id() -> str:
    return str(uuid4())


def dosage_answer(text: str) -> GeneratedAnswer:
    """Answer a dosage-keyword query with the calculator; never consults passages."""
    req = parse_dosage_request(text)
    if req is None:
        return GeneratedAnswer(response=DOSAGE_HELP)
    try:
        return GeneratedAnswer(response=calculate_dosage(req).text)
    except ValidationError as ex:
        logger.info("dosage request rejected: %s", ex)
        return GeneratedAnswer(response=f"{ex}.\n\n{DOSAGE_HELP}")


async def route_query(
    answerer: Answerer, text: str, history: tuple[ConversationTurn, ...] = ()
) -> GeneratedAnswer:
    """Send dosage-keyword queries to the calculator and the rest to `answerer`."""
    if is_dosage_request(text):
        return dosage_answer(text)
    return await answerer.answer(text, history)


class ChatSession:
    """
    Host-side chat flow around the orchestrator.

    - Blank input is ignored.
    - Dosage keywords route to the calculator and skip retrieval/generation.
    - Everything else goes to the orchestrator with the newest completed turns.
    """

    def __init__(
        self,
        answerer: Answerer,
        clock: ClockPort,
        snapshot_turns: int = 10,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self.answerer = answerer
        self.clock = clock
        self.snapshot_turns = snapshot_turns
        self.id_factory = id_factory

    def open_thread(self, first_message: str) -> ChatThread:
        now = self.clock.now()
        return ChatThread(
            id=self.id_factory(),
            title=chat_title(first_message),
            urgency=classify_urgency(first_message),
            created_at=now,
            updated_at=now,
        )

    def begin(self, thread: ChatThread, text: str) -> tuple[ChatThread, ChatTurn]:
        """Append the user turn and park a placeholder in the pending slot."""
        now = self.clock.now()
        user_turn = ChatTurn(id=self.id_factory(), role="user", content=text, timestamp=now)
        placeholder = ChatTurn(id=self.id_factory(), role="assistant", content="", timestamp=now)
        return thread.begin(user_turn, placeholder), placeholder

    async def reply(self, text: str, history: tuple[ConversationTurn, ...]) -> GeneratedAnswer:
        return await route_query(self.answerer, text, history)

    async def send(self, thread: ChatThread | None, text: str) -> ChatThread | None:
        """Run one full exchange and return the updated thread."""
        if not text.strip():
            return thread

        current = thread or self.open_thread(text)
        history = current.history(self.snapshot_turns)
        started, placeholder = self.begin(current, text)

        try:
            answer = await self.reply(text, history)
        except Exception:
            logger.exception("chat reply failed; storing fallback message")
            answer = GeneratedAnswer(response=APOLOGY_TEXT)

        final = ChatTurn(
            id=placeholder.id,
            role="assistant",
            content=answer.response,
            timestamp=self.clock.now(),
            citations=answer.citations,
        )
        return started.resolve(final)
