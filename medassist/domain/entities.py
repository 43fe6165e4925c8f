# medassist/domain/entities.py
# Chat thread entities: append-only turns plus a separate pending slot.
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime

from medassist.domain.errors import ValidationError
from medassist.domain.models import Citation, ConversationTurn, Role
from medassist.domain.services.routing import Urgency


@dataclass(frozen=True)
class ChatTurn:
    """One immutable message of a chat thread."""

    id: str
    role: Role
    content: str
    timestamp: datetime
    citations: tuple[Citation, ...] = ()

    def as_conversation_turn(self) -> ConversationTurn:
        return ConversationTurn(role=self.role, content=self.content)


@dataclass(frozen=True)
class ChatThread:
    """
    Immutable chat thread.

    `turns` only ever grows. While an answer is being produced, `pending`
    holds a placeholder assistant turn; `resolve` swaps it for the final turn
    and returns a new thread in one step.
    """

    id: str
    title: str
    created_at: datetime
    updated_at: datetime
    urgency: Urgency = "low"
    turns: tuple[ChatTurn, ...] = field(default_factory=tuple)
    pending: ChatTurn | None = None

    @property
    def total_messages(self) -> int:
        return len(self.turns)

    def history(self, max_turns: int) -> tuple[ConversationTurn, ...]:
        """Newest `max_turns` completed turns as conversation history."""
        if max_turns <= 0:
            return ()
        return tuple(t.as_conversation_turn() for t in self.turns[-max_turns:])

    def begin(self, user_turn: ChatTurn, placeholder: ChatTurn) -> ChatThread:
        if self.pending is not None:
            raise ValidationError("a response is already pending for this thread")
        return replace(
            self,
            turns=(*self.turns, user_turn),
            pending=placeholder,
            updated_at=user_turn.timestamp,
        )

    def resolve(self, assistant_turn: ChatTurn) -> ChatThread:
        if self.pending is None:
            raise ValidationError("no pending response to resolve")
        return replace(
            self,
            turns=(*self.turns, assistant_turn),
            pending=None,
            updated_at=assistant_turn.timestamp,
        )
