# medassist/application/dto/answer_dto.py
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from medassist.domain.models import ConversationTurn


@dataclass(frozen=True)
class AnswerRequest:
    """
    DTO for one user question sent to the RAG orchestrator.

    - query:    raw user question
    - history:  prior turns, oldest first; immutable once sent
    """

    query: str
    history: tuple[ConversationTurn, ...] = field(default_factory=tuple)

    @classmethod
    def build(
        cls, query: str, history: Iterable[ConversationTurn] = (), max_turns: int | None = None
    ) -> AnswerRequest:
        """Snapshot `history` into an immutable tuple, keeping the newest `max_turns`."""
        turns = tuple(history)
        if max_turns is not None:
            turns = turns[-max_turns:] if max_turns > 0 else ()
        return cls(query=query, history=turns)
