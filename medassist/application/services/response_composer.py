"""Builds the exact message sequence sent to the language model.

Layout: one system instruction, then at most `history_turns` prior turns in
chronological order, then the user turn carrying any retrieved context inline.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from medassist.application.ports.llm_port import ChatMessage
from medassist.domain.models import ConversationTurn, ReferencePassage

DEFAULT_SOURCE = "Nelson Textbook of Pediatrics"


def medical_system_prompt(source: str = DEFAULT_SOURCE) -> str:
    return f"""You are NelsonGPT, an evidence-based pediatric medical assistant powered by the {source}. You provide accurate, clinical-grade medical information for healthcare professionals.

Guidelines:
- Always cite sources when referencing medical information
- Provide dosage calculations with clear formulas
- Include differential diagnoses when relevant
- Mention contraindications and side effects
- Emphasize when immediate medical attention is needed
- Use clear, professional medical terminology
- Format responses with proper markdown for readability

Remember: You are assisting qualified healthcare professionals. Always recommend clinical correlation and professional judgment."""


def render_passage(passage: ReferencePassage) -> str:
    """Render one passage as a labeled block: `**title** (chapter, p. N):\\nbody`."""
    label = [part for part in (passage.chapter, _page_label(passage.page)) if part]
    header = f"**{passage.title}**"
    if label:
        header += f" ({', '.join(label)})"
    return f"{header}:\n{passage.content}"


def _page_label(page: int | None) -> str:
    return f"p. {page}" if page is not None else ""


@dataclass(frozen=True)
class ResponseComposer:
    source: str = DEFAULT_SOURCE
    history_turns: int = 6

    def system_message(self) -> ChatMessage:
        return ChatMessage(role="system", content=medical_system_prompt(self.source))

    def context_block(self, passages: Sequence[ReferencePassage]) -> str:
        return "\n\n".join(render_passage(p) for p in passages)

    def user_message(self, query: str, passages: Sequence[ReferencePassage]) -> ChatMessage:
        if not passages:
            return ChatMessage(role="user", content=f"**User Question:** {query}")
        return ChatMessage(
            role="user",
            content=(
                f"**Retrieved Context from {self.source}:**\n"
                f"{self.context_block(passages)}\n\n"
                f"**User Question:** {query}"
            ),
        )

    def window(self, history: Sequence[ConversationTurn]) -> list[ConversationTurn]:
        """Newest `history_turns` turns; the oldest are dropped first."""
        if self.history_turns <= 0:
            return []
        return list(history[-self.history_turns :])

    def compose(
        self,
        query: str,
        passages: Sequence[ReferencePassage],
        history: Sequence[ConversationTurn] = (),
    ) -> list[ChatMessage]:
        return [
            self.system_message(),
            *(ChatMessage(role=t.role, content=t.content) for t in self.window(history)),
            self.user_message(query, passages),
        ]
