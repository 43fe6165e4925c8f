# medassist/domain/services/routing.py
# Keyword heuristics for request routing and thread labelling. Pure, no I/O.
from __future__ import annotations

from typing import Literal

Urgency = Literal["low", "medium", "high", "emergency"]

DOSAGE_KEYWORDS = ("dosage", "calculate")
TITLE_MAX_CHARS = 40


def is_dosage_request(text: str) -> bool:
    """True when the raw query should bypass retrieval for the dosage calculator.

    Plain substring match on the lower-cased text; not an intent classifier.
    """
    lowered = text.lower()
    return any(k in lowered for k in DOSAGE_KEYWORDS)


def chat_title(first_message: str) -> str:
    text = first_message.lower()
    if "dosage" in text or "dose" in text:
        return "Drug Dosage Consultation"
    if "emergency" in text or "urgent" in text:
        return "Emergency Medical Consultation"
    if "symptom" in text:
        return "Symptom Analysis"
    if "growth" in text or "development" in text:
        return "Growth & Development"
    if len(first_message) > TITLE_MAX_CHARS:
        return first_message[:TITLE_MAX_CHARS] + "..."
    return first_message


def classify_urgency(message: str) -> Urgency:
    text = message.lower()
    if any(k in text for k in ("emergency", "urgent", "resuscitation")):
        return "emergency"
    if "immediate" in text or "acute" in text:
        return "high"
    if "concern" in text or "worried" in text:
        return "medium"
    return "low"
