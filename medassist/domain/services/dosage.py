# medassist/domain/services/dosage.py
# Pure domain service: weight-based pediatric dose arithmetic, no I/O.
from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from medassist.domain.errors import ValidationError

SAFETY_DISCLAIMER = (
    "*Always verify dosing with current guidelines and consider patient-specific factors.*"
)

DOSAGE_HELP = (
    "To calculate a weight-based dose, include the drug name, the dose per kg, "
    "the patient weight and the frequency, for example: "
    "*calculate dosage of amoxicillin 20 mg/kg for a 15 kg child, max 500 mg, twice daily*."
)


@dataclass(frozen=True)
class DosageRequest:
    """
    Input for a weight-based dose calculation.

    - drug_name:    display name of the drug
    - dose_per_kg:  mg per kg of body weight
    - weight_kg:    patient weight in kg
    - max_dose:     optional single-dose cap in mg
    - frequency:    free-text dosing frequency ("twice daily")
    """

    drug_name: str
    dose_per_kg: float
    weight_kg: float
    frequency: str
    max_dose: float | None = None


@dataclass(frozen=True)
class DosageResult:
    """Deterministic outcome of a dose calculation."""

    request: DosageRequest
    calculated_dose: float
    final_dose: float
    text: str

    @property
    def capped(self) -> bool:
        return self.final_dose < self.calculated_dose


def _num(x: float) -> str:
    # Plain notation, every significant digit of the input
    text = format(Decimal(repr(float(x))), "f")
    return text.rstrip("0").rstrip(".") if "." in text else text


def _mg(x: float) -> str:
    # One decimal, ties rounded up
    return str(Decimal(repr(float(x))).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def _validate(req: DosageRequest) -> None:
    if not req.drug_name.strip():
        raise ValidationError("drug name must not be empty")
    if req.dose_per_kg <= 0:
        raise ValidationError("dose per kg must be > 0")
    if req.weight_kg <= 0:
        raise ValidationError("patient weight must be > 0")
    if req.max_dose is not None and req.max_dose <= 0:
        raise ValidationError("maximum dose must be > 0 when given")


def calculate_dosage(req: DosageRequest) -> DosageResult:
    """Compute the recommended dose and its formatted explanation.

    calculated = dose_per_kg * weight; the final dose is capped at max_dose
    when one is given. Doses are shown with one decimal place, halves rounded
    up.

    Raises:
        ValidationError: If an input is empty or not positive
    """
    _validate(req)
    calculated = req.dose_per_kg * req.weight_kg
    final = min(calculated, req.max_dose) if req.max_dose is not None else calculated

    lines = [
        f"**{req.drug_name} Dosage Calculation:**",
        "",
        f"- Patient weight: {_num(req.weight_kg)} kg",
        f"- Dose per kg: {_num(req.dose_per_kg)} mg/kg",
        f"- Calculated dose: {_mg(calculated)} mg",
    ]
    if req.max_dose is not None:
        lines.append(f"- Maximum dose: {_num(req.max_dose)} mg")
        if final < calculated:
            lines.append(
                f"- Calculated dose exceeds the maximum; capped from {_mg(calculated)} mg "
                f"to {_mg(final)} mg"
            )
    lines += [
        f"- **Recommended dose: {_mg(final)} mg {req.frequency}**",
        "",
        SAFETY_DISCLAIMER,
    ]
    return DosageResult(
        request=req,
        calculated_dose=calculated,
        final_dose=final,
        text="\n".join(lines),
    )


def calculate(
    drug_name: str,
    dose_per_kg: float,
    weight_kg: float,
    max_dose: float | None = None,
    frequency: str = "",
) -> str:
    """Convenience wrapper returning only the formatted explanation."""
    req = DosageRequest(
        drug_name=drug_name,
        dose_per_kg=dose_per_kg,
        weight_kg=weight_kg,
        frequency=frequency,
        max_dose=max_dose,
    )
    return calculate_dosage(req).text


# ---------------------------------------------------------------------------
# Free-text parsing
# ---------------------------------------------------------------------------

_NUMBER = r"(\d+(?:\.\d+)?)"
_DOSE_PER_KG = re.compile(_NUMBER + r"\s*mg\s*/\s*kg", re.IGNORECASE)
_WEIGHT = re.compile(_NUMBER + r"\s*kg\b", re.IGNORECASE)
_MAX_DOSE = re.compile(
    r"max(?:imum)?(?:\s+(?:single\s+)?dose)?\s*(?:of\s+)?" + _NUMBER + r"\s*mg\b(?!\s*/)",
    re.IGNORECASE,
)
_FREQUENCY = re.compile(
    r"\b(once daily|twice daily|three times daily|four times daily|every \d+ hours|daily|"
    r"once a day|twice a day|three times a day|four times a day)\b",
    re.IGNORECASE,
)
_DRUG_AFTER = re.compile(r"\b(?:of|for)\s+([A-Za-z][A-Za-z-]{2,})")
_WORD = re.compile(r"[A-Za-z][A-Za-z-]{2,}")
_NOT_DRUGS = frozenset(
    {"the", "child", "children", "patient", "infant", "baby", "kid", "toddler", "dose",
     "dosage", "dosing", "calculate", "weight", "weighs", "weighing", "max", "maximum",
     "and", "with", "for", "per", "give", "please", "what", "how", "much", "should", "use"}
)


def _drug_name(text: str, dose_start: int) -> str | None:
    # Nearest plausible word before the mg/kg dose, else the word after "of"/"for"
    for word in reversed(_WORD.findall(text[:dose_start])):
        if word.lower() not in _NOT_DRUGS:
            return word.capitalize()
    for match in _DRUG_AFTER.finditer(text):
        word = match.group(1)
        if word.lower() not in _NOT_DRUGS:
            return word.capitalize()
    return None


def parse_dosage_request(text: str, default_frequency: str = "as directed") -> DosageRequest | None:
    """Extract a DosageRequest from a free-text question.

    Returns None unless a drug name, a mg/kg dose and a kg weight are all
    present. Maximum dose and frequency are optional.
    """
    per_kg = _DOSE_PER_KG.search(text)
    if per_kg is None:
        return None
    weight = _WEIGHT.search(_DOSE_PER_KG.sub(" ", text))
    drug = _drug_name(text, per_kg.start())
    if weight is None or drug is None:
        return None
    max_dose = _MAX_DOSE.search(text)
    frequency = _FREQUENCY.search(text)
    return DosageRequest(
        drug_name=drug,
        dose_per_kg=float(per_kg.group(1)),
        weight_kg=float(weight.group(1)),
        frequency=frequency.group(1).lower() if frequency else default_frequency,
        max_dose=float(max_dose.group(1)) if max_dose else None,
    )
