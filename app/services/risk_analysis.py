"""Turn raw Gemini output into a validated RiskAnalysis.

The prediction prompt asks the model for a bare JSON object:

    {"riskFactors": [...], "predictions": "...",
     "recommendations": "...", "riskScore": 1-10}

Models still wrap it in ```json fences now and then, or drift from the
schema. `parse_model_output` strips fences, decodes and validates, and
reports the outcome as data (AcceptedAnalysis / RejectedAnalysis) rather
than raising. When the output is rejected, `fallback_analysis` derives a
deterministic analysis from the patient's own diagnoses using a small
table of keyword rules.

Everything here is pure: no I/O, no model calls, no retries.
"""
from __future__ import annotations

import json
import re
from dataclasses import dataclass
from numbers import Real
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from app.models.risk_analysis import AnalysisSource, RiskAnalysis

# fences only count at the very start and end; ``` inside a string value is content
_OPEN_FENCE = re.compile(r"\A\s*```(?:json)?[ \t]*\n?", re.IGNORECASE)
_CLOSE_FENCE = re.compile(r"\n?```\s*\Z")

BASE_RISK_SCORE = 3
MIN_RISK_SCORE = 1
MAX_RISK_SCORE = 10


@dataclass(frozen=True)
class KeywordRule:
    keywords: Tuple[str, ...]
    risk_factor: str
    score_delta: int

    def matches(self, diagnoses: Sequence[str]) -> bool:
        return any(k in d for d in diagnoses for k in self.keywords)


# Evaluated independently and in this order; every matching rule counts.
FALLBACK_RULES: Tuple[KeywordRule, ...] = (
    KeywordRule(("hypertension", "blood pressure"), "Hypertension detected in medical history", 2),
    KeywordRule(("diabetes",), "Diabetes management required", 2),
    KeywordRule(("heart", "cardiac"), "Cardiovascular concerns identified", 3),
    KeywordRule(("cholesterol",), "Cholesterol level monitoring needed", 1),
)

GENERIC_RISK_FACTORS: Tuple[str, ...] = (
    "General health monitoring recommended",
    "Preventive care suggested",
)

FALLBACK_RECOMMENDATIONS = "\n".join([
    "1. Schedule regular check-ups with your healthcare provider every 3-6 months",
    "2. Maintain a balanced diet rich in fruits, vegetables, and whole grains",
    "3. Exercise regularly for at least 30 minutes daily",
    "4. Take all prescribed medications as directed",
    "5. Monitor your vital signs regularly",
    "6. Avoid smoking and limit alcohol consumption",
    "7. Manage stress through relaxation techniques",
])

_PREDICTION_TAIL = (
    "continued monitoring and adherence to your treatment plan is recommended. "
    "Regular check-ups with your healthcare provider are important to manage "
    "these conditions effectively."
)


# -------------------------
# Validation result
# -------------------------
@dataclass(frozen=True)
class AcceptedAnalysis:
    analysis: RiskAnalysis
    ok: bool = True


@dataclass(frozen=True)
class RejectedAnalysis:
    reason: str
    ok: bool = False


ValidationResult = Union[AcceptedAnalysis, RejectedAnalysis]


@dataclass(frozen=True)
class AnalysisOutcome:
    analysis: RiskAnalysis
    source: AnalysisSource
    rejection: Optional[str] = None


# -------------------------
# Extraction
# -------------------------
def strip_code_fences(text: str) -> str:
    """Remove ``` / ```json fences and surrounding whitespace."""
    text = _OPEN_FENCE.sub("", text, count=1)
    return _CLOSE_FENCE.sub("", text, count=1).strip()


def _is_number(v: Any) -> bool:
    # bool is an int subclass, but true/false is not a score
    return isinstance(v, Real) and not isinstance(v, bool)


def validate_analysis(payload: Any) -> ValidationResult:
    """Check a decoded payload against the riskFactors/predictions/recommendations/riskScore schema."""
    if not isinstance(payload, dict):
        return RejectedAnalysis("expected a JSON object")

    factors = payload.get("riskFactors")
    if not isinstance(factors, list):
        return RejectedAnalysis("Invalid risk factors format")

    predictions = payload.get("predictions")
    if not isinstance(predictions, str) or not predictions:
        return RejectedAnalysis("Invalid predictions format")

    recommendations = payload.get("recommendations")
    if not isinstance(recommendations, str) or not recommendations:
        return RejectedAnalysis("Invalid recommendations format")

    score = payload.get("riskScore")
    # chained comparison is False for NaN and never converts huge ints to float
    if not _is_number(score) or not MIN_RISK_SCORE <= score <= MAX_RISK_SCORE:
        return RejectedAnalysis("Invalid risk score")

    return AcceptedAnalysis(
        RiskAnalysis(
            risk_factors=[str(f) for f in factors],
            predictions=predictions,
            recommendations=recommendations,
            # stored as an int; rounding keeps an in-range value in range
            risk_score=int(round(score)),
        )
    )


def parse_model_output(text: str) -> ValidationResult:
    cleaned = strip_code_fences(text)
    try:
        payload = json.loads(cleaned)
    except ValueError as exc:
        return RejectedAnalysis(f"Malformed JSON: {exc}")
    return validate_analysis(payload)


# -------------------------
# Fallback
# -------------------------
def _distinct(values: Iterable[str]) -> List[str]:
    seen = set()
    out = []
    for v in values:
        if v and v not in seen:
            seen.add(v)
            out.append(v)
    return out


def fallback_analysis(diagnoses: Iterable[Optional[str]]) -> RiskAnalysis:
    """Rule-based analysis from diagnosis text alone."""
    stripped = [(d or "").strip() for d in diagnoses]
    lowered = [d.lower() for d in stripped]

    risk_factors: List[str] = []
    score = BASE_RISK_SCORE
    for rule in FALLBACK_RULES:
        if rule.matches(lowered):
            risk_factors.append(rule.risk_factor)
            score += rule.score_delta

    if not risk_factors:
        risk_factors.extend(GENERIC_RISK_FACTORS)

    shown = _distinct(stripped)
    if shown:
        predictions = f"Based on your health records showing {', '.join(shown)}, {_PREDICTION_TAIL}"
    else:
        predictions = f"Based on your health records, {_PREDICTION_TAIL}"

    return RiskAnalysis(
        risk_factors=risk_factors,
        predictions=predictions,
        recommendations=FALLBACK_RECOMMENDATIONS,
        risk_score=min(MAX_RISK_SCORE, score),
    )


def derive_risk_analysis(
    raw_text: Optional[str],
    records: Sequence[Dict[str, Any]],
) -> AnalysisOutcome:
    """
    Produce the analysis for a patient's records.

    `raw_text` is the model response, or None when there was none; both a
    missing response and a rejected one end in the keyword fallback. The
    caller decides beforehand whether a missing response should get here.
    """
    if not records:
        raise ValueError("risk analysis needs at least one health record")

    if raw_text is None:
        rejection = "No response from model"
    else:
        result = parse_model_output(raw_text)
        if isinstance(result, AcceptedAnalysis):
            return AnalysisOutcome(result.analysis, "model")
        rejection = result.reason

    diagnoses = [r.get("diagnosis") for r in records]
    return AnalysisOutcome(fallback_analysis(diagnoses), "fallback", rejection)
