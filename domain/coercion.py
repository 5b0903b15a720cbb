"""Trust boundary between raw model output and typed evaluation results.

Nothing in here raises: every field has a default and a malformed response
degrades to a neutral evaluation instead of an error.
"""
import json
import math
from typing import Any, List, Optional

from pydantic import BaseModel, Field, ValidationError, ValidationInfo, field_validator

from domain.schemas import DimensionResult, EvaluationOutput

DEFAULT_REASON = "No reason provided"
MAX_RISK_FLAGS = 20
MIN_SCORE = 1
MAX_SCORE = 5

# risk is on a 1 (low) .. 5 (high) scale, so its neutral default is low risk
DEFAULT_SCORES = {
    "relevance": 3,
    "experience": 3,
    "motivation": 3,
    "risk": 1,
}


def safe_json_parse(text: Any) -> Any:
    if not isinstance(text, str):
        return None
    try:
        return json.loads(text)
    except (ValueError, RecursionError):
        pass
    start = text.find("{")
    end = text.rfind("}")
    if start >= 0 and end > start:
        try:
            return json.loads(text[start:end + 1])
        except (ValueError, RecursionError):
            return None
    return None


def clamp_score(value: float) -> int:
    # round half up, Python's round() would send 2.5 to 2
    rounded = math.floor(value + 0.5)
    return max(MIN_SCORE, min(MAX_SCORE, rounded))


class DimensionPayload(BaseModel):
    """One ``{score, reason}`` object as the model sent it."""

    score: Optional[float] = None
    reason: str = DEFAULT_REASON

    @field_validator("score", mode="before")
    @classmethod
    def _parse_score(cls, value):
        if isinstance(value, bool) or not isinstance(value, (int, float, str)):
            return None
        try:
            number = float(value.strip() if isinstance(value, str) else value)
        except (ValueError, OverflowError):
            return None
        return number if math.isfinite(number) else None

    @field_validator("reason", mode="before")
    @classmethod
    def _ensure_reason(cls, value):
        if isinstance(value, str) and value.strip():
            return value.strip()
        return DEFAULT_REASON


def coerce_dimension(value: Any, default_score: int) -> DimensionResult:
    payload = DimensionPayload.model_validate(value if isinstance(value, dict) else {})
    score = default_score if payload.score is None else payload.score
    return DimensionResult(score=clamp_score(score), reason=payload.reason)


def coerce_risk_flags(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    flags = [item.strip() for item in value if isinstance(item, str) and item.strip()]
    return flags[:MAX_RISK_FLAGS]


class EvaluationPayload(EvaluationOutput):
    """The model's JSON object, defaulted field by field."""

    relevance: DimensionResult = Field(default=None, validate_default=True)
    experience: DimensionResult = Field(default=None, validate_default=True)
    motivation: DimensionResult = Field(default=None, validate_default=True)
    risk: DimensionResult = Field(default=None, validate_default=True)
    risk_flags: List[str] = Field(
        default=None, validate_default=True, alias="riskFlags", max_length=MAX_RISK_FLAGS)

    @field_validator("relevance", "experience", "motivation", "risk", mode="before")
    @classmethod
    def _coerce_dimension(cls, value, info: ValidationInfo):
        return coerce_dimension(value, DEFAULT_SCORES[info.field_name])

    @field_validator("risk_flags", mode="before")
    @classmethod
    def _ensure_flags(cls, value):
        return coerce_risk_flags(value)


def default_evaluation() -> EvaluationOutput:
    return EvaluationPayload.model_validate({})


def coerce_evaluation(raw_text: Any) -> EvaluationOutput:
    parsed = safe_json_parse(raw_text)
    if not isinstance(parsed, dict):
        return default_evaluation()
    try:
        return EvaluationPayload.model_validate(parsed)
    except ValidationError:
        return default_evaluation()
