from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class CandidateStage(str, Enum):
    INBOX = "INBOX"
    SHORTLIST = "SHORTLIST"
    MAYBE = "MAYBE"
    NO = "NO"
    INTERVIEW = "INTERVIEW"
    OFFER = "OFFER"


class CandidateForScoring(BaseModel):
    id: int
    job_id: int
    candidate_name: str
    cv_url: str = ""
    raw_answers: Any = None


class EvaluationInput(BaseModel):
    candidate_id: int
    candidate_name: str
    job_id: int
    cv_url: str
    raw_answers: Any = None


class DimensionResult(BaseModel):
    score: int = Field(..., ge=1, le=5)
    reason: str = Field(..., min_length=1)


class EvaluationOutput(BaseModel):
    relevance: DimensionResult
    experience: DimensionResult
    motivation: DimensionResult
    risk: DimensionResult
    risk_flags: List[str] = Field(default_factory=list, max_length=20)


class CandidateScoreResult(BaseModel):
    candidate_id: int
    relevance: DimensionResult
    experience: DimensionResult
    motivation: DimensionResult
    risk: DimensionResult
    risk_flags: List[str] = Field(default_factory=list)
    final_score: float
    rubric_version: str


class PersistedScore(CandidateScoreResult):
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RubricResponse(BaseModel):
    version: str
    weights: Dict[str, float]
    notes: str


class FinalScoreRequest(BaseModel):
    # range is checked by the scoring service so the error is a ScoreValidationError
    final_score: Any = None


class FinalScoreResponse(BaseModel):
    candidate_id: int
    final_score: float


class StageUpdateRequest(BaseModel):
    stage: CandidateStage


class StageUpdateResponse(BaseModel):
    candidate_id: int
    stage: CandidateStage


class BulkScoreItem(BaseModel):
    candidate_id: int
    status: str
    final_score: Optional[float] = None
    error: Optional[str] = None


class BulkScoreResponse(BaseModel):
    job_id: int
    requested: int
    scored: int
    failed: int
    results: List[BulkScoreItem]


class CandidateSummary(BaseModel):
    id: int
    candidate_name: str
    cv_url: str
    stage: CandidateStage
    final_score: Optional[float] = None


class CandidateDetail(BaseModel):
    id: int
    job_id: int
    candidate_name: str
    cv_url: str
    raw_answers: Any = None
    stage: CandidateStage
    score: Optional[PersistedScore] = None
