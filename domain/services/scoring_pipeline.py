import asyncio
import logging
import math
from typing import Iterable, List, Optional, Protocol

import httpx

from domain.answers import normalize_answers
from domain.coercion import coerce_evaluation
from domain.errors import (
    CandidateNotFoundError,
    CvExtractionError,
    ScoreValidationError,
    ScoringError,
)
from domain.rubric import ACTIVE_RUBRIC, MAX_FINAL_SCORE, MIN_FINAL_SCORE, Rubric, round_half_up
from domain.schemas import (
    BulkScoreItem,
    CandidateForScoring,
    CandidateScoreResult,
    EvaluationInput,
    FinalScoreResponse,
    PersistedScore,
)
from infra.pdf.parser import DEFAULT_FETCH_TIMEOUT, fetch_cv_text

logger = logging.getLogger(__name__)

CV_UNAVAILABLE = "(could not read CV)"


class CandidateStore(Protocol):
    def get_for_scoring(self, candidate_id: int) -> Optional[CandidateForScoring]: ...

    def exists(self, candidate_id: int) -> bool: ...


class ScoreStore(Protocol):
    def save(self, result: CandidateScoreResult) -> PersistedScore: ...

    def update_final_score(self, candidate_id: int, final_score: float) -> PersistedScore: ...

    def get(self, candidate_id: int) -> Optional[PersistedScore]: ...


class Evaluator(Protocol):
    async def evaluate(self, data: EvaluationInput, cv_text: str, answers_text: str) -> str: ...


class ScoringService:
    """Runs one scoring pass per call:

    load candidate -> extract CV -> normalize answers -> LLM -> coerce ->
    compose -> persist.

    CV extraction failures degrade to a placeholder; every other failure
    propagates and nothing is written.
    """

    def __init__(
        self,
        candidates: CandidateStore,
        scores: ScoreStore,
        evaluator: Evaluator,
        *,
        rubric: Rubric = ACTIVE_RUBRIC,
        cv_client: Optional[httpx.AsyncClient] = None,
        cv_fetch_timeout: float = DEFAULT_FETCH_TIMEOUT,
    ):
        self.candidates = candidates
        self.scores = scores
        self.evaluator = evaluator
        self.rubric = rubric
        self.cv_client = cv_client
        self.cv_fetch_timeout = cv_fetch_timeout

    async def _read_cv(self, candidate_id: int, cv_url: str) -> str:
        try:
            text = await fetch_cv_text(cv_url, self.cv_client, timeout=self.cv_fetch_timeout)
        except CvExtractionError as exc:
            logger.warning(f"CV unavailable for candidate {candidate_id}: {exc}")
            return CV_UNAVAILABLE
        return text or CV_UNAVAILABLE

    async def score_candidate(self, candidate_id: int) -> PersistedScore:
        candidate = await asyncio.to_thread(self.candidates.get_for_scoring, candidate_id)
        if candidate is None:
            raise CandidateNotFoundError(candidate_id)

        data = EvaluationInput(
            candidate_id=candidate.id,
            candidate_name=candidate.candidate_name,
            job_id=candidate.job_id,
            cv_url=candidate.cv_url,
            raw_answers=candidate.raw_answers,
        )
        logger.info(f"Scoring candidate {data.candidate_id} for job {data.job_id}")

        cv_text = await self._read_cv(data.candidate_id, data.cv_url)
        answers_text = normalize_answers(data.raw_answers)
        logger.info(
            f"Candidate {data.candidate_id}: cv_text={len(cv_text)} chars, "
            f"answers_text={len(answers_text)} chars")

        raw = await self.evaluator.evaluate(data, cv_text, answers_text)
        evaluation = coerce_evaluation(raw)

        result = CandidateScoreResult(
            candidate_id=data.candidate_id,
            relevance=evaluation.relevance,
            experience=evaluation.experience,
            motivation=evaluation.motivation,
            risk=evaluation.risk,
            risk_flags=evaluation.risk_flags,
            final_score=self.rubric.compose(
                evaluation.relevance,
                evaluation.experience,
                evaluation.motivation,
                evaluation.risk,
            ),
            rubric_version=self.rubric.version,
        )
        saved = await asyncio.to_thread(self.scores.save, result)
        logger.info(
            f"Candidate {saved.candidate_id} scored {saved.final_score} "
            f"(rubric={saved.rubric_version}, flags={len(saved.risk_flags)})")
        return saved

    async def score_candidates(
        self, candidate_ids: Iterable[int], concurrency: int = 4
    ) -> List[BulkScoreItem]:
        """Score many candidates in parallel. One failure does not stop the rest."""
        semaphore = asyncio.Semaphore(max(1, concurrency))

        async def one(candidate_id: int) -> BulkScoreItem:
            async with semaphore:
                try:
                    saved = await self.score_candidate(candidate_id)
                except ScoringError as exc:
                    logger.error(f"Bulk scoring failed for candidate {candidate_id}: {exc}")
                    return BulkScoreItem(candidate_id=candidate_id, status="failed", error=str(exc))
                except Exception as exc:
                    logger.exception(f"Unexpected error scoring candidate {candidate_id}")
                    return BulkScoreItem(candidate_id=candidate_id, status="failed", error=str(exc))
                return BulkScoreItem(
                    candidate_id=candidate_id, status="scored", final_score=saved.final_score)

        return list(await asyncio.gather(*(one(cid) for cid in candidate_ids)))

    def get_rubric(self) -> dict:
        return self.rubric.describe()

    def get_score(self, candidate_id: int) -> Optional[PersistedScore]:
        return self.scores.get(candidate_id)

    def set_manual_final_score(self, candidate_id: int, value) -> FinalScoreResponse:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ScoreValidationError("final_score must be a valid number")
        try:
            value = float(value)
        except OverflowError:
            raise ScoreValidationError("final_score must be a valid number") from None
        if not math.isfinite(value) or not MIN_FINAL_SCORE <= value <= MAX_FINAL_SCORE:
            raise ScoreValidationError(
                f"final_score must be between {MIN_FINAL_SCORE:g} and {MAX_FINAL_SCORE:g}")

        updated = self.scores.update_final_score(candidate_id, round_half_up(value))
        logger.info(f"Manual final score for candidate {candidate_id}: {updated.final_score}")
        return FinalScoreResponse(candidate_id=updated.candidate_id, final_score=updated.final_score)
