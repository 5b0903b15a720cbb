import asyncio
from typing import List
from fastapi import APIRouter, Depends
from app.container import Container
from domain.errors import CandidateNotFoundError
from domain.schemas import (
    BulkScoreResponse,
    CandidateDetail,
    CandidateSummary,
    StageUpdateRequest,
    StageUpdateResponse,
)
from api.dependencies import get_candidates_repository, get_container
from infra.repositories.candidates_repository import CandidatesRepository

router = APIRouter()


@router.get("/jobs/{job_id}/candidates", response_model=List[CandidateSummary])
def list_job_candidates(job_id: int,
                        candidates: CandidatesRepository = Depends(get_candidates_repository)) -> List[CandidateSummary]:
    return candidates.list_by_job(job_id)


@router.get("/candidates/{candidate_id}", response_model=CandidateDetail)
def get_candidate(candidate_id: int,
                  candidates: CandidatesRepository = Depends(get_candidates_repository)) -> CandidateDetail:
    detail = candidates.get_detail(candidate_id)
    if detail is None:
        raise CandidateNotFoundError(candidate_id)
    return detail


@router.patch("/candidates/{candidate_id}/stage", response_model=StageUpdateResponse)
def update_stage(candidate_id: int, body: StageUpdateRequest,
                 candidates: CandidatesRepository = Depends(get_candidates_repository)) -> StageUpdateResponse:
    if not candidates.exists(candidate_id):
        raise CandidateNotFoundError(candidate_id)
    candidates.update_stage(candidate_id, body.stage)
    return StageUpdateResponse(candidate_id=candidate_id, stage=body.stage)


@router.post("/jobs/{job_id}/score", response_model=BulkScoreResponse)
async def score_job_candidates(job_id: int, rescore: bool = False,
                               container: Container = Depends(get_container)) -> BulkScoreResponse:
    ids = await asyncio.to_thread(
        container.candidates.list_ids_by_job, job_id, not rescore)
    results = await container.scoring.score_candidates(
        ids, concurrency=container.settings.BULK_SCORING_CONCURRENCY)
    scored = sum(1 for r in results if r.status == "scored")
    return BulkScoreResponse(
        job_id=job_id,
        requested=len(ids),
        scored=scored,
        failed=len(results) - scored,
        results=results,
    )
