from fastapi import APIRouter, Depends, HTTPException
from domain.schemas import FinalScoreRequest, FinalScoreResponse, PersistedScore, RubricResponse
from domain.services.scoring_pipeline import ScoringService
from api.dependencies import get_scoring_service

router = APIRouter()


@router.get("/scoring/rubric", response_model=RubricResponse)
def get_rubric(scoring: ScoringService = Depends(get_scoring_service)) -> RubricResponse:
    return RubricResponse(**scoring.get_rubric())


@router.post("/candidates/{candidate_id}/score", response_model=PersistedScore)
async def score_candidate(candidate_id: int,
                          scoring: ScoringService = Depends(get_scoring_service)) -> PersistedScore:
    return await scoring.score_candidate(candidate_id)


@router.get("/candidates/{candidate_id}/score", response_model=PersistedScore)
def get_score(candidate_id: int,
              scoring: ScoringService = Depends(get_scoring_service)) -> PersistedScore:
    score = scoring.get_score(candidate_id)
    if not score:
        raise HTTPException(status_code=404, detail="score not found")
    return score


@router.put("/candidates/{candidate_id}/final-score", response_model=FinalScoreResponse)
def update_final_score(candidate_id: int, body: FinalScoreRequest,
                       scoring: ScoringService = Depends(get_scoring_service)) -> FinalScoreResponse:
    return scoring.set_manual_final_score(candidate_id, body.final_score)
