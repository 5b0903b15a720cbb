from fastapi import Request

from app.container import Container
from domain.services.scoring_pipeline import ScoringService
from infra.repositories.candidates_repository import CandidatesRepository


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_scoring_service(request: Request) -> ScoringService:
    return get_container(request).scoring


def get_candidates_repository(request: Request) -> CandidatesRepository:
    return get_container(request).candidates
