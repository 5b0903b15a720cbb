from fastapi import APIRouter
from api.endpoints.scoring import router as scoring_router
from api.endpoints.candidates import router as candidates_router
from api.endpoints.health import router as health_router

api_router = APIRouter()
api_router.include_router(scoring_router, tags=["scoring"])
api_router.include_router(candidates_router, tags=["candidates"])
api_router.include_router(health_router, tags=["health"])
