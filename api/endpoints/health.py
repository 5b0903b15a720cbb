from fastapi import APIRouter, Depends, HTTPException
from app.container import Container
from api.dependencies import get_container
from infra.db.session import ping

router = APIRouter()


@router.get("/health")
def health(container: Container = Depends(get_container)):
    try:
        ping(container.engine)
    except Exception as exc:
        raise HTTPException(status_code=503, detail=str(exc))
    return {
        "status": "ok",
        "model": container.evaluator.model,
        "rubric_version": container.scoring.rubric.version,
    }
