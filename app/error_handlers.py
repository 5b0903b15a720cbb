from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import logging

from domain.errors import EvaluationError, NotFoundError, ScoreValidationError

logger = logging.getLogger(__name__)

def attach_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(NotFoundError)
    async def _not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(ScoreValidationError)
    async def _invalid(request: Request, exc: ScoreValidationError):
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.exception_handler(EvaluationError)
    async def _upstream(request: Request, exc: EvaluationError):
        logger.error("Evaluation failed on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=502, content={"detail": f"Evaluation failed: {exc}"})

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception):
        logger.exception("Unhandled: %s", exc)
        return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})
