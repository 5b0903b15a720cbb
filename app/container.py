import logging
from dataclasses import dataclass
from typing import Optional

import httpx
from sqlalchemy.engine import Engine

from app.settings import Settings
from domain.services.scoring_pipeline import ScoringService
from infra.db.session import create_db_engine, create_session_factory, init_db
from infra.llm.client import LLMEvaluator
from infra.repositories.candidates_repository import CandidatesRepository
from infra.repositories.scores_repository import ScoresRepository

logger = logging.getLogger(__name__)


@dataclass
class Container:
    """Process-scoped dependencies, built once at startup and closed at shutdown."""

    settings: Settings
    engine: Engine
    candidates: CandidatesRepository
    scores: ScoresRepository
    evaluator: LLMEvaluator
    cv_client: httpx.AsyncClient
    scoring: ScoringService

    async def aclose(self) -> None:
        await self.evaluator.aclose()
        await self.cv_client.aclose()
        self.engine.dispose()
        logger.info("Released HTTP clients and database pool")


def build_container(
    settings: Settings,
    *,
    evaluator: Optional[LLMEvaluator] = None,
    cv_client: Optional[httpx.AsyncClient] = None,
) -> Container:
    # MissingConfigurationError surfaces here, before any request is served
    evaluator = evaluator or LLMEvaluator.from_settings(settings)
    cv_client = cv_client or httpx.AsyncClient()

    engine = create_db_engine(settings.DATABASE_URL)
    init_db(engine)
    sessions = create_session_factory(engine)
    candidates = CandidatesRepository(sessions)
    scores = ScoresRepository(sessions)

    scoring = ScoringService(
        candidates,
        scores,
        evaluator,
        cv_client=cv_client,
        cv_fetch_timeout=settings.CV_FETCH_TIMEOUT,
    )
    logger.info(f"Scoring ready (model={evaluator.model}, rubric={scoring.rubric.version})")
    return Container(
        settings=settings,
        engine=engine,
        candidates=candidates,
        scores=scores,
        evaluator=evaluator,
        cv_client=cv_client,
        scoring=scoring,
    )
