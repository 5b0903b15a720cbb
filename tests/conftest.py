"""
Pytest configuration and shared fixtures.
"""

import json
import httpx
import pytest

from app.settings import Settings
from infra.db.session import create_db_engine, create_session_factory, init_db
from infra.repositories.candidates_repository import CandidatesRepository
from infra.repositories.scores_repository import ScoresRepository
from helpers import make_pdf


@pytest.fixture
def good_llm_response() -> str:
    return json.dumps({
        "relevance": {"score": 4, "reason": "Worked on payment ops for three years."},
        "experience": {"score": 4, "reason": "Led a team of five analysts."},
        "motivation": {"score": 3, "reason": "Generic interest in fintech."},
        "risk": {"score": 2, "reason": "Short last tenure."},
        "riskFlags": ["short_tenure"],
    })


@pytest.fixture
def cv_pdf_bytes() -> bytes:
    return make_pdf(["Jane Doe", "Senior Payments Analyst"])


@pytest.fixture
def cv_transport(cv_pdf_bytes):
    """Serves the sample CV at /cv/ok.pdf and 404 for everything else."""

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/cv/ok.pdf":
            return httpx.Response(200, content=cv_pdf_bytes,
                                  headers={"content-type": "application/pdf"})
        return httpx.Response(404)

    return httpx.MockTransport(handler)


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'test.sqlite3'}",
        OPENAI_API_KEY="sk-test",
        OPENAI_MODEL="gpt-test",
        BULK_SCORING_CONCURRENCY=2,
    )


@pytest.fixture
def sessions(test_settings):
    engine = create_db_engine(test_settings.DATABASE_URL)
    init_db(engine)
    yield create_session_factory(engine)
    engine.dispose()


@pytest.fixture
def candidates_repo(sessions) -> CandidatesRepository:
    repo = CandidatesRepository(sessions)
    repo.upsert_many([
        {
            "id": 101,
            "job_id": 7,
            "candidate_name": "Jane Doe",
            "cv_url": "https://cv.example.com/cv/ok.pdf",
            "raw_answers": {"answers": [
                {"question": "Why us?", "value": "I love payments."},
                {"question": "", "value": ""},
            ]},
        },
        {
            "id": 102,
            "job_id": 7,
            "candidate_name": "John Roe",
            "cv_url": "https://cv.example.com/cv/missing.pdf",
            "raw_answers": [{"question": "Notice period?", "value": "Two weeks"}],
        },
        {
            "id": 201,
            "job_id": 8,
            "candidate_name": "Ana Lima",
            "cv_url": "",
            "raw_answers": None,
        },
    ])
    return repo


@pytest.fixture
def scores_repo(sessions) -> ScoresRepository:
    return ScoresRepository(sessions)
