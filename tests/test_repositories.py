"""
Tests for the candidate and score stores.
"""

from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeout

import pytest
from sqlalchemy import func, select

from domain.errors import ScoreNotFoundError
from domain.schemas import CandidateScoreResult, CandidateStage, DimensionResult
from infra.db.models import CandidateScoreRecord


def make_result(candidate_id: int = 101, final_score: float = 3.75, score: int = 4) -> CandidateScoreResult:
    return CandidateScoreResult(
        candidate_id=candidate_id,
        relevance=DimensionResult(score=score, reason="relevant"),
        experience=DimensionResult(score=score, reason="experienced"),
        motivation=DimensionResult(score=3, reason="motivated"),
        risk=DimensionResult(score=2, reason="some risk"),
        risk_flags=["short_tenure"],
        final_score=final_score,
        rubric_version="v-test",
    )


def count_scores(sessions, candidate_id: int) -> int:
    with sessions() as s:
        return s.scalar(
            select(func.count()).select_from(CandidateScoreRecord)
            .where(CandidateScoreRecord.candidate_id == candidate_id))


class TestCandidatesRepository:

    def test_get_for_scoring(self, candidates_repo):
        candidate = candidates_repo.get_for_scoring(101)
        assert candidate.candidate_name == "Jane Doe"
        assert candidate.job_id == 7
        assert candidate.raw_answers["answers"][0]["question"] == "Why us?"

    def test_unknown_candidate(self, candidates_repo):
        assert candidates_repo.get_for_scoring(999) is None
        assert candidates_repo.exists(999) is False
        assert candidates_repo.exists(101) is True

    def test_upsert_many_is_idempotent(self, candidates_repo):
        created = candidates_repo.upsert_many([
            {"id": 101, "job_id": 7, "candidate_name": "Renamed"},
            {"id": 103, "job_id": 7, "candidate_name": "New Person"},
        ])
        assert created == 1
        assert candidates_repo.get_for_scoring(101).candidate_name == "Jane Doe"
        assert candidates_repo.get_detail(103).stage == CandidateStage.INBOX

    def test_update_stage(self, candidates_repo):
        candidates_repo.update_stage(101, CandidateStage.SHORTLIST)
        assert candidates_repo.get_detail(101).stage == CandidateStage.SHORTLIST

    def test_list_ids_by_job(self, candidates_repo, scores_repo):
        assert candidates_repo.list_ids_by_job(7) == [101, 102]
        scores_repo.save(make_result(101))
        assert candidates_repo.list_ids_by_job(7, unscored_only=True) == [102]
        assert candidates_repo.list_ids_by_job(99) == []

    def test_list_by_job(self, candidates_repo, scores_repo):
        scores_repo.save(make_result(102, final_score=2.4))
        candidates_repo.update_stage(101, CandidateStage.MAYBE)
        rows = candidates_repo.list_by_job(7)
        assert [r.candidate_name for r in rows] == ["Jane Doe", "John Roe"]
        assert rows[0].stage == CandidateStage.MAYBE
        assert rows[0].final_score is None
        assert rows[1].final_score == 2.4
        assert candidates_repo.list_by_job(99) == []

    def test_get_detail(self, candidates_repo, scores_repo):
        detail = candidates_repo.get_detail(101)
        assert detail.job_id == 7
        assert detail.stage == CandidateStage.INBOX
        assert detail.score is None

        scores_repo.save(make_result(101))
        detail = candidates_repo.get_detail(101)
        assert detail.score.final_score == 3.75
        assert detail.score.risk_flags == ["short_tenure"]
        assert candidates_repo.get_detail(999) is None


class TestScoresRepository:

    def test_save_round_trip(self, candidates_repo, scores_repo):
        result = make_result()
        saved = scores_repo.save(result)
        loaded = scores_repo.get(101)
        for persisted in (saved, loaded):
            assert persisted.model_dump(exclude={"created_at", "updated_at"}) == result.model_dump()
        assert loaded.created_at is not None

    def test_save_twice_keeps_one_record_with_latest_values(self, candidates_repo, scores_repo, sessions):
        scores_repo.save(make_result(final_score=3.75, score=4))
        scores_repo.save(make_result(final_score=2.1, score=2))
        assert count_scores(sessions, 101) == 1
        loaded = scores_repo.get(101)
        assert loaded.final_score == 2.1
        assert loaded.relevance.score == 2

    def test_update_final_score(self, candidates_repo, scores_repo):
        scores_repo.save(make_result())
        updated = scores_repo.update_final_score(101, 4.2)
        assert updated.final_score == 4.2
        assert updated.relevance.score == 4

    def test_update_final_score_without_prior_score(self, scores_repo, sessions):
        with pytest.raises(ScoreNotFoundError):
            scores_repo.update_final_score(999, 4.2)
        assert scores_repo.get(999) is None
        assert count_scores(sessions, 999) == 0

    def test_concurrent_saves(self, candidates_repo, scores_repo, sessions):
        results = [make_result(cid, final_score=float(i % 5)) for i, cid in enumerate([101, 102, 201] * 4)]
        with ThreadPoolExecutor(max_workers=4) as pool:
            list(pool.map(scores_repo.save, results))
        for cid in (101, 102, 201):
            assert count_scores(sessions, cid) == 1

    def test_lock_on_one_candidate_does_not_block_another(self, candidates_repo, scores_repo):
        with ThreadPoolExecutor(max_workers=2) as pool:
            with scores_repo._locks.hold(101):
                other = pool.submit(scores_repo.save, make_result(102))
                assert other.result(timeout=5).candidate_id == 102

                same = pool.submit(scores_repo.save, make_result(101))
                with pytest.raises(FuturesTimeout):
                    same.result(timeout=0.2)
            assert same.result(timeout=5).candidate_id == 101

    def test_lock_registry_is_emptied_after_writes(self, candidates_repo, scores_repo):
        for cid in (101, 102, 201):
            scores_repo.save(make_result(cid))
        scores_repo.update_final_score(101, 4.0)
        with pytest.raises(ScoreNotFoundError):
            scores_repo.update_final_score(999, 4.0)
        assert len(scores_repo._locks) == 0
