from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import selectinload, sessionmaker

from domain.schemas import CandidateDetail, CandidateForScoring, CandidateStage, CandidateSummary
from infra.db.models import CandidateRecord, CandidateScoreRecord, CandidateStageRecord
from infra.repositories.scores_repository import score_from_record


def _stage_of(rec: CandidateRecord) -> CandidateStage:
    return CandidateStage(rec.stage.stage) if rec.stage else CandidateStage.INBOX


class CandidatesRepository:
    """Candidate store. The scoring core only reads through it."""

    def __init__(self, sessions: sessionmaker):
        self._sessions = sessions

    def upsert_many(self, candidates: Iterable[Dict[str, Any]]) -> int:
        """Insert candidates that are not known yet and give them an INBOX stage.

        Existing rows are left untouched so re-imports are idempotent.
        """
        created = 0
        with self._sessions() as s:
            for c in candidates:
                if s.get(CandidateRecord, c["id"]) is not None:
                    continue
                s.add(CandidateRecord(
                    id=c["id"],
                    job_id=c["job_id"],
                    candidate_name=c["candidate_name"],
                    cv_url=c.get("cv_url") or "",
                    raw_answers=c.get("raw_answers"),
                ))
                s.add(CandidateStageRecord(
                    candidate_id=c["id"], stage=CandidateStage.INBOX.value))
                created += 1
            s.commit()
        return created

    def get_for_scoring(self, candidate_id: int) -> Optional[CandidateForScoring]:
        with self._sessions() as s:
            rec = s.get(CandidateRecord, candidate_id)
            if not rec:
                return None
            return CandidateForScoring(
                id=rec.id,
                job_id=rec.job_id,
                candidate_name=rec.candidate_name,
                cv_url=rec.cv_url or "",
                raw_answers=rec.raw_answers,
            )

    def exists(self, candidate_id: int) -> bool:
        with self._sessions() as s:
            return s.get(CandidateRecord, candidate_id) is not None

    def list_ids_by_job(self, job_id: int, unscored_only: bool = False) -> List[int]:
        stmt = select(CandidateRecord.id).where(CandidateRecord.job_id == job_id)
        if unscored_only:
            stmt = stmt.outerjoin(
                CandidateScoreRecord,
                CandidateScoreRecord.candidate_id == CandidateRecord.id,
            ).where(CandidateScoreRecord.candidate_id.is_(None))
        with self._sessions() as s:
            return list(s.scalars(stmt.order_by(CandidateRecord.id)))

    def list_by_job(self, job_id: int) -> List[CandidateSummary]:
        stmt = (
            select(CandidateRecord)
            .where(CandidateRecord.job_id == job_id)
            .options(selectinload(CandidateRecord.stage), selectinload(CandidateRecord.score))
            .order_by(CandidateRecord.candidate_name)
        )
        with self._sessions() as s:
            return [
                CandidateSummary(
                    id=rec.id,
                    candidate_name=rec.candidate_name,
                    cv_url=rec.cv_url or "",
                    stage=_stage_of(rec),
                    final_score=rec.score.final_score if rec.score else None,
                )
                for rec in s.scalars(stmt)
            ]

    def get_detail(self, candidate_id: int) -> Optional[CandidateDetail]:
        with self._sessions() as s:
            rec = s.get(CandidateRecord, candidate_id)
            if not rec:
                return None
            return CandidateDetail(
                id=rec.id,
                job_id=rec.job_id,
                candidate_name=rec.candidate_name,
                cv_url=rec.cv_url or "",
                raw_answers=rec.raw_answers,
                stage=_stage_of(rec),
                score=score_from_record(rec.score) if rec.score else None,
            )

    def update_stage(self, candidate_id: int, stage: CandidateStage) -> None:
        with self._sessions() as s:
            rec = s.get(CandidateStageRecord, candidate_id)
            if rec is None:
                s.add(CandidateStageRecord(candidate_id=candidate_id, stage=stage.value))
            else:
                rec.stage = stage.value
            s.commit()
