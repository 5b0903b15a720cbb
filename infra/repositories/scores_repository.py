import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from sqlalchemy.orm import sessionmaker

from domain.errors import ScoreNotFoundError
from domain.schemas import CandidateScoreResult, DimensionResult, PersistedScore
from infra.db.models import CandidateScoreRecord


class _KeyedLocks:
    """One lock per key; writers on different keys never contend.

    Entries are dropped once no thread holds or waits on them.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[int, List] = {}  # key -> [lock, holders]

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    @contextmanager
    def hold(self, key: int) -> Iterator[None]:
        with self._guard:
            entry = self._locks.setdefault(key, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[key]


def score_from_record(rec: CandidateScoreRecord) -> PersistedScore:
    return PersistedScore(
        candidate_id=rec.candidate_id,
        relevance=DimensionResult(score=rec.relevance_score, reason=rec.relevance_reason),
        experience=DimensionResult(score=rec.experience_score, reason=rec.experience_reason),
        motivation=DimensionResult(score=rec.motivation_score, reason=rec.motivation_reason),
        risk=DimensionResult(score=rec.risk_score, reason=rec.risk_reason),
        risk_flags=list(rec.risk_flags or []),
        final_score=rec.final_score,
        rubric_version=rec.rubric_version,
        created_at=rec.created_at,
        updated_at=rec.updated_at,
    )


class ScoresRepository:
    """Latest score per candidate. ``save`` and ``update_final_score`` are the
    only write paths into score state."""

    def __init__(self, sessions: sessionmaker):
        self._sessions = sessions
        self._locks = _KeyedLocks()

    def save(self, result: CandidateScoreResult) -> PersistedScore:
        fields = dict(
            relevance_score=result.relevance.score,
            relevance_reason=result.relevance.reason,
            experience_score=result.experience.score,
            experience_reason=result.experience.reason,
            motivation_score=result.motivation.score,
            motivation_reason=result.motivation.reason,
            risk_score=result.risk.score,
            risk_reason=result.risk.reason,
            risk_flags=list(result.risk_flags),
            final_score=result.final_score,
            rubric_version=result.rubric_version,
        )
        with self._locks.hold(result.candidate_id), self._sessions() as s:
            rec = s.get(CandidateScoreRecord, result.candidate_id)
            if rec is None:
                rec = CandidateScoreRecord(candidate_id=result.candidate_id, **fields)
                s.add(rec)
            else:
                for name, value in fields.items():
                    setattr(rec, name, value)
            s.commit()
            s.refresh(rec)
            return score_from_record(rec)

    def update_final_score(self, candidate_id: int, final_score: float) -> PersistedScore:
        with self._locks.hold(candidate_id), self._sessions() as s:
            rec = s.get(CandidateScoreRecord, candidate_id)
            if rec is None:
                raise ScoreNotFoundError(candidate_id)
            rec.final_score = final_score
            s.commit()
            s.refresh(rec)
            return score_from_record(rec)

    def get(self, candidate_id: int) -> Optional[PersistedScore]:
        with self._sessions() as s:
            rec = s.get(CandidateScoreRecord, candidate_id)
            return score_from_record(rec) if rec else None
