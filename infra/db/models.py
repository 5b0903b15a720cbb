from sqlalchemy import Column, Integer, String, Float, Text, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from infra.db.session import Base

class CandidateRecord(Base):
    __tablename__ = "candidates"
    id = Column(Integer, primary_key=True, autoincrement=False)  # external application id
    job_id = Column(Integer, nullable=False, index=True)
    candidate_name = Column(String, nullable=False)
    cv_url = Column(String, nullable=False, default="")
    raw_answers = Column(JSON, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    stage = relationship("CandidateStageRecord", back_populates="candidate", uselist=False)
    score = relationship("CandidateScoreRecord", back_populates="candidate", uselist=False)

class CandidateStageRecord(Base):
    __tablename__ = "candidate_stages"
    candidate_id = Column(Integer, ForeignKey("candidates.id"), primary_key=True)
    stage = Column(String, nullable=False, default="INBOX")
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
    candidate = relationship("CandidateRecord", back_populates="stage")

class CandidateScoreRecord(Base):
    __tablename__ = "candidate_scores"
    candidate_id = Column(Integer, ForeignKey("candidates.id"), primary_key=True)
    relevance_score = Column(Integer, nullable=False)
    relevance_reason = Column(Text, nullable=False)
    experience_score = Column(Integer, nullable=False)
    experience_reason = Column(Text, nullable=False)
    motivation_score = Column(Integer, nullable=False)
    motivation_reason = Column(Text, nullable=False)
    risk_score = Column(Integer, nullable=False)
    risk_reason = Column(Text, nullable=False)
    risk_flags = Column(JSON, nullable=False, default=list)
    final_score = Column(Float, nullable=False)
    rubric_version = Column(String, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
    candidate = relationship("CandidateRecord", back_populates="score")
