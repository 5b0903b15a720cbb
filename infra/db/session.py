from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase


class Base(DeclarativeBase):
    pass


def create_db_engine(url: str) -> Engine:
    connect_args = {}
    if url.startswith("sqlite"):
        # repositories are called from worker threads
        connect_args["check_same_thread"] = False
    return create_engine(url, echo=False, future=True, pool_pre_ping=True,
                         connect_args=connect_args)


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        bind=engine, autoflush=False, autocommit=False, expire_on_commit=False,
        future=True)


def init_db(engine: Engine) -> None:
    from infra.db.models import CandidateRecord, CandidateStageRecord, CandidateScoreRecord
    Base.metadata.create_all(bind=engine)


def ping(engine: Engine) -> bool:
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    return True
