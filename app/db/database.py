from functools import lru_cache
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base

from app.core.config import get_settings

Base = declarative_base()


@lru_cache()
def get_engine() -> Engine:
    """获取数据库引擎"""
    database_url = get_settings().sqlalchemy_database_url
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    return create_engine(database_url, connect_args=connect_args, pool_pre_ping=True)


def get_session_maker():
    """获取会话工厂"""
    return sessionmaker(autocommit=False, autoflush=False, bind=get_engine())


def get_session():
    """获取数据库会话

    Stores only flush; the caller commits. Closing a session that was not
    committed rolls its transaction back.
    """
    SessionLocal = get_session_maker()
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def create_tables(db_engine: Optional[Engine] = None):
    """创建所有表

    Args:
        db_engine: 可选的数据库引擎，如果不提供则使用默认引擎
    """
    # register every model on Base.metadata
    from app.models import post, posts_tags, tag, user  # noqa: F401

    engine = db_engine or get_engine()
    Base.metadata.create_all(bind=engine)
