# marketplace_chat/infrastructure/database/session.py

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from marketplace_chat.config.settings import Settings
from marketplace_chat.infrastructure.database.base_model import BaseModel


class Database:
    """Engine plus session factory, built once per application and passed around."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self._session_factory = sessionmaker(
            bind=engine,
            autoflush=False,
            expire_on_commit=False,
        )

    @classmethod
    def from_url(cls, url: str, *, echo: bool = False) -> "Database":
        if url.startswith("sqlite"):
            # one shared connection so an in-memory database survives across sessions
            engine = create_engine(
                url,
                echo=echo,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            engine = create_engine(url, echo=echo, pool_pre_ping=True)
        return cls(engine)

    @classmethod
    def from_settings(cls, app_settings: Settings) -> "Database":
        return cls.from_url(app_settings.database_url, echo=app_settings.db_echo)

    def create_all(self) -> None:
        import marketplace_chat.infrastructure.database.models  # noqa: F401

        BaseModel.metadata.create_all(self.engine)

    @contextmanager
    def session(self) -> Iterator[Session]:
        session: Session = self._session_factory()
        try:
            yield session
            session.commit()
        except BaseException:
            # includes GeneratorExit/KeyboardInterrupt from an aborted request
            session.rollback()
            raise
        finally:
            session.close()
