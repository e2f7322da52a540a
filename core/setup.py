from typing import Any
from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import QueuePool
from config.setting import settings


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class DatabaseSetup:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(DatabaseSetup, cls).__new__(cls)
            cls._instance._initialize()
        return cls._instance

    def _initialize(self) -> None:
        """Construct an Database Operator with connection pooling"""
        engine_kwargs = {
            "poolclass": QueuePool,
            "pool_pre_ping": True,  # Verify connections before use
            "pool_recycle": 3600,
            "pool_size": 10,
            "max_overflow": 20,
            "echo": settings.DB_ECHO,
        }

        is_sqlite = settings.DATABASE_URL.startswith("sqlite")
        if is_sqlite:
            engine_kwargs["connect_args"] = {"check_same_thread": False}

        self._engine = create_engine(settings.DATABASE_URL, **engine_kwargs)
        if is_sqlite:
            # SQLite ignores ON DELETE rules unless asked per connection
            event.listen(self._engine, "connect", _enable_sqlite_foreign_keys)

        self._session_maker = sessionmaker(
            bind=self._engine, autocommit=False, autoflush=False, expire_on_commit=False
        )
        self._base = declarative_base()

    def get_session(self) -> sessionmaker:
        """Grant session

            This method returns the database
            session factory
        Returns:
            object: database session factory
        """
        return self._session_maker

    @property
    def get_base(self) -> Any:
        """Grant Base

            This method returns the
            database Base
        Returns:
            object: database base
        """
        return self._base

    @property
    def get_engine(self) -> Any:
        """Grant engine
            This method returns the
            database engine

        Returns:
            object: database engine
        """
        return self._engine


database = DatabaseSetup()
Base = database.get_base
