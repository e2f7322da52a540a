from typing import Optional
from core import setup
from sqlalchemy.orm import Session, sessionmaker


class CreateDBSession:
    """Synchronous database session context manager

    Uses the application session factory unless one is handed in.
    """
    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self.db_factory = session_factory or setup.database.get_session()
        self.session = None

    def __enter__(self) -> Session:
        self.session = self.db_factory()
        return self.session

    def __exit__(self, exc_type, exc_value, exc_traceback):
        if self.session:
            if exc_type is not None:
                self.session.rollback()
            self.session.close()
