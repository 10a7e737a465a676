"""Database initialization utilities."""

from sqlalchemy.engine import Engine

from foodie import models  # noqa: F401
from foodie.db.base import Base


def init_db(engine: Engine) -> None:
    """Create the places, bookmark, review, reservation and vote tables."""
    Base.metadata.create_all(bind=engine)
