from sqlalchemy import Engine

from petcare.db.base import Base

# IMPORTANT: import models so they register with Base.metadata
import petcare.db.models  # noqa: F401


def init_db(engine: Engine) -> None:
    Base.metadata.create_all(bind=engine)
