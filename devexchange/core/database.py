import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.orm.exc import StaleDataError
from sqlalchemy.pool import StaticPool

from devexchange.core.config import settings

logger = logging.getLogger(__name__)


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        options = {"connect_args": {"check_same_thread": False}}
        # in-memory databases live and die with their connection
        if url in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool
        return options
    return {"pool_pre_ping": True}


engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.DATABASE_ECHO,
    **_engine_options(settings.DATABASE_URL),
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Create every table known to the models."""
    from devexchange.models.user_db import user_db  # noqa: F401
    from devexchange.models.trust_db import trust_db  # noqa: F401
    from devexchange.models.category_db import category_db  # noqa: F401
    from devexchange.models.image_db import image_db  # noqa: F401
    from devexchange.models.quiz_db import quiz_user_answer  # noqa: F401
    from devexchange.models.connection_db import connection_db  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database schema ready")


def commit_update(db, model, obj_id) -> bool:
    """Commit a pending update; False when the row vanished underneath it."""
    try:
        db.commit()
    except StaleDataError:
        db.rollback()
        if db.get(model, obj_id) is None:
            logger.info("%s %s disappeared during update", model.__name__, obj_id)
            return False
        raise
    return True
