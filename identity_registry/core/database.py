import logging
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from identity_registry.core.config import DATABASE_URL, DB_POOL_SIZE

logger = logging.getLogger(__name__)

Base = declarative_base()


def build_engine(url: str = DATABASE_URL, **kwargs) -> Engine:
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    else:
        kwargs.setdefault("pool_size", DB_POOL_SIZE)
        kwargs.setdefault("pool_pre_ping", True)
    return create_engine(url, **kwargs)


engine = build_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def connect(bind: Engine = engine) -> None:
    import identity_registry.models.user  # noqa: F401  registers the users table

    Base.metadata.create_all(bind=bind, checkfirst=True)
    logger.info(f"Database ready ({bind.url.render_as_string(hide_password=True)})")


def disconnect(bind: Engine = engine) -> None:
    bind.dispose()
    logger.info("Database connections closed")
