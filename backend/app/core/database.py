from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from app.core.config import settings


def enable_foreign_keys(target: Engine) -> None:
    """SQLite only enforces FOREIGN KEY / ON DELETE CASCADE when asked to, per connection."""

    @event.listens_for(target, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = create_engine(
    f"sqlite:///{settings.db_path}",
    echo=settings.debug,
    connect_args={"check_same_thread": False},
)
enable_foreign_keys(engine)


def init_db() -> None:
    import app.models  # noqa: F401 - ensure models are registered
    from app.core.seed import seed_reference_data

    settings.db_path.parent.mkdir(parents=True, exist_ok=True)
    SQLModel.metadata.create_all(engine)

    if settings.seed_reference_data:
        with Session(engine) as session:
            seed_reference_data(session)