"""SQLModel engine singleton."""
from sqlmodel import SQLModel, create_engine

from sleeptrack.config import get_settings

_engine = None


def get_engine():
    """Return the module-level engine, creating it on first call."""
    global _engine
    if _engine is None:
        settings = get_settings()
        connect_args = {}
        if settings.database_url.startswith("sqlite"):
            # Stores serialize per subject themselves; SQLite must accept any thread
            connect_args["check_same_thread"] = False
        _engine = create_engine(settings.database_url, connect_args=connect_args)
        # Import all models so metadata is populated before create_all
        from sleeptrack.models.sleep import SleepSampleRecord  # noqa
        SQLModel.metadata.create_all(_engine)
    return _engine


def get_store():
    """FastAPI dependency returning the configured subject's SampleStore."""
    from sleeptrack.store.sample_store import SampleStore
    return SampleStore(get_engine(), subject=get_settings().subject)
