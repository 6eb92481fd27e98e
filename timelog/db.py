from sqlalchemy.engine import Engine
from sqlmodel import create_engine


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """Build an engine; SQLite connections may be used from FastAPI's worker threads."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(database_url, echo=echo, connect_args=connect_args)
