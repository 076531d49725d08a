from sports_hub.db.base import Base
from sports_hub.db.engine import (
    DatabaseConfig,
    create_db_engine,
    create_schema,
    create_session_factory,
)

__all__ = [
    "Base",
    "DatabaseConfig",
    "create_db_engine",
    "create_schema",
    "create_session_factory",
]
