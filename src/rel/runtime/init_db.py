"""Database initialization script."""

from src.rel.core.naming import NamingConvention
from src.rel.core.services.database.db_manage import DbManageService
from src.rel.core.services.database.db_session import DbSessionService
from src.rel.runtime.context import get_config


def init_db() -> None:
    """Create all database tables."""
    main_config = get_config()
    naming = NamingConvention(main_config.naming.style)
    with DbSessionService(main_config.database, naming) as db:
        DbManageService(db.engine).create_all()


if __name__ == "__main__":
    init_db()
