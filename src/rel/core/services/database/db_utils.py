from loguru import logger
from psycopg2.extensions import parse_dsn
from sqlalchemy.engine import URL, make_url

from src.rel.runtime.config.config_data import DatabaseConfig

# libpq keywords that map onto URL parts; everything else becomes a query argument
_DSN_URL_PARTS = {
    "user": "username",
    "password": "password",
    "host": "host",
    "port": "port",
    "dbname": "database",
}


def dsn_to_url(dsn: str, driver: str = "postgresql") -> URL:
    """Translate a libpq keyword DSN such as ``dbname=rel sslmode=disable``."""
    params = parse_dsn(dsn)
    parts = {}
    query = {}
    for key, value in params.items():
        if key in _DSN_URL_PARTS:
            parts[_DSN_URL_PARTS[key]] = int(value) if key == "port" else value
        else:
            query[key] = value
    return URL.create(driver, query=query, **parts)


def get_database_url(config: DatabaseConfig) -> URL:
    """Build the connection URL from the URL/DSN string and structured settings."""
    if config.url and "://" in config.url:
        url = make_url(config.url)
    elif config.url:
        url = dsn_to_url(config.url, config.driver)
    else:
        url = URL.create(config.driver)

    overrides = {
        "host": config.host,
        "port": config.port,
        "database": config.database,
        "username": config.user,
        "password": config.password,
    }
    for part, value in overrides.items():
        if value is None:
            continue
        current = getattr(url, part)
        if current is not None and current != value:
            logger.warning(
                "Database {} '{}' from settings overrides '{}' from the URL",
                part,
                "***" if part == "password" else value,
                "***" if part == "password" else current,
            )
        url = url.set(**{part: value})

    if config.sslmode is not None:
        url = url.update_query_dict({"sslmode": config.sslmode})

    return url
