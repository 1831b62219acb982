import os

DATABASE_URL_ENV = "ENTITY_HYDRATOR_DATABASE_URL"
DEFAULT_DATABASE_URL = "sqlite://"


def get_database_url() -> str:
    """Database used by the SQLAlchemy storage, in-memory SQLite unless overridden."""
    env_url = os.getenv(DATABASE_URL_ENV)
    if env_url:
        return env_url
    return DEFAULT_DATABASE_URL
