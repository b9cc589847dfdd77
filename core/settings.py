from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL, make_url


class Settings(BaseSettings):
    # === PostgreSQL parameters ===
    DB_HOST: str = 'localhost'
    DB_PORT: int = 5432
    DB_USER: str = 'postgres'
    DB_PASSWORD: str = ''
    DB_NAME: str = 'company_hierarchy'

    # Full URL override, e.g. sqlite+aiosqlite:///./hierarchy.db
    DATABASE_URL: str | None = None

    # SQLAlchemy parameters
    DRIVER: str = 'postgresql+asyncpg'
    ECHO: bool = False
    POOL_SIZE: int = 5
    MAX_OVERFLOW: int = 10
    POOL_PRE_PING: bool = True
    DB_CONNECT_TIMEOUT: float = 10
    DB_COMMAND_TIMEOUT: float = 60
    CREATE_SCHEMA_ON_STARTUP: bool = False

    # === Hierarchy ===
    # One query for the whole table instead of one query per tree node
    HIERARCHY_PRELOAD: bool = True
    # Collapse every error except "not found" on GET /employee/{id} into 400
    LEGACY_ERROR_STATUSES: bool = False

    LOG_LEVEL: str = 'INFO'

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore',
        case_sensitive=False,
    )

    def url(self) -> URL:
        """Build the connection URL without string concatenation."""
        if self.DATABASE_URL:
            return make_url(self.DATABASE_URL)
        return URL.create(
            drivername=self.DRIVER,
            username=self.DB_USER,
            password=self.DB_PASSWORD,
            host=self.DB_HOST,
            port=self.DB_PORT,
            database=self.DB_NAME,
        )


# Singleton settings instance for the whole application
settings = Settings()
