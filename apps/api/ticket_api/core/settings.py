from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./ticket_api.db"
    # DB bootstrap (dev only)
    AUTO_DB_BOOTSTRAP: bool = False

    # Host plugins
    SUBTICKET_PLUGIN_ENABLED: bool = True
    MARKDOWN_PLUGIN_ENABLED: bool = False
    REQUIRE_MARKDOWN_PLUGIN: bool = False

    # Notes posted through the update endpoint
    DEFAULT_NOTE_TITLE: str = "API Update"
    DEFAULT_NOTE_FORMAT: str = "markdown"

    # Search pagination
    SEARCH_DEFAULT_LIMIT: int = 20
    SEARCH_MAX_LIMIT: int = 100

    # Ticket creation
    TICKET_NUMBER_DIGITS: int = 6
    DEFAULT_SOURCE: str = "API"
    DEFAULT_PRIORITY: str = "Normal"

    CORS_ORIGINS: str = "http://localhost:3000,http://127.0.0.1:3000"
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()


def get_settings() -> Settings:
    return settings
