"""Service configuration loaded from environment variables."""
from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Service configuration loaded from environment variables.

    Attributes:
        host: Bind address for the API server.
        port: Port number for the API server.
        debug: Enable debug logging and API documentation.
        json_logs: Render logs as JSON lines instead of console output.
        cors_origins_raw: Raw comma-separated CORS origins string.
        shutdown_timeout: Seconds uvicorn waits for in-flight requests.
        key: API key for authenticating requests. Empty disables the check.
        seed_path: Optional path to a seed corpus replacing the packaged one.
        snippet_length: Characters of content kept in result snippets.
        suggest_min_length: Minimum fragment length for suggestions.
        suggest_max_limit: Maximum number of suggestions per request.
        analytics_max_batch: Maximum analytics events per ingestion batch.
        analytics_max_days: Longest period, in days, an analytics report may cover.
        analytics_max_events: Number of most recent analytics events retained.
    """

    model_config = SettingsConfigDict(
        env_prefix="KB_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    json_logs: bool = True
    cors_origins_raw: str = "http://localhost:3000"
    shutdown_timeout: float = 30.0
    key: str = ""

    seed_path: str | None = None
    snippet_length: int = 200
    suggest_min_length: int = 2
    suggest_max_limit: int = 20
    analytics_max_batch: int = 10
    analytics_max_days: int = 366
    analytics_max_events: int = 10_000

    @computed_field
    @property
    def cors_origins(self) -> list[str]:
        """Parse CORS origins from comma-separated string.

        Returns:
            List of allowed origin URLs.
        """
        return [
            origin.strip()
            for origin in self.cors_origins_raw.split(",")
            if origin.strip()
        ]
