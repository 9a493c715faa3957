from pathlib import Path

from pydantic import AliasChoices
from pydantic_settings import BaseSettings
from pydantic import Field

ENV_FILE = Path(__file__).resolve().parent.parent / ".env.local"


class Settings(BaseSettings):
    database_url: str = "sqlite:///./incidents.db"
    frontend_url: str | None = None
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]
    host: str = "127.0.0.1"
    port: int = 3000
    log_level: str = "INFO"

    # Reject create/update bodies carrying fields outside the incident schema
    forbid_unknown_fields: bool = True
    default_page_size: int = Field(default=10, ge=1)
    max_page_size: int = Field(default=100, ge=1)

    # Web client; talks to this process in-memory when unset
    api_base_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("api_base_url", "vite_api_url"),
    )
    search_debounce_ms: int = Field(default=1000, ge=0)

    model_config = {"env_file": str(ENV_FILE), "extra": "ignore"}

    @property
    def allowed_origins(self) -> list[str]:
        origins = list(self.cors_origins)
        if self.frontend_url and self.frontend_url not in origins:
            origins.append(self.frontend_url)
        return origins


settings = Settings()
