"""Configuration management for the nightly pruner."""

from functools import lru_cache

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from nightly_pruner.constants import GITHUB_API_URL, KEEP_ASSETS, NIGHTLY_TAG, REQUEST_TIMEOUT


class Settings(BaseSettings):
    """Settings loaded from the environment a GitHub Actions runner provides."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # GitHub
    github_token: SecretStr = Field(description="Token allowed to edit releases and refs")
    github_repository: str = Field(description="Repository slug, owner/name")
    github_sha: str = Field(description="Commit the nightly tag is moved to")
    github_api_url: str = Field(default=GITHUB_API_URL, description="GitHub REST API base URL")
    request_timeout: float = Field(default=REQUEST_TIMEOUT, gt=0, description="HTTP timeout")

    # Pruning
    nightly_tag: str = Field(default=NIGHTLY_TAG, description="Tag of the release to prune")
    keep_assets: int = Field(default=KEEP_ASSETS, ge=0, description="Newest assets to keep")
    force_tag_update: bool = Field(
        default=False, description="Move the tag even when it is not a fast-forward"
    )

    # Application
    environment: str = Field(default="production", description="Environment name")
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("github_repository")
    @classmethod
    def validate_repository(cls, v: str) -> str:
        """Validate the owner/name slug."""
        owner, sep, name = v.strip().partition("/")
        if not sep or not owner or not name or "/" in name:
            raise ValueError(f"Repository must be owner/name, got: {v}")
        return f"{owner}/{name}"

    @field_validator("github_sha")
    @classmethod
    def validate_sha(cls, v: str) -> str:
        """Reject an empty commit SHA."""
        v = v.strip()
        if not v:
            raise ValueError("Commit SHA must not be empty")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() == "development"

    @property
    def repo_owner(self) -> str:
        return self.github_repository.split("/", 1)[0]

    @property
    def repo_name(self) -> str:
        return self.github_repository.split("/", 1)[1]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()  # type: ignore[call-arg]
