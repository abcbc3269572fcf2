from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    allowed_origins: str = Field(default="http://localhost:3000")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    # Project discovery
    project_path: str = Field(default="")
    gitlab_ci_patterns: str = Field(default=".gitlab-ci.yml,.gitlab/**/*.yml")

    # Reference handling
    max_reference_depth: int = Field(default=100)

    @property
    def allowed_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.allowed_origins.split(",")]

    @property
    def gitlab_ci_patterns_list(self) -> List[str]:
        return [pattern.strip() for pattern in self.gitlab_ci_patterns.split(",") if pattern.strip()]

    def validate(self) -> None:
        errors = []
        if self.log_level.upper() not in VALID_LOG_LEVELS:
            errors.append(f"LOG_LEVEL must be one of {sorted(VALID_LOG_LEVELS)}")
        if not self.gitlab_ci_patterns_list:
            errors.append("GITLAB_CI_PATTERNS must contain at least one pattern")
        if self.max_reference_depth <= 0:
            errors.append("MAX_REFERENCE_DEPTH must be positive")
        if errors:
            raise ValueError(f"Configuration errors: {', '.join(errors)}")


settings = Settings()
