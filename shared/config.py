"""Application configuration with startup validation.

All config is validated at import time via pydantic-settings.
In remote mode, the profile store base URL and access token are required.
"""

from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_prefix": "TP_", "env_file": ".env"}

    # Profile store mode: "memory" or "remote"
    store_mode: str = "memory"

    # Remote profile store
    profile_api_base_url: str = ""
    profile_api_token: str = ""
    request_timeout_seconds: float = 10.0

    # Editable profile defaults
    default_timezone: str = "America/New_York"

    # API
    api_version: str = "v1"

    # Retry (transport only; the schedule core never retries)
    retry_max_attempts: int = 3
    retry_max_wait_seconds: int = 30

    @model_validator(mode="after")
    def validate_remote_mode(self) -> "Settings":
        """Fail fast at startup if remote mode is selected but the store is not configured."""
        if self.store_mode not in ("memory", "remote"):
            raise ValueError(
                f"store_mode must be 'memory' or 'remote', got '{self.store_mode}'"
            )
        if self.store_mode == "remote":
            missing = []
            if not self.profile_api_base_url:
                missing.append("TP_PROFILE_API_BASE_URL")
            if not self.profile_api_token:
                missing.append("TP_PROFILE_API_TOKEN")
            if missing:
                raise ValueError(
                    f"store_mode='remote' requires profile store settings. "
                    f"Missing: {', '.join(missing)}"
                )
        return self


settings = Settings()
