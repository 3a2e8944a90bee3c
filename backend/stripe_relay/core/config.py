from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Required per request; empty values are reported, not raised at startup.
    stripe_webhook_secret: str = ""
    apps_script_url: str = ""
    proxy_secret: str = ""

    stripe_api_version: str = "2023-10-16"

    proxy_secret_placement: Literal["query", "header"] = "query"
    proxy_secret_param: str = "proxy_secret"
    proxy_secret_header: str = "X-Proxy-Secret"

    forward_timeout: float | None = None  # seconds, None disables the timeout
    signature_tolerance: int = 300
    user_agent: str = "railway-stripe-proxy/1.0"
    accept_root_post: bool = False
    max_body_size: int = 1_048_576  # 1 MiB

    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    def missing(self) -> list[str]:
        """Env var names of required values that are unset or empty."""
        required = {
            "STRIPE_WEBHOOK_SECRET": self.stripe_webhook_secret,
            "APPS_SCRIPT_URL": self.apps_script_url,
            "PROXY_SECRET": self.proxy_secret,
        }
        return [name for name, value in required.items() if not value]


@lru_cache
def get_settings() -> Settings:
    return Settings()
