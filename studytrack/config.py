"""
Application configuration loaded from environment variables.
Uses pydantic-settings so every value can be overridden via a .env file.

The settings object is built once at process start (see `studytrack.main`)
and handed to the token provider, the repositories and the API server.
Nothing in the package reads configuration from a module-level global.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # ── JWT ──────────────────────────────────────────────────────────────────
    # Secret used to sign/verify bearer tokens.  There is no default: the
    # process refuses to start without one.
    jwt_secret_key: str = Field(..., min_length=1)
    jwt_algorithm: str = "HS256"
    # Token lifetime in minutes
    jwt_expire_minutes: int = Field(60, gt=0)

    # ── HTTP ─────────────────────────────────────────────────────────────────
    host: str = "0.0.0.0"
    port: int = 3333
    # Comma-separated list of allowed CORS origins ("*" for any)
    allow_origins: str = "*"
    log_level: str = "INFO"

    # ── Directories ──────────────────────────────────────────────────────────
    # How many entries GET /{id}/directory/recents returns at most
    recent_directories_limit: int = Field(5, gt=0)

    # ── AWS ──────────────────────────────────────────────────────────────────
    aws_region: str = "us-east-1"
    # Leave blank to use the default credential chain (IAM role, env vars, …)
    aws_access_key_id: str = ""
    aws_secret_access_key: str = ""

    # ── DynamoDB ─────────────────────────────────────────────────────────────
    # Every resource lives in its own table named <prefix><resource>
    dynamodb_table_prefix: str = "studytrack_"
    # Set to a local DynamoDB endpoint for development (e.g. http://localhost:8000)
    dynamodb_endpoint_url: str = ""

    # ── Helpers ───────────────────────────────────────────────────────────────
    def get_allow_origins(self) -> list[str]:
        """Return the CORS origin list parsed from ``allow_origins``."""
        origins = [o.strip() for o in self.allow_origins.split(",") if o.strip()]
        return origins or ["*"]
