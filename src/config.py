import logging
from typing import Literal, Optional

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings

log = logging.getLogger(__name__)

ServeMode = Literal["proxy", "static", "none"]


class Settings(BaseSettings):
    app_env: str = Field("dev", alias="APP_ENV")
    host: str = Field("0.0.0.0", alias="HOST")
    port: int = Field(8081, alias="PORT")

    # Frontend dev server (proxy target) and the origin allowed for CORS
    frontend_port: int = Field(8080, alias="FRONTEND_PORT")
    cors_origin: Optional[str] = Field(None, alias="CORS_ORIGIN")
    enable_cors: bool = Field(False, alias="ENABLE_CORS")

    # proxy | static | none; unset => proxy in dev, static otherwise
    serve_mode: Optional[ServeMode] = Field(None, alias="SERVE_MODE")
    static_dir: str = Field("frontend/dist", alias="STATIC_DIR")

    metadata_path: str = Field("deepgram.toml", alias="METADATA_PATH")

    # Deepgram key is REQUIRED; fail fast if missing.
    deepgram_api_key: str = Field(..., min_length=1, alias="DEEPGRAM_API_KEY")
    deepgram_api_base: str = Field("https://api.deepgram.com", alias="DEEPGRAM_API_BASE")
    request_timeout_seconds: int = Field(120, alias="REQUEST_TIMEOUT_SECONDS")

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    @property
    def is_development(self) -> bool:
        return self.app_env.strip().lower() in ("dev", "development")

    @property
    def effective_serve_mode(self) -> ServeMode:
        if self.serve_mode:
            return self.serve_mode
        return "proxy" if self.is_development else "static"

    @property
    def frontend_origin(self) -> str:
        return self.cors_origin or f"http://localhost:{self.frontend_port}"


def load_settings() -> Settings:
    """
    Build Settings from the environment (and .env). A missing DEEPGRAM_API_KEY
    is fatal: log setup instructions and exit with status 1.
    """
    try:
        return Settings()
    except ValidationError as e:
        missing = [err for err in e.errors() if "DEEPGRAM_API_KEY" in err.get("loc", ())]
        if missing:
            log.error(
                "Deepgram API key not found. Set DEEPGRAM_API_KEY in a .env file "
                "or export it in the environment. Get a key at https://console.deepgram.com"
            )
        else:
            log.error("Invalid configuration: %s", e)
        raise SystemExit(1) from e
