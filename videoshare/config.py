import logging
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "videoshare"
    app_env: str = "dev"
    storage_dir: str = "uploads"
    max_upload_size_bytes: int = 2 * 1024 * 1024 * 1024
    allowed_extensions: list[str] = ["mp4", "avi", "mov", "mkv", "wmv", "flv", "webm", "m4v"]
    stream_media_type: str = "video/mp4"
    chunk_size: int = 1024 * 1024
    cors_allowed_origins: list[str] = ["*"]
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000

    model_config = SettingsConfigDict(env_file=".env", env_prefix="VIDEOSHARE_")


@lru_cache
def get_settings() -> Settings:
    return Settings()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
