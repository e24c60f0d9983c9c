from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="AYAH_PLAYER_", env_file=".env", extra="ignore")

    openai_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("AYAH_PLAYER_OPENAI_API_KEY", "OPENAI_API_KEY"),
    )
    host: str = "0.0.0.0"
    port: int = Field(default=3001, validation_alias=AliasChoices("AYAH_PLAYER_PORT", "PORT"))

    quran_api_base: str = "https://api.alquran.cloud/v1"
    translation_edition: str = "en.asad"
    audio_host: str = "https://everyayah.com/data"
    reciter: str = "Alafasy_128kbps"
    range_model: str = "gpt-4.1"
    http_timeout: float = 15.0

    parse_rate_limit: int = Field(default=5, ge=1)
    parse_rate_window_seconds: float = Field(default=60.0, gt=0)

    audio_start_retries: int = Field(default=3, ge=0)
    audio_retry_base_delay: float = Field(default=0.5, ge=0)

    starting_surah: int = Field(default=89, ge=1, le=114)
    starting_ayah: int = Field(default=1, ge=1)
    log_level: str = "INFO"


settings = Settings()
