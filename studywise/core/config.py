from typing import Optional
from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    name: str = Field(default="studywise", alias="APP_NAME")
    version: str = Field(default="v1", alias="API_VERSION")
    port: int = Field(default=9000, alias="APP_PORT")
    mode: str = Field(default="prod", alias="MODE")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"], alias="CORS_ORIGINS"
    )

    @computed_field
    def is_production(self) -> bool:
        return self.mode != "dev"


class ModelSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    gemini_api_key: Optional[str] = Field(default=None, alias="GEMINI_API_KEY")
    openrouter_api_key: Optional[str] = Field(default=None, alias="OPENROUTER_API_KEY")

    # Model provider selection for text flows: "google" or "openrouter"
    provider: str = Field(default="google", alias="MODEL_PROVIDER")
    openrouter_model: str = Field(
        default="google/gemini-2.5-flash", alias="OPENROUTER_MODEL"
    )
    text_model: str = Field(default="gemini-2.5-flash", alias="TEXT_MODEL")
    # Speech is only available through Gemini
    tts_model: str = Field(
        default="gemini-2.5-flash-preview-tts", alias="TTS_MODEL"
    )
    timeout_seconds: float = Field(default=60.0, alias="FLOW_TIMEOUT_SECONDS")


class StoreSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    # Unset keeps the store in memory
    path: Optional[str] = Field(default=None, alias="STORE_PATH")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    app: AppSettings = Field(default_factory=lambda: AppSettings())
    models: ModelSettings = Field(default_factory=lambda: ModelSettings())
    store: StoreSettings = Field(default_factory=lambda: StoreSettings())


settings = Settings()
