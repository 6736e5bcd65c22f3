from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Конфиг pydantic-settings
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="allow",
    )

    DATABASE_URL: str = "sqlite:///./warehouse.db"

    # Дата по умолчанию для поступлений при импорте (ДД.ММ.ГГГГ)
    DEFAULT_MOVEMENT_DATE: str = "01.01.2026"

    LOG_LEVEL: str = "INFO"


settings = Settings()
