"""
Конфигурация приложения.
Все значения читаются из переменных окружения (и файла .env).
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseConfig(BaseSettings):
    """Конфигурация подключения к PostgreSQL."""

    model_config = SettingsConfigDict(env_prefix="DB_", env_file=".env", extra="ignore")

    host: str = "localhost"
    port: int = 5432
    user: str = "flashdeck"
    password: str = "flashdeck"
    name: str = "flashdeck"
    pool_size: int = 5
    max_overflow: int = 10

    @property
    def async_url(self) -> str:
        """URL для asyncpg драйвера."""
        return (
            f"postgresql+asyncpg://{self.user}:{self.password}@{self.host}:{self.port}/{self.name}"
        )


class LoggingConfig(BaseSettings):
    """Конфигурация логирования.

    format: ``console`` для разработки или ``json`` для продакшена.
    """

    model_config = SettingsConfigDict(env_prefix="LOG_", env_file=".env", extra="ignore")

    level: str = "INFO"
    format: str = "console"


class CardConfig(BaseSettings):
    """Конфигурация движка карточек."""

    model_config = SettingsConfigDict(env_prefix="CARD_", env_file=".env", extra="ignore")

    # Проверка дубликатов по содержимому полей при создании/обновлении
    duplicate_check_enabled: bool = True


class AppConfig(BaseSettings):
    """Общая конфигурация приложения."""

    model_config = SettingsConfigDict(env_prefix="APP_", env_file=".env", extra="ignore")

    name: str = "flashdeck"
    debug: bool = False
    cors_origins: str = "http://localhost:3000,http://localhost:5173"

    @property
    def cors_origins_list(self) -> list[str]:
        """Список CORS origins."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


class Settings:
    """Агрегатор всех конфигураций."""

    def __init__(self) -> None:
        self.db = DatabaseConfig()
        self.logging = LoggingConfig()
        self.cards = CardConfig()
        self.app = AppConfig()


@lru_cache
def get_settings() -> Settings:
    """Получить закешированный экземпляр настроек."""
    return Settings()


settings = get_settings()
