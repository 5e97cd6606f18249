# movies_api/core/config.py
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "movies_api"
    env: str = Field(default="local")
    host: str = "0.0.0.0"
    port: int = 8080

    mongo_dsn: str = Field(
        default="mongodb://mongo:27017/movies",
        alias="MONGO_DSN"
    )
    mongo_db: str = "movies"

    sentry_dsn: str = Field(default="", alias="SENTRY_DSN")
    sentry_test_enabled: bool = Field(default=False,
                                      alias="SENTRY_TEST_ENABLED")

    # подпись токенов для мутирующих эндпоинтов; без секрета мутации
    # закрыты, а в production сервис не стартует
    jwt_secret: str = Field(default="", alias="JWT_SECRET")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")

    # 0 = лимитер выключен
    rate_limit_max: int = Field(default=100, alias="RATE_LIMIT_MAX")
    rate_limit_window_s: int = Field(default=60, alias="RATE_LIMIT_WINDOW_S")

    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")

    # Pydantic v2: модель конфигурации
    model_config = SettingsConfigDict(env_file="infra/.env",
                                      extra="ignore",
                                      populate_by_name=True)

    @property
    def is_production(self) -> bool:
        return self.env.lower() in {"prod", "production"}


settings = Settings()
