from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    app_host: str = "0.0.0.0"
    app_port: int = 8000

    database_url: str = "postgresql+psycopg://kosmos:kosmos@db:5432/kosmos"

    # identity is resolved upstream; the api trusts this header
    user_id_header: str = "X-User-Id"

    log_level: str = "INFO"
    log_format: str = "console"

    @property
    def is_development(self) -> bool:
        return self.app_env == "dev"

settings = Settings()
