from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db_name: str = "classroom"

    jwt_secret_key: str = "change-me"
    jwt_algorithm: str = "HS256"
    token_ttl_hours: int = 24

    log_level: str = "INFO"
    cors_origins: str = "*"


settings = Settings()
