# app/core/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./app.db"

    JWT_ACCESS_SECRET: str = "change-this-secret"
    JWT_ALG: str = "HS256"

    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7
    REFRESH_TOKEN_BYTES: int = 40
    VERIFICATION_CODE_EXPIRE_MINUTES: int = 15
    PASSWORD_RESET_EXPIRE_MINUTES: int = 60
    RESET_TOKEN_BYTES: int = 32

    # argon2 cost
    PASSWORD_HASH_TIME_COST: int = 2
    PASSWORD_HASH_MEMORY_COST: int = 102400
    PASSWORD_HASH_PARALLELISM: int = 8

    FRONTEND_URL: str = "http://localhost:3000"

    # 비워두면 메일 대신 로그로만 남긴다
    MAIL_HOST: str = ""
    MAIL_PORT: int = 2525
    MAIL_USER: str = ""
    MAIL_PASS: str = ""
    MAIL_FROM: str = "no-reply@localhost"
    MAIL_USE_TLS: bool = False
    MAIL_TIMEOUT: float = 10.0
    MAIL_FAIL_SOFT: bool = False

    # 요청 제한 (횟수 / 초)
    RATE_LIMIT_ENABLED: bool = True
    AUTH_RATE_LIMIT: int = 100
    AUTH_RATE_WINDOW_SECONDS: int = 15 * 60
    VERIFY_RATE_LIMIT: int = 5
    VERIFY_RATE_WINDOW_SECONDS: int = 15 * 60
    LOGIN_RATE_LIMIT: int = 5
    LOGIN_RATE_WINDOW_SECONDS: int = 15 * 60
    RESET_REQUEST_RATE_LIMIT: int = 3
    RESET_REQUEST_RATE_WINDOW_SECONDS: int = 15 * 60

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

settings = Settings()
