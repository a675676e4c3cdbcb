"""
Configuration settings for the FlowManager backend.

This module handles application configuration using Pydantic settings.
DATABASE_URL has no default: the process refuses to start without it.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Application
    app_name: str = "FlowManager"
    api_prefix: str = "/api"
    version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Database Configuration
    database_url: str
    db_echo: bool = False
    db_pool_size: int = 10
    db_max_overflow: int = 10

    # Security Configuration (JWT sessions)
    secret_key: str = "change-this-secret-key-in-production-min-32-chars"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 8

    # Password hashing cost factor
    bcrypt_rounds: int = 12

    # Role given to accounts created without an explicit role
    default_role_name: str = "Użytkownik"

    # Redis Configuration (session revocation)
    redis_url: str = "redis://localhost:6379/0"
    redis_decode_responses: bool = True

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
