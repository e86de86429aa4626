import os
from pathlib import Path

from decouple import Config, RepositoryEnv
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = next(p for p in Path(__file__).resolve().parents if (p / "main.py").exists())
BASE_DIR = PROJECT_ROOT

# Determine which env file to load
env_file = os.getenv("ENV_FILE", ".env")
env_path = PROJECT_ROOT / env_file

# Only use RepositoryEnv if the env file exists
if env_path.exists():
    config = Config(RepositoryEnv(env_path))
else:
    # fallback: read directly from os.environ using decouple's AutoConfig
    from decouple import AutoConfig

    config = AutoConfig(search_path=None)


class Settings(BaseSettings):
    # App general
    DEBUG: bool = config("DEBUG", default=False, cast=bool)
    APP_NAME: str = config("APP_NAME", default="WORKBOARD")
    APP_VERSION: str = config("APP_VERSION", default="1.0.0")
    ENVIRONMENT: str = config("ENVIRONMENT", default="dev")
    APP_PORT: int = config("APP_PORT", default=8000, cast=int)
    LOG_LEVEL: str = config("LOG_LEVEL", default="INFO")
    APP_URL: str = config("APP_URL", default="http://localhost:8000")
    DEV_URL: str = config("DEV_URL", default="http://localhost:3000")

    # Database
    DB_TYPE: str = config("DB_TYPE", default="sqlite")
    DB_HOST: str = config("DB_HOST", default="localhost")
    DB_PORT: int = config("DB_PORT", default=5432, cast=int)
    DB_USER: str = config("DB_USER", default="user")
    DB_PASS: str = config("DB_PASS", default="password")
    DB_NAME: str = config("DB_NAME", default="workboard")
    SQLITE_PATH: str = config("SQLITE_PATH", default="db.sqlite3")
    DB_ECHO: bool = config("DB_ECHO", default=False, cast=bool)

    # JWT Authentication
    JWT_SECRET: str = config("JWT_SECRET", default="your-super-secret-jwt-key-change-in-production")
    JWT_ALGORITHM: str = config("JWT_ALGORITHM", default="HS256")
    JWT_EXPIRY_HOURS: int = config("JWT_EXPIRY_HOURS", default=24, cast=int)

    # Scoring
    WORKLOAD_CAPACITY: int = config("WORKLOAD_CAPACITY", default=10, cast=int)
    MIN_PERFORMANCE_FOR_ASSIGNMENT: float = config(
        "MIN_PERFORMANCE_FOR_ASSIGNMENT", default=40.0, cast=float
    )
    PERFORMANCE_ON_TIME_REWARD: float = config("PERFORMANCE_ON_TIME_REWARD", default=2.5, cast=float)
    PERFORMANCE_LATE_PENALTY: float = config("PERFORMANCE_LATE_PENALTY", default=2.5, cast=float)
    PERFORMANCE_REJECTION_PENALTY: float = config(
        "PERFORMANCE_REJECTION_PENALTY", default=5.0, cast=float
    )

    # Work items and dashboards
    DEFAULT_WORK_ITEM_DAYS: int = config("DEFAULT_WORK_ITEM_DAYS", default=7, cast=int)
    DUE_SOON_DAYS: int = config("DUE_SOON_DAYS", default=3, cast=int)
    DASHBOARD_RECENT_LIMIT: int = config("DASHBOARD_RECENT_LIMIT", default=5, cast=int)
    PERFORMANCE_HISTORY_DAYS: int = config("PERFORMANCE_HISTORY_DAYS", default=30, cast=int)

    # Seeding
    SEED_DEFAULT_MANAGER: bool = config("SEED_DEFAULT_MANAGER", default=True, cast=bool)
    DEFAULT_MANAGER_EMAIL: str = config("DEFAULT_MANAGER_EMAIL", default="manager@company.com")
    DEFAULT_MANAGER_PASSWORD: str = config("DEFAULT_MANAGER_PASSWORD", default="Manager123!")
    DEFAULT_MANAGER_NAME: str = config("DEFAULT_MANAGER_NAME", default="System Manager")

    model_config = SettingsConfigDict(extra="allow")


settings = Settings()
