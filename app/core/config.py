# app/core/config.py
"""Application configuration using Pydantic."""
from pydantic_settings import BaseSettings
from typing import List, Optional

class Settings(BaseSettings):
    database_url: str
    redis_url: str = 'redis://localhost:6379/0'
    jwt_secret_key: str
    jwt_algorithm: str = 'HS256'
    access_token_expire_minutes: int = 720

    app_name: str = 'attendance_api'
    app_version: str = '1.0.0'
    environment: str = 'development'
    log_level: str = 'info'
    allowed_origins: List[str] = ['*']
    auto_create_tables: bool = False

    # Shared secret expected in the Authorization header of sweep endpoints
    cron_secret: Optional[str] = None

    notification_retention_days: int = 7
    reset_code_ttl_minutes: int = 10

    resend_api_key: Optional[str] = None
    email_from: str = 'Attendance App <onboarding@resend.dev>'
    app_url: str = 'http://localhost:8000'

    model_config = {
        'env_file': '.env',
        'extra': 'ignore'
    }

settings = Settings()
