from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List

class Settings(BaseSettings):
    PROJECT_NAME: str = "Exam Portal"
    VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"
    SECRET_KEY: str = "change-me-in-production"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24  # 1 day

    # CORS
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Database Configuration
    DATABASE_URL: str = "sqlite:///./exam_portal.db"
    TEST_DATABASE_URL: Optional[str] = None
    DB_POOL_TIMEOUT_SECONDS: int = 30
    DB_STATEMENT_TIMEOUT_MS: int = 15000

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_TO_FILE: bool = False
    LOG_DIR: str = "logs"

    # Evaluation policy
    MISSING_QUESTION_POLICY: str = "zero_and_flag"  # or "reject"
    ALLOW_REEVALUATION: bool = True

    # Certificates
    CERTIFICATE_NUMBER_PREFIX: str = "CERT"
    VERIFICATION_CODE_PREFIX: str = "VERIFY"

    model_config = SettingsConfigDict(env_file=".env")

settings = Settings()
