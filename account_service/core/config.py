from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, ValidationError, field_validator
from typing import List
import sys
from functools import lru_cache
import structlog

logger = structlog.get_logger()


class Settings(BaseSettings):
    """
    Account Service Configuration
    
    Values are read from the environment (and an optional .env file) once at
    startup. The signing secret and database URL have no defaults; the service
    refuses to start without them.
    """
    
    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        extra="ignore",
        validate_assignment=True,
    )
    
    # Application settings
    APP_NAME: str = "account-service"
    VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "production"
    HOST: str = "0.0.0.0"
    PORT: int = Field(default=3000, ge=1, le=65535)
    
    # API settings
    API_PREFIX: str = "/api/users"
    
    # Security settings - REQUIRED, NO DEFAULTS
    SECRET_KEY: str = Field(..., min_length=32)
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=60, ge=1, le=10080)  # max one week
    BCRYPT_ROUNDS: int = Field(default=12, ge=4, le=31)
    
    # Database - REQUIRED
    DATABASE_URL: str = Field(...)
    DATABASE_ECHO: bool = False
    
    @field_validator("SECRET_KEY")
    @classmethod
    def validate_secret_key(cls, v: str) -> str:
        """Reject placeholder signing secrets."""
        bad_values = ["your-secret-key", "change-me", "changeme", "12345"]
        if any(bad in v.lower() for bad in bad_values):
            raise ValueError("SECRET_KEY contains weak or default values")
        return v
    
    @field_validator("ALGORITHM")
    @classmethod
    def validate_algorithm(cls, v: str) -> str:
        allowed = ["HS256", "HS384", "HS512"]
        if v not in allowed:
            raise ValueError(f"ALGORITHM must be one of: {allowed}")
        return v
    
    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        valid_envs = ["development", "staging", "production", "test"]
        if v not in valid_envs:
            raise ValueError(f"ENVIRONMENT must be one of: {valid_envs}")
        return v
    
    @property
    def uses_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


def validate_required_settings(settings: Settings) -> None:
    """
    Validate environment-specific requirements.
    Fail fast if the configuration is unsafe for the target environment.
    """
    errors: List[str] = []
    
    if settings.ENVIRONMENT == "production":
        if settings.DEBUG:
            errors.append("DEBUG must be False in production")
        
        if settings.uses_sqlite:
            errors.append("DATABASE_URL cannot use SQLite in production")
    
    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        logger.error(error_msg)
        raise ValueError(error_msg)
    
    logger.info(
        "Configuration validated successfully",
        environment=settings.ENVIRONMENT,
        debug=settings.DEBUG,
        token_ttl_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
        bcrypt_rounds=settings.BCRYPT_ROUNDS,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Exits the process if required environment variables are missing.
    """
    try:
        settings = Settings()
        validate_required_settings(settings)
        return settings
    except ValidationError as e:
        logger.error("Failed to load settings", errors=e.errors(include_input=False))
        print("\n" + "="*60)
        print("CONFIGURATION ERROR")
        print("="*60)
        print("\nRequired environment variables are missing or invalid:")
        for error in e.errors():
            field = error.get("loc", ["unknown"])[0]
            msg = error.get("msg", "Invalid value")
            print(f"  - {field}: {msg}")
        print("\nPlease check your environment variables and .env file")
        print("="*60 + "\n")
        sys.exit(1)
    except ValueError as e:
        logger.error("Invalid settings", error=str(e))
        sys.exit(1)
