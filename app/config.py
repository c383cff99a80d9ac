from dataclasses import dataclass

from pydantic_settings import BaseSettings, SettingsConfigDict

from app.core.exceptions import ConfigurationException


@dataclass(frozen=True)
class AdminBootstrapConfig:
    """
    Declarative admin identity to reconcile at process start.

    Built from the HBOX_ADMIN_* settings and handed to the bootstrapper
    explicitly, so nothing downstream reads the environment.
    """

    enabled: bool
    name: str
    email: str
    password: str

    @property
    def missing_fields(self) -> list[str]:
        """Names of required fields that are empty"""
        fields = {"name": self.name, "email": self.email, "password": self.password}
        return [key for key, value in fields.items() if not value.strip()]

    def require_complete(self) -> None:
        """
        Raises:
            ConfigurationException: If name, email or password is empty
        """
        missing = self.missing_fields
        if missing:
            names = ", ".join(f"HBOX_ADMIN_{name.upper()}" for name in missing)
            raise ConfigurationException(f"Admin bootstrap requested but missing {names}")


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be configured via .env file or environment variables.
    """

    # Database
    DATABASE_URL: str = "sqlite:///./inventory.db"
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20

    # JWT Authentication
    SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"

    # Application
    APP_NAME: str = "Inventory Admin API"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    ALLOW_REGISTRATION: bool = True
    DEMO_MODE: bool = False

    # CORS
    CORS_ORIGINS: str = ""
    CORS_ALLOW_CREDENTIALS: bool = True

    # Admin bootstrap
    HBOX_ADMIN_CREATE: str = ""
    HBOX_ADMIN_NAME: str = ""
    HBOX_ADMIN_EMAIL: str = ""
    HBOX_ADMIN_PASSWORD: str = ""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS from comma-separated string"""
        if not self.CORS_ORIGINS:
            return []
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def admin_bootstrap(self) -> AdminBootstrapConfig:
        """Admin bootstrap request; only the literal "true" enables it"""
        return AdminBootstrapConfig(
            enabled=self.HBOX_ADMIN_CREATE.strip().lower() == "true",
            name=self.HBOX_ADMIN_NAME,
            email=self.HBOX_ADMIN_EMAIL,
            password=self.HBOX_ADMIN_PASSWORD,
        )


# Global settings instance
settings = Settings()
