"""
Configuration module for Inkwell.

This module defines the Settings class, which loads environment variables
and provides application-wide configuration: database URL, token signing
secret, outbound email credentials, frontend URL and server options.

Usage:
    Import the `settings` object to access configuration throughout the project.
"""

import os
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv
from typing import List

load_dotenv()

NO_JWT_SECRET = "NO_JWT_SECRET_SET"
NO_MAILERSEND_KEY = "NO_MAILERSEND_KEY_SET"

class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        DATABASE_URL (str): Database connection string.
        JWT_SECRET (str): Secret used to sign bearer and password-reset tokens.
        ACCESS_TOKEN_EXPIRE_MINUTES (int): Lifetime of a login token.
        RESET_TOKEN_EXPIRE_MINUTES (int): Lifetime of a password-reset token.
        MAILERSEND_API_KEY (str): API key for the MailerSend email API.
        MAILERSEND_FROM_EMAIL (str): Sender address for outgoing emails.
        MAILERSEND_FROM_NAME (str): Sender display name for outgoing emails.
        FRONTEND_URL (str): Base URL of the storefront, used in email links.
        PORT (int): Port the API server listens on.
        ENVIRONMENT (str): Current environment (e.g., 'production', 'development').
        CORS_ORIGINS (str): Comma-separated list of allowed origins.
        LOG_LEVEL (str): Root logging level.
    """
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./inkwell.db")
    JWT_SECRET: str = os.getenv("JWT_SECRET", NO_JWT_SECRET)
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
    RESET_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("RESET_TOKEN_EXPIRE_MINUTES", "60"))
    MAILERSEND_API_KEY: str = os.getenv("MAILERSEND_API_KEY", NO_MAILERSEND_KEY)
    MAILERSEND_FROM_EMAIL: str = os.getenv("MAILERSEND_FROM_EMAIL", "noreply@inkwell.com")
    MAILERSEND_FROM_NAME: str = os.getenv("MAILERSEND_FROM_NAME", "Inkwell Books")
    FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:3000")
    PORT: int = int(os.getenv("PORT", "5000"))
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "production")
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "http://localhost:3000")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def list_cors_origins(self) -> List[str]:
        """
        Returns the list of allowed origins parsed from CORS_ORIGINS.

        Returns:
            List[str]: List of origins.
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(',') if origin.strip()]

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
