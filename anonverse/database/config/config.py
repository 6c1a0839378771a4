"""
Configuration — Pydantic v2 Settings (env / .env)
=================================================

Purpose
-------
Centralized, strongly-typed configuration for the Anonverse client core using:
- Pydantic v2 `BaseSettings` for environment-driven values
- `pydantic-settings` v2 for `.env` loading and model config

Load Order & Behavior
---------------------
- Values are read from the environment; if not present, `.env` is used.
- Every field carries a development default, so importing the package never
  requires a `.env` file. Production deployments must override `SECRET_KEY`.
- `extra="ignore"`: unknown env vars are ignored (not an error).

Usage
-----
from anonverse.database.config.config import settings

guest_key = settings.GUEST_FLAG_KEY
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application configuration settings loaded from environment variables
    or a `.env` file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    DB_URL: str = Field("sqlite:///./anonverse.db", description="SQLAlchemy URL of the data store behind the SQL adapters.")
    DEVICE_STATE_PATH: str = Field("./.anonverse/device.json", description="File that holds client-local device flags.")
    GUEST_FLAG_KEY: str = Field("anonverse_guest", description="Key of the guest-mode flag inside the device state.")
    SECRET_KEY: str = Field("anonverse-dev-secret", description="Secret key used to sign access tokens.")
    ALGORITHM: str = Field("HS256", description="Access token signing algorithm (e.g., `HS256`).")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(60, description="Duration (in minutes) before a session token expires.")
    VERIFICATION_CODE_TTL_MINUTES: int = Field(10, description="Duration (in minutes) a confirmation code stays valid.")
    PASSWORD_MIN_LENGTH: int = Field(8, description="Minimum accepted password length.")
    SMTP_HOST: str = Field("smtp.gmail.com", description="SMTP server used to deliver confirmation codes.")
    SMTP_PORT: int = Field(587, description="SMTP port (STARTTLS).")
    SENDER_EMAIL: str = Field("", description="Address confirmation emails are sent from.")
    APP_PASSWORD: str = Field("", description="Password of the sender mailbox.")


settings = Settings()
"""Singleton Settings instance shared across the package."""
