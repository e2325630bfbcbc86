"""Application settings loaded from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """All configuration is driven by ``FLEETCMD_*`` environment variables."""

    # Device sessions
    ssh_port: int = 22
    ssh_transport: str = "paramiko"
    ssh_key_path: str = ""
    auth_strict_key: bool = False

    # Transport time bounds (seconds)
    timeout_socket: int = 15
    timeout_transport: int = 15
    timeout_ops: int = 30

    # Command rendering
    command_separator: str = ";"

    # API key
    api_key: str = ""

    # Template, inventory and log paths given to the HTTP API must resolve
    # inside this directory
    files_root: str = "."

    # Diagnostics
    log_level: str = "INFO"
    log_json: bool = False

    model_config = SettingsConfigDict(
        env_prefix="FLEETCMD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


# Singleton – import this from anywhere
settings = Settings()
