"""Service configuration, loaded from the environment or a .env file."""

import json
from functools import lru_cache
from pathlib import Path
from typing import Annotated

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""

    app_name: str = "User Files API"
    debug: bool = False
    log_level: str = "INFO"

    # Network
    host: str = "127.0.0.1"
    port: int = 8000
    api_prefix: str = "/api"
    cors_origins: Annotated[list[str], NoDecode] = ["http://localhost:3000"]

    # Root of the user-scoped tree, relative paths resolve against the cwd
    user_files_dir: str = "public/user-files"

    # Folders seeded into an empty root
    default_folders: list[str] = ["Documents", "Images"]

    # Display name of the synthetic root node for top-level reads
    root_folder_name: str = "My Files"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="USER_FILES_",
        extra="ignore",
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def assemble_cors_origins(cls, value: list[str] | str) -> list[str]:
        if isinstance(value, str):
            if value.startswith("["):
                return json.loads(value)
            return [o.strip() for o in value.split(",") if o.strip()]
        return value

    @model_validator(mode="after")
    def _resolve_user_files_dir(self) -> "Settings":
        path = Path(self.user_files_dir)
        if not path.is_absolute():
            self.user_files_dir = str(Path.cwd() / path)
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
