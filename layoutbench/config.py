"""
Configuration settings for layoutbench.

Uses Pydantic Settings to load environment variables for the database
connection, logging, table names and benchmark defaults. `DATABASE_URL` takes
precedence over the individual `DB_*` fields when set.
"""
from __future__ import annotations

import re
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]{0,62}$")


class Settings(BaseSettings):
    # Database
    database_url: Optional[str] = Field(None, alias="DATABASE_URL")
    db_host: str = Field("localhost", alias="DB_HOST")
    db_port: int = Field(5432, alias="DB_PORT")
    db_user: str = Field("postgres", alias="DB_USER")
    db_password: str = Field("postgres", alias="DB_PASSWORD")
    db_name: str = Field("layoutbench", alias="DB_NAME")
    db_connect_attempts: int = Field(3, alias="DB_CONNECT_ATTEMPTS", ge=1)

    # Application
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # Tables
    seed_table: str = Field("perf", alias="SEED_TABLE")
    scratch_table: str = Field("perf2", alias="SCRATCH_TABLE")

    # Benchmark defaults
    seed_rows: int = Field(2_000_000, alias="SEED_ROWS", ge=0)
    progress_every: int = Field(100_000, alias="PROGRESS_EVERY", gt=0)
    write_iterations: int = Field(10_000, alias="WRITE_ITERATIONS", ge=1)
    read_iterations: int = Field(1, alias="READ_ITERATIONS", ge=1)
    results_dir: str = Field("results", alias="RESULTS_DIR")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("seed_table", "scratch_table")
    @classmethod
    def _plain_identifier(cls, value: str) -> str:
        if not _IDENTIFIER.match(value):
            raise ValueError(f"'{value}' is not a plain SQL identifier")
        return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
