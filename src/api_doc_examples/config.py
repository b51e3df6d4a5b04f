"""Process-level configuration from the environment and an optional .env file."""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from api_doc_examples.fetch import DEFAULT_TIMEOUT

ENV_DOC_URL = "DOC_URL"
ENV_TIMEOUT = "API_DOC_TIMEOUT"
ENV_LOG_LEVEL = "API_DOC_LOG_LEVEL"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseModel):
    doc_url: str | None = None
    fetch_timeout: float = Field(DEFAULT_TIMEOUT, gt=0)
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log level must be one of {', '.join(LOG_LEVELS)}")
        return level


def load_settings(env_file: Path | None = None) -> Settings:
    """Build Settings from os.environ after loading `.env`.

    Values already present in the environment win over the file.
    """
    if env_file is not None:
        load_dotenv(env_file)
    else:
        load_dotenv()

    values = {}
    if os.getenv(ENV_DOC_URL):
        values["doc_url"] = os.getenv(ENV_DOC_URL)
    if os.getenv(ENV_TIMEOUT):
        values["fetch_timeout"] = os.getenv(ENV_TIMEOUT)
    if os.getenv(ENV_LOG_LEVEL):
        values["log_level"] = os.getenv(ENV_LOG_LEVEL)
    return Settings(**values)
