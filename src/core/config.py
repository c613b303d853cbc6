"""
Settings read from the environment, plus the one place that configures logging.

Library code only ever calls `logging.getLogger(__name__)`; handlers get attached here.
"""

import logging
import os
from typing import Self

from pydantic import BaseModel, field_validator

DEFAULT_DATABASE_URL = "sqlite:///chess.db"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class Settings(BaseModel):
    database_url: str = DEFAULT_DATABASE_URL
    database_echo: bool = False
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value!r}")
        return level

    @classmethod
    def from_env(cls) -> Self:
        """CHESS_DATABASE_URL, CHESS_DATABASE_ECHO, CHESS_LOG_LEVEL"""
        return cls(
            database_url=os.environ.get("CHESS_DATABASE_URL", DEFAULT_DATABASE_URL),
            database_echo=os.environ.get("CHESS_DATABASE_ECHO", "false"),
            log_level=os.environ.get("CHESS_LOG_LEVEL", "INFO"),
        )


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
