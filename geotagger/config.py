# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Runtime settings

Defaults for the command-line interface, overridable through GEOTAGGER_*
environment variables or a .env file in the working directory. Explicit
command-line flags take precedence over these settings.

Copyright 2025 DNAi inc.
"""

from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class GeotaggerSettings(BaseSettings):
    exact_match_range: float = Field(default=60.0, ge=0)
    interpolation_match_range: float = Field(default=240.0, ge=0)
    altitude_reference: float = 0.0
    max_concurrency: Optional[int] = Field(default=None, ge=1)
    batch_delay: float = Field(default=3.0, ge=0)
    verbose: bool = False
    log_level: LogLevel = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="GEOTAGGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )
