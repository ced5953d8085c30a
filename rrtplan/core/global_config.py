# Copyright 2025-2026 Dimensional Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from functools import cached_property
import logging
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PlanningConfig(BaseSettings):
    """Default planner parameters, overridable through ``RRTPLAN_*`` variables."""

    step_length: float = Field(default=0.2, gt=0.0)
    max_iterations: int = Field(default=1000, ge=0)
    neighborhood_radius: float = Field(default=0.5, ge=0.0)
    stop_when_reach_goal: bool = True
    smoothing_iterations: int = Field(default=100, ge=0)
    index: Literal["kdtree", "brute_force"] = "kdtree"
    seed: int | None = None

    model_config = SettingsConfigDict(
        env_prefix="RRTPLAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )


class LoggingConfig(BaseSettings):
    """Log sinks, overridable through ``RRTPLAN_LOG_*`` variables.

    ``colors`` left unset follows whether stdout is a terminal.
    """

    level: str = "INFO"
    directory: Path | None = None
    to_file: bool = True
    colors: bool | None = None
    max_bytes: int = Field(default=10 * 1024 * 1024, gt=0)
    backup_count: int = Field(default=20, ge=0)

    model_config = SettingsConfigDict(
        env_prefix="RRTPLAN_LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    @cached_property
    def numeric_level(self) -> int:
        level = getattr(logging, self.level.upper(), None)
        if isinstance(level, int):
            return level
        return logging.INFO
