"""Application state and configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import platformdirs
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from stablepatch.core.base import BaseConfig, BaseState
from stablepatch.core.log import Logger
from stablepatch.core.yaml_settings import YamlWithIncludesSettingsSource

# ============================================================
# CONFIG MODELS (loaded from YAML/env/CLI)
# ============================================================

class FetchConfig(BaseConfig):
    """How sources outside the document are fetched."""

    timeout: float = Field(
        default=30.0,
        gt=0,
        description="Total timeout for one HTTP fetch, in seconds",
    )
    max_depth: int = Field(
        default=16,
        ge=1,
        description=(
            "Deepest chain of nested patch documents "
            "(patch-file / patch-url sources) to follow"
        ),
    )
    user_agent: str = Field(
        default="stablepatch",
        description="User-Agent header sent with HTTP fetches",
    )


class Config(BaseConfig):
    """Application configuration loaded from YAML/env/CLI.

    Inherits from BaseConfig so closing it closes the logger.
    """

    logger: Logger | None = Field(
        default=None,
        description="Logger configuration and runtime instance"
    )
    fetch: FetchConfig = Field(
        default_factory=FetchConfig,
        description="Source fetching settings"
    )
    log_root: Path = Field(
        default_factory=(
            lambda: Path(platformdirs.user_state_dir("stablepatch"))
        ),
        description="Root directory for log files",
    )
    run_name: str = Field(
        default="apply",
        description="Run name used for the log directory and service name",
    )

    @model_validator(mode='after')
    def _setup_logger(self) -> Config:
        """Initialize the global logger once settings are loaded."""
        from stablepatch.core.log import setup_logger

        if self.logger is None:
            self.logger = Logger()

        setup_logger(
            log_root=self.log_root,
            run_name=self.run_name,
            console=self.logger.console,
            file=self.logger.file,
            level=self.logger.level,
        )

        return self

    def close(self):
        """Close the global logger, then the remaining children."""
        from stablepatch.core.log import logger
        logger.close()
        super().close()


# ============================================================
# RUNTIME STATE MODELS (mutable while a command runs)
# ============================================================

class ApplyState(BaseState):
    """Apply workflow runtime state."""

    document: str = Field(
        default="-",
        description="Location of the patch document (path, URL, or -)",
    )
    output: Path | None = Field(
        default=None,
        description="Output file, or None for standard output",
    )
    loaded: Any = Field(
        default=None,
        description="LoadedDocument once the document has been parsed",
    )
    result: bytes | None = Field(
        default=None,
        description="Patched bytes once the document has been rendered",
    )
    status: str = Field(
        default="pending",
        description="Workflow status: pending, loaded, rendered, complete",
    )

    model_config = ConfigDict(arbitrary_types_allowed=True)


class Runtime(BaseModel):
    """All runtime state, one section per workflow."""

    apply: ApplyState = Field(
        default_factory=ApplyState,
        description="Apply workflow runtime state"
    )


# ============================================================
# STATE (config + runtime combined)
# ============================================================

class State(BaseSettings):
    """Complete application state: configuration and runtime.

    This is the object that flows through the workflow graph.

    - config: loaded from YAML/env/CLI, read-only in practice
    - runtime: mutated by workflow nodes
    """

    config: Config = Field(
        default_factory=Config,
        description="Application configuration (from YAML/env/CLI)",
    )
    runtime: Runtime = Field(
        default_factory=Runtime,
        description="Runtime state (mutates during workflow execution)",
    )
    include: list[str] | None = Field(
        default=None,
        description=(
            "Additional YAML files to include and merge. "
            "Use --include on CLI or include: in YAML files."
        ),
    )

    model_config = SettingsConfigDict(
        yaml_file="stablepatch.yaml",
        env_file=".env",
        env_prefix="STABLEPATCH_",
        env_nested_delimiter="__",
        cli_implicit_flags=True,
        cli_use_class_docs_for_groups=True,
        arbitrary_types_allowed=True,
        extra='ignore',
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Priority, highest first: init args, YAML, .env, environment,
        file secrets."""
        return (
            init_settings,
            YamlWithIncludesSettingsSource(settings_cls),
            dotenv_settings,
            env_settings,
            file_secret_settings,
        )


__all__ = [
    "ApplyState",
    "Config",
    "FetchConfig",
    "Runtime",
    "State",
]
