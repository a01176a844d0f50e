"""craftwatch — Configuration.

Configuration is loaded from (in order of increasing priority):
    1. Built-in defaults (this file)
    2. Environment variables prefixed with CRAFTWATCH_
       (nested keys joined with ``__``, e.g. CRAFTWATCH_LOGGING__LEVEL)
    3. System config: /etc/craftwatch/config.yaml
    4. User config:   ~/.craftwatch/config.yaml
    5. An explicit file passed to ``Settings.load()``

File values are passed to the model as init arguments, so a top-level
section present in a file replaces the environment for that section.

Call ``Settings.load()`` once at startup and hand the instance to
``build_runtime()``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from craftwatch.exceptions import ConfigurationError


# ---------------------------------------------------------------------------
# Sub-configuration blocks
# ---------------------------------------------------------------------------


class LoggingConfig(BaseModel):
    level: Literal["debug", "info", "warning", "error", "critical"] = "info"
    format: Literal["json", "console"] = "console"
    file: Path | None = None


class StreamConfig(BaseModel):
    """How server output files and pipes are decoded."""

    encoding: str = "utf-8"
    errors: Literal["strict", "replace", "ignore"] = Field(
        default="replace",
        description="Decoding error policy. Server output is not guaranteed to be clean UTF-8.",
    )


class TaskConfig(BaseModel):
    """One automation task: a trigger bound to a log-message action."""

    name: str = Field(min_length=1)
    trigger: str = Field(description="Trigger type id, e.g. 'player_joined'.")
    parameters: str = Field(
        default="",
        description="Trigger parameter string, checked by the trigger's validate_input.",
    )
    message: str = Field(
        default="{task}: {player}",
        description="Message logged when the task runs. Placeholders: {task} {player} {address} {count}.",
    )
    enabled: bool = True


class TaskerConfig(BaseModel):
    max_workers: Annotated[int, Field(ge=1, le=32)] = Field(
        default=4,
        description="Size of the thread pool running fired tasks.",
    )
    tasks: list[TaskConfig] = Field(default_factory=list)

    @field_validator("tasks")
    @classmethod
    def unique_task_names(cls, v: list[TaskConfig]) -> list[TaskConfig]:
        seen: set[str] = set()
        for task in v:
            if task.name in seen:
                raise ValueError(f"duplicate task name: {task.name}")
            seen.add(task.name)
        return v


# ---------------------------------------------------------------------------
# Root settings
# ---------------------------------------------------------------------------


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CRAFTWATCH_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    stream: StreamConfig = Field(default_factory=StreamConfig)
    tasker: TaskerConfig = Field(default_factory=TaskerConfig)

    @classmethod
    def load(cls, config_file: Path | None = None) -> "Settings":
        """Load settings from YAML files + environment variables."""
        data: dict[str, object] = {}

        candidates = [
            Path("/etc/craftwatch/config.yaml"),
            Path.home() / ".craftwatch" / "config.yaml",
        ]
        if config_file:
            if not config_file.exists():
                raise ConfigurationError(
                    f"Config file not found: {config_file}",
                    context={"path": str(config_file)},
                )
            candidates.append(config_file)

        for path in candidates:
            if path.exists():
                try:
                    with path.open(encoding="utf-8") as f:
                        loaded = yaml.safe_load(f) or {}
                except yaml.YAMLError as exc:
                    raise ConfigurationError(
                        f"Invalid YAML in {path}: {exc}", context={"path": str(path)}
                    ) from exc
                if not isinstance(loaded, dict):
                    raise ConfigurationError(
                        f"Config file {path} must contain a mapping",
                        context={"path": str(path)},
                    )
                data.update(loaded)

        try:
            return cls(**data)
        except ValidationError as exc:
            raise ConfigurationError(
                f"Invalid configuration: {exc.error_count()} error(s)",
                context={"errors": exc.errors(include_url=False)},
            ) from exc


# Module-level singleton, replaced by ``Settings.load()`` at startup.
_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def override_settings(settings: Settings) -> None:
    """Replace the module-level singleton. Used in tests."""
    global _settings
    _settings = settings
