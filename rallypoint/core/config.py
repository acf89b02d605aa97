from typing import Any, Optional
import json
import os
from pydantic import BaseModel, Field, ValidationError
from loguru import logger
from .events import Signal


class ConfigError(ValueError):
    """Raised for updates that name an unknown section/key or fail validation."""
    pass


# --- Settings Models ---
class GeneralSettings(BaseModel):
    debug_mode: bool = True

class LoggingSettings(BaseModel):
    level: Optional[str] = None  # overrides debug_mode when set
    log_dir: str = "logs"
    file_logging: bool = False
    rotation: str = "10 MB"
    retention: str = "1 week"

class SchedulerSettings(BaseModel):
    task_name_prefix: str = "rallypoint"
    shutdown_timeout: float = 5.0

class RegistrySettings(BaseModel):
    trace_cleanup: bool = False  # log every cancelled leaf

class AppConfig(BaseModel):
    model_config = {"validate_assignment": True}

    general: GeneralSettings = Field(default_factory=GeneralSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    scheduler: SchedulerSettings = Field(default_factory=SchedulerSettings)
    registry: RegistrySettings = Field(default_factory=RegistrySettings)


# --- Manager ---
class ConfigManager:
    """
    Manages configuration with optional persistence and reactivity.

    Without a filepath the configuration lives in memory only.
    """
    def __init__(self, filepath: Optional[str] = None):
        self.filepath = filepath
        self._data = AppConfig()
        self.on_changed = Signal("ConfigChanged")
        if self.filepath:
            self._load()

    @property
    def data(self) -> AppConfig:
        return self._data

    def update(self, section: str, key: str, value: Any):
        """Update a setting, validate via Pydantic, autosave, and emit change event."""
        if section not in AppConfig.model_fields:
            raise ConfigError(f"Invalid section: {section}")

        section_obj = getattr(self._data, section)
        if key not in type(section_obj).model_fields:
            raise ConfigError(f"Invalid key: {key} in section {section}")

        try:
            validated = type(section_obj).model_validate({**section_obj.model_dump(), key: value})
        except ValidationError as e:
            raise ConfigError(f"Invalid value for {section}.{key}: {e}") from e

        setattr(self._data, section, validated)
        self._save()
        self.on_changed.emit(section, key, getattr(validated, key))

    def get(self, section: str, key: str) -> Any:
        section_obj = getattr(self._data, section)
        return getattr(section_obj, key)

    def _load(self):
        """Load settings from JSON or TOML file if present; otherwise keep defaults."""
        if os.path.isfile(self.filepath):
            try:
                if self.filepath.endswith('.toml'):
                    import tomllib
                    with open(self.filepath, "rb") as f:
                        raw = tomllib.load(f)
                else:
                    with open(self.filepath, "r", encoding="utf-8") as f:
                        raw = json.load(f)
                self._data = AppConfig.model_validate(raw)
            except (OSError, ValueError) as e:
                logger.error(f"Failed to load config from {self.filepath}: {e}")
        else:
            self._save()

    def _save(self):
        """Persist current config to JSON file."""
        if not self.filepath or self.filepath.endswith('.toml'):
            return
        try:
            dirname = os.path.dirname(self.filepath)
            if dirname:
                os.makedirs(dirname, exist_ok=True)
            with open(self.filepath, "w", encoding="utf-8") as f:
                json.dump(self._data.model_dump(), f, indent=4)
        except OSError as e:
            logger.error(f"Failed to save config to {self.filepath}: {e}")
