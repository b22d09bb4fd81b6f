from typing import Any, Optional
import json
import os
from pydantic import BaseModel, Field, ValidationError
from loguru import logger
from .events.observer import Signal

# --- Settings Models ---
class GeneralSettings(BaseModel):
    debug_mode: bool = False

class LoggingSettings(BaseModel):
    log_dir: Optional[str] = None  # None disables the file sink
    rotation: str = "10 MB"
    retention: str = "1 week"

class EventSettings(BaseModel):
    trace_dispatch: bool = False

class ArchkitConfig(BaseModel):
    general: GeneralSettings = Field(default_factory=GeneralSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    events: EventSettings = Field(default_factory=EventSettings)

# --- Manager ---
class ConfigManager:
    """
    Loads framework configuration and announces changes.

    Settings come from a JSON or TOML file when one exists, otherwise the
    defaults are used. Changes made through ``update`` live in memory only.
    """
    def __init__(self, filepath: Optional[str] = None):
        self.filepath = filepath
        self._data = ArchkitConfig()
        self.on_changed = Signal("ConfigChanged")
        self._load()

    @property
    def data(self) -> ArchkitConfig:
        return self._data

    def update(self, section: str, key: str, value: Any):
        """Update a setting, validate via Pydantic and emit change event."""
        if section not in ArchkitConfig.model_fields:
            raise ValueError(f"Invalid section: {section}")

        section_obj = getattr(self._data, section)
        if key not in type(section_obj).model_fields:
            raise ValueError(f"Invalid key: {key} in section {section}")

        validated = type(section_obj).model_validate({**section_obj.model_dump(), key: value})
        setattr(self._data, section, validated)
        self.on_changed.emit(section, key, getattr(validated, key))

    def get(self, section: str, key: str) -> Any:
        section_obj = getattr(self._data, section)
        return getattr(section_obj, key)

    def _load(self):
        """Load settings from JSON or TOML file if present; otherwise keep defaults."""
        if not self.filepath or not os.path.isfile(self.filepath):
            return
        try:
            if self.filepath.endswith('.toml'):
                import tomllib
                with open(self.filepath, "rb") as f:
                    raw = tomllib.load(f)
            else:
                with open(self.filepath, "r", encoding="utf-8") as f:
                    raw = json.load(f)
            self._data = ArchkitConfig.model_validate(raw)
            logger.debug(f"Loaded config from {self.filepath}")
        except (OSError, ValueError, ValidationError) as e:
            logger.error(f"Failed to load config from {self.filepath}: {e}")
