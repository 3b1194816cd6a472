"""
LTL Core Config Runtime - Runtime Configuration Management

This module provides the process-wide settings used by the command line,
the HTTP service and the conversion pipeline. Settings are organised in
sections; defaults are applied first, then a JSON settings file, then
``LTL_<SECTION>_<KEY>`` environment variables.
"""

from __future__ import annotations
import os
import json
import logging
import threading
from pathlib import Path
from typing import Dict, Optional, Any, Union

from ltl_core.models import CitationLabels, ConversionOptions

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "LTL_CONFIG"
ENV_PREFIX = "LTL_"
DEFAULT_CONFIG_PATH = Path.home() / ".ltl" / "settings.json"

DEFAULT_SETTINGS: Dict[str, Dict[str, Any]] = {
    "conversion": {
        "include_citation_layer": True,
        "include_morphological_layer": True,
        "document_label": "Document",
        "paragraph_label": "Paragraph",
        "sentence_label": "Sentence",
        "default_corpus_ref": "http://liita.it/data/corpora",
    },
    "parser": {
        "strict": False,
    },
    "logging": {
        "level": "INFO",
        "format": "console",
        "file": None,
    },
    "server": {
        "host": "127.0.0.1",
        "port": 8000,
        "max_upload_bytes": 10 * 1024 * 1024,
    },
}


def _coerce(raw: str, current: Any) -> Any:
    """Convert an environment string to the type of the current value"""
    if isinstance(current, bool):
        return raw.strip().lower() in ("1", "true", "yes", "on")
    if isinstance(current, int):
        try:
            return int(raw)
        except ValueError:
            logger.warning(f"Ignoring non-integer value {raw!r}")
            return current
    return raw


class RuntimeConfig:
    """Main runtime configuration class"""

    _instance: Optional["RuntimeConfig"] = None
    _lock = threading.Lock()

    def __new__(cls, *args, **kwargs):
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._initialized = False
            return cls._instance

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        if self._initialized:
            return

        env_path = os.environ.get(CONFIG_ENV_VAR)
        if config_path is not None:
            self.config_path = Path(config_path)
        elif env_path:
            self.config_path = Path(env_path)
        else:
            self.config_path = DEFAULT_CONFIG_PATH

        self._settings: Dict[str, Dict[str, Any]] = {}
        self._load_settings()
        self._apply_environment()

        self._initialized = True
        logger.debug(f"RuntimeConfig initialized from {self.config_path}")

    def _load_settings(self):
        """Load settings from config file"""
        if self.config_path.exists():
            try:
                with open(self.config_path, "r", encoding="utf-8") as f:
                    loaded = json.load(f)
                if isinstance(loaded, dict):
                    self._settings = {k: dict(v) for k, v in loaded.items() if isinstance(v, dict)}
                else:
                    logger.warning(f"Ignoring settings file {self.config_path}: not a JSON object")
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Failed to load settings: {e}")

        for section, values in DEFAULT_SETTINGS.items():
            current = self._settings.setdefault(section, {})
            for key, value in values.items():
                current.setdefault(key, value)

    def _apply_environment(self):
        """Apply LTL_<SECTION>_<KEY> overrides"""
        for section, values in self._settings.items():
            for key, current in list(values.items()):
                env_name = f"{ENV_PREFIX}{section}_{key}".upper()
                raw = os.environ.get(env_name)
                if raw is not None:
                    values[key] = _coerce(raw, current)

    def save_settings(self):
        """Save settings to config file"""
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                json.dump(self._settings, f, indent=2)
        except OSError as e:
            logger.error(f"Failed to save settings: {e}")

    def get_setting(self, section: str, key: str, default: Any = None) -> Any:
        """Get a setting value"""
        return self._settings.get(section, {}).get(key, default)

    def set_setting(self, section: str, key: str, value: Any):
        """Set a setting value"""
        if section not in self._settings:
            self._settings[section] = {}
        self._settings[section][key] = value

    def conversion_options(self) -> ConversionOptions:
        """Build conversion options from the conversion section"""
        section = self._settings["conversion"]
        return ConversionOptions(
            include_citation_layer=bool(section["include_citation_layer"]),
            include_morphological_layer=bool(section["include_morphological_layer"]),
            citation_labels=CitationLabels(
                document_label=section["document_label"],
                paragraph_label=section["paragraph_label"],
                sentence_label=section["sentence_label"],
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "config_path": str(self.config_path),
            "settings": {k: dict(v) for k, v in self._settings.items()},
        }


def get_runtime_config(config_path: Optional[Union[str, Path]] = None) -> RuntimeConfig:
    """Get the singleton runtime configuration instance"""
    return RuntimeConfig(config_path)


def reset_runtime_config():
    """Drop the singleton so the next call reloads settings"""
    with RuntimeConfig._lock:
        RuntimeConfig._instance = None


def get_setting(section: str, key: str, default: Any = None) -> Any:
    """Get a setting value"""
    return get_runtime_config().get_setting(section, key, default)
