"""
WriteRight Analysis Configuration
=================================
Centralized configuration for the analysis core.

Configuration can be set via:
1. Environment variables (WR_CACHE_CAPACITY=200)
2. Config file (writeright_config.json)
3. Direct API calls (config.set('cache.capacity', 200))

All settings have sensible defaults for local operation.
"""

import os
import json
from pathlib import Path
from typing import Any, Dict, Optional, Tuple
from dataclasses import dataclass, field, asdict

from config_logging import get_logger

__version__ = "1.0.0"

logger = get_logger('config')

# Default configuration path
CONFIG_FILE = Path(__file__).parent.parent / "writeright_config.json"


@dataclass
class CacheConfig:
    """Result cache configuration."""
    capacity: int = 100
    min_text_length: int = 5  # Shorter texts are never cached


@dataclass
class FailureConfig:
    """Failure tracker configuration."""
    threshold: int = 5
    recovery_interval: float = 60.0  # seconds between recovery probes


@dataclass
class SpellingConfig:
    """Offline dictionary configuration."""
    max_edit_distance: int = 2
    prefix_length: int = 7
    max_suggestions: int = 5
    context_chars: int = 20
    custom_dictionary: Optional[str] = None


@dataclass
class RemoteConfig:
    """Remote completion service configuration."""
    model: str = "gpt-4o"
    timeout: float = 30.0
    api_key: Optional[str] = field(default_factory=lambda: os.environ.get('OPENAI_API_KEY'))
    base_url: Optional[str] = field(default_factory=lambda: os.environ.get('OPENAI_BASE_URL'))
    min_text_length: int = 10  # Remote analysis only for longer texts


@dataclass
class LanguageConfig:
    """Language resolution configuration."""
    supported: Tuple[str, ...] = ("en", "es")
    default: str = "en"
    auto_detect_min_length: int = 10


@dataclass
class WriteRightConfig:
    """Master analysis configuration."""
    cache: CacheConfig = field(default_factory=CacheConfig)
    failures: FailureConfig = field(default_factory=FailureConfig)
    spelling: SpellingConfig = field(default_factory=SpellingConfig)
    remote: RemoteConfig = field(default_factory=RemoteConfig)
    language: LanguageConfig = field(default_factory=LanguageConfig)


# Global configuration instance
_config: Optional[WriteRightConfig] = None


def get_config() -> WriteRightConfig:
    """Get the global analysis configuration."""
    global _config
    if _config is None:
        _config = _load_config()
    return _config


def _load_config(path: Optional[Path] = None) -> WriteRightConfig:
    """Load configuration from file and environment."""
    config = WriteRightConfig()
    path = path or CONFIG_FILE

    if path.exists():
        try:
            with open(path, 'r', encoding='utf-8') as f:
                file_config = json.load(f)
            _apply_dict_to_config(config, file_config)
        except (json.JSONDecodeError, IOError) as e:
            logger.warning(f"Could not load config file: {e}", path=str(path))

    _apply_env_to_config(config)

    return config


def _apply_dict_to_config(config: WriteRightConfig, data: Dict[str, Any]):
    """Apply dictionary values to config object."""
    for section_name, section_data in data.items():
        if hasattr(config, section_name) and isinstance(section_data, dict):
            section = getattr(config, section_name)
            for key, value in section_data.items():
                if hasattr(section, key):
                    if isinstance(getattr(section, key), tuple) and isinstance(value, list):
                        value = tuple(value)
                    setattr(section, key, value)


def _apply_env_to_config(config: WriteRightConfig):
    """Apply environment variables to config."""
    env_mappings = {
        'WR_CACHE_CAPACITY': ('cache', 'capacity', int),
        'WR_CACHE_MIN_TEXT_LENGTH': ('cache', 'min_text_length', int),
        'WR_FAILURE_THRESHOLD': ('failures', 'threshold', int),
        'WR_RECOVERY_INTERVAL': ('failures', 'recovery_interval', float),
        'WR_SPELLING_MAX_EDIT_DISTANCE': ('spelling', 'max_edit_distance', int),
        'WR_SPELLING_MAX_SUGGESTIONS': ('spelling', 'max_suggestions', int),
        'WR_CUSTOM_DICTIONARY': ('spelling', 'custom_dictionary', str),
        'WR_OPENAI_MODEL': ('remote', 'model', str),
        'WR_OPENAI_TIMEOUT': ('remote', 'timeout', float),
        'WR_DEFAULT_LANGUAGE': ('language', 'default', str),
    }

    for env_var, (section, key, converter) in env_mappings.items():
        value = os.environ.get(env_var)
        if value is not None:
            try:
                section_obj = getattr(config, section)
                setattr(section_obj, key, converter(value))
            except (ValueError, AttributeError) as e:
                logger.warning(f"Invalid env var {env_var}={value}: {e}")


def get(key: str, default: Any = None) -> Any:
    """
    Get a configuration value by dot-notation key.

    Example: get('cache.capacity') -> 100
    """
    config = get_config()
    parts = key.split('.')

    obj = config
    for part in parts:
        if hasattr(obj, part):
            obj = getattr(obj, part)
        else:
            return default

    return obj


def set(key: str, value: Any):
    """
    Set a configuration value by dot-notation key.

    Example: set('failures.threshold', 3)
    """
    config = get_config()
    parts = key.split('.')

    if len(parts) < 2:
        raise ValueError(f"Key must be in format 'section.key': {key}")

    section_name = parts[0]
    attr_name = parts[1]

    if hasattr(config, section_name):
        section = getattr(config, section_name)
        if hasattr(section, attr_name):
            setattr(section, attr_name, value)
        else:
            raise ValueError(f"Unknown config key: {attr_name}")
    else:
        raise ValueError(f"Unknown config section: {section_name}")


def save_config(path: Optional[Path] = None):
    """Save current configuration to file (the API key is never written)."""
    config = get_config()
    path = path or CONFIG_FILE

    data = asdict(config)
    data['remote'].pop('api_key', None)

    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2)


def reset_config():
    """Reset configuration to defaults."""
    global _config
    _config = WriteRightConfig()
