"""Simple YAML configuration loader for scribeproxy."""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
import logging

from ..models.audio import AudioFormat

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = "scribeproxy.yaml"

# Environment variable -> (config key, type)
ENV_OVERRIDES = {
    "PROXY_HOST": ("server.host", str),
    "PROXY_PORT": ("server.port", int),
    "AUDIO_SAMPLE_RATE": ("audio.sample_rate", int),
    "AUDIO_CHANNELS": ("audio.channels", int),
    "AUDIO_BIT_DEPTH": ("audio.bit_depth", int),
    "CHUNK_DURATION_SECONDS": ("transcription.chunk_duration_seconds", float),
    "OPENAI_API_KEY": ("openai.api_key", str),
}


def find_config_file(start_dir: Optional[str] = None) -> Path:
    """Look for scribeproxy.yaml in start_dir and its parents."""
    current = Path(start_dir or os.getcwd()).resolve()
    for directory in [current, *current.parents]:
        candidate = directory / DEFAULT_CONFIG_FILENAME
        if candidate.exists():
            return candidate
    raise FileNotFoundError(f"Configuration file {DEFAULT_CONFIG_FILENAME} not found in {current} or its parents")


class ScribeProxyConfig:
    """scribeproxy configuration loader."""

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration loader.

        Args:
            config_path: Path to YAML config file. If None, looks for scribeproxy.yaml
                        in current directory and parent directories.
        """
        self.config_file = Path(config_path) if config_path else find_config_file()

        if not self.config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_file}")

        logger.info(f"Loading configuration from: {self.config_file}")
        self.config = self._load_config()
        self._apply_env_overrides()

    def _load_config(self) -> Dict[str, Any]:
        """Load and parse YAML configuration file."""
        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file: {e}") from e
        except OSError as e:
            raise ValueError(f"Failed to load configuration: {e}") from e

        if not config:
            raise ValueError("Configuration file is empty")
        if not isinstance(config, dict):
            raise ValueError("Configuration file must contain a mapping at the top level")

        # Resolve relative paths
        self._resolve_paths(config)

        logger.info("Configuration loaded successfully")
        return config

    def _resolve_paths(self, config: Dict[str, Any]) -> None:
        """Resolve relative paths in configuration relative to config file location."""
        config_dir = self.config_file.parent

        # Resolve log file path
        logging_section = config.get('logging')
        if isinstance(logging_section, dict) and logging_section.get('file_path'):
            log_path = logging_section['file_path']
            if not os.path.isabs(log_path):
                logging_section['file_path'] = str(config_dir / log_path)

    def _apply_env_overrides(self) -> None:
        """Override file values with environment variables where set."""
        for env_name, (key_path, cast) in ENV_OVERRIDES.items():
            raw = os.environ.get(env_name)
            if raw is None or raw == "":
                continue
            try:
                value = cast(raw)
            except ValueError as e:
                raise ValueError(f"Invalid value for {env_name}: {raw!r}") from e
            self.set(key_path, value)

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get configuration value using dot notation (e.g., 'audio.sample_rate').

        Args:
            key_path: Dot-separated key path (e.g., 'server.port')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split('.')
        value = self.config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def set(self, key_path: str, value: Any) -> None:
        """Set configuration value using dot notation.

        Args:
            key_path: Dot-separated path to config value (e.g., 'server.port')
            value: Value to set
        """
        keys = key_path.split('.')
        config_dict = self.config

        # Navigate to the parent dictionary
        for key in keys[:-1]:
            if not isinstance(config_dict.get(key), dict):
                config_dict[key] = {}
            config_dict = config_dict[key]

        # Set the final value
        config_dict[keys[-1]] = value
        if key_path == 'openai.api_key':
            logger.debug(f"Configuration key '{key_path}' set")
        else:
            logger.debug(f"Configuration key '{key_path}' set to: {value}")

    def get_audio_format(self) -> AudioFormat:
        """Get the validated inbound audio format - CRASHES on invalid parameters."""
        return AudioFormat(
            sample_rate=int(self.get('audio.sample_rate', 24000)),
            channels=int(self.get('audio.channels', 1)),
            bit_depth=int(self.get('audio.bit_depth', 16)),
        )

    def get_chunk_duration_seconds(self) -> float:
        """Get the transcription window duration in seconds."""
        duration = float(self.get('transcription.chunk_duration_seconds', 5.0))
        if duration <= 0:
            raise ValueError(f"transcription.chunk_duration_seconds must be positive, got {duration}")
        return duration

    def get_openai_api_key(self) -> str:
        """Get OpenAI API key - CRASHES if not configured."""
        api_key = self.get('openai.api_key')
        if not api_key:
            raise ValueError(f"OpenAI API key not configured: set openai.api_key in "
                             f"{self.config_file.name} or OPENAI_API_KEY")
        return api_key
