"""
Configuration management for the corrga system.

This module provides file-based configuration for the genetic search, the
interactive viewer and output locations. A few settings can be overridden from
environment variables (optionally loaded from a .env file).
"""

import os
import json
from pathlib import Path
from typing import Any, Dict, Optional
from dataclasses import dataclass, asdict
from dotenv import load_dotenv

from .exceptions import ConfigurationError
from .logging import get_logger


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class SearchConfig:
    """Configuration for the genetic template search."""
    population_size: int = 100
    crossover_rate: float = 0.40
    mutation_rate: float = 0.03
    generations: int = 50
    seed: Optional[int] = None


@dataclass
class ViewerConfig:
    """Configuration for the interactive tracking viewer."""
    camera_index: int = 0
    event_loop_delay_ms: int = 200
    max_population: int = 1000
    window_name: str = "GA Input / Output"
    selection_window_name: str = "Selected Region / Object"


@dataclass
class OutputConfig:
    """Configuration for logs and exported search history."""
    history_dir: str = "checkpoints"
    log_dir: str = "logs"
    log_level: str = "INFO"


class Config:
    """
    Main configuration class for corrga.

    Values come from the dataclass defaults, then an optional JSON file, then
    environment variables.
    """

    def __init__(self, config_file: Optional[Path] = None, env_file: Optional[Path] = None):
        """
        Initialize configuration.

        Args:
            config_file: Path to JSON configuration file
            env_file: Path to .env file with environment overrides
        """
        self.logger = get_logger(__name__)

        if env_file:
            load_dotenv(env_file)
        else:
            load_dotenv()

        self.search = SearchConfig()
        self.viewer = ViewerConfig()
        self.output = OutputConfig()

        if config_file and Path(config_file).exists():
            self._load_from_file(Path(config_file))

        self._load_env_overrides()

        self._validate()

        self.logger.debug("Configuration loaded successfully")

    def _load_from_file(self, config_file: Path):
        """Load configuration from JSON file."""
        try:
            with open(config_file, 'r') as f:
                config_data = json.load(f)
        except (OSError, ValueError) as e:
            raise ConfigurationError(f"Failed to load config file {config_file}: {str(e)}")

        if not isinstance(config_data, dict):
            raise ConfigurationError(f"Config file {config_file} must contain a JSON object")

        for section_name, section_data in config_data.items():
            if section_name in ("search", "viewer", "output") and isinstance(section_data, dict):
                section = getattr(self, section_name)
                for key, value in section_data.items():
                    if hasattr(section, key):
                        setattr(section, key, value)

        self.logger.info(f"Loaded configuration from {config_file}")

    def _load_env_overrides(self):
        """Apply overrides from CORRGA_* environment variables."""
        try:
            if os.getenv("CORRGA_SEED"):
                self.search.seed = int(os.getenv("CORRGA_SEED"))
            if os.getenv("CORRGA_CAMERA_INDEX"):
                self.viewer.camera_index = int(os.getenv("CORRGA_CAMERA_INDEX"))
        except ValueError as e:
            raise ConfigurationError(f"Invalid integer in environment override: {str(e)}")

        if os.getenv("CORRGA_LOG_LEVEL"):
            self.output.log_level = os.getenv("CORRGA_LOG_LEVEL").upper()

        self.logger.debug("Environment overrides applied")

    def _validate(self):
        """Validate configuration settings."""
        errors = []

        if not _is_int(self.search.population_size) or self.search.population_size <= 0:
            errors.append("Population size must be a positive integer")

        if not _is_number(self.search.crossover_rate) or not 0 <= self.search.crossover_rate <= 1:
            errors.append("Crossover rate must be between 0 and 1")

        if not _is_number(self.search.mutation_rate) or not 0 <= self.search.mutation_rate <= 1:
            errors.append("Mutation rate must be between 0 and 1")

        if not _is_int(self.search.generations) or self.search.generations < 0:
            errors.append("Generations must not be negative")

        if self.search.seed is not None and not _is_int(self.search.seed):
            errors.append("Seed must be an integer")

        if not _is_int(self.viewer.camera_index) or self.viewer.camera_index < 0:
            errors.append("Camera index must not be negative")

        if not _is_int(self.viewer.event_loop_delay_ms) or self.viewer.event_loop_delay_ms <= 0:
            errors.append("Event loop delay must be positive and greater than 0")

        if not _is_int(self.viewer.max_population) or self.viewer.max_population <= 0:
            errors.append("Maximum population must be positive and greater than 0")

        if not isinstance(self.output.log_level, str) or self.output.log_level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            errors.append(f"Unknown log level: {self.output.log_level}")

        if errors:
            raise ConfigurationError("Configuration validation failed", details=errors)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "search": asdict(self.search),
            "viewer": asdict(self.viewer),
            "output": asdict(self.output),
        }

    def save(self, config_file: Path):
        """Save configuration to JSON file."""
        try:
            config_file.parent.mkdir(parents=True, exist_ok=True)
            with open(config_file, 'w') as f:
                json.dump(self.to_dict(), f, indent=2)
            self.logger.info(f"Configuration saved to {config_file}")
        except OSError as e:
            raise ConfigurationError(f"Failed to save config file {config_file}: {str(e)}")

    def get_history_dir(self) -> Path:
        """Get the directory where search history files are written."""
        return Path(self.output.history_dir)

    def get_log_file(self) -> Path:
        """Get the full path to the log file."""
        return Path(self.output.log_dir) / "corrga.log"

    def __repr__(self) -> str:
        return (f"Config(population={self.search.population_size}, "
                f"crossover={self.search.crossover_rate}, mutation={self.search.mutation_rate})")


# Global configuration instance
_config: Optional[Config] = None


def get_config() -> Config:
    """
    Get the global configuration instance.

    Returns:
        Global configuration instance
    """
    global _config
    if _config is None:
        _config = Config()
    return _config


def set_config(config: Config):
    """
    Set the global configuration instance.

    Args:
        config: Configuration instance to set
    """
    global _config
    _config = config
