# doclet_engine/config_loader.py

"""
Configuration loader for the doclet engine command line.
Loads settings from config.yaml and merges them over built-in defaults.
"""

import copy
import os
import yaml
import logging
from typing import Dict, Any, List

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Loads and manages configuration settings."""

    DEFAULT_CONFIG = {
        'exclude_dirs': [
            'node_modules', '__pycache__', '.git', '.venv', 'venv',
            'dist', 'build', '.vscode', '.idea', '.pytest_cache'
        ],
        'sources': {
            'extensions': ['.js'],
            'encoding': 'utf-8'
        },
        'output': {
            'file': 'doclets.json',
            'indent': 2
        },
        'logging': {
            'level': 'INFO',
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            'file': 'doclet_engine.log'
        },
        'processing': {
            'parallel': True,
            'max_workers': 4
        }
    }

    def __init__(self, config_path: str = 'config.yaml'):
        """
        Initialize the configuration loader.

        Args:
            config_path: Path to the configuration YAML file
        """
        self.config_path = config_path
        self.config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """
        Load configuration from file or use defaults.

        Returns:
            Configuration dictionary
        """
        config = copy.deepcopy(self.DEFAULT_CONFIG)

        if os.path.exists(self.config_path):
            try:
                with open(self.config_path, 'r', encoding='utf-8') as f:
                    user_config = yaml.safe_load(f)
                    if user_config:
                        config = self._merge_configs(config, user_config)
                        logger.info(f"Loaded configuration from {self.config_path}")
            except (OSError, yaml.YAMLError) as e:
                logger.warning(f"Failed to load config from {self.config_path}: {e}")
                logger.info("Using default configuration")
        else:
            logger.info(f"Config file not found at {self.config_path}, using defaults")

        return config

    def _merge_configs(self, default: Dict, user: Dict) -> Dict:
        """
        Recursively merge user config into default config.

        Args:
            default: Default configuration
            user: User configuration

        Returns:
            Merged configuration
        """
        merged = {key: (self._merge_configs(value, {}) if isinstance(value, dict) else value)
                  for key, value in default.items()}

        for key, value in user.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = self._merge_configs(merged[key], value)
            else:
                merged[key] = value

        return merged

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.

        Args:
            key: Configuration key (e.g., 'processing.max_workers')
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key.split('.')
        value = self.config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def get_exclude_dirs(self) -> List[str]:
        """Get list of directories to exclude from scanning."""
        return self.config.get('exclude_dirs', [])

    def get_extensions(self) -> List[str]:
        """Get the file extensions treated as JavaScript sources."""
        return self.config.get('sources', {}).get('extensions', ['.js'])

    def get_encoding(self) -> str:
        """Get the preferred source file encoding."""
        return self.config.get('sources', {}).get('encoding', 'utf-8')

    def get_output_file(self) -> str:
        """Get the JSON output file path."""
        return self.config.get('output', {}).get('file', 'doclets.json')

    def get_output_indent(self) -> int:
        """Get the JSON indentation width."""
        return self.config.get('output', {}).get('indent', 2)

    def get_log_level(self) -> str:
        """Get logging level."""
        return self.config.get('logging', {}).get('level', 'INFO')

    def get_log_format(self) -> str:
        """Get logging format string."""
        return self.config.get('logging', {}).get('format', '%(levelname)s - %(message)s')

    def get_log_file(self) -> str:
        """Get log file path."""
        return self.config.get('logging', {}).get('file', 'doclet_engine.log')

    def is_parallel_processing(self) -> bool:
        """Check if parallel processing is enabled."""
        return self.config.get('processing', {}).get('parallel', True)

    def get_max_workers(self) -> int:
        """Get maximum number of worker threads."""
        return self.config.get('processing', {}).get('max_workers', 4)
