"""Configuration loader for DocDesk settings."""

import copy
import os
import logging
import yaml
from typing import Dict, Any, Optional
from pathlib import Path

logger = logging.getLogger(__name__)

PACKAGE_ROOT = Path(__file__).resolve().parents[1]

# Default configuration
DEFAULT_CONFIG = {
    'server': {
        'name': 'docdesk-mcp-server',
        'version': '1.0.0'
    },
    'logging': {
        'level': 'INFO',
        'json': False,
        'file': None
    },
    'search': {
        'default_limit': 10,
        'weights': {
            'title': 10,
            'description': 5,
            'content': 2,
            'tag': 3
        },
        'excerpt': {
            'before': 50,
            'after': 150
        }
    },
    'fetch': {
        'user_agent': 'DocDesk/1.0',
        'timeout': None,
        'window': {
            'before': 3,
            'after': 10
        },
        'max_length': 5000,
        'truncation_marker': '\n\n... (content truncated)'
    },
    'seed': {
        'documents': str(PACKAGE_ROOT / 'indexer' / 'seed_docs.yaml'),
        'libraries': str(PACKAGE_ROOT / 'sources' / 'libraries.yaml')
    }
}

_TRUTHY = {'1', 'true', 'yes', 'on'}


class Settings:
    """DocDesk configuration manager."""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path or self._get_default_config_path()
        self._config = self._load_config()

    def _get_default_config_path(self) -> str:
        """Get the default configuration file path."""
        # Look for config file in multiple locations
        possible_paths = [
            os.environ.get('DOCDESK_CONFIG'),
            os.path.join(os.getcwd(), 'config', 'docdesk.yaml'),
            os.path.join(Path(__file__).parent, 'docdesk.yaml'),
            os.path.join(os.path.expanduser('~'), '.docdesk', 'docdesk.yaml')
        ]

        for path in possible_paths:
            if path and os.path.exists(path):
                return path

        # Return the expected path even if it doesn't exist
        return os.path.join(Path(__file__).parent, 'docdesk.yaml')

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from file or use defaults."""
        config = copy.deepcopy(DEFAULT_CONFIG)

        if os.path.exists(self.config_path):
            try:
                with open(self.config_path, 'r', encoding='utf-8') as f:
                    file_config = yaml.safe_load(f) or {}

                config = self._deep_merge(config, file_config)

            except (OSError, yaml.YAMLError) as e:
                logger.warning(f"Failed to load config from {self.config_path}: {e}; using defaults")
        else:
            logger.debug(f"Config file not found at {self.config_path}, using defaults")

        self._apply_env_overrides(config)
        return config

    def _apply_env_overrides(self, config: Dict[str, Any]) -> None:
        level = os.environ.get('DOCDESK_LOG_LEVEL')
        if level:
            config['logging']['level'] = level
        use_json = os.environ.get('DOCDESK_LOG_JSON')
        if use_json is not None:
            config['logging']['json'] = use_json.strip().lower() in _TRUTHY

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by dotted key."""
        keys = key.split('.')
        value = self._config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def get_server_info(self) -> Dict[str, str]:
        return {
            'name': self.get('server.name', 'docdesk-mcp-server'),
            'version': str(self.get('server.version', '1.0.0'))
        }

    def get_logging_settings(self) -> Dict[str, Any]:
        return {
            'level': self.get('logging.level', 'INFO'),
            'use_json': bool(self.get('logging.json', False)),
            'log_file': self.get('logging.file')
        }

    def get_search_weights(self) -> Dict[str, int]:
        """Get the additive scoring weights per matched field."""
        return {
            field: int(self.get(f'search.weights.{field}', DEFAULT_CONFIG['search']['weights'][field]))
            for field in ('title', 'description', 'content', 'tag')
        }

    def get_excerpt_window(self) -> Dict[str, int]:
        return {
            'before': int(self.get('search.excerpt.before', 50)),
            'after': int(self.get('search.excerpt.after', 150))
        }

    def get_default_limit(self) -> int:
        return int(self.get('search.default_limit', 10))

    def get_fetch_settings(self) -> Dict[str, Any]:
        """Get HTTP and distillation settings for library doc fetching."""
        timeout = self.get('fetch.timeout')
        return {
            'user_agent': self.get('fetch.user_agent', 'DocDesk/1.0'),
            'timeout': float(timeout) if timeout is not None else None,
            'window_before': int(self.get('fetch.window.before', 3)),
            'window_after': int(self.get('fetch.window.after', 10)),
            'max_length': int(self.get('fetch.max_length', 5000)),
            'truncation_marker': self.get('fetch.truncation_marker', DEFAULT_CONFIG['fetch']['truncation_marker'])
        }

    def get_seed_paths(self) -> Dict[str, str]:
        return {
            'documents': self.get('seed.documents'),
            'libraries': self.get('seed.libraries')
        }

    def reload(self):
        """Reload configuration from file."""
        self._config = self._load_config()


# Global configuration instance
settings = Settings()
