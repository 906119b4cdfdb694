import copy
import logging
import yaml
from pathlib import Path
from typing import Dict, Any, Optional

log = logging.getLogger(__name__)

CONFIG_FILE_NAME = "hushscan.config.yaml"

# Define the default configuration settings for the application.
# These values are used if they are not specified in the user's config file.
DEFAULT_CONFIG: Dict[str, Any] = {
    "rules": {
        "excluded_paths": [
            "**/node_modules/**",
            "**/.git/**",
            "**/vendor/**",
            "**/__pycache__/**",
        ],
        "max_file_size": "5MB",
        "scan_all_files": False,
        "text_extensions": [
            ".txt", ".log", ".json", ".xml", ".yaml", ".yml", ".conf", ".cfg",
            ".go", ".rs", ".py", ".js", ".java", ".c", ".cpp", ".sh",
            ".sql", ".md", ".html", ".css",
        ],
        "detectors": {
            "aws": {"enabled": True},
            "github": {"enabled": True},
            "google": {"enabled": True},
            "api_key": {"enabled": True},
            "database_uri": {"enabled": True},
            "private_key": {"enabled": True},
            "bearer": {"enabled": True},
            "credit_card": {"enabled": True},
            "high_entropy": {"enabled": False},
        },
    },
    "validation": {
        "github": {
            "endpoint": "https://api.github.com/user",
            "timeout": 2.0,
        },
    },
}

def deep_merge(source: Dict, destination: Dict) -> Dict:
    """
    Recursively merges source dict into destination dict.

    An override whose shape does not match the existing value (a mapping
    replaced by a scalar, a list by a string, ...) is skipped with a warning.
    """
    for key, value in source.items():
        if key in destination and not _same_shape(destination[key], value):
            log.warning("Ignoring config key '%s': expected a %s, got %r.",
                        key, type(destination[key]).__name__, value)
            continue
        if isinstance(value, dict):
            node = destination.setdefault(key, {})
            deep_merge(value, node)
        else:
            destination[key] = value
    return destination

def _same_shape(current: Any, value: Any) -> bool:
    return all(isinstance(current, kind) == isinstance(value, kind) for kind in (dict, list))

def find_config_file(start_path: Path) -> Optional[Path]:
    """
    Search for hushscan.config.yaml upwards from the start_path.
    This allows running the tool from any subdirectory of a project.
    """
    current_path = start_path.resolve()
    while True:
        config_file = current_path / CONFIG_FILE_NAME
        if config_file.is_file():
            return config_file
        if current_path.parent == current_path:  # Reached the filesystem root
            return None
        current_path = current_path.parent


def load_config() -> Dict[str, Any]:
    """
    Loads configuration from hushscan.config.yaml by searching up from the
    current directory, and merges it with the default configuration.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    config_file_path = find_config_file(Path.cwd())

    if config_file_path:
        try:
            with open(config_file_path, "r") as f:
                user_config = yaml.safe_load(f)
            if isinstance(user_config, dict):
                config = deep_merge(user_config, config)
        except (IOError, yaml.YAMLError) as e:
            log.warning("Could not load or parse %s. Using default settings. Error: %s", config_file_path, e)

    return config
