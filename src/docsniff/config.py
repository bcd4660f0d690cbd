"""Configuration management for docsniff.

Handles configuration loading from multiple sources with precedence:
CLI args > environment variables > .docsniffrc > pyproject.toml > defaults
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

# tomllib is only available in Python 3.11+
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found]

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class DocsniffConfig:
    """Configuration for the doc comment sniffs.

    Attributes:
        enforce_package_naming: Report @package/@subpackage names that are not
            "Ucfirst_Ucfirst" underscore names (default: False; suggestions are
            computed either way).
        report_missing_php_version: Warn when a file comment does not mention
            "PHP version" before its first tag (default: False).
        require_tag_content: Report tags with nothing after them on their line
            (default: True).
        check_file_comments: Run the file comment sniff (default: True).
        check_class_comments: Run the class comment sniff (default: True).
    """

    enforce_package_naming: bool = False
    report_missing_php_version: bool = False
    require_tag_content: bool = True
    check_file_comments: bool = True
    check_class_comments: bool = True

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Validate configuration values.

        Raises:
            ValueError: If any configuration value is invalid.
        """
        for f in fields(self):
            if not isinstance(getattr(self, f.name), bool):
                raise ValueError(f"{f.name} must be a boolean")


def _get_config_field_names() -> set[str]:
    """Get the set of valid configuration field names.

    Returns:
        Set of field names from DocsniffConfig.
    """
    return {f.name for f in fields(DocsniffConfig)}


def parse_bool(value: str, name: str) -> bool:
    """Parse a boolean from an environment variable value.

    Args:
        value: Raw string value.
        name: Variable name, used in the error message.

    Returns:
        The parsed boolean.

    Raises:
        ValueError: If the value is not a recognised boolean.
    """
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean (got {value!r})")


def find_config_file(filename: str = ".docsniffrc", start_dir: Path | None = None) -> Path | None:
    """Find a configuration file by traversing up the directory tree.

    Args:
        filename: Name of the config file to find.
        start_dir: Directory to start searching from. Defaults to current directory.

    Returns:
        Path to the config file if found, None otherwise.
    """
    current = (start_dir or Path.cwd()).resolve()

    while True:
        config_path = current / filename
        if config_path.is_file():
            return config_path

        parent = current.parent
        if parent == current:
            # Reached filesystem root
            return None
        current = parent


def _load_toml_file(path: Path) -> dict[str, Any]:
    """Load a TOML file and return its contents.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        tomllib.TOMLDecodeError: If the file is not valid TOML.
    """
    with open(path, "rb") as f:
        result: dict[str, Any] = tomllib.load(f)
        return result


def _normalize_keys(data: dict[str, Any]) -> dict[str, Any]:
    """Accept kebab-case keys and drop unknown ones."""
    valid_fields = _get_config_field_names()
    result: dict[str, Any] = {}
    for key, value in data.items():
        name = key.replace("-", "_")
        if name in valid_fields:
            result[name] = value
        else:
            logger.debug("Ignoring unknown config key %r", key)
    return result


def _load_from_rc(start_dir: Path | None = None) -> dict[str, Any]:
    """Load configuration from a .docsniffrc TOML file.

    Returns:
        Configuration from .docsniffrc, or empty dict if not found or unreadable.
    """
    config_path = find_config_file(".docsniffrc", start_dir)
    if config_path is None:
        return {}

    try:
        return _normalize_keys(_load_toml_file(config_path))
    except (tomllib.TOMLDecodeError, OSError) as e:
        logger.warning("Ignoring unreadable config file %s: %s", config_path, e)
        return {}


def _load_from_pyproject(start_dir: Path | None = None) -> dict[str, Any]:
    """Load configuration from pyproject.toml [tool.docsniff] section.

    Returns:
        Configuration from pyproject.toml, or empty dict if not found.
    """
    config_path = find_config_file("pyproject.toml", start_dir)
    if config_path is None:
        return {}

    try:
        data = _load_toml_file(config_path)
    except (tomllib.TOMLDecodeError, OSError) as e:
        logger.warning("Ignoring unreadable config file %s: %s", config_path, e)
        return {}

    tool = data.get("tool", {})
    if not isinstance(tool, dict):
        return {}
    section = tool.get("docsniff", {})
    if not isinstance(section, dict):
        return {}
    return _normalize_keys(section)


def _load_from_env() -> dict[str, Any]:
    """Load configuration from DOCSNIFF_* environment variables.

    For example: DOCSNIFF_ENFORCE_PACKAGE_NAMING=1

    Raises:
        ValueError: If a variable holds something other than a boolean.
    """
    result: dict[str, Any] = {}
    for name in sorted(_get_config_field_names()):
        env_var = f"DOCSNIFF_{name.upper()}"
        value = os.environ.get(env_var)
        if value is not None:
            result[name] = parse_bool(value, env_var)
    return result


def _merge_configs(*configs: dict[str, Any]) -> dict[str, Any]:
    """Merge configuration dictionaries; later ones take precedence."""
    result: dict[str, Any] = {}
    for config in configs:
        for key, value in config.items():
            if value is not None:
                result[key] = value
    return result


def load_config(
    cli_overrides: dict[str, Any] | None = None,
    start_dir: Path | None = None,
) -> DocsniffConfig:
    """Load configuration with full precedence chain.

    Precedence (highest to lowest):
    1. CLI arguments (cli_overrides)
    2. Environment variables (DOCSNIFF_*)
    3. .docsniffrc file
    4. pyproject.toml [tool.docsniff] section
    5. Default values

    Args:
        cli_overrides: Configuration overrides from CLI arguments.
        start_dir: Directory to start searching for config files.

    Returns:
        Fully resolved DocsniffConfig instance.

    Raises:
        ValueError: If the resulting configuration is invalid.
    """
    pyproject_config = _load_from_pyproject(start_dir)
    rc_config = _load_from_rc(start_dir)
    env_config = _load_from_env()
    cli_config = _normalize_keys(cli_overrides or {})

    merged = _merge_configs(pyproject_config, rc_config, env_config, cli_config)
    logger.debug("Resolved configuration: %s", merged)
    return DocsniffConfig(**merged)
