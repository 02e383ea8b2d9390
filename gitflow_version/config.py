"""Configuration for artifact locations, the revision writer and probe windows."""

import configparser
import logging
import os
import platform
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict, Optional, Union

from gitflow_version.constants import (
    APP_NAME,
    DEFAULT_PACKAGE_JSON,
    DEFAULT_POM_FILE,
    DEVELOP_MAX_COUNT,
    LOGGER_NAME,
    MAIN_MAX_COUNT,
    REVISION_WRITERS,
    SINCE_DAYS,
    WORKSPACE_CONFIG_FILE,
)
from gitflow_version.versioning.branch import BranchKind
from gitflow_version.versioning.exceptions import VersioningError
from gitflow_version.versioning.probe import LookbackWindow

logger = logging.getLogger(LOGGER_NAME)

_home = os.path.expanduser("~")

xdg_config_home = os.environ.get("XDG_CONFIG_HOME") or os.path.join(_home, ".config")

if platform.system() == "Darwin":
    # macOS
    config_dir = Path(f"~/Library/Application Support/{APP_NAME}").expanduser()
else:
    # Linux or others
    config_dir = Path(os.path.join(xdg_config_home, APP_NAME))


default_cfg = {
    "artifacts": {
        "pom": DEFAULT_POM_FILE,
        "package_json": DEFAULT_PACKAGE_JSON,
        "revision_writer": "maven",
    },
    "probe": {
        "develop_max_count": str(DEVELOP_MAX_COUNT),
        "main_max_count": str(MAIN_MAX_COUNT),
        "since_days": str(SINCE_DAYS),
    },
}


def get_config_file() -> Path:
    return config_dir / f"{APP_NAME}.cfg"


def find_config_file(workspace: Union[str, Path]) -> Path:
    """
    Pick the configuration file for a workspace.

    The workspace-local ``.gitflow-version.cfg`` wins over the user config file.
    """
    local = Path(workspace) / WORKSPACE_CONFIG_FILE
    if local.is_file():
        return local
    return get_config_file()


class ConfigAccessor:
    """
    A dict-like accessor for configuration files.

    Reading never creates files or directories; only ``save`` writes.

    Usage:
        config = ConfigAccessor()
        value = config.get('section', 'key', default='default')
    """

    def __init__(self, config_path: Optional[Path] = None):
        if config_path is None:
            self.config_path = get_config_file()
        else:
            self.config_path = Path(config_path)

        self.config = configparser.ConfigParser(inline_comment_prefixes=(";", "#"))
        if self.config_path.exists():
            self.config.read(self.config_path)

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """
        Get a configuration value from the specified section and key.

        Args:
            section: The configuration section
            key: The configuration key
            default: Value to return if the section or key doesn't exist

        Returns:
            The configuration value if it exists, otherwise the default value
        """
        try:
            return self.config[section][key]
        except (KeyError, configparser.NoSectionError, configparser.NoOptionError):
            return default

    def set(self, section: str, key: str, value: str) -> None:
        if not self.config.has_section(section):
            self.config.add_section(section)

        self.config[section][key] = value

    def save(self) -> None:
        """
        Save the current configuration to the config file.

        Fails gracefully if the file cannot be written (e.g., read-only filesystem).
        """
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w") as configfile:
                self.config.write(configfile)
        except (OSError, IOError) as e:
            logger.warning(
                f"Could not save configuration to {self.config_path}: {e}. "
                "Configuration changes will not persist."
            )

    def sections(self) -> list:
        return self.config.sections()


def _get_int(config: ConfigAccessor, section: str, key: str) -> int:
    raw = config.get(section, key, default_cfg[section][key])
    try:
        value = int(raw)
    except ValueError:
        raise VersioningError(
            f"Invalid configuration value [{section}] {key} = {raw!r}: expected an integer"
        )
    if value < 1:
        raise VersioningError(
            f"Invalid configuration value [{section}] {key} = {raw!r}: must be positive"
        )
    return value


@dataclass(frozen=True)
class Settings:
    """Resolved configuration for one invocation."""

    pom: str = DEFAULT_POM_FILE
    package_json: str = DEFAULT_PACKAGE_JSON
    revision_writer: str = "maven"
    develop_max_count: int = DEVELOP_MAX_COUNT
    main_max_count: int = MAIN_MAX_COUNT
    since_days: int = SINCE_DAYS

    @classmethod
    def from_config(cls, config: ConfigAccessor) -> "Settings":
        """
        Build settings from a config file, falling back to the defaults.

        Raises:
            VersioningError: If a value is malformed
        """
        artifacts = default_cfg["artifacts"]
        writer = config.get("artifacts", "revision_writer", artifacts["revision_writer"])
        if writer not in REVISION_WRITERS:
            raise VersioningError(
                f"Invalid configuration value [artifacts] revision_writer = {writer!r}: "
                f"expected one of {', '.join(REVISION_WRITERS)}"
            )

        return cls(
            pom=config.get("artifacts", "pom", artifacts["pom"]),
            package_json=config.get("artifacts", "package_json", artifacts["package_json"]),
            revision_writer=writer,
            develop_max_count=_get_int(config, "probe", "develop_max_count"),
            main_max_count=_get_int(config, "probe", "main_max_count"),
            since_days=_get_int(config, "probe", "since_days"),
        )

    @classmethod
    def for_workspace(cls, workspace: Union[str, Path]) -> "Settings":
        config_file = find_config_file(workspace)
        logger.debug(f"🔍 Using configuration: {config_file}")
        return cls.from_config(ConfigAccessor(config_file))

    def windows(self) -> Dict[BranchKind, LookbackWindow]:
        since = timedelta(days=self.since_days)
        return {
            BranchKind.DEVELOP: LookbackWindow(self.develop_max_count, since),
            BranchKind.MAIN: LookbackWindow(self.main_max_count, since),
        }
