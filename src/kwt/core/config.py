"""Two-tier configuration: global (~/.kwt/config.toml) and local (.kwt.toml).

Example local config:

    prefix_type = "detect"
    worktree_dir = "../worktrees"

    [[post_commands]]
    label = "Install dependencies"
    commands = ["uv sync"]

Merge precedence is defaults < global < local. Scalar fields override only
when the tier's file sets them. ``post_commands`` is replaced wholesale by the
local list whenever the local file defines it.
"""

import logging
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

import tomlkit
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from kwt.errors import ConfigError

logger = logging.getLogger(__name__)

PrefixType = Literal["none", "manual", "detect"]

DEFAULT_WORKTREE_DIR = "../worktrees"
LOCAL_CONFIG_FILENAME = ".kwt.toml"


class PostCommandGroup(BaseModel):
    """A labelled list of command lines run in a new worktree."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    label: str
    commands: list[str]


class Configuration(BaseModel):
    """Validated kwt configuration.

    The same model describes each file on disk and the merged result.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    prefix_type: PrefixType = "none"
    manual_prefix: str | None = None
    worktree_dir: str = DEFAULT_WORKTREE_DIR
    post_commands: list[PostCommandGroup] = Field(default_factory=list)


def global_config_path() -> Path:
    """Get the path to the global config file."""
    return Path.home() / ".kwt" / "config.toml"


def local_config_path(repo_root: Path) -> Path:
    """Get the path to the local config file for a repository."""
    return repo_root / LOCAL_CONFIG_FILENAME


def merge_configs(
    global_config: Configuration | None, local_config: Configuration | None
) -> Configuration:
    """Layer global and local configuration over the defaults.

    Args:
        global_config: Global tier, or None if the file is absent
        local_config: Local tier, or None if the file is absent

    Returns:
        Merged Configuration
    """
    defaults = Configuration()
    merged: dict[str, Any] = {name: getattr(defaults, name) for name in Configuration.model_fields}
    for tier in (global_config, local_config):
        if tier is None:
            continue
        for field_name in tier.model_fields_set:
            merged[field_name] = getattr(tier, field_name)

    # Lists are never concatenated across tiers
    if local_config is not None and "post_commands" in local_config.model_fields_set:
        merged["post_commands"] = list(local_config.post_commands)

    return Configuration(**merged)


def parse_config(data: Mapping[str, Any], source: str) -> Configuration:
    """Validate raw config data against the schema.

    Raises:
        ConfigError: If the data has unknown keys or wrong field types
    """
    try:
        return Configuration.model_validate(dict(data))
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {source}:\n{e}") from e


def read_config_file(path: Path) -> Configuration | None:
    """Read and validate one config file.

    Returns:
        Parsed Configuration, or None if the file does not exist

    Raises:
        ConfigError: If the file is not valid TOML or fails validation
    """
    if not path.exists():
        return None

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Failed to read config file {path}: {e}") from e

    return parse_config(data, str(path))


def render_config(config: Configuration) -> str:
    """Render a Configuration as a TOML document."""
    doc = tomlkit.document()
    doc.add(tomlkit.comment("kwt configuration"))
    doc["prefix_type"] = config.prefix_type
    if config.manual_prefix is not None:
        doc["manual_prefix"] = config.manual_prefix
    doc["worktree_dir"] = config.worktree_dir

    # An empty array of tables renders as nothing; keep the key explicit
    if not config.post_commands:
        doc["post_commands"] = tomlkit.array()
        return tomlkit.dumps(doc)

    post_commands = tomlkit.aot()
    for group in config.post_commands:
        table = tomlkit.table()
        table["label"] = group.label
        table["commands"] = list(group.commands)
        post_commands.append(table)
    doc["post_commands"] = post_commands

    return tomlkit.dumps(doc)


def write_config_file(path: Path, config: Configuration) -> None:
    """Write a Configuration to disk, creating parent directories.

    Raises:
        ConfigError: If the file cannot be written
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(render_config(config), encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Failed to write config file {path}: {e}") from e


class ConfigStore:
    """Loads, merges and persists the global and local configuration.

    The merged configuration is cached for the lifetime of the store and
    recomputed after every successful save.
    """

    def __init__(self, *, global_path: Path, local_path: Path) -> None:
        self.global_path = global_path
        self.local_path = local_path
        self._global: Configuration | None = None
        self._local: Configuration | None = None
        self._merged: Configuration | None = None

    def load(self) -> Configuration:
        """Load both tiers and return the merged configuration.

        Raises:
            ConfigError: If a present file does not validate
        """
        if self._merged is not None:
            return self._merged

        self._global = read_config_file(self.global_path)
        logger.debug("Global config loaded from %s: %s", self.global_path, self._global)

        self._local = read_config_file(self.local_path)
        logger.debug("Local config loaded from %s: %s", self.local_path, self._local)

        self._merged = merge_configs(self._global, self._local)
        logger.debug("Merged config: %s", self._merged)
        return self._merged

    def load_global(self) -> Configuration | None:
        """Return the global tier as stored, or None if absent."""
        self.load()
        return self._global

    def load_local(self) -> Configuration | None:
        """Return the local tier as stored, or None if absent."""
        self.load()
        return self._local

    def init_local(self, overrides: Mapping[str, Any] | None = None) -> Configuration:
        """Write a default local configuration with optional overrides."""
        data: dict[str, Any] = Configuration().model_dump()
        if overrides:
            data.update(overrides)
        return self.save_local(data)

    def save_local(self, config: Configuration | Mapping[str, Any]) -> Configuration:
        """Validate and write the local configuration.

        Missing fields are filled with defaults; the full object is written.

        Raises:
            ConfigError: If validation or the write fails
        """
        validated = _validate_for_save(config, str(self.local_path))
        # Read the other tier first so an invalid file aborts before writing
        if self._merged is None:
            self._global = read_config_file(self.global_path)
        write_config_file(self.local_path, validated)
        logger.debug("Local config saved to: %s", self.local_path)

        self._local = validated
        self._merged = merge_configs(self._global, self._local)
        return validated

    def save_global(self, config: Configuration | Mapping[str, Any]) -> Configuration:
        """Validate and write the global configuration.

        Raises:
            ConfigError: If validation or the write fails
        """
        validated = _validate_for_save(config, str(self.global_path))
        if self._merged is None:
            self._local = read_config_file(self.local_path)
        write_config_file(self.global_path, validated)
        logger.debug("Global config saved to: %s", self.global_path)

        self._global = validated
        self._merged = merge_configs(self._global, self._local)
        return validated

    def has_local(self) -> bool:
        return self.local_path.exists()

    def has_global(self) -> bool:
        return self.global_path.exists()


def _validate_for_save(config: Configuration | Mapping[str, Any], source: str) -> Configuration:
    data = config.model_dump() if isinstance(config, Configuration) else dict(config)
    validated = parse_config(data, source)
    # Mirror what a reload of the written file produces
    return Configuration.model_validate(validated.model_dump(exclude_none=True))
