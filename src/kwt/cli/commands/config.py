"""`kwt config`: inspect and edit the global and local configuration."""

import json
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import click

from kwt.cli.output import machine_output, success_output, user_output
from kwt.core.config import ConfigStore, Configuration
from kwt.core.context import KwtContext
from kwt.errors import ConfigError, KwtError


@dataclass(frozen=True)
class ConfigKey:
    """A configuration key reachable through --get and --set."""

    name: str
    description: str
    getter: Callable[[Configuration], Any]
    setter: Callable[[dict[str, Any], Any], dict[str, Any]]


def _field_setter(field_name: str) -> Callable[[dict[str, Any], Any], dict[str, Any]]:
    def setter(data: dict[str, Any], value: Any) -> dict[str, Any]:
        return {**data, field_name: value}

    return setter


CONFIG_KEYS: dict[str, ConfigKey] = {
    "prefix_type": ConfigKey(
        name="prefix_type",
        description='Worktree name prefix: "none", "manual" or "detect"',
        getter=lambda config: config.prefix_type,
        setter=_field_setter("prefix_type"),
    ),
    "manual_prefix": ConfigKey(
        name="manual_prefix",
        description='Prefix used when prefix_type is "manual"',
        getter=lambda config: config.manual_prefix,
        setter=_field_setter("manual_prefix"),
    ),
    "worktree_dir": ConfigKey(
        name="worktree_dir",
        description="Directory that holds new worktrees",
        getter=lambda config: config.worktree_dir,
        setter=_field_setter("worktree_dir"),
    ),
    "post_commands": ConfigKey(
        name="post_commands",
        description="Command groups run in every new worktree",
        getter=lambda config: [group.model_dump() for group in config.post_commands],
        setter=_field_setter("post_commands"),
    ),
}


def lookup_key(key: str) -> ConfigKey:
    """Raises ConfigError for keys outside CONFIG_KEYS."""
    if key not in CONFIG_KEYS:
        valid = ", ".join(CONFIG_KEYS)
        raise ConfigError(f"Unknown configuration key '{key}'. Valid keys: {valid}")
    return CONFIG_KEYS[key]


def format_key_table() -> str:
    lines = ["Keys:"]
    for config_key in CONFIG_KEYS.values():
        lines.append(f"  {config_key.name:<14} {config_key.description}")
    return "\n".join(lines)


def parse_assignment(assignment: str) -> tuple[str, Any]:
    """Split `key=value`, decoding the value as JSON when possible.

    Examples:
        >>> parse_assignment("worktree_dir=../wt")
        ('worktree_dir', '../wt')
        >>> parse_assignment('post_commands=[]')
        ('post_commands', [])
    """
    key, sep, raw_value = assignment.partition("=")
    key = key.strip()
    if not sep or not key or not raw_value:
        raise KwtError("Invalid format. Use: --set key=value")

    try:
        value = json.loads(raw_value)
    except json.JSONDecodeError:
        value = raw_value
    return key, value


def _tier_label(use_global: bool) -> str:
    return "Global" if use_global else "Local"


def init_config(store: ConfigStore, *, use_global: bool) -> bool:
    """Create a default config file for the selected tier.

    Returns:
        False if the file already exists
    """
    label = _tier_label(use_global)
    exists = store.has_global() if use_global else store.has_local()
    if exists:
        user_output(f"{label} configuration already exists")
        return False

    if use_global:
        store.save_global({})
    else:
        store.init_local()
    success_output(f"{label} configuration initialized")
    return True


def list_config(store: ConfigStore) -> None:
    config = store.load()
    user_output("Current configuration:")
    machine_output(json.dumps(config.model_dump(), indent=2))


def get_config_value(store: ConfigStore, key: str) -> Any:
    """Print the merged value of `key` as JSON and return it.

    Raises:
        ConfigError: If the key is unknown
        KwtError: If the key has no value
    """
    config_key = lookup_key(key)
    value = config_key.getter(store.load())
    if value is None:
        raise KwtError(f"Configuration key '{key}' is not set")
    machine_output(json.dumps(value, indent=2))
    return value


def set_config_value(store: ConfigStore, assignment: str, *, use_global: bool) -> Configuration:
    """Apply `key=value` to the selected tier's stored configuration and save it.

    Raises:
        KwtError: If the assignment is malformed
        ConfigError: If the key is unknown or the resulting configuration is invalid
    """
    key, value = parse_assignment(assignment)
    config_key = lookup_key(key)

    stored = store.load_global() if use_global else store.load_local()
    data = stored.model_dump(exclude_unset=True) if stored is not None else {}
    data = config_key.setter(data, value)

    if use_global:
        saved = store.save_global(data)
    else:
        saved = store.save_local(data)

    success_output(f"{_tier_label(use_global)} configuration updated: {key} = {json.dumps(value)}")
    return saved


@click.command("config")
@click.option("--init", "init_", is_flag=True, help="Create a default configuration file.")
@click.option("--global", "use_global", is_flag=True, help="Use the global configuration.")
@click.option("--set", "assignment", metavar="KEY=VALUE", help="Set a configuration value.")
@click.option("--get", "key", metavar="KEY", help="Print a configuration value.")
@click.option("--list", "list_", is_flag=True, help="Print the merged configuration.")
@click.pass_context
def config_cmd(
    click_ctx: click.Context,
    init_: bool,
    use_global: bool,
    assignment: str | None,
    key: str | None,
    list_: bool,
) -> None:
    """Manage configuration.

    Values passed to --set are parsed as JSON when possible.
    """
    ctx: KwtContext = click_ctx.obj
    store = ctx.config_store

    if init_:
        init_config(store, use_global=use_global)
        return

    if list_:
        list_config(store)
        return

    if key is not None:
        get_config_value(store, key)
        return

    if assignment is not None:
        set_config_value(store, assignment, use_global=use_global)
        return

    user_output(click_ctx.get_help())
    user_output()
    user_output(format_key_table())
