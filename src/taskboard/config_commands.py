"""`tb config` commands: read and write board settings."""

from typing import Any

import structlog
from cyclopts import App

from taskboard.config import DEFAULTS, get_config

logger = structlog.get_logger()

config_app = App(name="config", help="Manage board settings (snapshot.path, ordering.strict)")


def _scope(global_: bool) -> str:
    return "global" if global_ else "local"


def _format(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@config_app.command
def set(key: str, value: str, global_: bool = False) -> None:
    """Store a board setting.

    Args:
        key: Setting name, e.g. snapshot.path or ordering.strict
        value: New value; ordering.strict takes true/false, yes/no, on/off or 1/0
        global_: Write to ~/.taskboard/config.yaml instead of the local file.
    """
    if key not in DEFAULTS:
        logger.warning("Unknown config key", key=key)
        print(f"Note: {key} is not a known setting; known: {', '.join(sorted(DEFAULTS))}")
    stored = get_config(use_global=global_).set(key, value)
    print(f"Set {key} = {_format(stored)} ({_scope(global_)})")


@config_app.command
def unset(key: str, global_: bool = False) -> None:
    """Remove a board setting so the next layer (global, then default) applies."""
    if get_config(use_global=global_).unset(key):
        print(f"Unset {key} ({_scope(global_)})")
    else:
        print(f"{key} is not set in {_scope(global_)} config")


@config_app.command
def get(key: str, global_: bool = False) -> None:
    """Show a setting and the layer it comes from."""
    config = get_config(use_global=global_)
    source = config.source(key)
    if source is None:
        print(f"{key} is not set")
        return
    print(f"{key} = {_format(config.get(key))} ({source})")


@config_app.command(name="list")
def list_config(global_: bool = False, defaults: bool = False) -> None:
    """List board settings.

    Args:
        global_: List the global file only instead of the merged view.
        defaults: Include built-in defaults for keys that are not set.
    """
    settings = get_config(use_global=global_).list()
    if defaults:
        settings = {**DEFAULTS, **settings}

    if not settings:
        print(f"No {_scope(global_)} settings")
        return
    for key in sorted(settings):
        print(f"{key} = {_format(settings[key])}")
