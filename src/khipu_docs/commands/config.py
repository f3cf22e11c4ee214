"""``khipu-docs config``: inspect and edit the user configuration file."""

from __future__ import annotations

from typing import Any

import typer

from khipu_docs.output import error, format_response, info, success


config_app = typer.Typer(no_args_is_help=True)

_TRUTHY = ("true", "1", "yes", "on")


def _parent_of(data: dict[str, Any], key: str) -> tuple[dict[str, Any], str]:
    """Return the mapping that holds the leaf of dotted *key*, and the leaf name.

    Raises:
        ValueError: A segment does not exist, or the leaf is a whole section.
    """
    *sections, leaf = key.split(".")
    node = data
    for section in sections:
        child = node.get(section)
        if not isinstance(child, dict):
            raise ValueError(f"Invalid config key: {key}")
        node = child
    if leaf not in node or isinstance(node[leaf], dict):
        raise ValueError(f"Unknown config key: {key}")
    return node, leaf


def _coerce(current: Any, raw: str, key: str) -> Any:
    """Convert *raw* to the type of the value it replaces."""
    if isinstance(current, bool):
        return raw.strip().lower() in _TRUTHY
    if isinstance(current, int):
        try:
            return int(raw)
        except ValueError:
            raise ValueError(f"Expected integer for {key}, got: {raw}") from None
    if isinstance(current, float):
        try:
            return float(raw)
        except ValueError:
            raise ValueError(f"Expected number for {key}, got: {raw}") from None
    return raw


@config_app.command("show")
def config_show() -> None:
    """Print the stored configuration (the file path goes to stderr)."""
    from khipu_docs.config import global_config_path, load_global_config

    config = load_global_config()
    info(f"Config file: {global_config_path()}")
    format_response(config)


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Dotted key, e.g. 'api.timeout' or 'spec'."),
    value: str = typer.Argument(help="New value; converted to the key's type."),
) -> None:
    """Change one setting.

    Example::

        khipu-docs config set spec ./openapi.yaml
        khipu-docs config set api.max_retries 5
        khipu-docs config set api.api_key_source file:~/.khipu/key

    Exits with code 2 when the key does not exist or the value is rejected.
    """
    from khipu_docs.config import load_global_config, save_global_config
    from khipu_docs.models import GlobalConfig

    data = load_global_config().model_dump(mode="json")
    try:
        parent, leaf = _parent_of(data, key)
        parent[leaf] = _coerce(parent[leaf], value, key)
        updated = GlobalConfig.model_validate(data)
    except ValueError as exc:
        error(str(exc))
        raise typer.Exit(code=2) from None

    save_global_config(updated)
    success(f"Set {key} = {parent[leaf]}")


@config_app.command("reset")
def config_reset(
    force: bool = typer.Option(False, "--force", "-f", help="Do not ask for confirmation."),
) -> None:
    """Restore every setting to its default."""
    from khipu_docs.config import save_global_config
    from khipu_docs.models import GlobalConfig

    if not force and not typer.confirm("Reset all config to defaults?"):
        info("Cancelled.")
        raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
