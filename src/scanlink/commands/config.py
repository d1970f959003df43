"""``scanlink config show`` and ``scanlink config set``.

Both operate on ``config.json`` (:class:`~scanlink.models.GlobalConfig`).
The proxy authorization value is a credential and is never echoed back.
"""

from __future__ import annotations

import typer

from scanlink.output import error, format_response, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the global configuration and the effective HTTP settings.

    The ``effective_http`` section includes environment overrides.

    Example::

        scanlink config show
        scanlink --json config show
    """
    from scanlink.config import get_config_dir, load_global_config, resolve_http_config

    config = load_global_config()
    data = config.model_dump(mode="json")
    data["effective_http"] = resolve_http_config(config).model_dump(mode="json")
    if data["effective_http"].get("proxy_authorization"):
        data["effective_http"]["proxy_authorization"] = "***"
    if data["http"].get("proxy_authorization"):
        data["http"]["proxy_authorization"] = "***"
    info(f"Config directory: {get_config_dir()}")
    format_response(data)


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Config key (dot notation, e.g., 'http.proxy')."),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    Raises:
        typer.Exit: With code 2 if the key is unknown or the value invalid.

    Example::

        scanlink config set http.proxy http://proxy.local:3128
        scanlink config set http.proxy_support off
    """
    from scanlink.config import set_global_config_value
    from scanlink.exceptions import ConfigError
    from scanlink.exit_codes import EXIT_INVALID_USAGE

    try:
        set_global_config_value(key, value)
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=EXIT_INVALID_USAGE) from None
    shown = "***" if key.endswith("proxy_authorization") else value
    success(f"Set {key} = {shown}")
