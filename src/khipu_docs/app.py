"""Root Typer application and the ``khipu-docs`` console-script entry point.

Command groups:

* ``docs`` -- overview, endpoints, endpoint, schema and search over the
  OpenAPI document. Always present.
* ``config`` -- show, set and reset the user configuration.
* ``api`` -- the Khipu payment API itself. Added by :func:`main` only when
  an API key can be read.

:func:`main` turns :class:`~khipu_docs.exceptions.KhipuDocsError` into its
exit code and writes a crash log for anything unexpected.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import typer

from khipu_docs import __version__
from khipu_docs.commands.config import config_app
from khipu_docs.commands.docs import docs_app
from khipu_docs.exceptions import ConfigError, KhipuDocsError
from khipu_docs.exit_codes import EXIT_GENERIC_FAILURE
from khipu_docs.output import OutputFormat

_EXIT_INTERRUPTED = 130

app = typer.Typer(
    name="khipu-docs",
    help="Navigate the Khipu payment API description.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.add_typer(docs_app, name="docs", help="Query the API description.")
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"khipu-docs {__version__}")
        raise typer.Exit()


def _flag_format(json_output: bool, plain_output: bool) -> Optional[str]:
    if json_output:
        return OutputFormat.JSON.value
    if plain_output:
        return OutputFormat.PLAIN.value
    return None


def _pick_format(configured: str) -> OutputFormat:
    """An unknown ``output.format`` value means auto."""
    try:
        return OutputFormat(configured)
    except ValueError:
        return OutputFormat.AUTO


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit."
    ),
    spec: Optional[str] = typer.Option(
        None, "--spec", "-s", help="OpenAPI document: file path, URL, or '-' for stdin."
    ),
    json_output: bool = typer.Option(False, "--json", help="Print results as JSON."),
    plain_output: bool = typer.Option(False, "--plain", help="Print results as tab-separated text."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colour."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only print results, warnings and errors."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Print debug traces and library logs."),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-n", help="Print API requests instead of sending them."
    ),
) -> None:
    """Set up output and the effective configuration for the sub-command.

    ``ctx.obj`` receives ``config``, ``dry_run`` and ``verbose``.
    """
    from khipu_docs.config import resolve_config
    from khipu_docs.output import OutputManager, set_output

    config = resolve_config(cli_spec=spec, cli_format=_flag_format(json_output, plain_output))
    fmt = _pick_format(config.output.format)
    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(levelname)s %(name)s: %(message)s",
        )

    ctx.ensure_object(dict)
    ctx.obj.update(config=config, dry_run=dry_run, verbose=verbose)


def _interrupted(*_: Any) -> None:
    sys.stderr.write("\nCancelled.\n")
    sys.exit(_EXIT_INTERRUPTED)


def _setup_signal_handlers() -> None:
    signal.signal(signal.SIGINT, _interrupted)


def _write_crash_log() -> Path:
    """Save the traceback being handled under ``<data dir>/logs``."""
    from khipu_docs.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / f"crash-{datetime.now():%Y%m%d-%H%M%S}.log"
    log_path.write_text(traceback.format_exc(), encoding="utf-8")
    return log_path


def register_api_commands() -> bool:
    """Add the ``api`` group if an API key is available; return whether it was added.

    A malformed key source only produces a warning, so ``docs`` keeps working.
    """
    from khipu_docs.commands.api import api_app
    from khipu_docs.config import find_api_key, resolve_config
    from khipu_docs.output import warning

    try:
        api_key = find_api_key(resolve_config())
    except ConfigError as exc:
        warning(f"API commands disabled: {exc}")
        return False

    if api_key is None:
        return False
    app.add_typer(api_app, name="api", help="Call the live Khipu payment API.")
    return True


def main() -> None:
    """Console-script entry point. Always ends in ``SystemExit``."""
    from khipu_docs.output import error

    _setup_signal_handlers()
    try:
        register_api_commands()
        app()
    except KeyboardInterrupt:
        _interrupted()
    except KhipuDocsError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except Exception:
        log_path = _write_crash_log()
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
