"""Rendering of query results and diagnostics.

Everything a command prints goes through this module so that the two
streams stay separate:

* **stdout** carries results only -- overviews, endpoint payloads, schemas,
  search results and payment API responses. Agents parse this stream, so
  in ``--json`` mode it is always a single JSON document.
* **stderr** carries diagnostics -- status lines, warnings, errors, next-step
  hints and ``--verbose`` traces.

``OutputFormat.AUTO`` picks Rich-highlighted JSON for an interactive
terminal and tab-separated text when stdout is piped. Colour is disabled by
``--no-color``, ``NO_COLOR`` (any value) or ``TERM=dumb``.

The root command builds one :class:`OutputManager` and installs it with
:func:`set_output`; commands call the module-level helpers
(:func:`format_response`, :func:`info`, :func:`suggest`, ...).
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax


class OutputFormat(str, Enum):
    """How results are written to stdout.

    ``AUTO`` becomes ``RICH`` on a colour-capable TTY and ``PLAIN`` otherwise.
    """

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


# (plain prefix, rich markup template, shown when quiet, needs verbose)
_CHANNELS: dict[str, tuple[str, str, bool, bool]] = {
    "info": ("", "{message}", False, False),
    "success": ("", "[green]{message}[/green]", False, False),
    "warning": ("Warning: ", "[yellow]Warning:[/yellow] {message}", True, False),
    "error": ("Error: ", "[bold red]Error:[/bold red] {message}", True, False),
    "suggest": ("→ ", "[dim]→ {message}[/dim]", False, False),
    "debug": ("[debug] ", "[dim]\\[debug] {message}[/dim]", False, True),
}


class OutputManager:
    """Writes results to stdout and diagnostics to stderr.

    Args:
        format: Result format; ``AUTO`` is resolved once, here.
        no_color: Disable colour and Rich markup. Also forced on by the
            environment (see :func:`_should_disable_color`).
        quiet: Hide info, success and suggestion lines. Warnings and errors
            are always shown.
        verbose: Show debug lines.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        if format != OutputFormat.AUTO:
            self._format = format
        elif _is_tty() and not self._no_color:
            self._format = OutputFormat.RICH
        else:
            self._format = OutputFormat.PLAIN

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=self._format == OutputFormat.RICH,
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    # --- results (stdout) ---

    def format_response(self, data: Any) -> None:
        """Write one result to stdout in the active format.

        Pydantic result models are converted with their ``to_payload`` method
        (camelCase keys, ``None`` fields dropped) before rendering.
        """
        data = _to_jsonable(data)
        if self._format == OutputFormat.JSON:
            self._write_json(data)
        elif self._format == OutputFormat.PLAIN:
            self._write_plain(data)
        else:
            self._write_rich(data)

    def print_data(self, text: str) -> None:
        """Write a raw line to stdout."""
        print(text, file=sys.stdout, flush=True)

    # --- diagnostics (stderr) ---

    def info(self, message: str) -> None:
        self._diagnostic("info", message)

    def success(self, message: str) -> None:
        self._diagnostic("success", message)

    def warning(self, message: str) -> None:
        self._diagnostic("warning", message)

    def error(self, message: str) -> None:
        self._diagnostic("error", message)

    def suggest(self, message: str) -> None:
        """Print a next-step hint, e.g. the command that lists alternatives."""
        self._diagnostic("suggest", message)

    def debug(self, message: str) -> None:
        self._diagnostic("debug", message)

    def _diagnostic(self, channel: str, message: str) -> None:
        prefix, markup, always, needs_verbose = _CHANNELS[channel]
        if needs_verbose and not self._verbose:
            return
        if self._quiet and not always:
            return
        if self._no_color:
            print(f"{prefix}{message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(markup.format(message=escape(message)))

    # --- renderers ---

    def _write_json(self, data: Any) -> None:
        if isinstance(data, str):
            try:
                data = json.loads(data)
            except (json.JSONDecodeError, TypeError):
                self.print_data(data)
                return
        self.print_data(_dumps(data, indent=2))

    def _write_plain(self, data: Any) -> None:
        if isinstance(data, dict):
            lines = [f"{key}\t{_cell(value)}" for key, value in data.items()]
        elif isinstance(data, list):
            lines = [
                "\t".join(_cell(v) for v in item.values()) if isinstance(item, dict) else str(item)
                for item in data
            ]
        else:
            lines = [str(data)]
        for line in lines:
            self.print_data(line)

    def _write_rich(self, data: Any) -> None:
        if isinstance(data, str):
            try:
                data = json.loads(data)
            except (json.JSONDecodeError, TypeError):
                self._stdout.print(data, markup=False)
                return
        self._stdout.print(Syntax(_dumps(data, indent=2), "json", theme="monokai", word_wrap=True))


def _to_jsonable(data: Any) -> Any:
    if isinstance(data, BaseModel):
        to_payload = getattr(data, "to_payload", None)
        if callable(to_payload):
            return to_payload()
        return data.model_dump(mode="json")
    if isinstance(data, list):
        return [_to_jsonable(item) for item in data]
    return data


def _dumps(data: Any, indent: Optional[int] = None) -> str:
    return json.dumps(data, indent=indent, ensure_ascii=False, default=str)


def _cell(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return _dumps(value)
    return str(value)


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """``NO_COLOR`` set to anything, or ``TERM=dumb``."""
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


# --- process-wide instance ---

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed manager, creating a default one on first use."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager (tests swap stdout/stderr between runs)."""
    global _output
    _output = None


def format_response(data: Any) -> None:
    get_output().format_response(data)


def info(message: str) -> None:
    get_output().info(message)


def error(message: str) -> None:
    get_output().error(message)


def success(message: str) -> None:
    get_output().success(message)


def warning(message: str) -> None:
    get_output().warning(message)


def suggest(message: str) -> None:
    get_output().suggest(message)


def debug(message: str) -> None:
    get_output().debug(message)
