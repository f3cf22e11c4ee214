"""Built-in CLI sub-commands for khipu-docs.

This package groups the Typer sub-command modules that form the CLI's
top-level command tree:

* :mod:`~khipu_docs.commands.docs` -- navigate the API description
  (overview, endpoints, endpoint, schema, search).
* :mod:`~khipu_docs.commands.api` -- call the live Khipu payment API;
  registered only when an API key is configured.
* :mod:`~khipu_docs.commands.config` -- view and modify global settings.

Each module exports a :class:`typer.Typer` sub-application that
:mod:`khipu_docs.app` attaches to the root command.
"""
